"""
Structure Detection Strategies

Sheets carry no explicit markup: table and enum boundaries are inferred
either from cell background colors or from fixed text patterns. Each rule
is a small strategy object so that the parsers stay independent of the
source format and can be tested against synthetic grids.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..sheets.grid import SheetGrid

DEFAULT_NO_COLOR = "#ffffff"


def is_header_row(cells: List[str]) -> bool:
    """A column header row ("Logical Name | Optional | Field Type ...")."""
    text = " ".join(cells).lower()
    return "logical name" in text or "field type" in text


def is_colored(color: Optional[str], no_color: str = DEFAULT_NO_COLOR) -> bool:
    return bool(color) and color.lower() != no_color.lower()


def first_non_empty(cells: List[str]) -> str:
    for cell in cells:
        if cell:
            return cell
    return ""


@dataclass
class TableStart:
    """A detected table boundary: the table name and rows consumed by it."""
    name: str
    rows_consumed: int = 1


class TableStartDetector:
    """Decides whether a row opens a new table."""

    mode = ""

    def detect(self, grid: SheetGrid, index: int) -> Optional[TableStart]:
        raise NotImplementedError


class HeaderLookaheadStart(TableStartDetector):
    """A lone name cell immediately followed by a "Logical ..." header row.

    The name must sit in the first column; a lone cell elsewhere is a
    description continuation line.
    """

    mode = "header_lookahead"

    def detect(self, grid: SheetGrid, index: int) -> Optional[TableStart]:
        name = grid.cell(index, 0)
        if not name or any(c for c in grid.row(index)[1:]):
            return None
        if index + 1 >= grid.row_count:
            return None
        header = grid.row(index + 1)
        if "logical" not in grid.cell(index + 1, 0).lower() or not is_header_row(header):
            return None
        return TableStart(name=name, rows_consumed=2)


class ColorBoundaryStart(TableStartDetector):
    """A colored, non-header row names a new table in its first cell."""

    mode = "color_boundary"

    def __init__(self, no_color: str = DEFAULT_NO_COLOR):
        self.no_color = no_color

    def detect(self, grid: SheetGrid, index: int) -> Optional[TableStart]:
        name = grid.cell(index, 0)
        if not name or not is_colored(grid.background(index, 0), self.no_color):
            return None
        if is_header_row(grid.row(index)):
            return None
        return TableStart(name=name)


class EnumBoundaryDetector:
    """Decides whether a row opens a new enum (returns its raw name)."""

    mode = ""

    def detect(self, grid: SheetGrid, index: int) -> Optional[str]:
        raise NotImplementedError


class TextEnumBoundary(EnumBoundaryDetector):
    """First non-empty cell starting with an uppercase letter."""

    mode = "text"

    def detect(self, grid: SheetGrid, index: int) -> Optional[str]:
        value = first_non_empty(grid.row(index))
        if value and value[0].isalpha() and value[0].isupper():
            return value
        return None


class ColorEnumBoundary(EnumBoundaryDetector):
    """First cell with a background other than the no-color marker."""

    mode = "color"

    def __init__(self, no_color: str = DEFAULT_NO_COLOR):
        self.no_color = no_color

    def detect(self, grid: SheetGrid, index: int) -> Optional[str]:
        value = grid.cell(index, 0)
        if value and is_colored(grid.background(index, 0), self.no_color):
            return value
        return None


TABLE_START_DETECTORS = {
    HeaderLookaheadStart.mode: HeaderLookaheadStart,
    ColorBoundaryStart.mode: ColorBoundaryStart,
}

ENUM_BOUNDARY_DETECTORS = {
    TextEnumBoundary.mode: TextEnumBoundary,
    ColorEnumBoundary.mode: ColorEnumBoundary,
}


def table_start_detector(mode: str, no_color: str = DEFAULT_NO_COLOR) -> TableStartDetector:
    """Build the table-start strategy named ``mode``."""
    if mode not in TABLE_START_DETECTORS:
        raise ValueError(
            f"Unknown table start mode: {mode} (expected one of {', '.join(TABLE_START_DETECTORS)})"
        )
    if mode == ColorBoundaryStart.mode:
        return ColorBoundaryStart(no_color)
    return TABLE_START_DETECTORS[mode]()


def enum_boundary_detector(mode: str, no_color: str = DEFAULT_NO_COLOR) -> EnumBoundaryDetector:
    """Build the enum-boundary strategy named ``mode``."""
    if mode not in ENUM_BOUNDARY_DETECTORS:
        raise ValueError(
            f"Unknown enum boundary mode: {mode} (expected one of {', '.join(ENUM_BOUNDARY_DETECTORS)})"
        )
    if mode == ColorEnumBoundary.mode:
        return ColorEnumBoundary(no_color)
    return ENUM_BOUNDARY_DETECTORS[mode]()
