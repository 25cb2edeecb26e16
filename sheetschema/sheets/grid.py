"""
Sheet Grids

The input boundary of the exporter: a workbook is a list of rectangular
grids of text cells, each with an optional parallel grid of background
colors and an optional tab color. Grids can be built in memory (tests,
spreadsheet hosts) or loaded from a JSON/YAML grid document.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


def normalize_color(value: Any) -> Optional[str]:
    """Normalize a color to ``#rrggbb`` lowercase, or None when unset.

    Accepts ``#RGB``, ``#RRGGBB`` and ARGB hex (``FFRRGGBB``, as openpyxl
    reports fills).
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text or text == "none":
        return None
    if text.startswith("#"):
        text = text[1:]
    if len(text) == 3 and all(c in "0123456789abcdef" for c in text):
        text = "".join(c * 2 for c in text)
    elif len(text) == 8:
        text = text[2:]
    if len(text) != 6 or not all(c in "0123456789abcdef" for c in text):
        return None
    return f"#{text}"


def cell_text(value: Any) -> str:
    """Render a cell value as stripped text ('' for empty)."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass
class SheetGrid:
    """One sheet (region) of the source workbook."""
    name: str
    values: List[List[str]] = field(default_factory=list)
    backgrounds: Optional[List[List[Optional[str]]]] = None
    tab_color: Optional[str] = None

    def __post_init__(self):
        self.values = [[cell_text(v) for v in row] for row in self.values]
        if self.backgrounds is not None:
            self.backgrounds = [[normalize_color(c) for c in row] for row in self.backgrounds]
        self.tab_color = normalize_color(self.tab_color)

    @property
    def row_count(self) -> int:
        return len(self.values)

    def row(self, index: int) -> List[str]:
        if 0 <= index < len(self.values):
            return self.values[index]
        return []

    def cell(self, row: int, col: int) -> str:
        cells = self.row(row)
        if 0 <= col < len(cells):
            return cells[col]
        return ""

    def background(self, row: int, col: int = 0) -> Optional[str]:
        """Background color of a cell, None when the sheet carries no colors."""
        if self.backgrounds is None or not (0 <= row < len(self.backgrounds)):
            return None
        colors = self.backgrounds[row]
        if 0 <= col < len(colors):
            return colors[col]
        return None


@dataclass
class WorkbookGrid:
    """A whole workbook: its name and sheets in tab order."""
    name: str
    sheets: List[SheetGrid] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkbookGrid":
        sheets = []
        for sheet in data.get("sheets", []):
            sheets.append(SheetGrid(
                name=sheet["name"],
                values=sheet.get("values", []),
                backgrounds=sheet.get("backgrounds"),
                tab_color=sheet.get("tabColor", sheet.get("tab_color")),
            ))
        return cls(name=data.get("name", ""), sheets=sheets)


def load_grid_document(path: Union[Path, str]) -> WorkbookGrid:
    """Load a workbook grid dump from a .json, .yaml or .yml file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Grid document not found: {path}")

    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Grid document must be a mapping with a 'sheets' list: {path}")

    workbook = WorkbookGrid.from_dict(data)
    if not workbook.name:
        workbook.name = path.stem
    return workbook
