"""
XLSX Reader

Loads an .xlsx workbook into WorkbookGrid form with openpyxl, keeping the
solid fill color of every cell and the tab color of every sheet.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from openpyxl import load_workbook

from .grid import SheetGrid, WorkbookGrid, cell_text, normalize_color

logger = logging.getLogger(__name__)


def _fill_color(cell) -> Optional[str]:
    fill = cell.fill
    if fill is None or fill.fill_type != "solid":
        return None
    color = fill.fgColor
    # Theme and indexed colors have no literal rgb; treat them as "some color".
    if color is None:
        return None
    if color.type == "rgb":
        return normalize_color(color.rgb)
    return "#000000"


def _tab_color(worksheet) -> Optional[str]:
    tab = worksheet.sheet_properties.tabColor
    if tab is None:
        return None
    if tab.type == "rgb":
        return normalize_color(tab.rgb)
    return "#000000"


def load_xlsx(path: Union[Path, str]) -> WorkbookGrid:
    """Read every worksheet of ``path`` into a WorkbookGrid."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {path}")

    workbook = load_workbook(path, data_only=True)
    sheets: List[SheetGrid] = []

    for worksheet in workbook.worksheets:
        values = []
        backgrounds = []
        for row in worksheet.iter_rows():
            values.append([cell_text(cell.value) for cell in row])
            backgrounds.append([_fill_color(cell) for cell in row])

        sheets.append(SheetGrid(
            name=worksheet.title,
            values=values,
            backgrounds=backgrounds,
            tab_color=_tab_color(worksheet),
        ))

    logger.info(f"Loaded {path.name}: {len(sheets)} sheets")
    return WorkbookGrid(name=path.stem, sheets=sheets)
