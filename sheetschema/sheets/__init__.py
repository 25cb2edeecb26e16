"""Workbook grid input: in-memory grids, grid documents and .xlsx files."""

from .grid import SheetGrid, WorkbookGrid, load_grid_document, normalize_color
from .xlsx_reader import load_xlsx

__all__ = ["SheetGrid", "WorkbookGrid", "load_grid_document", "normalize_color", "load_xlsx"]
