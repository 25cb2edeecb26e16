"""Test suite for sheetschema."""

from sheetschema.sheets.grid import SheetGrid

COLORED = "#c9daf8"
NO_COLOR = "#ffffff"


def make_grid(name, rows, colored_rows=(), tab_color=None, with_colors=True):
    """Helper: build a SheetGrid, coloring the first cell of ``colored_rows``."""
    backgrounds = None
    if with_colors:
        backgrounds = [[COLORED if i in colored_rows else NO_COLOR] for i in range(len(rows))]
    return SheetGrid(name=name, values=rows, backgrounds=backgrounds, tab_color=tab_color)


def find_table(tables, name, schema=None):
    """Helper: find a table by name (and schema) in a list or model."""
    for table in tables:
        if table.name == name and (schema is None or table.schema == schema):
            return table
    return None


def codes(diagnostics):
    """Helper: diagnostic codes in order."""
    return [d.code for d in diagnostics]
