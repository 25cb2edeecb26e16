"""Spreadsheet schema export to DBML and ChartDB JSON."""

from .config_loader import ConfigLoader, ExportConfig
from .pipeline import SchemaExporter, ExportResult, BuildResult, load_workbook_grid

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader",
    "ExportConfig",
    "SchemaExporter",
    "ExportResult",
    "BuildResult",
    "load_workbook_grid",
]
