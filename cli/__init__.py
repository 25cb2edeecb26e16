"""Command line interface for sheetschema."""
