"""Serializers for DBML and ChartDB JSON."""

from .dbml_serializer import DbmlSerializer
from .chartdb_serializer import ChartDBSerializer
from .chartdb_schema import ChartDBDiagram, parse_document, validate_document

__all__ = ["DbmlSerializer", "ChartDBSerializer", "ChartDBDiagram", "parse_document", "validate_document"]
