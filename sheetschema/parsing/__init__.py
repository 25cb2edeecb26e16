"""Sheet parsing: type mapping, boundary detection, enum/table parsers, FK resolution."""

from .type_mapper import map_type
from .enum_parser import EnumSheetParser, sanitize_identifier
from .table_parser import TableSheetParser, ColumnLayout
from .relationship_resolver import RelationshipResolver

__all__ = [
    "map_type",
    "EnumSheetParser",
    "sanitize_identifier",
    "TableSheetParser",
    "ColumnLayout",
    "RelationshipResolver",
]
