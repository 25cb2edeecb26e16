"""Schema model, build context and assembler."""

from .schema_model import (
    TypeKind,
    NormalizedType,
    RelationIntent,
    Field,
    Index,
    Table,
    EnumType,
    Relationship,
    Area,
    SchemaModel,
)
from .build_context import BuildContext, Diagnostic, DiagnosticLevel

__all__ = [
    "TypeKind",
    "NormalizedType",
    "RelationIntent",
    "Field",
    "Index",
    "Table",
    "EnumType",
    "Relationship",
    "Area",
    "SchemaModel",
    "BuildContext",
    "Diagnostic",
    "DiagnosticLevel",
]
