"""
ChartDB Serializer

Renders a SchemaModel as a ChartDB diagram JSON document. The importer is
strict: identities must be strings, required collections must be present
even when empty, root timestamps are ISO-8601 text and nested timestamps
epoch milliseconds. The document is validated against ChartDBDiagram before
it is returned.
"""

import json
from typing import Any, Dict, Optional

from ..config_loader import LayoutConfig, OutputConfig
from ..model.schema_model import (
    Area,
    EnumType,
    Field,
    Index,
    NormalizedType,
    Relationship,
    SchemaModel,
    Table,
    TypeKind,
)
from .chartdb_schema import validate_document

PRECISION_BOUNDS = {"max": 999, "min": 1}
SCALE_BOUNDS = {"max": 999, "min": 0}


class ChartDBSerializer:
    """
    Converts a SchemaModel to ChartDB's JSON import format.
    """

    def __init__(self, output: Optional[OutputConfig] = None, layout: Optional[LayoutConfig] = None):
        self.output = output or OutputConfig()
        self.layout = layout or LayoutConfig()

    def to_document(self, model: SchemaModel) -> Dict[str, Any]:
        """Build the document as plain dicts and lists."""
        epoch = model.created_at_epoch_ms
        return {
            "id": "0",
            "name": model.name or self.output.default_name,
            "databaseType": self.output.database_type,
            "tables": [self._table(t, epoch) for t in model.tables],
            "relationships": [self._relationship(r, epoch) for r in model.relationships],
            "areas": [self._area(a, epoch) for a in model.areas],
            "customTypes": [self._custom_type(e, epoch) for e in model.enums],
            "notes": [],
            "subjectAreas": [],
            "createdAt": model.created_at_iso,
            "updatedAt": model.created_at_iso,
        }

    def serialize(self, model: SchemaModel) -> str:
        """Serialize to an indented JSON string (validated)."""
        document = self.to_document(model)
        validate_document(document)
        return json.dumps(document, indent=2, ensure_ascii=False)

    def map_type(self, ntype: NormalizedType) -> Dict[str, Any]:
        """ChartDB type descriptor for a normalized type."""
        kind = ntype.kind

        if kind == TypeKind.NUMERIC:
            precision = ntype.precision if ntype.precision is not None else self.output.numeric_precision
            scale = ntype.scale if ntype.scale is not None else self.output.numeric_scale
            return {
                "id": "numeric",
                "name": ntype.raw,
                "fieldAttributes": {
                    "precision": {**PRECISION_BOUNDS, "default": precision},
                    "scale": {**SCALE_BOUNDS, "default": scale},
                },
            }

        if kind == TypeKind.TEXT:
            return {"id": ntype.name, "name": ntype.raw, "usageLevel": 1}

        if kind == TypeKind.INTEGER:
            return {"id": "integer" if ntype.name == "int" else ntype.name, "name": ntype.raw.lower()}

        if kind == TypeKind.TIMESTAMP:
            return {"id": "timestamp", "name": "timestamp with time zone"}

        if kind in (TypeKind.BIGINT, TypeKind.DATE, TypeKind.BOOLEAN, TypeKind.MONEY):
            return {"id": ntype.name, "name": ntype.name}

        if kind == TypeKind.ENUM:
            return {"id": ntype.enum_name, "name": ntype.enum_name}

        return {"id": ntype.name, "name": ntype.raw}

    def _field(self, field: Field, epoch: int) -> Dict[str, Any]:
        return {
            "id": field.identity,
            "name": field.name,
            "type": self.map_type(field.type),
            "primaryKey": field.is_primary_key,
            "unique": field.is_unique,
            "nullable": field.nullable,
            "increment": False,
            "default": "",
            "comment": field.description,
            "createdAt": epoch,
        }

    def _index(self, index: Index, epoch: int) -> Dict[str, Any]:
        return {
            "id": index.identity,
            "name": index.name,
            "unique": index.unique,
            "fieldIds": list(index.field_ids),
            "createdAt": epoch,
            "isPrimaryKey": index.is_primary_key,
        }

    def _table(self, table: Table, epoch: int) -> Dict[str, Any]:
        return {
            "id": table.identity,
            "name": table.name,
            "schema": table.schema,
            "color": table.color or self.layout.default_area_color,
            "x": table.x,
            "y": table.y,
            "width": table.width or self.layout.table_width,
            "fields": [self._field(f, epoch) for f in table.fields],
            "indexes": [self._index(i, epoch) for i in table.indexes],
            "isView": False,
            "createdAt": epoch,
            "updatedAt": epoch,
        }

    def _relationship(self, rel: Relationship, epoch: int) -> Dict[str, Any]:
        return {
            "id": rel.identity,
            "name": rel.name,
            "sourceSchema": rel.source_schema,
            "sourceTableId": rel.source_table,
            "sourceFieldId": rel.source_field,
            "targetSchema": rel.target_schema,
            "targetTableId": rel.target_table,
            "targetFieldId": rel.target_field,
            "sourceCardinality": rel.source_cardinality,
            "targetCardinality": rel.target_cardinality,
            "createdAt": epoch,
        }

    def _area(self, area: Area, epoch: int) -> Dict[str, Any]:
        return {
            "id": area.identity,
            "name": area.name,
            "color": area.color,
            "x": area.x,
            "y": area.y,
            "width": area.width,
            "height": area.height,
            "createdAt": epoch,
        }

    def _custom_type(self, enum: EnumType, epoch: int) -> Dict[str, Any]:
        return {
            "id": enum.identity,
            "name": enum.name,
            "kind": "enum",
            "values": list(enum.values),
            "fields": [],
            "createdAt": epoch,
        }
