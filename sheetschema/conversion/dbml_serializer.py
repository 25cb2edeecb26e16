"""
DBML Serializer

Renders a SchemaModel as DBML text: enums first, then every table followed
by the Ref lines of the foreign keys it owns. Type names keep the token as
written in the sheet, so "numeric(5,2)" stays "numeric(5,2)".
"""

import re
from typing import List, Optional

from ..config_loader import OutputConfig
from ..model.schema_model import EnumType, Field, NormalizedType, SchemaModel, Table, TypeKind

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_identifier(name: str) -> str:
    """Double-quote names that are not plain identifiers."""
    if _PLAIN_IDENTIFIER.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def escape_block_comment(text: str) -> str:
    """Break up '*/' so a description cannot close its comment early."""
    return text.replace("*/", "* /")


class DbmlSerializer:
    """
    Converts a SchemaModel to DBML.
    """

    def __init__(self, output: Optional[OutputConfig] = None):
        self.output = output or OutputConfig()

    def serialize(self, model: SchemaModel) -> str:
        blocks: List[str] = []

        for enum in model.enums:
            blocks.append(self._enum(enum))

        for table in model.tables:
            lines = [self._table(table)]
            for rel in model.relationships_from(table):
                ref = self._ref(model, rel)
                if ref:
                    lines.append(ref)
            blocks.append("\n".join(lines))

        return "\n\n".join(blocks) + "\n" if blocks else ""

    def type_name(self, ntype: NormalizedType) -> str:
        """DBML column type for a normalized type."""
        if ntype.kind == TypeKind.ENUM:
            return quote_identifier(ntype.enum_name)
        if ntype.kind in (TypeKind.NUMERIC, TypeKind.TEXT, TypeKind.INTEGER):
            token = ntype.raw or ntype.name
        elif ntype.kind == TypeKind.MONEY:
            token = ntype.raw.split("(")[0].strip().lower() or ntype.name
        else:
            token = ntype.name
        # DBML type names cannot contain spaces unless quoted
        if " " in token:
            return f'"{token}"'
        return token

    def table_ref(self, table: Table) -> str:
        if self.output.dbml_qualify_schema and table.schema:
            return f"{quote_identifier(table.schema)}.{quote_identifier(table.name)}"
        return quote_identifier(table.name)

    def _enum(self, enum: EnumType) -> str:
        lines = [f"Enum {quote_identifier(enum.name)} {{"]
        for value in enum.values:
            lines.append(f"  {quote_identifier(value)}")
        lines.append("}")
        return "\n".join(lines)

    def _table(self, table: Table) -> str:
        lines = [f"Table {self.table_ref(table)} {{"]
        for field in table.fields:
            lines.append(f"  {self._field(field)}")
        lines.append("}")
        return "\n".join(lines)

    def _field(self, field: Field) -> str:
        settings = []
        if field.is_primary_key:
            settings.append("pk")
        if not field.nullable:
            settings.append("not null")
        if field.is_unique and not field.is_primary_key:
            settings.append("unique")

        line = f"{quote_identifier(field.name)} {self.type_name(field.type)}"
        if settings:
            line += f" [{', '.join(settings)}]"

        description = field.description.strip()
        if "\n" in description:
            body = "\n    ".join(escape_block_comment(l) for l in description.split("\n"))
            line += f" /* {body} */"
        elif description:
            line += f" // {description}"
        return line

    def _ref(self, model: SchemaModel, rel) -> str:
        source = model.field_by_id(rel.source_field)
        target = model.field_by_id(rel.target_field)
        if source is None or target is None:
            return ""
        source_table, source_field = source
        target_table, target_field = target
        return (
            f"Ref: {self.table_ref(source_table)}.{quote_identifier(source_field.name)}"
            f" > {self.table_ref(target_table)}.{quote_identifier(target_field.name)}"
        )
