"""
Table Sheet Parser

Scans one schema region and turns it into tables. Table boundaries come
from the configured TableStartDetector; every other row of an open table is
a field, a column header row, or a description continuation line.

Column positions are configurable through ColumnLayout because the two
source formats place the type and relation columns differently.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ..model.build_context import BuildContext, TableEntry
from ..model.schema_model import Field, Index, NormalizedType, RelationIntent, Table
from ..sheets.grid import SheetGrid
from .detection import TableStartDetector, is_header_row
from .enum_parser import sanitize_identifier
from .type_mapper import map_type

logger = logging.getLogger(__name__)


@dataclass
class ColumnLayout:
    """Zero-based positions of the field columns."""
    name: int = 0
    optional: int = 1
    type: int = 2
    relation: int = 3
    constraints: int = 4
    description: int = 5


class TableSheetParser:
    """
    Parses table regions into Table entries on the build context.

    Tables are finalized (primary-key index built, lookup entry registered)
    when the next table starts or the sheet ends; tables without fields are
    kept.
    """

    def __init__(self, layout: ColumnLayout, detector: TableStartDetector, context: BuildContext):
        self.layout = layout
        self.detector = detector
        self.context = context

    def parse(self, grid: SheetGrid, schema: Optional[str] = None, color: Optional[str] = None) -> List[Table]:
        schema = schema or grid.name
        parsed: List[Table] = []
        current: Optional[Table] = None

        index = 0
        while index < grid.row_count:
            start = self.detector.detect(grid, index)
            if start is not None:
                if current is not None:
                    self._finalize(current, parsed, grid)
                current = Table(
                    identity=self.context.next_id(),
                    schema=schema,
                    name=start.name,
                    color=color,
                )
                index += start.rows_consumed
                continue

            if current is not None:
                self._parse_row(current, grid, index)
            index += 1

        if current is not None:
            self._finalize(current, parsed, grid)

        logger.info(f"Parsed {len(parsed)} tables from {grid.name}")
        return parsed

    def _parse_row(self, table: Table, grid: SheetGrid, index: int):
        cells = grid.row(index)
        name = grid.cell(index, self.layout.name)

        if not name:
            self._continue_description(table, grid, index)
            return
        if is_header_row(cells):
            return

        if table.find_field(name) is not None:
            self.context.warn(
                "duplicate_field",
                f"Field '{name}' repeated in table '{table.name}'; later row skipped",
                sheet=grid.name, row=index + 1,
            )
            return

        table.fields.append(self._parse_field(table, grid, index, name))

    def _parse_field(self, table: Table, grid: SheetGrid, index: int, name: str) -> Field:
        layout = self.layout
        constraints = self._constraints(grid.cell(index, layout.constraints))
        required = grid.cell(index, layout.optional).upper() == "N" or "not null" in constraints
        is_pk = name.lower() == "id"

        declared = map_type(grid.cell(index, layout.type))
        if not declared.recognized:
            self.context.info(
                "unrecognized_type",
                f"Type '{declared.raw}' of {table.name}.{name} not recognized; using '{declared.name}'",
                sheet=grid.name, row=index + 1,
            )

        field = Field(
            identity=self.context.next_id(),
            name=name,
            type=declared,
            nullable=not required and not is_pk,
            is_primary_key=is_pk,
            is_unique=is_pk or "unique" in constraints,
            description=grid.cell(index, layout.description),
            declared_type=declared,
            row=index + 1,
        )

        relation = grid.cell(index, layout.relation)
        if relation:
            self._apply_relation(table, field, relation, grid, index)
        return field

    @staticmethod
    def _constraints(text: str) -> List[str]:
        """Lowercased "Unique, Not Null" style tokens."""
        return [" ".join(part.lower().split()) for part in re.split(r"[,;]", text) if part.strip()]

    def _apply_relation(self, table: Table, field: Field, relation: str, grid: SheetGrid, index: int):
        """Handle "ForeignKey, Table[.field]" and "Enum, Name" / "base, Name" cells."""
        parts = relation.split(",")
        kind = parts[0].strip().lower()
        target = parts[1].strip() if len(parts) > 1 else ""

        if kind.startswith("foreignkey"):
            if not target:
                self.context.warn(
                    "fk_target_missing",
                    f"Foreign key on {table.name}.{field.name} names no target",
                    sheet=grid.name, row=index + 1,
                )
                return
            table_name, _, field_name = target.partition(".")
            intent = RelationIntent(
                source_field=field.identity,
                target_table_name=table_name.strip(),
                target_field_name=field_name.strip() or "id",
            )
            field.relation = intent
            table.relation_intents.append(intent)

        elif kind in ("enum", "base"):
            enum_name = sanitize_identifier(target)
            if enum_name:
                field.type = NormalizedType.enum_ref(enum_name)
            else:
                self.context.warn(
                    "enum_name_missing",
                    f"Enum reference on {table.name}.{field.name} names no enum",
                    sheet=grid.name, row=index + 1,
                )

        else:
            self.context.info(
                "unknown_relation",
                f"Relation '{relation}' on {table.name}.{field.name} ignored",
                sheet=grid.name, row=index + 1,
            )

    def _continue_description(self, table: Table, grid: SheetGrid, index: int):
        if not table.fields:
            return
        text = grid.cell(index, self.layout.description)
        if not text:
            return
        previous = table.fields[-1]
        previous.description = f"{previous.description}\n{text}" if previous.description else text

    def _finalize(self, table: Table, parsed: List[Table], grid: SheetGrid):
        pk_fields = [f.identity for f in table.primary_key_fields]
        if pk_fields:
            table.indexes.append(Index(
                identity=self.context.next_id(),
                name=f"{table.name}_pkey",
                field_ids=pk_fields,
                unique=True,
                is_primary_key=True,
            ))

        key = (table.schema, table.name)
        if key in self.context.table_lookup:
            self.context.warn(
                "duplicate_table",
                f"Table '{table.schema}.{table.name}' defined more than once; references resolve to the first",
                sheet=grid.name,
            )
        else:
            self.context.table_lookup[key] = TableEntry(
                identity=table.identity,
                schema=table.schema,
                fields={f.name: f.identity for f in table.fields},
            )

        parsed.append(table)
        self.context.tables.append(table)
