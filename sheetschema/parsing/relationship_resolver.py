"""
Relationship Resolver

Second pass over the parsed tables: turns every RelationIntent into a
many-to-one Relationship when its target exists in the source table's own
schema, and checks enum references against the parsed enums. Nothing here
fails the run; unresolved references are dropped and reported.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..model.build_context import BuildContext, TableEntry
from ..model.schema_model import Relationship, Table, TypeKind
from .type_mapper import map_type

logger = logging.getLogger(__name__)


class RelationshipResolver:
    """Resolves foreign-key intents into Relationship records."""

    def __init__(self, context: BuildContext):
        self.context = context

    def resolve(
        self,
        tables: Optional[List[Table]] = None,
        lookup: Optional[Dict[Tuple[str, str], TableEntry]] = None,
    ) -> List[Relationship]:
        """
        Resolve the intents of ``tables`` (defaults to every table on the
        context) against ``lookup``. Intents are cleared afterwards.
        """
        if tables is None:
            tables = self.context.tables
        if lookup is None:
            lookup = self.context.table_lookup

        resolved: List[Relationship] = []

        for table in tables:
            for intent in table.relation_intents:
                relationship = self._resolve_intent(table, intent, lookup)
                if relationship is not None:
                    resolved.append(relationship)

            table.relation_intents = []
            for field in table.fields:
                field.relation = None

        self.context.relationships.extend(resolved)
        logger.info(f"Resolved {len(resolved)} relationships")
        return resolved

    def _resolve_intent(self, table: Table, intent, lookup) -> Optional[Relationship]:
        target = lookup.get((table.schema, intent.target_table_name))
        if target is None:
            self.context.warn(
                "fk_target_table_missing",
                f"Foreign key target not found: {table.schema}.{intent.target_table_name} "
                f"(from {table.name})",
                sheet=table.schema,
            )
            return None

        target_field = target.fields.get(intent.target_field_name or "id")
        if target_field is None:
            self.context.info(
                "fk_target_field_missing",
                f"Foreign key target field not found: {table.schema}.{intent.target_table_name}."
                f"{intent.target_field_name} (from {table.name})",
                sheet=table.schema,
            )
            return None

        return Relationship(
            identity=self.context.next_id(),
            name=f"{table.name}_{target.schema}_{target.identity}_fk",
            source_schema=table.schema,
            source_table=table.identity,
            source_field=intent.source_field,
            target_schema=target.schema,
            target_table=target.identity,
            target_field=target_field,
            source_cardinality="many",
            target_cardinality="one",
        )

    def check_enum_references(self, tables: Optional[List[Table]] = None) -> int:
        """Revert fields referencing unknown enums to their declared type.

        Returns the number of fields reverted.
        """
        if tables is None:
            tables = self.context.tables

        reverted = 0
        for table in tables:
            for field in table.fields:
                if field.type.kind != TypeKind.ENUM:
                    continue
                if self.context.find_enum(field.type.enum_name) is not None:
                    continue
                fallback = field.declared_type or map_type(None)
                self.context.warn(
                    "enum_not_found",
                    f"Enum '{field.type.enum_name}' referenced by {table.name}.{field.name} "
                    f"does not exist; using '{fallback.name}'",
                    sheet=table.schema, row=field.row,
                )
                field.type = fallback
                reverted += 1
        return reverted
