"""
Model Assembler

Freezes the contents of a BuildContext into a SchemaModel and gives every
area and table a placeholder position on a fixed grid. Real layouts are
carried over by a separate migration step downstream.
"""

import logging
from typing import Dict, List, Optional

from ..config_loader import LayoutConfig
from .build_context import BuildContext
from .schema_model import Area, SchemaModel, Table

logger = logging.getLogger(__name__)


class ModelAssembler:
    """Lays out areas and tables and builds the read-only model."""

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self.layout = layout or LayoutConfig()

    def area_width(self) -> int:
        return self.layout.tables_per_row * self.layout.spacing_x

    def add_area(self, context: BuildContext, name: str, color: Optional[str]) -> Area:
        """Create the area for a schema region, placed right of the previous one."""
        x = 0
        if context.areas:
            last = context.areas[-1]
            x = last.x + last.width + self.layout.area_gap

        area = Area(
            identity=context.next_id(),
            name=name,
            color=color or self.layout.default_area_color,
            x=x,
            y=0,
            width=self.area_width(),
            height=self.layout.area_height,
        )
        context.areas.append(area)
        return area

    def place_tables(self, tables: List[Table], areas: List[Area]):
        """Grid-place each schema's tables inside its area, in sheet order."""
        origins: Dict[str, Area] = {area.name: area for area in areas}
        slots: Dict[str, int] = {}

        for table in tables:
            slot = slots.get(table.schema, 0)
            slots[table.schema] = slot + 1

            area = origins.get(table.schema)
            origin_x = area.x if area else 0
            origin_y = area.y if area else 0

            table.x = origin_x + (slot % self.layout.tables_per_row) * self.layout.spacing_x
            table.y = origin_y + (slot // self.layout.tables_per_row) * self.layout.spacing_y
            table.width = self.layout.table_width
            if area and not table.color:
                table.color = area.color

    def assemble(self, context: BuildContext, name: str) -> SchemaModel:
        """Build the SchemaModel from everything accumulated on ``context``."""
        self.place_tables(context.tables, context.areas)

        model = SchemaModel(
            name=name,
            tables=tuple(context.tables),
            relationships=tuple(context.relationships),
            enums=tuple(context.enums),
            areas=tuple(context.areas),
            created_at_iso=context.now_iso,
            created_at_epoch_ms=context.now_epoch_ms,
        )
        logger.info(
            f"Assembled '{name}': {len(model.tables)} tables, {len(model.relationships)} relationships, "
            f"{len(model.enums)} enums, {len(model.areas)} areas"
        )
        return model
