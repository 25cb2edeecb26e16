"""
Enum Sheet Parser

Scans an enum region top to bottom. A boundary row (as decided by the
configured EnumBoundaryDetector) opens a new enum; every other non-empty
row is a value of the enum currently open.
"""

import logging
import re
from typing import List, Optional

from ..model.build_context import BuildContext
from ..model.schema_model import EnumType
from ..sheets.grid import SheetGrid
from .detection import EnumBoundaryDetector, first_non_empty

logger = logging.getLogger(__name__)


def sanitize_identifier(name: str) -> str:
    """Collapse whitespace to underscores and drop anything not [A-Za-z0-9_]."""
    collapsed = re.sub(r"\s+", "_", name.strip())
    return re.sub(r"[^A-Za-z0-9_]", "", collapsed)


class EnumSheetParser:
    """
    Parses enum regions into EnumType entries on the build context.

    The first enum with a given sanitized name wins; later blocks with the
    same name are rejected and reported.
    """

    def __init__(self, detector: EnumBoundaryDetector, context: BuildContext):
        self.detector = detector
        self.context = context

    def parse(self, grid: SheetGrid) -> List[EnumType]:
        parsed: List[EnumType] = []
        current: Optional[EnumType] = None
        skipping = False  # inside a rejected block
        opened_at = 0

        for index in range(grid.row_count):
            value = first_non_empty(grid.row(index))
            if not value:
                continue

            boundary = self.detector.detect(grid, index)
            if boundary is not None:
                if current is not None:
                    self._flush(current, parsed, grid, opened_at)
                current = None
                skipping = False

                name = sanitize_identifier(boundary)
                if not name:
                    self.context.warn(
                        "invalid_enum_name",
                        f"Enum name '{boundary}' has no identifier characters; block skipped",
                        sheet=grid.name, row=index + 1,
                    )
                    skipping = True
                elif self._is_duplicate(name, parsed):
                    self.context.warn(
                        "duplicate_enum",
                        f"Enum '{name}' is already defined; later definition skipped",
                        sheet=grid.name, row=index + 1,
                    )
                    skipping = True
                else:
                    current = EnumType(identity=self.context.next_id(), name=name)
                    opened_at = index + 1
                continue

            if current is not None:
                current.values.append(value)
            elif not skipping:
                self.context.info(
                    "orphan_enum_value",
                    f"Value '{value}' appears before any enum name; ignored",
                    sheet=grid.name, row=index + 1,
                )

        if current is not None:
            self._flush(current, parsed, grid, opened_at)

        logger.info(f"Parsed {len(parsed)} enums from {grid.name}")
        return parsed

    def _is_duplicate(self, name: str, parsed: List[EnumType]) -> bool:
        if any(e.name == name for e in parsed):
            return True
        return self.context.find_enum(name) is not None

    def _flush(self, enum: EnumType, parsed: List[EnumType], grid: SheetGrid, row: int):
        if not enum.values:
            self.context.info(
                "empty_enum",
                f"Enum '{enum.name}' has no values",
                sheet=grid.name, row=row,
            )
        parsed.append(enum)
        self.context.enums.append(enum)
