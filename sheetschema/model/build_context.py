"""
Build Context

Mutable state for a single export run: the identity counter, the run clock,
the accumulated entities and the diagnostics list. A context is created at
the start of a run, passed through parse/resolve/assemble, and then dropped.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .schema_model import Area, EnumType, Relationship, Table

logger = logging.getLogger(__name__)


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic."""
    INFO = "info"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A skipped or defaulted decision made while building the model."""
    level: DiagnosticLevel
    code: str
    message: str
    sheet: Optional[str] = None
    row: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "code": self.code,
            "message": self.message,
            "sheet": self.sheet,
            "row": self.row,
        }


@dataclass
class TableEntry:
    """Lookup record for a finalized table, keyed by (schema, name)."""
    identity: str
    schema: str
    fields: Dict[str, str] = field(default_factory=dict)  # field name -> field identity


def _to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BuildContext:
    """
    Accumulators and identity source for one model build.

    Identities are decimal strings from a single counter seeded at 1 and
    shared by every entity kind. The run timestamp is sampled once, at
    construction, and reused for every entity.
    """

    def __init__(self, now: Optional[datetime] = None):
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        self.now_iso = _to_iso(now)
        self.now_epoch_ms = int(now.timestamp() * 1000)

        self._next_id = 1
        self.issued_ids: List[str] = []

        self.tables: List[Table] = []
        self.enums: List[EnumType] = []
        self.areas: List[Area] = []
        self.relationships: List[Relationship] = []
        self.table_lookup: Dict[Tuple[str, str], TableEntry] = {}
        self.diagnostics: List[Diagnostic] = []
        self.processed_sheets: List[str] = []

    def next_id(self) -> str:
        """Issue the next identity token."""
        identity = str(self._next_id)
        self._next_id += 1
        self.issued_ids.append(identity)
        return identity

    def warn(self, code: str, message: str, sheet: Optional[str] = None, row: Optional[int] = None):
        self._report(DiagnosticLevel.WARNING, code, message, sheet, row)

    def info(self, code: str, message: str, sheet: Optional[str] = None, row: Optional[int] = None):
        self._report(DiagnosticLevel.INFO, code, message, sheet, row)

    def _report(self, level, code, message, sheet, row):
        self.diagnostics.append(Diagnostic(level=level, code=code, message=message, sheet=sheet, row=row))
        location = f" [{sheet}:{row}]" if sheet and row else (f" [{sheet}]" if sheet else "")
        if level == DiagnosticLevel.WARNING:
            logger.warning(f"{code}: {message}{location}")
        else:
            logger.info(f"{code}: {message}{location}")

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.WARNING]

    def find_enum(self, name: str) -> Optional[EnumType]:
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None
