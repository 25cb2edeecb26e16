"""
Schema Model

In-memory representation of a schema inferred from spreadsheet regions:
tables, fields, enums, relationships and layout areas. Everything that
leaves the parser flows through these dataclasses before it is serialized.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class TypeKind(str, Enum):
    """Variant tag for a normalized column type."""
    TEXT = "text"
    NUMERIC = "numeric"
    INTEGER = "integer"
    BIGINT = "bigint"
    TIMESTAMP = "timestamp"
    DATE = "date"
    BOOLEAN = "boolean"
    MONEY = "money"
    ENUM = "enum"
    OTHER = "other"


@dataclass(frozen=True)
class NormalizedType:
    """A raw column type token mapped onto one type family.

    ``name`` is the lowercase base name (``varchar``, ``numeric``, ``int``...),
    ``raw`` is the token as written in the sheet. Numeric types may carry a
    precision/scale pair; enum references carry the referenced enum name.
    """
    kind: TypeKind
    name: str
    raw: str = ""
    precision: Optional[int] = None
    scale: Optional[int] = None
    enum_name: Optional[str] = None
    recognized: bool = True

    @classmethod
    def enum_ref(cls, enum_name: str) -> "NormalizedType":
        return cls(kind=TypeKind.ENUM, name=enum_name, raw=enum_name, enum_name=enum_name)


@dataclass
class RelationIntent:
    """An unresolved foreign key recorded while a table is parsed."""
    source_field: str
    target_table_name: str
    target_field_name: str = "id"


@dataclass
class Field:
    """A single field (column) of a table."""
    identity: str
    name: str
    type: NormalizedType
    nullable: bool = True
    is_primary_key: bool = False
    is_unique: bool = False
    description: str = ""
    relation: Optional[RelationIntent] = None
    declared_type: Optional[NormalizedType] = None  # type column result before an enum override
    row: Optional[int] = None  # 1-indexed source row


@dataclass
class Index:
    """An index over one or more fields of a table."""
    identity: str
    name: str
    field_ids: List[str] = field(default_factory=list)
    unique: bool = True
    is_primary_key: bool = False


@dataclass
class Table:
    """A table parsed from one schema region."""
    identity: str
    schema: str
    name: str
    fields: List[Field] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    color: Optional[str] = None
    x: int = 0
    y: int = 0
    width: int = 0
    relation_intents: List[RelationIntent] = field(default_factory=list)

    @property
    def primary_key_fields(self) -> List[Field]:
        return [f for f in self.fields if f.is_primary_key]

    def find_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class EnumType:
    """A named enumeration ("custom type" in the diagram output)."""
    identity: str
    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class Relationship:
    """A resolved many-to-one foreign key."""
    identity: str
    name: str
    source_schema: str
    source_table: str
    source_field: str
    target_schema: str
    target_table: str
    target_field: str
    source_cardinality: str = "many"
    target_cardinality: str = "one"


@dataclass
class Area:
    """A visual grouping rectangle, one per schema region."""
    identity: str
    name: str
    color: str
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class SchemaModel:
    """The assembled, read-only result of one export run."""
    name: str
    tables: Tuple[Table, ...]
    relationships: Tuple[Relationship, ...]
    enums: Tuple[EnumType, ...]
    areas: Tuple[Area, ...]
    created_at_iso: str
    created_at_epoch_ms: int

    def field_by_id(self, identity: str) -> Optional[Tuple[Table, Field]]:
        for table in self.tables:
            for f in table.fields:
                if f.identity == identity:
                    return table, f
        return None

    def relationships_from(self, table: Table) -> List[Relationship]:
        """Relationships whose source side is ``table``."""
        return [r for r in self.relationships if r.source_table == table.identity]
