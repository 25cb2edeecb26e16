"""
ChartDB Document Schema

Strict pydantic models of the diagram document accepted by ChartDB's
importer. Every key the importer requires is declared without a default,
identities are strings, and unknown keys are rejected, so a document that
validates here will not be refused downstream for a missing or mistyped key.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FieldAttribute(_Strict):
    """Bounds and default of a type parameter (precision, scale)."""
    max: StrictInt
    min: StrictInt
    default: StrictInt


class FieldType(_Strict):
    """Type descriptor of a field."""
    id: StrictStr
    name: StrictStr
    usage_level: Optional[StrictInt] = Field(default=None, alias="usageLevel")
    field_attributes: Optional[Dict[str, FieldAttribute]] = Field(default=None, alias="fieldAttributes")


class DBField(_Strict):
    id: StrictStr
    name: StrictStr
    type: FieldType
    primary_key: StrictBool = Field(alias="primaryKey")
    unique: StrictBool
    nullable: StrictBool
    increment: StrictBool
    default: StrictStr
    comment: StrictStr
    created_at: StrictInt = Field(alias="createdAt")


class DBIndex(_Strict):
    id: StrictStr
    name: StrictStr
    unique: StrictBool
    field_ids: List[StrictStr] = Field(alias="fieldIds")
    created_at: StrictInt = Field(alias="createdAt")
    is_primary_key: StrictBool = Field(alias="isPrimaryKey")


class DBTable(_Strict):
    id: StrictStr
    name: StrictStr
    schema_name: StrictStr = Field(alias="schema")
    color: StrictStr
    x: StrictInt
    y: StrictInt
    width: StrictInt
    fields: List[DBField]
    indexes: List[DBIndex]
    is_view: StrictBool = Field(alias="isView")
    created_at: StrictInt = Field(alias="createdAt")
    updated_at: StrictInt = Field(alias="updatedAt")


class DBRelationship(_Strict):
    id: StrictStr
    name: StrictStr
    source_schema: StrictStr = Field(alias="sourceSchema")
    source_table_id: StrictStr = Field(alias="sourceTableId")
    source_field_id: StrictStr = Field(alias="sourceFieldId")
    target_schema: StrictStr = Field(alias="targetSchema")
    target_table_id: StrictStr = Field(alias="targetTableId")
    target_field_id: StrictStr = Field(alias="targetFieldId")
    source_cardinality: StrictStr = Field(alias="sourceCardinality")
    target_cardinality: StrictStr = Field(alias="targetCardinality")
    created_at: StrictInt = Field(alias="createdAt")


class DBArea(_Strict):
    id: StrictStr
    name: StrictStr
    color: StrictStr
    x: StrictInt
    y: StrictInt
    width: StrictInt
    height: StrictInt
    created_at: StrictInt = Field(alias="createdAt")


class DBCustomType(_Strict):
    id: StrictStr
    name: StrictStr
    kind: StrictStr
    values: List[StrictStr]
    fields: List[Dict[str, StrictStr]]
    created_at: StrictInt = Field(alias="createdAt")


class ChartDBDiagram(_Strict):
    """Root document."""
    id: StrictStr
    name: StrictStr
    database_type: StrictStr = Field(alias="databaseType")
    tables: List[DBTable]
    relationships: List[DBRelationship]
    areas: List[DBArea]
    custom_types: List[DBCustomType] = Field(alias="customTypes")
    notes: List[Dict]
    subject_areas: List[Dict] = Field(alias="subjectAreas")
    created_at: StrictStr = Field(alias="createdAt")
    updated_at: StrictStr = Field(alias="updatedAt")


def validate_document(document: Dict) -> ChartDBDiagram:
    """Validate a parsed document; raises pydantic.ValidationError on failure."""
    return ChartDBDiagram.model_validate(document)


def parse_document(text: str) -> ChartDBDiagram:
    """Parse and validate a JSON document string."""
    return ChartDBDiagram.model_validate_json(text)
