"""
Tests for table region parsing: boundary detection, field derivation,
relation cells and description continuation.
"""

import pytest

from sheetschema.model.schema_model import TypeKind
from sheetschema.parsing.detection import ColorBoundaryStart, HeaderLookaheadStart, is_header_row
from sheetschema.parsing.table_parser import ColumnLayout, TableSheetParser
from tests import codes, find_table, make_grid

HEADER = ["Logical Name", "Optional", "Field Type", "Relation", "Constraints", "Description"]


def _color_parser(context, layout=None):
    return TableSheetParser(layout or ColumnLayout(), ColorBoundaryStart(), context)


def _lookahead_parser(context, layout=None):
    return TableSheetParser(layout or ColumnLayout(), HeaderLookaheadStart(), context)


class TestColorBoundary:

    @pytest.fixture
    def grid(self):
        rows = [
            ["Agency", "", "", "", "", ""],
            HEADER,
            ["id", "N", "bigint", "", "", "key"],
            ["name", "N", "varchar(50)", "", "", ""],
            ["Invoice", "", "", "", "", ""],
            ["id", "", "int", "", "", ""],
            ["agency_id", "n", "bigint", "ForeignKey, Agency.id", "", ""],
        ]
        return make_grid("Billing", rows, colored_rows={0, 1, 4})

    def test_tables_and_fields(self, context, grid):
        tables = _color_parser(context).parse(grid)

        assert [t.name for t in tables] == ["Agency", "Invoice"]
        assert [f.name for f in tables[0].fields] == ["id", "name"]
        assert [f.name for f in tables[1].fields] == ["id", "agency_id"]
        assert all(t.schema == "Billing" for t in tables)

    def test_colored_header_row_is_not_a_table(self, context, grid):
        tables = _color_parser(context).parse(grid)
        assert find_table(tables, "Logical Name") is None

    def test_field_flags(self, context, grid):
        agency = _color_parser(context).parse(grid)[0]
        pk, name = agency.fields

        assert pk.is_primary_key and pk.is_unique and not pk.nullable
        assert not name.is_primary_key and not name.nullable
        assert name.type.kind == TypeKind.TEXT
        assert pk.description == "key"

    def test_optional_flag_is_case_insensitive(self, context, grid):
        invoice = _color_parser(context).parse(grid)[1]
        assert not invoice.fields[1].nullable

    def test_primary_key_index(self, context, grid):
        agency = _color_parser(context).parse(grid)[0]
        assert [f.name for f in agency.primary_key_fields] == ["id"]
        assert len(agency.indexes) == 1
        index = agency.indexes[0]
        assert index.name == "Agency_pkey"
        assert index.is_primary_key and index.unique
        assert index.field_ids == [agency.fields[0].identity]

    def test_lookup_registered(self, context, grid):
        tables = _color_parser(context).parse(grid)
        entry = context.table_lookup[("Billing", "Agency")]
        assert entry.identity == tables[0].identity
        assert entry.fields == {"id": tables[0].fields[0].identity, "name": tables[0].fields[1].identity}

    def test_rows_before_first_table_are_ignored(self, context):
        grid = make_grid("S", [["stray", "N", "int"], ["T"], ["id", "N", "int"]], colored_rows={1})
        tables = _color_parser(context).parse(grid)
        assert [t.name for t in tables] == ["T"]
        assert [f.name for f in tables[0].fields] == ["id"]

    def test_empty_table_is_kept(self, context):
        grid = make_grid("S", [["Empty"], ["Next"], ["id", "N", "int"]], colored_rows={0, 1})
        tables = _color_parser(context).parse(grid)
        assert [t.name for t in tables] == ["Empty", "Next"]
        assert tables[0].fields == [] and tables[0].indexes == []
        assert ("S", "Empty") in context.table_lookup

    def test_without_colors_nothing_is_detected(self, context):
        grid = make_grid("S", [["T"], ["id", "N", "int"]], with_colors=False)
        assert _color_parser(context).parse(grid) == []


class TestHeaderLookahead:

    def test_single_cell_followed_by_header(self, context):
        rows = [
            ["Product"],
            HEADER,
            ["id", "N", "int"],
            ["title", "N", "text"],
            ["Variant", "", ""],
            ["logical name", "optional"],
            ["id", "N", "int"],
        ]
        tables = _lookahead_parser(context).parse(make_grid("Catalog", rows, with_colors=False))

        assert [t.name for t in tables] == ["Product", "Variant"]
        assert [f.name for f in tables[0].fields] == ["id", "title"]
        assert [f.name for f in tables[1].fields] == ["id"]

    def test_single_cell_without_header_is_a_field(self, context):
        rows = [["Product"], HEADER, ["id", "N", "int"], ["legacy_code"], ["id2", "Y", "int"]]
        tables = _lookahead_parser(context).parse(make_grid("Catalog", rows, with_colors=False))

        assert len(tables) == 1
        assert [f.name for f in tables[0].fields] == ["id", "legacy_code", "id2"]

    def test_continuation_before_logical_field_is_not_a_table(self, context):
        rows = [
            ["Product"],
            HEADER,
            ["notes", "Y", "text", "", "", "First line"],
            ["", "", "", "", "", "second line"],
            ["logical_key", "N", "int"],
            ["price", "N", "numeric"],
        ]
        tables = _lookahead_parser(context).parse(make_grid("Catalog", rows, with_colors=False))

        assert [(t.name, [f.name for f in t.fields]) for t in tables] == [
            ("Product", ["notes", "logical_key", "price"]),
        ]
        assert tables[0].fields[0].description == "First line\nsecond line"

    def test_lookahead_row_must_be_a_header(self, context):
        rows = [["Product"], HEADER, ["id", "N", "int"], ["legacy"], ["logical_id", "N", "int"]]
        tables = _lookahead_parser(context).parse(make_grid("Catalog", rows, with_colors=False))

        assert len(tables) == 1
        assert [f.name for f in tables[0].fields] == ["id", "legacy", "logical_id"]

    def test_single_cell_on_last_row_is_not_a_table(self, context):
        rows = [["Product"], HEADER, ["id", "N", "int"], ["Orphan"]]
        tables = _lookahead_parser(context).parse(make_grid("Catalog", rows, with_colors=False))
        assert [t.name for t in tables] == ["Product"]


class TestDescriptions:

    def test_multi_line_continuation(self, context):
        rows = [
            ["People"],
            ["Name", "N", "varchar", "", "", "Primary"],
            ["", "", "", "", "", "display name"],
        ]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].description == "Primary\ndisplay name"

    def test_several_continuation_lines_in_order(self, context):
        rows = [
            ["People"],
            ["Name", "N", "varchar", "", "", "one"],
            ["", "", "", "", "", "two"],
            ["", "", "", "", "", ""],
            ["", "", "", "", "", "three"],
        ]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].description == "one\ntwo\nthree"

    def test_continuation_onto_empty_description(self, context):
        rows = [["People"], ["Name", "N", "varchar"], ["", "", "", "", "", "later"]]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].description == "later"

    def test_continuation_without_field_is_ignored(self, context):
        rows = [["People"], ["", "", "", "", "", "floating"], ["id", "N", "int"]]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].description == ""

    def test_description_is_trimmed(self, context):
        rows = [["People"], ["id", "N", "int", "", "", "   padded  "]]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].description == "padded"


class TestRelations:

    def _parse(self, context, relation):
        rows = [["Invoice"], ["agency_id", "N", "bigint", relation]]
        return _color_parser(context).parse(make_grid("Billing", rows, colored_rows={0}))[0]

    def test_foreign_key_with_field(self, context):
        table = self._parse(context, "ForeignKey, Agency.id")
        intent = table.relation_intents[0]
        assert (intent.target_table_name, intent.target_field_name) == ("Agency", "id")
        assert intent.source_field == table.fields[0].identity
        assert table.fields[0].relation is intent

    def test_foreign_key_defaults_to_id(self, context):
        table = self._parse(context, "ForeignKey, Agency")
        assert table.relation_intents[0].target_field_name == "id"

    def test_foreign_key_case_insensitive(self, context):
        table = self._parse(context, "foreignKey,Agency.code")
        assert table.relation_intents[0].target_field_name == "code"

    def test_foreign_key_without_target(self, context):
        table = self._parse(context, "ForeignKey")
        assert table.relation_intents == []
        assert codes(context.warnings) == ["fk_target_missing"]

    @pytest.mark.parametrize("relation", ["Enum, Order Status", "base, Order Status"])
    def test_enum_reference(self, context, relation):
        table = self._parse(context, relation)
        field = table.fields[0]
        assert field.type.kind == TypeKind.ENUM
        assert field.type.enum_name == "Order_Status"
        assert field.declared_type.kind == TypeKind.BIGINT
        assert table.relation_intents == []

    def test_unknown_relation_is_reported(self, context):
        table = self._parse(context, "Lookup, Somewhere")
        assert table.relation_intents == []
        assert codes(context.diagnostics) == ["unknown_relation"]


class TestLayoutsAndPolicies:

    def test_configurable_columns(self, context):
        layout = ColumnLayout(name=0, optional=1, relation=2, type=3, constraints=4, description=5)
        rows = [["Invoice"], ["agency_id", "N", "ForeignKey, Agency", "bigint", "", "desc"]]
        table = _color_parser(context, layout).parse(make_grid("S", rows, colored_rows={0}))[0]

        assert table.fields[0].type.kind == TypeKind.BIGINT
        assert table.relation_intents[0].target_table_name == "Agency"
        assert table.fields[0].description == "desc"

    def test_constraints_column(self, context):
        rows = [
            ["Account"],
            ["email", "Y", "text", "", "Unique, NOT  NULL"],
            ["handle", "Y", "text", "", "unique"],
            ["nickname", "Y", "text", "", "indexed"],
        ]
        email, handle, nickname = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0].fields

        assert email.is_unique and not email.nullable
        assert handle.is_unique and handle.nullable
        assert not handle.is_primary_key
        assert not nickname.is_unique and nickname.nullable

    def test_duplicate_field_first_wins(self, context):
        rows = [["T"], ["code", "N", "int"], ["code", "Y", "text"]]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]

        assert len(table.fields) == 1
        assert table.fields[0].type.kind == TypeKind.INTEGER
        assert codes(context.warnings) == ["duplicate_field"]

    def test_duplicate_table_keeps_first_lookup(self, context):
        rows = [["T"], ["id", "N", "int"], ["T"], ["id", "N", "int"]]
        tables = _color_parser(context).parse(make_grid("S", rows, colored_rows={0, 2}))

        assert len(tables) == 2
        assert context.table_lookup[("S", "T")].identity == tables[0].identity
        assert codes(context.warnings) == ["duplicate_table"]

    def test_unrecognized_type_is_reported(self, context):
        rows = [["T"], ["payload", "Y", "jsonb"]]
        table = _color_parser(context).parse(make_grid("S", rows, colored_rows={0}))[0]
        assert table.fields[0].type.name == "jsonb"
        assert codes(context.diagnostics) == ["unrecognized_type"]

    def test_identity_order(self, context):
        rows = [["A"], ["id", "N", "int"], ["B"], ["x", "Y", "int"]]
        a, b = _color_parser(context).parse(make_grid("S", rows, colored_rows={0, 2}))

        assert a.identity == "1"
        assert a.fields[0].identity == "2"
        assert a.indexes[0].identity == "3"
        assert b.identity == "4"
        assert b.fields[0].identity == "5"
        assert b.indexes == []


def test_is_header_row():
    assert is_header_row(HEADER)
    assert is_header_row(["", "FIELD TYPE"])
    assert not is_header_row(["logical", "x"])
