"""
End-to-end tests for the sample workbook export pipeline.
"""

import json

import pytest

from sheetschema.conversion.chartdb_schema import parse_document
from sheetschema.model.schema_model import TypeKind
from sheetschema.pipeline import SchemaExporter, load_workbook_grid
from tests import codes, find_table
from tests.conftest import BILLING_JSON, CATALOG_YAML


@pytest.mark.e2e
class TestBillingChartDB:
    """Colored workbook through the chartdb profile."""

    @pytest.fixture(scope="class")
    def result(self, billing_workbook):
        return SchemaExporter().export(billing_workbook, "chartdb")

    def test_processed_sheets(self, result):
        assert result.processed_sheets == ["Enums", "Billing"]
        assert "sheet_skipped" in codes(result.diagnostics)

    def test_model_contents(self, result):
        model = result.model
        assert [t.name for t in model.tables] == ["Agency", "Invoice", "InvoiceLine"]
        assert [e.name for e in model.enums] == ["InvoiceStatus", "Currency"]
        assert [a.name for a in model.areas] == ["Billing"]
        assert len(model.relationships) == 2

    def test_warnings(self, result):
        assert codes(result.warnings) == ["fk_target_table_missing"]
        assert "fk_target_field_missing" in codes(result.diagnostics)

    def test_invoice_fields(self, result):
        invoice = find_table(result.model.tables, "Invoice")
        fields = {f.name: f for f in invoice.fields}

        assert fields["amount"].description == "Invoice total\nbefore tax"
        assert fields["amount"].type.precision == 5
        assert fields["status"].type.kind == TypeKind.ENUM
        assert fields["status"].type.enum_name == "InvoiceStatus"
        assert fields["issued_at"].nullable

    def test_identities_unique_and_increasing(self, result):
        model = result.model
        ids = [e.identity for e in model.enums] + [a.identity for a in model.areas]
        for table in model.tables:
            ids.append(table.identity)
            ids.extend(f.identity for f in table.fields)
            ids.extend(i.identity for i in table.indexes)
        ids.extend(r.identity for r in model.relationships)

        numbers = sorted(int(i) for i in ids)
        assert len(set(numbers)) == len(numbers)
        assert numbers == list(range(1, len(numbers) + 1))

    def test_document_validates(self, result):
        diagram = parse_document(result.text)
        assert diagram.name == "Billing Model"
        assert [t.name for t in diagram.tables] == ["Agency", "Invoice", "InvoiceLine"]

    def test_tables_placed_inside_area(self, result):
        area = result.model.areas[0]
        for table in result.model.tables:
            assert area.x <= table.x < area.x + area.width
            assert table.width == 450

    def test_summary(self, result):
        assert result.summary() == {
            "tables": 3,
            "fields": 13,
            "relationships": 2,
            "enums": 2,
            "areas": 1,
            "warnings": 1,
        }


@pytest.mark.e2e
class TestCatalogDbml:
    """Header-row workbook through the dbml profile."""

    @pytest.fixture(scope="class")
    def result(self, catalog_workbook):
        return SchemaExporter().export(catalog_workbook, "dbml")

    def test_output(self, result):
        assert result.text == (
            "Enum Color {\n"
            "  red\n"
            "  green\n"
            "}\n"
            "\n"
            "Enum Size {\n"
            "  small\n"
            "  large\n"
            "}\n"
            "\n"
            "Table Product {\n"
            "  id int [pk, not null]\n"
            "  title varchar(200) [not null] // Shown in listings\n"
            "  color Color\n"
            "  price numeric(10,2) [not null] // List price */ excl. VAT\n"
            "}\n"
            "\n"
            "Table Variant {\n"
            "  id int [pk, not null]\n"
            "  product_id int [not null]\n"
            "  size Size\n"
            "  notes text /* First line\n"
            "    second line * / end */\n"
            "}\n"
            "Ref: Variant.product_id > Product.id\n"
        )

    def test_no_warnings(self, result):
        assert result.warnings == []


class TestRuns:

    def test_each_run_renumbers(self, billing_workbook):
        exporter = SchemaExporter()
        first = exporter.build(billing_workbook).model
        second = exporter.build(billing_workbook).model

        assert [t.identity for t in first.tables] == [t.identity for t in second.tables]
        assert first.tables[0] is not second.tables[0]

    def test_same_workbook_both_formats(self, billing_workbook):
        exporter = SchemaExporter()
        dbml = exporter.export(billing_workbook, "dbml", profile="chartdb")
        chartdb = exporter.export(billing_workbook, "chartdb")

        assert "Table Invoice {" in dbml.text
        assert "Ref: Invoice.agency_id > Agency.id" in dbml.text
        assert len(json.loads(chartdb.text)["tables"]) == 3

    def test_unknown_format(self, billing_workbook):
        with pytest.raises(ValueError):
            SchemaExporter().export(billing_workbook, "sql")

    def test_unknown_profile(self, billing_workbook):
        with pytest.raises(KeyError):
            SchemaExporter().build(billing_workbook, "nope")

    def test_load_workbook_grid(self):
        assert load_workbook_grid(BILLING_JSON).name == "Billing Model"
        assert load_workbook_grid(CATALOG_YAML).sheets[1].name == "Catalog"

    def test_load_unsupported_suffix(self, tmp_path):
        path = tmp_path / "schema.csv"
        path.write_text("a,b\n")
        with pytest.raises(ValueError):
            load_workbook_grid(path)
