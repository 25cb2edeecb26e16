"""
Shared test fixtures for sheetschema.

Provides a fixed run clock, fresh build contexts and the sample workbooks.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the project root is importable
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sheetschema.config_loader import ExportConfig
from sheetschema.model.build_context import BuildContext
from sheetschema.sheets.grid import WorkbookGrid, load_grid_document

SAMPLES = PROJECT_ROOT / "samples" / "workbooks"
BILLING_JSON = SAMPLES / "billing.json"
CATALOG_YAML = SAMPLES / "catalog.yaml"

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def context() -> BuildContext:
    """A fresh build context with a fixed clock."""
    return BuildContext(now=FIXED_NOW)


@pytest.fixture
def config() -> ExportConfig:
    """Built-in default configuration."""
    return ExportConfig()


@pytest.fixture(scope="session")
def billing_workbook() -> WorkbookGrid:
    """Colored sample workbook (chartdb profile)."""
    assert BILLING_JSON.exists(), f"Sample workbook not found at {BILLING_JSON}"
    return load_grid_document(BILLING_JSON)


@pytest.fixture(scope="session")
def catalog_workbook() -> WorkbookGrid:
    """Header-row sample workbook (dbml profile)."""
    assert CATALOG_YAML.exists(), f"Sample workbook not found at {CATALOG_YAML}"
    return load_grid_document(CATALOG_YAML)
