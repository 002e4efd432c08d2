"""
Pytest configuration and shared fixtures for the dqstore test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the dqstore project.
"""

import shutil
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data(temp_dir):
    """Sample configuration data for testing."""
    return {
        "store": {
            "user_home": str(temp_dir / "home"),
            "completion_cache_size": 50,
            "storage": {
                "compression": "zstd",
            },
        },
        "logging": {
            "level": "DEBUG",
        },
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary configuration file for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


# ============================================================================
# Metadata Fixtures
# ============================================================================


@pytest.fixture
def user_home_context(temp_dir):
    """A user home context over an empty temporary folder."""
    from dqstore.metadata.storage import UserHomeContextFactory
    from dqstore.models.config import StoreConfig

    factory = UserHomeContextFactory(StoreConfig(user_home=temp_dir / "home", completion_cache_size=100))
    return factory.open_local_user_home()


@pytest.fixture
def sample_user_home():
    """
    In-memory user home with two connections:

        dwh:    public.fact_sales (id, amount with checks), public.dim_customer,
                staging.raw_sales (disabled)
        crm:    sales.accounts (table-level check)
    """
    from dqstore.metadata import (
        CheckSpec,
        ColumnSpec,
        RuleParametersSpec,
        SensorParametersSpec,
        UserHome,
    )

    def make_check(sensor_name: str, disabled: bool = False) -> CheckSpec:
        return CheckSpec(
            sensor=SensorParametersSpec(sensor_definition_name=sensor_name),
            rule=RuleParametersSpec(rule_definition_name="min_count", parameters={"min_count": 1}),
            disabled=disabled,
        )

    user_home = UserHome()

    dwh = user_home.connections.create_and_add_new("dwh")
    dwh.spec.provider_type = "postgresql"
    fact_sales = dwh.tables.create_and_add_new("public.fact_sales")
    fact_sales.spec.checks.put("row_count", make_check("table/row_count"))
    id_column = ColumnSpec()
    id_column.checks.put("nulls_count", make_check("column/nulls_count"))
    id_column.checks.put("unique_count", make_check("column/unique_count", disabled=True))
    fact_sales.spec.columns.put("id", id_column)
    amount_column = ColumnSpec()
    amount_column.checks.put("nulls_count", make_check("column/nulls_count"))
    fact_sales.spec.columns.put("amount", amount_column)
    dwh.tables.create_and_add_new("public.dim_customer")
    raw_sales = dwh.tables.create_and_add_new("staging.raw_sales")
    raw_sales.spec.disabled = True
    raw_sales.spec.columns.put("id", ColumnSpec())

    crm = user_home.connections.create_and_add_new("crm")
    crm.spec.provider_type = "snowflake"
    accounts = crm.tables.create_and_add_new("sales.accounts")
    accounts.spec.checks.put("row_count", make_check("table/row_count"))

    return user_home


# ============================================================================
# Sensor Readings Fixtures
# ============================================================================


class TestUtils:
    """Utility functions for testing."""

    @staticmethod
    def create_readings(rows: List[Dict[str, Any]]):
        """Create a normalized sensor readings table from (check_hash, dimension_id, time_period, value) rows."""
        import polars as pl

        from dqstore.readings import normalize

        return normalize(pl.DataFrame(
            {
                "check_hash": [row["check_hash"] for row in rows],
                "dimension_id": [row.get("dimension_id", 0) for row in rows],
                "time_period": [row["time_period"] for row in rows],
                "actual_value": [float(row["actual_value"]) for row in rows],
                "executed_at": [row.get("executed_at", datetime(2024, 1, 31, 12, 0)) for row in rows],
            }
        ))


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    # Store original config path (default path)
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    # Clean up after test
    from dqstore.config import clear_config_cache, set_config_path

    clear_config_cache()

    # Always reset to original config path
    set_config_path(original_config_path)
