"""
Unit tests for the sensor readings schema helpers.
"""

from datetime import datetime, timedelta, timezone

import polars as pl
import pytest

from dqstore.readings import SCHEMA, SensorReadingsColumns, compute_dimension_id, create_empty_table, normalize


@pytest.mark.unit
class TestNormalize:
    """Test cases for normalize and create_empty_table."""

    def test_empty_table_has_schema(self):
        """Test that the empty table has every standard column."""
        table = create_empty_table()

        assert table.height == 0
        assert table.columns == list(SCHEMA)
        assert table.schema[SensorReadingsColumns.EXECUTED_AT] == pl.Datetime("us", "UTC")

    def test_missing_columns_added(self):
        """Test that a minimal table is completed with typed null columns."""
        df = pl.DataFrame({
            "check_hash": [1],
            "dimension_id": [0],
            "time_period": [datetime(2024, 3, 5)],
            "actual_value": [5],
        })

        normalized = normalize(df)

        assert normalized.columns == list(SCHEMA)
        assert normalized.schema[SensorReadingsColumns.ACTUAL_VALUE] == pl.Float64
        assert normalized[SensorReadingsColumns.CONNECTION_NAME].to_list() == [None]
        assert normalized[SensorReadingsColumns.ID][0].startswith("1/0/2024-03-05T00:00:00")

    def test_existing_id_kept(self):
        """Test that a given id is not replaced."""
        df = pl.DataFrame({
            "id": ["custom"],
            "check_hash": [1],
            "dimension_id": [0],
            "time_period": [datetime(2024, 3, 5)],
        })

        assert normalize(df)[SensorReadingsColumns.ID].to_list() == ["custom"]

    def test_executed_at_converted_to_utc(self):
        """Test that timestamps with another time zone are converted to UTC."""
        local = datetime(2024, 3, 5, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        df = pl.DataFrame({"check_hash": [1], "executed_at": [local]})

        normalized = normalize(df)

        assert normalized.schema[SensorReadingsColumns.EXECUTED_AT] == pl.Datetime("us", "UTC")
        assert normalized[SensorReadingsColumns.EXECUTED_AT][0] == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)

    def test_naive_executed_at_is_utc(self):
        """Test that naive timestamps are taken as UTC."""
        df = pl.DataFrame({"check_hash": [1], "executed_at": [datetime(2024, 3, 5, 12, 0)]})

        normalized = normalize(df)

        assert normalized[SensorReadingsColumns.EXECUTED_AT][0] == datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)

    def test_extra_columns_kept_last(self):
        """Test that custom columns survive normalization."""
        df = pl.DataFrame({"custom": ["x"], "check_hash": [1]})

        normalized = normalize(df)

        assert normalized.columns[-1] == "custom"
        assert normalized["custom"].to_list() == ["x"]


@pytest.mark.unit
class TestDimensionId:
    """Test cases for compute_dimension_id."""

    def test_no_dimensions(self):
        """Test that readings without dimensions use 0."""
        assert compute_dimension_id(None) == 0
        assert compute_dimension_id([]) == 0
        assert compute_dimension_id([None, None]) == 0

    def test_stable_and_distinct(self):
        """Test that the id depends on the values and their order."""
        assert compute_dimension_id(["US", "web"]) == compute_dimension_id(["US", "web"])
        assert compute_dimension_id(["US", "web"]) != compute_dimension_id(["web", "US"])
        assert compute_dimension_id(["US", None]) != compute_dimension_id([None, "US"])

    def test_missing_dimension_id_is_zero(self):
        """Test that readings without a dimension id get the id of no dimensions."""
        df = pl.DataFrame({
            "check_hash": [1, 2],
            "dimension_id": [None, 7],
            "time_period": [datetime(2024, 3, 5)] * 2,
        })

        assert normalize(df)[SensorReadingsColumns.DIMENSION_ID].to_list() == [0, 7]
        assert normalize(df.drop("dimension_id"))[SensorReadingsColumns.DIMENSION_ID].to_list() == [0, 0]
