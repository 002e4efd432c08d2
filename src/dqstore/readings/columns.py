"""
Columns of the sensor readings tables.

Every row is one reading captured by one check for one time period and one
combination of data stream dimensions. Rows are unique by
(check_hash, dimension_id, time_period) within a partition.
"""

import hashlib
from typing import Dict, List, Optional, Sequence

import polars as pl


class SensorReadingsColumns:
    """Names of the sensor readings columns."""
    ID = "id"
    ACTUAL_VALUE = "actual_value"
    EXPECTED_VALUE = "expected_value"
    TIME_PERIOD = "time_period"
    TIME_GRADIENT = "time_gradient"
    DIMENSION_ID = "dimension_id"
    CONNECTION_NAME = "connection_name"
    PROVIDER = "provider"
    SCHEMA_NAME = "schema_name"
    TABLE_NAME = "table_name"
    COLUMN_NAME = "column_name"
    CHECK_HASH = "check_hash"
    CHECK_NAME = "check_name"
    SENSOR_NAME = "sensor_name"
    EXECUTED_AT = "executed_at"
    DURATION_MS = "duration_ms"

    # identity of a reading inside a partition
    JOIN_COLUMNS: List[str] = [CHECK_HASH, DIMENSION_ID, TIME_PERIOD]

    # the time series of one check and one combination of dimensions
    TIME_SERIES_COLUMNS: List[str] = [CHECK_HASH, DIMENSION_ID]


SCHEMA: Dict[str, pl.DataType] = {
    SensorReadingsColumns.ID: pl.Utf8,
    SensorReadingsColumns.ACTUAL_VALUE: pl.Float64,
    SensorReadingsColumns.EXPECTED_VALUE: pl.Float64,
    SensorReadingsColumns.TIME_PERIOD: pl.Datetime("us"),
    SensorReadingsColumns.TIME_GRADIENT: pl.Utf8,
    SensorReadingsColumns.DIMENSION_ID: pl.Int64,
    SensorReadingsColumns.CONNECTION_NAME: pl.Utf8,
    SensorReadingsColumns.PROVIDER: pl.Utf8,
    SensorReadingsColumns.SCHEMA_NAME: pl.Utf8,
    SensorReadingsColumns.TABLE_NAME: pl.Utf8,
    SensorReadingsColumns.COLUMN_NAME: pl.Utf8,
    SensorReadingsColumns.CHECK_HASH: pl.Int64,
    SensorReadingsColumns.CHECK_NAME: pl.Utf8,
    SensorReadingsColumns.SENSOR_NAME: pl.Utf8,
    SensorReadingsColumns.EXECUTED_AT: pl.Datetime("us", "UTC"),
    SensorReadingsColumns.DURATION_MS: pl.Int32,
}


def create_empty_table() -> pl.DataFrame:
    """Returns an empty sensor readings table with all columns."""
    return pl.DataFrame(schema=SCHEMA)


def _to_utc(column: str, dtype: pl.DataType) -> pl.Expr:
    expr = pl.col(column)
    if isinstance(dtype, pl.Datetime):
        if dtype.time_zone is None:
            expr = expr.dt.replace_time_zone("UTC")
        elif dtype.time_zone != "UTC":
            expr = expr.dt.convert_time_zone("UTC")
        return expr.dt.cast_time_unit("us")
    return expr.cast(SCHEMA[column])


def normalize(df: pl.DataFrame) -> pl.DataFrame:
    """
    Casts a readings table to the standard schema.

    Missing columns are added as nulls, a missing dimension_id becomes 0 like
    a reading without dimensions. The id is derived from the join columns
    when it is missing. Extra columns are kept after the standard ones.
    """
    expressions = []
    for column, dtype in SCHEMA.items():
        if column not in df.columns:
            expressions.append(pl.lit(None, dtype=dtype).alias(column))
        elif column == SensorReadingsColumns.EXECUTED_AT:
            expressions.append(_to_utc(column, df.schema[column]))
        else:
            expressions.append(pl.col(column).cast(dtype))
    normalized = df.with_columns(expressions).with_columns(
        pl.col(SensorReadingsColumns.DIMENSION_ID).fill_null(0)
    )

    reading_id = pl.concat_str(
        [
            pl.col(SensorReadingsColumns.CHECK_HASH).cast(pl.Utf8),
            pl.col(SensorReadingsColumns.DIMENSION_ID).cast(pl.Utf8),
            pl.col(SensorReadingsColumns.TIME_PERIOD).dt.strftime("%Y-%m-%dT%H:%M:%S%.f"),
        ],
        separator="/",
    )
    normalized = normalized.with_columns(
        pl.coalesce([pl.col(SensorReadingsColumns.ID), reading_id]).alias(SensorReadingsColumns.ID)
    )

    extra_columns = [column for column in normalized.columns if column not in SCHEMA]
    return normalized.select(list(SCHEMA) + extra_columns)


def compute_dimension_id(dimension_values: Optional[Sequence[Optional[str]]]) -> int:
    """
    Stable 64-bit id of a combination of data stream dimension values.

    Readings without dimensions (or with only empty dimensions) use 0.
    """
    if not dimension_values or all(value is None for value in dimension_values):
        return 0
    text = "\x00".join("" if value is None else str(value) for value in dimension_values)
    digest = hashlib.blake2b(text.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, byteorder="big", signed=True)
