"""
Partitioned time-series store of the sensor readings.
"""

from .columns import SCHEMA, SensorReadingsColumns, compute_dimension_id, create_empty_table, normalize
from .factory import SensorReadingsSnapshotFactory
from .merge import TableMergeUtility
from .parquet_storage import SensorReadingsParquetStorage
from .partitioning import LoadedMonthlyPartition, ParquetPartitionId, month_of, months_between
from .snapshot import SensorReadingsSnapshot
from .timeseries import SensorReadingsTimeSeriesData, SensorReadingsTimeSeriesKey, SensorReadingsTimeSeriesMap

__all__ = [
    "SCHEMA",
    "SensorReadingsColumns",
    "compute_dimension_id",
    "create_empty_table",
    "normalize",
    "ParquetPartitionId",
    "LoadedMonthlyPartition",
    "month_of",
    "months_between",
    "SensorReadingsParquetStorage",
    "TableMergeUtility",
    "SensorReadingsSnapshot",
    "SensorReadingsSnapshotFactory",
    "SensorReadingsTimeSeriesKey",
    "SensorReadingsTimeSeriesData",
    "SensorReadingsTimeSeriesMap",
]
