"""
Snapshot of the sensor readings of one table.

A snapshot loads monthly partitions on demand, merges new readings into
them and writes back only the months that changed.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Union

import polars as pl

from ..metadata.sources import PhysicalTableName
from ..validation import ValidationError
from .columns import SensorReadingsColumns, create_empty_table, normalize
from .merge import TableMergeUtility
from .parquet_storage import SensorReadingsParquetStorage
from .partitioning import LoadedMonthlyPartition, ParquetPartitionId, month_of, months_between
from .timeseries import SensorReadingsTimeSeriesData, SensorReadingsTimeSeriesMap

logger = logging.getLogger(__name__)

_MONTH_COLUMN = "__month"


class SensorReadingsSnapshot:
    """
    Sensor readings of one (connection, table) pair.

    Creating a snapshot does not read anything. Months are read by
    ensure_month_loaded() and ensure_months_loaded(), or implicitly when new
    readings for a month are merged.
    """

    def __init__(self, connection_name: str, table_name: PhysicalTableName,
                 storage: SensorReadingsParquetStorage):
        self.connection_name = connection_name
        self.table_name = table_name
        self.storage = storage
        self._loaded_months: Dict[date, LoadedMonthlyPartition] = {}
        self._loaded_data: Optional[pl.DataFrame] = None
        self._time_series_map: Optional[SensorReadingsTimeSeriesMap] = None

    @property
    def loaded_months(self) -> Dict[date, LoadedMonthlyPartition]:
        """Loaded partitions ordered by month."""
        return dict(sorted(self._loaded_months.items()))

    def _invalidate_indexes(self) -> None:
        self._loaded_data = None
        self._time_series_map = None

    def ensure_month_loaded(self, month: Union[date, datetime]) -> pl.DataFrame:
        """
        Loads a month unless it is already loaded.

        Returns:
            The table of the month held by the snapshot

        Raises:
            PartitionReadError: When the partition file cannot be read
        """
        month = month_of(month)
        partition = self._loaded_months.get(month)
        if partition is None:
            partition_id = ParquetPartitionId(self.connection_name, self.table_name, month)
            partition = self.storage.load_partition(partition_id)
            self._loaded_months[month] = partition
            self._invalidate_indexes()
        return partition.data

    def ensure_months_loaded(self, start: Union[date, datetime], end: Union[date, datetime]) -> pl.DataFrame:
        """Loads all months in the range and returns their readings."""
        months = months_between(start, end)
        for month in months:
            self.ensure_month_loaded(month)
        return self._concat([self._loaded_months[month].data for month in months])

    @staticmethod
    def _concat(tables: List[pl.DataFrame]) -> pl.DataFrame:
        tables = [table for table in tables if table.height > 0]
        if not tables:
            return create_empty_table()
        return pl.concat(tables, how="diagonal_relaxed")

    @property
    def loaded_data(self) -> pl.DataFrame:
        """All loaded readings ordered by month."""
        if self._loaded_data is None:
            self._loaded_data = self._concat([partition.data for partition in self.loaded_months.values()])
        return self._loaded_data

    @property
    def time_series_map(self) -> SensorReadingsTimeSeriesMap:
        if self._time_series_map is None:
            self._time_series_map = SensorReadingsTimeSeriesMap.from_readings(self.loaded_data)
        return self._time_series_map

    def lookup_time_series(self, check_hash: int, dimension_id: int) -> Optional[SensorReadingsTimeSeriesData]:
        """Time series in the loaded months, None when nothing was loaded for it."""
        return self.time_series_map.find_time_series_data(check_hash, dimension_id)

    def historic_data_for(self, check_hash: int) -> pl.DataFrame:
        """Loaded readings of one check, all dimensions, ordered by time period."""
        return self.loaded_data.filter(pl.col(SensorReadingsColumns.CHECK_HASH) == check_hash) \
            .sort(SensorReadingsColumns.TIME_PERIOD, maintain_order=True)

    def merge_new_results(self, new_readings: pl.DataFrame) -> None:
        """
        Merges new readings into the months they belong to.

        Missing connection, schema and table names are filled with the names
        of this snapshot. The months are loaded first when needed and marked
        modified, nothing is written until flush().
        """
        if new_readings.height == 0:
            return

        readings = normalize(new_readings).with_columns(
            pl.col(SensorReadingsColumns.CONNECTION_NAME).fill_null(self.connection_name),
            pl.col(SensorReadingsColumns.SCHEMA_NAME).fill_null(self.table_name.schema_name),
            pl.col(SensorReadingsColumns.TABLE_NAME).fill_null(self.table_name.table_name),
            pl.col(SensorReadingsColumns.TIME_PERIOD).dt.truncate("1mo").dt.date().alias(_MONTH_COLUMN),
        )
        if readings[SensorReadingsColumns.CHECK_HASH].null_count() > 0:
            raise ValidationError("Every sensor reading must have a check_hash",
                                  field_name=SensorReadingsColumns.CHECK_HASH)
        if readings[_MONTH_COLUMN].null_count() > 0:
            raise ValidationError("Every sensor reading must have a time_period",
                                  field_name=SensorReadingsColumns.TIME_PERIOD)

        for (month,), month_readings in readings.partition_by(_MONTH_COLUMN, as_dict=True,
                                                              maintain_order=True).items():
            self.ensure_month_loaded(month)
            partition = self._loaded_months[month]
            partition.data = TableMergeUtility.merge_new_results(
                partition.data, month_readings.drop(_MONTH_COLUMN), SensorReadingsColumns.JOIN_COLUMNS)
            partition.modified = True
            logger.debug(f"Merged {month_readings.height} readings into {partition.partition_id}")

        self._invalidate_indexes()

    def is_modified(self) -> bool:
        return any(partition.modified for partition in self._loaded_months.values())

    def flush(self) -> int:
        """
        Writes the modified months.

        Returns:
            Number of partitions written
        """
        written = 0
        for partition in self.loaded_months.values():
            if not partition.modified:
                continue
            self.storage.save_partition(partition)
            partition.modified = False
            written += 1
        if written:
            logger.info(f"Saved {written} sensor readings partitions of {self.connection_name}/{self.table_name}")
        return written
