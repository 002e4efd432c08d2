"""
Index of the loaded sensor readings by time series.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, Optional

import polars as pl

from .columns import SensorReadingsColumns


@dataclass(frozen=True)
class SensorReadingsTimeSeriesKey:
    """A time series is the readings of one check for one combination of dimensions."""

    check_hash: int
    dimension_id: int


class SensorReadingsTimeSeriesData:
    """Readings of one time series ordered by the time period."""

    def __init__(self, key: SensorReadingsTimeSeriesKey, data: pl.DataFrame):
        self.key = key
        self.data = data.sort(SensorReadingsColumns.TIME_PERIOD)

    def __len__(self) -> int:
        return self.data.height

    def find_reading(self, time_period: datetime) -> Optional[dict]:
        """Returns the reading of a time period as a dict, None when there is none."""
        rows = self.data.filter(pl.col(SensorReadingsColumns.TIME_PERIOD) == time_period)
        if rows.height == 0:
            return None
        return rows.row(0, named=True)

    def actual_values(self) -> pl.Series:
        return self.data[SensorReadingsColumns.ACTUAL_VALUE]

    def __repr__(self) -> str:
        return f"SensorReadingsTimeSeriesData({self.key}, {len(self)} readings)"


class SensorReadingsTimeSeriesMap:
    """Time series of the loaded readings, keyed by (check hash, dimension id)."""

    def __init__(self):
        self._entries: Dict[SensorReadingsTimeSeriesKey, SensorReadingsTimeSeriesData] = {}

    @classmethod
    def from_readings(cls, readings: pl.DataFrame) -> "SensorReadingsTimeSeriesMap":
        time_series_map = cls()
        if readings.height == 0:
            return time_series_map
        groups = readings.partition_by(SensorReadingsColumns.TIME_SERIES_COLUMNS, as_dict=True, maintain_order=True)
        for (check_hash, dimension_id), data in groups.items():
            time_series_map.add(SensorReadingsTimeSeriesData(
                SensorReadingsTimeSeriesKey(check_hash, dimension_id), data))
        return time_series_map

    def add(self, time_series: SensorReadingsTimeSeriesData) -> None:
        self._entries[time_series.key] = time_series

    def find_time_series_data(self, check_hash: int, dimension_id: int) -> Optional[SensorReadingsTimeSeriesData]:
        return self._entries.get(SensorReadingsTimeSeriesKey(check_hash, dimension_id))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SensorReadingsTimeSeriesData]:
        return iter(self._entries.values())
