"""
Monthly partitions of the sensor readings.

Readings of one table are stored in one Parquet file per month:

    .data/sensor_readings/c=<connection>/t=<schema>.<table>/m=<YYYY-MM-01>/sensor_readings.<hash>.parquet
"""

import hashlib
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union

import polars as pl

from ..metadata.sources import PhysicalTableName

SENSOR_READINGS_FOLDER_NAME = "sensor_readings"
CONNECTION_KEY = "c"
TARGET_KEY = "t"
MONTH_KEY = "m"


def month_of(value: Union[date, datetime]) -> date:
    """First day of the month of a date or a timestamp."""
    return date(value.year, value.month, 1)


def months_between(start: Union[date, datetime], end: Union[date, datetime]) -> List[date]:
    """All months from the month of start to the month of end, inclusive."""
    current = month_of(start)
    last = month_of(end)
    months = []
    while current <= last:
        months.append(current)
        current = date(current.year + 1, 1, 1) if current.month == 12 else date(current.year, current.month + 1, 1)
    return months


@dataclass(frozen=True)
class ParquetPartitionId:
    """Identifies the partition of one table and one month."""

    connection_name: str
    table_name: PhysicalTableName
    month: date

    def __post_init__(self):
        object.__setattr__(self, "month", month_of(self.month))

    def relative_folder(self) -> Path:
        return (Path(f"{CONNECTION_KEY}={self.connection_name}")
                / f"{TARGET_KEY}={self.table_name.to_table_search_filter()}"
                / f"{MONTH_KEY}={self.month.isoformat()}")

    def file_name(self) -> str:
        """File name with a short stable hash, unique across partitions."""
        key = "\x00".join([self.connection_name, self.table_name.to_table_search_filter(), self.month.isoformat()])
        return f"{SENSOR_READINGS_FOLDER_NAME}.{hashlib.blake2b(key.encode('utf-8'), digest_size=8).hexdigest()}.parquet"

    def __str__(self) -> str:
        return f"{self.connection_name}/{self.table_name}/{self.month.isoformat()}"


@dataclass
class LoadedMonthlyPartition:
    """
    Content of one monthly partition held in memory.

    last_modified is the modification time of the file when it was read or
    written, None when the partition has no file yet.
    """

    partition_id: ParquetPartitionId
    data: pl.DataFrame
    last_modified: Optional[float] = None
    modified: bool = field(default=False)

    def __len__(self) -> int:
        return self.data.height
