"""
Parquet storage of the monthly sensor readings partitions using Polars.
"""

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

import polars as pl

from ..validation import PartitionReadError
from .columns import create_empty_table, normalize
from .partitioning import LoadedMonthlyPartition, ParquetPartitionId

logger = logging.getLogger(__name__)


class SensorReadingsParquetStorage:
    """
    Reads and writes whole monthly partitions.

    A partition is always rewritten completely. The new content is written to
    a temporary file in the partition folder and moved over the old file, so
    readers never see a half written partition.
    """

    def __init__(self, root: Path, compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"):
        """
        Initialize the storage.

        Args:
            root: The sensor_readings folder of the user home
            compression: Compression algorithm of the Parquet files
        """
        self.root = Path(root)
        self.compression = compression
        logger.debug(f"Initialized SensorReadingsParquetStorage at {self.root} with compression: {compression}")

    def partition_file_path(self, partition_id: ParquetPartitionId) -> Path:
        return self.root / partition_id.relative_folder() / partition_id.file_name()

    def load_partition(self, partition_id: ParquetPartitionId,
                       columns: Optional[List[str]] = None) -> LoadedMonthlyPartition:
        """
        Load one monthly partition.

        Args:
            partition_id: Partition to load
            columns: Optional list of columns to load (for column pruning)

        Returns:
            The loaded partition, with an empty table when the file does not exist

        Raises:
            PartitionReadError: If the file exists but cannot be read
        """
        path = self.partition_file_path(partition_id)
        if not path.exists():
            logger.debug(f"No sensor readings for partition {partition_id}")
            return LoadedMonthlyPartition(partition_id, create_empty_table())

        try:
            last_modified = path.stat().st_mtime
            df = pl.read_parquet(path, columns=columns) if columns else pl.read_parquet(path)
        except Exception as e:
            logger.error(f"Failed to load sensor readings from {path}: {e}")
            raise PartitionReadError(f"Cannot read the sensor readings partition {partition_id}: {e}",
                                     str(path)) from e

        logger.debug(f"Loaded {df.height} sensor readings from {path}")
        return LoadedMonthlyPartition(partition_id, normalize(df), last_modified)

    def save_partition(self, partition: LoadedMonthlyPartition) -> None:
        """
        Replace the file of a partition with the in-memory table.

        Args:
            partition: Loaded partition with the complete content of the month
        """
        path = self.partition_file_path(partition.partition_id)
        temp_path = path.with_name(f".{path.name}.tmp")
        try:
            # Ensure parent directory exists
            path.parent.mkdir(parents=True, exist_ok=True)
            partition.data.write_parquet(temp_path, compression=self.compression)
            os.replace(temp_path, path)
            partition.last_modified = path.stat().st_mtime
            logger.debug(f"Saved {partition.data.height} sensor readings to {path}")
        except Exception as e:
            logger.error(f"Failed to save sensor readings to {path}: {e}")
            temp_path.unlink(missing_ok=True)
            raise

    def partition_exists(self, partition_id: ParquetPartitionId) -> bool:
        return self.partition_file_path(partition_id).exists()
