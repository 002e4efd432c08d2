"""
Factory for creating sensor readings snapshots.
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import get_config
from ..metadata.sources import PhysicalTableName
from ..metadata.storage.userhome import DATA_FOLDER_NAME
from .parquet_storage import SensorReadingsParquetStorage
from .partitioning import SENSOR_READINGS_FOLDER_NAME
from .snapshot import SensorReadingsSnapshot

logger = logging.getLogger(__name__)


class SensorReadingsSnapshotFactory:
    """Creates snapshots sharing one storage."""

    def __init__(self, storage: SensorReadingsParquetStorage):
        self.storage = storage

    @classmethod
    def from_config(cls, user_home: Optional[Path] = None) -> "SensorReadingsSnapshotFactory":
        """
        Create a factory for the sensor readings of a user home.

        Args:
            user_home: User home folder, the configured store.user_home when None

        Returns:
            Factory using the configured Parquet compression
        """
        store_config = get_config().store
        home_path = Path(user_home).expanduser() if user_home is not None else store_config.user_home
        root = home_path / DATA_FOLDER_NAME / SENSOR_READINGS_FOLDER_NAME
        logger.debug(f"Creating sensor readings storage at {root}")
        return cls(SensorReadingsParquetStorage(root, compression=store_config.storage.compression))

    def create_snapshot(self, connection_name: str, table_name: PhysicalTableName) -> SensorReadingsSnapshot:
        """Creates an empty snapshot, no partition is read yet."""
        return SensorReadingsSnapshot(connection_name, table_name, self.storage)
