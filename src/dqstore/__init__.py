"""
dqstore: Embedded metadata and sensor readings store for data quality monitoring.

The package keeps the configuration of the monitored data sources in a user
home folder and the captured sensor readings in monthly Parquet partitions.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Configuration data structures
- validation: Exceptions, input validation and error handling
- metadata: Connections, tables, columns and checks with dirty tracking,
  traversal, search and YAML persistence
- readings: Partitioned sensor readings with merge-on-write

Usage:
    from dqstore import UserHomeContextFactory, SensorReadingsSnapshotFactory

    context = UserHomeContextFactory().open_local_user_home()
    connection = context.user_home.connections.create_and_add_new("dwh")
    connection.spec.provider_type = "postgresql"
    context.flush()
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path, setup_logging

# Model classes for external use
from .models import AppConfig, StoreConfig

# Validation utilities
from .validation import (
    DqStoreError,
    MetadataStructureError,
    PartitionReadError,
    SpecFileError,
    TraversalError,
    ValidationError,
)

# Metadata
from .metadata import HierarchyId, PhysicalTableName, UserHome
from .metadata.search import (
    CheckSearchFilters,
    ColumnSearchFilters,
    ConnectionSearchFilters,
    HierarchyNodeTreeSearcher,
    TableSearchFilters,
)
from .metadata.storage import UserHomeContext, UserHomeContextFactory

# Sensor readings
from .readings import SensorReadingsSnapshot, SensorReadingsSnapshotFactory, TableMergeUtility

__version__ = "0.1.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "setup_logging",
    # Models
    "AppConfig",
    "StoreConfig",
    # Validation
    "DqStoreError",
    "MetadataStructureError",
    "PartitionReadError",
    "SpecFileError",
    "TraversalError",
    "ValidationError",
    # Metadata
    "HierarchyId",
    "PhysicalTableName",
    "UserHome",
    "HierarchyNodeTreeSearcher",
    "ConnectionSearchFilters",
    "TableSearchFilters",
    "ColumnSearchFilters",
    "CheckSearchFilters",
    "UserHomeContext",
    "UserHomeContextFactory",
    # Sensor readings
    "SensorReadingsSnapshot",
    "SensorReadingsSnapshotFactory",
    "TableMergeUtility",
]
