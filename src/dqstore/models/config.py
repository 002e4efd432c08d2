"""
Configuration data models.

This module contains the configuration data structures of the store,
loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ..config.storage_config import StorageConfig

DEFAULT_USER_HOME = Path("~/.dqstore")


@dataclass
class StoreConfig:
    """
    Configuration of the user home and the sensor readings store, the `[store]` section.
    """

    # Root folder of the user home, with `sources/` and `.data/` inside.
    user_home: Path = DEFAULT_USER_HOME
    # Maximum number of entries kept by the name completion cache.
    completion_cache_size: int = 1000
    # [store.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    # [logging] level, one of the standard logging level names.
    logging_level: str = "INFO"
