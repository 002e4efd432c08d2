"""
Configuration management for the dqstore package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
    setup_logging,
)

from .loader import (
    load_main_config,
    load_toml_file,
)
from .storage_config import StorageConfig
from .validators import (
    validate_app_config,
    validate_store_config,
)

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    "setup_logging",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "validate_app_config",
    "validate_store_config",
    "StorageConfig",
]
