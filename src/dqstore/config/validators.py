"""
Configuration validation utilities.

This module turns the raw TOML dictionaries into validated configuration
dataclasses.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import DEFAULT_USER_HOME, AppConfig, StoreConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_integer,
)
from .storage_config import SUPPORTED_COMPRESSIONS, StorageConfig

logger = logging.getLogger(__name__)

LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_store_config(store_data: Dict[str, Any]) -> StoreConfig:
    """
    Validate and create a StoreConfig from the raw `[store]` section.

    Args:
        store_data: Raw store configuration from TOML

    Returns:
        Validated StoreConfig instance

    Raises:
        ValidationError: If validation fails
    """
    user_home = store_data.get("user_home", str(DEFAULT_USER_HOME))
    if not isinstance(user_home, str) or not user_home.strip():
        raise ValidationError(
            "store.user_home must be a non-empty string",
            field_name="store.user_home",
            value=user_home,
        )

    completion_cache_size = validate_positive_integer(
        store_data.get("completion_cache_size", 1000),
        min_value=1,
        max_value=1_000_000,
        field_name="store.completion_cache_size",
    )

    storage_data = store_data.get("storage", {})
    if not isinstance(storage_data, dict):
        raise ValidationError(
            "store.storage must be a table",
            field_name="store.storage",
            value=storage_data,
        )

    validate_enum_choice(
        storage_data.get("compression", "snappy"),
        valid_choices=list(SUPPORTED_COMPRESSIONS),
        field_name="store.storage.compression",
    )

    return StoreConfig(
        user_home=Path(user_home).expanduser(),
        completion_cache_size=completion_cache_size,
        storage=StorageConfig.from_dict(storage_data),
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole configuration file.

    Args:
        config_data: Parsed config.toml content

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If validation fails
    """
    store_config = validate_store_config(config_data.get("store", {}))

    logging_data = config_data.get("logging", {})
    logging_level = validate_enum_choice(
        logging_data.get("level", "INFO"),
        valid_choices=LOGGING_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )

    logger.debug(f"Validated configuration, user home: {store_config.user_home}")
    return AppConfig(store=store_config, logging_level=logging_level)
