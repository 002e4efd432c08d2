"""
Configuration data models of the dqstore package.

All models are dataclasses built by the configuration validators.
"""

from .config import AppConfig, StoreConfig

__all__ = [
    "AppConfig",
    "StoreConfig",
]
