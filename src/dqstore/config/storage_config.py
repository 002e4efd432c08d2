"""
Storage configuration model and validation.

This module defines the StorageConfig dataclass which encapsulates the
settings used when sensor readings partitions are written as Parquet files.
"""

from typing import Literal, Dict, Any
from dataclasses import dataclass

SUPPORTED_COMPRESSIONS = ("snappy", "gzip", "brotli", "lz4", "zstd")


@dataclass
class StorageConfig:
    """
    Configuration model for the sensor readings storage.

    Attributes:
        compression: Compression algorithm for Parquet partition files
            - 'snappy': Fast compression/decompression (default)
            - 'gzip': Higher compression ratio, slower
            - 'brotli': Very high compression ratio
            - 'lz4': Very fast compression
            - 'zstd': Modern balanced compression
    """

    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Args:
            config_dict: Dictionary containing storage configuration

        Returns:
            StorageConfig instance

        Raises:
            ValueError: If invalid configuration values are provided
        """
        compression = config_dict.get("compression", "snappy")

        if compression not in SUPPORTED_COMPRESSIONS:
            raise ValueError(f"Unsupported compression algorithm: {compression}")

        return cls(compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the StorageConfig to a dictionary.

        Returns:
            Dictionary representation of the StorageConfig
        """
        return {
            "compression": self.compression,
        }
