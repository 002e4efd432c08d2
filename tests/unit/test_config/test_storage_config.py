"""
Unit tests for storage configuration.
"""

import pytest

from dqstore.config.storage_config import StorageConfig


class TestStorageConfig:
    """Test cases for StorageConfig class."""

    def test_default_values(self):
        """Test default values of StorageConfig."""
        config = StorageConfig()
        assert config.compression == "snappy"

    def test_from_dict(self):
        """Test creating StorageConfig from dictionary."""
        config = StorageConfig.from_dict({"compression": "gzip"})
        assert config.compression == "gzip"

        config = StorageConfig.from_dict({})
        assert config.compression == "snappy"

    def test_from_dict_invalid_compression(self):
        """Test validation of compression algorithm."""
        with pytest.raises(ValueError) as excinfo:
            StorageConfig.from_dict({"compression": "invalid"})

        assert "Unsupported compression algorithm" in str(excinfo.value)

    def test_to_dict(self):
        """Test converting StorageConfig to dictionary."""
        config = StorageConfig(compression="zstd")
        assert config.to_dict() == {"compression": "zstd"}
