"""
Validation and error handling for the dqstore package.

This module provides the exception hierarchy, input validation and error
handling helpers with consistent error reporting across the package.
"""

from .exceptions import (
    DqStoreError,
    ErrorSeverity,
    MetadataStructureError,
    PartitionReadError,
    SpecFileError,
    TraversalError,
    ValidationError,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_enum_choice,
    validate_object_name,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "DqStoreError",
    "ErrorSeverity",
    "MetadataStructureError",
    "PartitionReadError",
    "SpecFileError",
    "TraversalError",
    "ValidationError",
    # Error handling
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    # Validators
    "validate_enum_choice",
    "validate_object_name",
    "validate_positive_integer",
]
