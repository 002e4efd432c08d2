"""
Exception types and error handling helpers.

This module keeps the error handling of the store small: one exception
hierarchy rooted at DqStoreError and a handle_error() helper that logs an
error with a consistent message and re-raises it.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class DqStoreError(Exception):
    """Base class of all errors raised by the store."""


class ValidationError(DqStoreError):
    """
    Exception raised when validation fails.

    Used for configuration values, user supplied object names and sensor
    readings without their key columns.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class MetadataStructureError(DqStoreError):
    """
    The metadata tree would lose its addressability.

    Raised for duplicate keys and for nodes without a required hierarchy id.
    Never recovered silently.
    """


class TraversalError(DqStoreError):
    """A visitor returned a traversal directive the walker does not know."""


class SpecFileError(DqStoreError):
    """A YAML specification file is malformed or has an unsupported kind."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.file_path = file_path


class PartitionReadError(DqStoreError):
    """
    A sensor readings partition file exists but cannot be read.

    Historical data must never be dropped, so the error is surfaced to the
    caller instead of treating the partition as empty.
    """

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.file_path = file_path


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)
