"""
Search filter parameters.

Every name field accepts an exact name or a pattern with `*` wildcards. An
empty field does not filter. enabled=False selects only disabled objects,
True or None select only enabled ones.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ConnectionSearchFilters:
    connection_name: Optional[str] = None
    enabled: Optional[bool] = None


@dataclass
class TableSearchFilters:
    connection_name: Optional[str] = None
    schema_table_name: Optional[str] = None
    enabled: Optional[bool] = None


@dataclass
class ColumnSearchFilters:
    connection_name: Optional[str] = None
    schema_table_name: Optional[str] = None
    column_name: Optional[str] = None
    enabled: Optional[bool] = None


@dataclass
class CheckSearchFilters:
    """Filters selecting the checks to run, either on tables or on columns."""

    connection_name: Optional[str] = None
    schema_table_name: Optional[str] = None
    column_name: Optional[str] = None
    check_name: Optional[str] = None
    sensor_name: Optional[str] = None
    enabled: Optional[bool] = None
