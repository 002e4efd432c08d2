"""
Filtered search over the metadata tree.
"""

from ..patterns import StringPatternComparer
from .filters import (
    CheckSearchFilters,
    ColumnSearchFilters,
    ConnectionSearchFilters,
    TableSearchFilters,
)
from .searcher import HierarchyNodeTreeSearcher
from .visitors import (
    AbstractSearchVisitor,
    CheckSearchFiltersVisitor,
    ColumnSearchFiltersVisitor,
    ConnectionSearchFiltersVisitor,
    TableSearchFiltersVisitor,
)

__all__ = [
    "StringPatternComparer",
    "ConnectionSearchFilters",
    "TableSearchFilters",
    "ColumnSearchFilters",
    "CheckSearchFilters",
    "HierarchyNodeTreeSearcher",
    "AbstractSearchVisitor",
    "ConnectionSearchFiltersVisitor",
    "TableSearchFiltersVisitor",
    "ColumnSearchFiltersVisitor",
    "CheckSearchFiltersVisitor",
]
