"""
Entry point of the metadata searches.
"""

import logging
from typing import List, Optional

from ..id import HierarchyNode
from ..traversal import HierarchyNodeTreeWalker
from .filters import CheckSearchFilters, ColumnSearchFilters, ConnectionSearchFilters, TableSearchFilters
from .visitors import (
    AbstractSearchVisitor,
    CheckSearchFiltersVisitor,
    ColumnSearchFiltersVisitor,
    ConnectionSearchFiltersVisitor,
    TableSearchFiltersVisitor,
)

logger = logging.getLogger(__name__)


class HierarchyNodeTreeSearcher:
    """
    Searches the metadata tree with search filters.

    The start node is usually the user home, but any node works, e.g. a single
    connection wrapper. A search that matches nothing returns an empty list.
    """

    _VISITOR_TYPES = {
        ConnectionSearchFilters: ConnectionSearchFiltersVisitor,
        TableSearchFilters: TableSearchFiltersVisitor,
        ColumnSearchFilters: ColumnSearchFiltersVisitor,
        CheckSearchFilters: CheckSearchFiltersVisitor,
    }

    def __init__(self, walker: Optional[HierarchyNodeTreeWalker] = None):
        self.walker = walker or HierarchyNodeTreeWalker()

    def _search(self, start_node: HierarchyNode, visitor: AbstractSearchVisitor) -> List[HierarchyNode]:
        results: List[HierarchyNode] = []
        self.walker.traverse_hierarchy_node_tree(start_node, lambda node: visitor.visit(node, results))
        logger.debug(f"Search with {visitor.filters} from {start_node.hierarchy_id} found {len(results)} nodes")
        return results

    def find(self, start_node: HierarchyNode, filters) -> List[HierarchyNode]:
        """
        Runs the search matching the type of the filters.

        Raises:
            TypeError: For an unknown filter type
        """
        visitor_type = self._VISITOR_TYPES.get(type(filters))
        if visitor_type is None:
            raise TypeError(f"Unsupported search filters: {type(filters).__name__}")
        return self._search(start_node, visitor_type(filters))

    def find_connections(self, start_node: HierarchyNode, filters: ConnectionSearchFilters) -> list:
        """Returns the matching ConnectionWrapper objects."""
        return self._search(start_node, ConnectionSearchFiltersVisitor(filters))

    def find_tables(self, start_node: HierarchyNode, filters: TableSearchFilters) -> list:
        """Returns the matching TableWrapper objects."""
        return self._search(start_node, TableSearchFiltersVisitor(filters))

    def find_columns(self, start_node: HierarchyNode, filters: ColumnSearchFilters) -> list:
        """Returns the matching ColumnSpec objects."""
        return self._search(start_node, ColumnSearchFiltersVisitor(filters))

    def find_checks(self, start_node: HierarchyNode, filters: CheckSearchFilters) -> list:
        """Returns the matching CheckSpec objects."""
        return self._search(start_node, CheckSearchFiltersVisitor(filters))
