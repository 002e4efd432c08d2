"""
Search visitors, one for each kind of search filter.

The filters are applied level by level. A list level with an exact name
filter selects the one matching child through the index, a pattern filter
scans all children and the item level rejects the ones that do not match.
"""

from typing import List, Optional, Set

from ..checks import CheckSpec, CheckSpecMap
from ..id import HierarchyNode
from ..patterns import StringPatternComparer
from ..sources import (
    ColumnSpec,
    ColumnSpecMap,
    ConnectionList,
    ConnectionWrapper,
    PhysicalTableName,
    TableList,
    TableSpec,
    TableWrapper,
)
from ..traversal import TreeNodeTraversalResult
from ..visitors import HierarchyNodeResultVisitor
from .filters import CheckSearchFilters, ColumnSearchFilters, ConnectionSearchFilters, TableSearchFilters


class AbstractSearchVisitor(HierarchyNodeResultVisitor):
    """
    Connection and table levels shared by all search visitors.

    Children selected by an exact name lookup are remembered, so the item
    level accepts them even when the lookup matched without case sensitivity.
    """

    def __init__(self, filters):
        super().__init__()
        self.filters = filters
        self._selected_by_lookup: Set[int] = set()

    def _select_child(self, child: HierarchyNode) -> TreeNodeTraversalResult:
        self._selected_by_lookup.add(id(child))
        return TreeNodeTraversalResult.traverse_child_node(child)

    def _name_matches(self, node: HierarchyNode, name: Optional[str], name_filter: Optional[str]) -> bool:
        if not name_filter or id(node) in self._selected_by_lookup:
            return True
        return StringPatternComparer.match_search_pattern(name, name_filter)

    def _is_excluded(self, disabled: Optional[bool]) -> bool:
        """
        Applies the enabled filter to an object.

        enabled=False selects only disabled objects, True or None select
        only enabled ones.
        """
        if self.filters.enabled is False:
            return not disabled
        return bool(disabled)

    def _table_name_filter(self) -> Optional[PhysicalTableName]:
        schema_table_name = getattr(self.filters, "schema_table_name", None)
        if not schema_table_name:
            return None
        return PhysicalTableName.from_schema_table_filter(schema_table_name)

    # --- connections ---

    def accept_connection_list(self, connection_list: ConnectionList, parameter) -> TreeNodeTraversalResult:
        connection_name_filter = self.filters.connection_name
        if not connection_name_filter or StringPatternComparer.is_search_pattern(connection_name_filter):
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN

        connection_wrapper = connection_list.get_by_object_name(connection_name_filter, allow_case_insensitive=True)
        if connection_wrapper is None:
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN
        return self._select_child(connection_wrapper)

    def accept_connection_wrapper(self, connection_wrapper: ConnectionWrapper, parameter) -> TreeNodeTraversalResult:
        if not self._name_matches(connection_wrapper, connection_wrapper.name, self.filters.connection_name):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        # enabled=False also searches enabled connections for disabled objects
        if connection_wrapper.spec.disabled and self.filters.enabled is not False:
            return TreeNodeTraversalResult.SKIP_CHILDREN
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_connection(self, connection_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.SKIP_CHILDREN

    # --- tables ---

    def accept_table_list(self, table_list: TableList, parameter) -> TreeNodeTraversalResult:
        table_name_filter = self._table_name_filter()
        if table_name_filter is None or table_name_filter.is_search_pattern():
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN

        table_wrapper = table_list.get_by_object_name(table_name_filter, allow_case_insensitive=True)
        if table_wrapper is None:
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN
        return self._select_child(table_wrapper)

    def accept_table_wrapper(self, table_wrapper: TableWrapper, parameter) -> TreeNodeTraversalResult:
        table_name_filter = self._table_name_filter()
        if table_name_filter is not None and id(table_wrapper) not in self._selected_by_lookup \
                and not table_wrapper.physical_table_name.match_pattern(table_name_filter):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table(self, table_spec: TableSpec, parameter) -> TreeNodeTraversalResult:
        if self._is_excluded(table_spec.disabled):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table_target(self, table_target_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.SKIP_CHILDREN

    def accept_column_type_snapshot(self, type_snapshot, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.SKIP_CHILDREN


class ConnectionSearchFiltersVisitor(AbstractSearchVisitor):
    """Finds connection wrappers."""

    def __init__(self, filters: ConnectionSearchFilters):
        super().__init__(filters)

    def accept_connection_wrapper(self, connection_wrapper: ConnectionWrapper,
                                  parameter: List[HierarchyNode]) -> TreeNodeTraversalResult:
        result = super().accept_connection_wrapper(connection_wrapper, parameter)
        if result is TreeNodeTraversalResult.TRAVERSE_CHILDREN \
                and not self._is_excluded(connection_wrapper.spec.disabled):
            parameter.append(connection_wrapper)
        return TreeNodeTraversalResult.SKIP_CHILDREN


class TableSearchFiltersVisitor(AbstractSearchVisitor):
    """Finds table wrappers."""

    def __init__(self, filters: TableSearchFilters):
        super().__init__(filters)

    def accept_table_wrapper(self, table_wrapper: TableWrapper,
                             parameter: List[HierarchyNode]) -> TreeNodeTraversalResult:
        result = super().accept_table_wrapper(table_wrapper, parameter)
        if result is TreeNodeTraversalResult.TRAVERSE_CHILDREN and not self._is_excluded(table_wrapper.spec.disabled):
            parameter.append(table_wrapper)
        return TreeNodeTraversalResult.SKIP_CHILDREN


class ColumnSearchFiltersVisitor(AbstractSearchVisitor):
    """Finds column specifications."""

    def __init__(self, filters: ColumnSearchFilters):
        super().__init__(filters)

    def accept_column_map(self, column_map: ColumnSpecMap, parameter) -> TreeNodeTraversalResult:
        column_name_filter = self.filters.column_name
        if not column_name_filter or StringPatternComparer.is_search_pattern(column_name_filter):
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN

        column_spec = column_map.get(column_name_filter)
        if column_spec is None:
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN
        return self._select_child(column_spec)

    def accept_column(self, column_spec: ColumnSpec, parameter: List[HierarchyNode]) -> TreeNodeTraversalResult:
        if self._is_excluded(column_spec.disabled):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        if self._name_matches(column_spec, column_spec.column_name, self.filters.column_name):
            parameter.append(column_spec)
        return TreeNodeTraversalResult.SKIP_CHILDREN

    def accept_check_map(self, check_map: CheckSpecMap, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.SKIP_CHILDREN


class CheckSearchFiltersVisitor(ColumnSearchFiltersVisitor):
    """
    Finds checks on tables and on columns.

    When a column name filter is given, only column-level checks can match.
    """

    def __init__(self, filters: CheckSearchFilters):
        super().__init__(filters)

    def accept_column(self, column_spec: ColumnSpec, parameter) -> TreeNodeTraversalResult:
        if self._is_excluded(column_spec.disabled):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        if not self._name_matches(column_spec, column_spec.column_name, self.filters.column_name):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_check_map(self, check_map: CheckSpecMap, parameter) -> TreeNodeTraversalResult:
        if self.filters.column_name and not self._is_column_level(check_map):
            return TreeNodeTraversalResult.SKIP_CHILDREN
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    @staticmethod
    def _is_column_level(check_map: CheckSpecMap) -> bool:
        # column checks live at .../columns/<column>/checks
        hierarchy_id = check_map.hierarchy_id
        return hierarchy_id is not None and len(hierarchy_id) >= 3 and hierarchy_id[-3] == "columns"

    def accept_check(self, check_spec: CheckSpec, parameter: List[HierarchyNode]) -> TreeNodeTraversalResult:
        sensor = check_spec.sensor
        # a check without sensor parameters has nothing to run
        check_disabled = check_spec.disabled or sensor is None or sensor.disabled
        if self._is_excluded(check_disabled):
            return TreeNodeTraversalResult.SKIP_CHILDREN

        if not self._name_matches(check_spec, check_spec.check_name, self.filters.check_name):
            return TreeNodeTraversalResult.SKIP_CHILDREN

        sensor_name_filter = self.filters.sensor_name
        if sensor_name_filter:
            if sensor is None or not StringPatternComparer.match_search_pattern(
                    sensor.sensor_definition_name, sensor_name_filter):
                return TreeNodeTraversalResult.SKIP_CHILDREN

        parameter.append(check_spec)
        return TreeNodeTraversalResult.SKIP_CHILDREN
