"""
Visitor base class dispatching on the node kind.
"""

from typing import Any, Callable, Dict

from ..validation import TraversalError
from .id import HierarchyNode, NodeKind
from .traversal import TreeNodeTraversalResult


class HierarchyNodeResultVisitor:
    """
    Visitor with one handler per node kind.

    Every handler receives the node and a visitor specific parameter, usually
    the list collecting the results, and returns the traversal directive. The
    default handlers continue into the children.
    """

    def __init__(self):
        self._handlers: Dict[NodeKind, Callable[[Any, Any], TreeNodeTraversalResult]] = {
            NodeKind.USER_HOME: self.accept_user_home,
            NodeKind.CONNECTION_LIST: self.accept_connection_list,
            NodeKind.CONNECTION_WRAPPER: self.accept_connection_wrapper,
            NodeKind.CONNECTION: self.accept_connection,
            NodeKind.TABLE_LIST: self.accept_table_list,
            NodeKind.TABLE_WRAPPER: self.accept_table_wrapper,
            NodeKind.TABLE: self.accept_table,
            NodeKind.TABLE_TARGET: self.accept_table_target,
            NodeKind.COLUMN_MAP: self.accept_column_map,
            NodeKind.COLUMN: self.accept_column,
            NodeKind.COLUMN_TYPE_SNAPSHOT: self.accept_column_type_snapshot,
            NodeKind.CHECK_MAP: self.accept_check_map,
            NodeKind.CHECK: self.accept_check,
            NodeKind.SENSOR_PARAMETERS: self.accept_sensor_parameters,
            NodeKind.RULE_PARAMETERS: self.accept_rule_parameters,
        }

    def visit(self, node: HierarchyNode, parameter: Any) -> TreeNodeTraversalResult:
        """
        Dispatches the node to the handler of its kind.

        Raises:
            TraversalError: When the node kind has no handler
        """
        handler = self._handlers.get(getattr(node, "node_kind", None))
        if handler is None:
            raise TraversalError(f"No visitor handler for node {type(node).__name__}")
        return handler(node, parameter)

    def accept_user_home(self, user_home, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_connection_list(self, connection_list, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_connection_wrapper(self, connection_wrapper, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_connection(self, connection_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table_list(self, table_list, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table_wrapper(self, table_wrapper, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table(self, table_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_table_target(self, table_target_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_column_map(self, column_map, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_column(self, column_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_column_type_snapshot(self, type_snapshot, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_check_map(self, check_map, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_check(self, check_spec, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_sensor_parameters(self, sensor_parameters, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def accept_rule_parameters(self, rule_parameters, parameter) -> TreeNodeTraversalResult:
        return TreeNodeTraversalResult.TRAVERSE_CHILDREN
