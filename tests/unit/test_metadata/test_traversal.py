"""
Unit tests for the tree walker and the visitor dispatch.
"""

import pytest

from dqstore.metadata import (
    ColumnSpec,
    HierarchyNodeResultVisitor,
    HierarchyNodeTreeWalker,
    NodeKind,
    TableSpec,
    TreeNodeTraversalResult,
    TreeTraverseAction,
    UserHome,
)
from dqstore.validation import TraversalError


def visited_kinds(start_node, func):
    kinds = []

    def record(node):
        kinds.append(node.node_kind)
        return func(node)

    completed = HierarchyNodeTreeWalker().traverse_hierarchy_node_tree(start_node, record)
    return kinds, completed


@pytest.mark.unit
class TestHierarchyNodeTreeWalker:
    """Test cases for HierarchyNodeTreeWalker."""

    def test_pre_order_traversal(self, sample_user_home):
        """Test that parents are visited before their children."""
        kinds, completed = visited_kinds(sample_user_home, lambda node: None)

        assert completed is True
        assert kinds[:4] == [NodeKind.USER_HOME, NodeKind.CONNECTION_LIST,
                             NodeKind.CONNECTION_WRAPPER, NodeKind.CONNECTION]
        assert kinds.count(NodeKind.CONNECTION_WRAPPER) == 2
        assert kinds.count(NodeKind.TABLE_WRAPPER) == 4
        assert kinds.count(NodeKind.CHECK) == 5
        assert kinds.count(NodeKind.SENSOR_PARAMETERS) == 5

    def test_skip_children(self, sample_user_home):
        """Test that SKIP_CHILDREN prunes the subtree of a node."""

        def skip_tables(node):
            if node.node_kind == NodeKind.TABLE_LIST:
                return TreeNodeTraversalResult.SKIP_CHILDREN
            return TreeNodeTraversalResult.TRAVERSE_CHILDREN

        kinds, completed = visited_kinds(sample_user_home, skip_tables)

        assert completed is True
        assert NodeKind.TABLE_LIST in kinds
        assert NodeKind.TABLE_WRAPPER not in kinds

    def test_stop_traversal(self, sample_user_home):
        """Test that STOP_TRAVERSAL ends the walk and reports it."""

        def stop_at_first_table(node):
            if node.node_kind == NodeKind.TABLE_WRAPPER:
                return TreeNodeTraversalResult.STOP_TRAVERSAL
            return None

        kinds, completed = visited_kinds(sample_user_home, stop_at_first_table)

        assert completed is False
        assert kinds.count(NodeKind.TABLE_WRAPPER) == 1
        assert kinds[-1] == NodeKind.TABLE_WRAPPER

    def test_traverse_one_child(self, sample_user_home):
        """Test that TRAVERSE_ONE_CHILD descends only into the selected child."""

        def only_crm(node):
            if node.node_kind == NodeKind.CONNECTION_LIST:
                return TreeNodeTraversalResult.traverse_child_node(node.get_by_object_name("crm"))
            return None

        names = []
        walker = HierarchyNodeTreeWalker()
        walker.traverse_hierarchy_node_tree(
            sample_user_home,
            lambda node: names.append(node.object_name) if node.node_kind == NodeKind.TABLE_WRAPPER else only_crm(node),
        )

        assert names == ["sales.accounts"]

    def test_traverse_one_child_requires_child(self):
        """Test that selecting no child is rejected."""
        with pytest.raises(TraversalError):
            TreeNodeTraversalResult(TreeTraverseAction.TRAVERSE_ONE_CHILD)

    def test_unsupported_result(self):
        """Test that an unknown directive raises TraversalError."""
        walker = HierarchyNodeTreeWalker()

        with pytest.raises(TraversalError):
            walker.traverse_hierarchy_node_tree(UserHome(), lambda node: "continue")

    def test_start_from_subtree(self):
        """Test that any node can be the start node."""
        table = TableSpec()
        table.columns.put("id", ColumnSpec())

        kinds, completed = visited_kinds(table, lambda node: None)

        assert completed is True
        assert kinds == [NodeKind.TABLE, NodeKind.COLUMN_MAP, NodeKind.COLUMN, NodeKind.CHECK_MAP,
                         NodeKind.CHECK_MAP]


class ColumnNameCollector(HierarchyNodeResultVisitor):
    def accept_column(self, column_spec, parameter):
        parameter.append(column_spec.column_name)
        return TreeNodeTraversalResult.SKIP_CHILDREN


@pytest.mark.unit
class TestHierarchyNodeResultVisitor:
    """Test cases for the visitor dispatch."""

    def test_dispatch_by_node_kind(self, sample_user_home):
        """Test that each node reaches the handler of its kind."""
        visitor = ColumnNameCollector()
        column_names = []

        HierarchyNodeTreeWalker().traverse_hierarchy_node_tree(
            sample_user_home, lambda node: visitor.visit(node, column_names))

        assert column_names == ["id", "amount", "id"]

    def test_default_handlers_traverse_children(self, sample_user_home):
        """Test that the base visitor continues into every child."""
        visitor = HierarchyNodeResultVisitor()

        assert visitor.visit(sample_user_home, None) is TreeNodeTraversalResult.TRAVERSE_CHILDREN

    def test_unknown_node_kind(self):
        """Test that a node without a known kind is rejected."""
        visitor = HierarchyNodeResultVisitor()

        with pytest.raises(TraversalError):
            visitor.visit(object(), None)
