"""
Depth-first traversal of the metadata tree.

The walker asks a callback what to do after visiting each node: descend into
all children, skip them, descend into one selected child only, or stop the
whole traversal.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from ..validation import TraversalError
from .id import HierarchyNode

logger = logging.getLogger(__name__)


class TreeTraverseAction(Enum):
    TRAVERSE_CHILDREN = "traverse_children"
    SKIP_CHILDREN = "skip_children"
    STOP_TRAVERSAL = "stop_traversal"
    TRAVERSE_ONE_CHILD = "traverse_one_child"


class TreeNodeTraversalResult:
    """Directive returned by a visitor, with the selected child for TRAVERSE_ONE_CHILD."""

    __slots__ = ("action", "selected_child")

    TRAVERSE_CHILDREN: "TreeNodeTraversalResult"
    SKIP_CHILDREN: "TreeNodeTraversalResult"
    STOP_TRAVERSAL: "TreeNodeTraversalResult"

    def __init__(self, action: TreeTraverseAction, selected_child: Optional[HierarchyNode] = None):
        if action == TreeTraverseAction.TRAVERSE_ONE_CHILD and selected_child is None:
            raise TraversalError("TRAVERSE_ONE_CHILD requires the selected child node")
        self.action = action
        self.selected_child = selected_child

    @classmethod
    def traverse_child_node(cls, child: HierarchyNode) -> "TreeNodeTraversalResult":
        """Continues the traversal in one child node only."""
        return cls(TreeTraverseAction.TRAVERSE_ONE_CHILD, child)

    def __repr__(self) -> str:
        return f"TreeNodeTraversalResult({self.action.name})"


TreeNodeTraversalResult.TRAVERSE_CHILDREN = TreeNodeTraversalResult(TreeTraverseAction.TRAVERSE_CHILDREN)
TreeNodeTraversalResult.SKIP_CHILDREN = TreeNodeTraversalResult(TreeTraverseAction.SKIP_CHILDREN)
TreeNodeTraversalResult.STOP_TRAVERSAL = TreeNodeTraversalResult(TreeTraverseAction.STOP_TRAVERSAL)

NodeCallback = Callable[[HierarchyNode], Optional[TreeNodeTraversalResult]]


class HierarchyNodeTreeWalker:
    """Pre-order walker over HierarchyNode trees."""

    def traverse_hierarchy_node_tree(self, start_node: HierarchyNode, func: NodeCallback) -> bool:
        """
        Visits the start node and its descendants in pre-order.

        Args:
            start_node: First node to visit
            func: Callback returning the directive for each node, None means
                TRAVERSE_CHILDREN

        Returns:
            False when the callback stopped the traversal, True otherwise

        Raises:
            TraversalError: When the callback returns an unknown directive
        """
        return self._visit(start_node, func)

    def _visit(self, node: HierarchyNode, func: NodeCallback) -> bool:
        result = func(node)
        if result is None:
            result = TreeNodeTraversalResult.TRAVERSE_CHILDREN
        if not isinstance(result, TreeNodeTraversalResult):
            raise TraversalError(f"Unsupported traversal result {result!r} for node {node.hierarchy_id}")

        action = result.action
        if action == TreeTraverseAction.STOP_TRAVERSAL:
            return False
        if action == TreeTraverseAction.SKIP_CHILDREN:
            return True
        if action == TreeTraverseAction.TRAVERSE_ONE_CHILD:
            return self._visit(result.selected_child, func)
        if action == TreeTraverseAction.TRAVERSE_CHILDREN:
            # children are materialized first, a visitor may load lazy nodes
            for child in list(node.children()):
                if not self._visit(child, func):
                    return False
            return True

        raise TraversalError(f"Unsupported traversal action {action!r}")
