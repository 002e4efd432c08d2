"""
Hierarchical metadata of the user home.

Connections, tables, columns and checks form a tree of HierarchyNode objects
with dirty tracking. The tree is searched with visitors and stored in YAML
files by dqstore.metadata.storage.
"""

from .basespecs import AbstractSpec, ChildField, DirtyTrackingSpecMap, SpecField
from .checks import CheckSpec, CheckSpecMap, RuleParametersSpec, SensorParametersSpec
from .completion import (
    CompletionCache,
    complete_column_names,
    complete_connection_names,
    complete_table_names,
)
from .id import HierarchyId, HierarchyNode, NodeKind
from .patterns import StringPatternComparer
from .sources import (
    ColumnSpec,
    ColumnSpecMap,
    ColumnTypeSnapshotSpec,
    ConnectionList,
    ConnectionSpec,
    ConnectionWrapper,
    PhysicalTableName,
    TableList,
    TableSpec,
    TableTargetSpec,
    TableWrapper,
    UserHome,
)
from .traversal import HierarchyNodeTreeWalker, TreeNodeTraversalResult, TreeTraverseAction
from .visitors import HierarchyNodeResultVisitor
from .wrappers import AbstractElementWrapper, AbstractIndexingList, InstanceStatus

__all__ = [
    # Identity
    "HierarchyId",
    "HierarchyNode",
    "NodeKind",
    # Dirty tracking
    "AbstractSpec",
    "ChildField",
    "DirtyTrackingSpecMap",
    "SpecField",
    "AbstractElementWrapper",
    "AbstractIndexingList",
    "InstanceStatus",
    # Object model
    "UserHome",
    "ConnectionList",
    "ConnectionWrapper",
    "ConnectionSpec",
    "TableList",
    "TableWrapper",
    "TableSpec",
    "TableTargetSpec",
    "PhysicalTableName",
    "ColumnSpecMap",
    "ColumnSpec",
    "ColumnTypeSnapshotSpec",
    "CheckSpecMap",
    "CheckSpec",
    "SensorParametersSpec",
    "RuleParametersSpec",
    # Traversal
    "TreeTraverseAction",
    "TreeNodeTraversalResult",
    "HierarchyNodeTreeWalker",
    "HierarchyNodeResultVisitor",
    "StringPatternComparer",
    # Completion
    "CompletionCache",
    "complete_connection_names",
    "complete_table_names",
    "complete_column_names",
]
