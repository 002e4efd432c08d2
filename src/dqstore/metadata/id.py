"""
Hierarchy identifiers and the base class of every node of the metadata tree.

A HierarchyId is the path of a node from the root of the user home, for
example ``/connections/dwh/tables/public.fact_sales/columns/id``. Nodes do
not keep references to their parents. A node that needs its own name reads
the last segment of its id.
"""

import hashlib
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Tuple


class HierarchyId:
    """
    Immutable path-like address of a node in the metadata tree.

    Two ids are equal when their segment sequences are equal.
    """

    __slots__ = ("_segments",)

    def __init__(self, *segments: Any):
        self._segments: Tuple[Any, ...] = tuple(segments)

    @classmethod
    def root(cls) -> "HierarchyId":
        """Returns the id of the root node (no segments)."""
        return cls()

    @classmethod
    def from_path(cls, path: str) -> "HierarchyId":
        """Parses a slash separated path created by str()."""
        return cls(*[segment for segment in path.split("/") if segment])

    @property
    def segments(self) -> Tuple[Any, ...]:
        return self._segments

    @property
    def last(self) -> Optional[Any]:
        """The last segment, the name of the node in its parent. None for the root."""
        return self._segments[-1] if self._segments else None

    def append(self, segment: Any) -> "HierarchyId":
        """Returns the id of a child node."""
        return HierarchyId(*self._segments, segment)

    def parent(self) -> "HierarchyId":
        """Returns the id without the last segment."""
        if not self._segments:
            raise ValueError("The root hierarchy id has no parent")
        return HierarchyId(*self._segments[:-1])

    def starts_with(self, other: "HierarchyId") -> bool:
        """True when this id is the other id or one of its descendants."""
        return self._segments[:len(other._segments)] == other._segments

    def hash64(self) -> int:
        """
        Stable 64-bit signed hash of the id.

        Used as the check hash stored with every sensor reading, so it must
        not depend on the interpreter's randomized hash().
        """
        digest = hashlib.blake2b(
            "\x00".join(str(segment) for segment in self._segments).encode("utf-8"),
            digest_size=8,
        ).digest()
        return int.from_bytes(digest, byteorder="big", signed=True)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HierarchyId):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __copy__(self) -> "HierarchyId":
        return self

    def __deepcopy__(self, memo) -> "HierarchyId":
        return self

    def __str__(self) -> str:
        return "/" + "/".join(str(segment) for segment in self._segments)

    def __repr__(self) -> str:
        return f"HierarchyId({str(self)!r})"


class NodeKind(Enum):
    """Concrete kind of a node, used by visitors to dispatch to the right handler."""
    USER_HOME = "user_home"
    CONNECTION_LIST = "connection_list"
    CONNECTION_WRAPPER = "connection_wrapper"
    CONNECTION = "connection"
    TABLE_LIST = "table_list"
    TABLE_WRAPPER = "table_wrapper"
    TABLE = "table"
    TABLE_TARGET = "table_target"
    COLUMN_MAP = "column_map"
    COLUMN = "column"
    COLUMN_TYPE_SNAPSHOT = "column_type_snapshot"
    CHECK_MAP = "check_map"
    CHECK = "check"
    SENSOR_PARAMETERS = "sensor_parameters"
    RULE_PARAMETERS = "rule_parameters"


class HierarchyNode(ABC):
    """
    Capability shared by every addressable element of the metadata tree.

    Subclasses declare their node_kind and expose child nodes. Setting the
    hierarchy id re-stamps the ids of the whole subtree.
    """

    node_kind: NodeKind

    def __init__(self):
        self._hierarchy_id: Optional[HierarchyId] = None

    @property
    def hierarchy_id(self) -> Optional[HierarchyId]:
        return self._hierarchy_id

    @hierarchy_id.setter
    def hierarchy_id(self, hierarchy_id: Optional[HierarchyId]) -> None:
        self._hierarchy_id = hierarchy_id
        self._propagate_hierarchy_id()

    def _propagate_hierarchy_id(self) -> None:
        """Stamps the ids of the direct children, which continue recursively."""
        if self._hierarchy_id is None:
            return
        for name, child in self.named_children():
            child.hierarchy_id = self._hierarchy_id.append(name)

    @abstractmethod
    def named_children(self) -> Iterable[Tuple[Any, "HierarchyNode"]]:
        """Iterates over (name, child) pairs of the non-empty child nodes."""

    def children(self) -> Iterator["HierarchyNode"]:
        """Iterates over the child nodes."""
        for _, child in self.named_children():
            yield child

    def get_child(self, child_name: Any) -> Optional["HierarchyNode"]:
        """Returns a child node by its name (a field name or a map key)."""
        for name, child in self.named_children():
            if name == child_name:
                return child
        return None

    @abstractmethod
    def is_dirty(self) -> bool:
        """True when the node or any of its descendants has unsaved changes."""

    @abstractmethod
    def clear_dirty(self, propagate_to_children: bool) -> None:
        """Clears the local dirty flag, and the flags of all descendants when requested."""
