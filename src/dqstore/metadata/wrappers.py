"""
Wrappers and indexed lists of top-level metadata objects.

Connections and tables are stored in their own files. A wrapper holds the
object name, the instance status used by flush() and the specification, which
file-backed subclasses load on first access.
"""

import logging
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from ..validation import MetadataStructureError
from .id import HierarchyNode

logger = logging.getLogger(__name__)


class InstanceStatus(Enum):
    """Persistence status of a wrapper."""
    ADDED = "added"
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    TO_BE_DELETED = "to_be_deleted"
    DELETED = "deleted"


class AbstractElementWrapper(HierarchyNode):
    """
    Named element of an indexed list, holding a lazily loaded spec.

    Subclasses list their child node fields in CHILD_FIELDS, the spec is
    always published as the "spec" child.
    """

    CHILD_FIELDS: Tuple[str, ...] = ()

    def __init__(self, object_name: str):
        super().__init__()
        self._object_name = object_name
        self._spec = None
        self._dirty = False
        self.status = InstanceStatus.ADDED

    @property
    def object_name(self) -> str:
        return self._object_name

    @property
    def spec(self):
        if self._spec is None:
            self._spec = self._load_spec()
            self._attach_child("spec", self._spec)
        return self._spec

    @spec.setter
    def spec(self, spec) -> None:
        self._dirty = self._dirty or self._spec != spec
        self._spec = spec
        self._attach_child("spec", spec)

    def is_spec_loaded(self) -> bool:
        return self._spec is not None

    def _load_spec(self):
        """Creates or loads the specification. In-memory wrappers create an empty one."""
        raise NotImplementedError

    def _attach_child(self, name: str, node: Optional[HierarchyNode]) -> None:
        if node is not None and self.hierarchy_id is not None:
            node.hierarchy_id = self.hierarchy_id.append(name)

    def named_children(self) -> Iterable[Tuple[Any, HierarchyNode]]:
        yield "spec", self.spec
        for name in self.CHILD_FIELDS:
            child = getattr(self, name)
            if child is not None:
                yield name, child

    def _propagate_hierarchy_id(self) -> None:
        # the spec is not loaded just to stamp its id; it receives the id when loaded
        if self.hierarchy_id is None:
            return
        if self._spec is not None:
            self._spec.hierarchy_id = self.hierarchy_id.append("spec")
        for name in self.CHILD_FIELDS:
            self._attach_child(name, getattr(self, name))

    def _loaded_children(self) -> Iterator[HierarchyNode]:
        if self._spec is not None:
            yield self._spec
        for name in self.CHILD_FIELDS:
            child = getattr(self, name)
            if child is not None:
                yield child

    def is_dirty(self) -> bool:
        if self._dirty or self.status in (InstanceStatus.ADDED, InstanceStatus.MODIFIED,
                                          InstanceStatus.TO_BE_DELETED):
            return True
        return any(child.is_dirty() for child in self._loaded_children())

    def clear_dirty(self, propagate_to_children: bool) -> None:
        self._dirty = False
        if propagate_to_children:
            for child in self._loaded_children():
                child.clear_dirty(True)

    def mark_for_deletion(self) -> None:
        self.status = InstanceStatus.TO_BE_DELETED

    def flush(self) -> None:
        """Moves the status forward after the changes were written."""
        if self.status in (InstanceStatus.ADDED, InstanceStatus.MODIFIED):
            self.status = InstanceStatus.UNCHANGED
        elif self.status == InstanceStatus.TO_BE_DELETED:
            self.status = InstanceStatus.DELETED
        self.clear_dirty(True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._object_name!r}, {self.status.value})"


W = TypeVar("W", bound=AbstractElementWrapper)


class AbstractIndexingList(HierarchyNode, Generic[W]):
    """
    Ordered list of wrappers indexed by object name.

    Deleted wrappers stay in the index until flushed but are hidden from
    iteration and lookups.
    """

    def __init__(self):
        super().__init__()
        self._dirty = False
        self._entries: Dict[str, W] = {}
        self._loaded = False

    def _load(self) -> None:
        """Populates the index from storage. In-memory lists have nothing to load."""

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._loaded = True
            self._load()

    def _add_loaded(self, wrapper: W) -> None:
        self._entries[wrapper.object_name] = wrapper
        if self.hierarchy_id is not None:
            wrapper.hierarchy_id = self.hierarchy_id.append(wrapper.object_name)

    def _create_wrapper(self, object_name: str) -> W:
        raise NotImplementedError

    def _active_entries(self) -> Iterator[Tuple[str, W]]:
        self._ensure_loaded()
        for name, wrapper in self._entries.items():
            if wrapper.status not in (InstanceStatus.TO_BE_DELETED, InstanceStatus.DELETED):
                yield name, wrapper

    def create_and_add_new(self, object_name: str) -> W:
        """
        Creates a new wrapper with status ADDED.

        Raises:
            MetadataStructureError: When an object with the same name exists
        """
        self._ensure_loaded()
        existing = self._entries.get(object_name)
        if existing is not None and existing.status not in (InstanceStatus.TO_BE_DELETED,
                                                             InstanceStatus.DELETED):
            raise MetadataStructureError(
                f"{type(self).__name__} already contains an object named '{object_name}'")
        wrapper = self._create_wrapper(object_name)
        wrapper.status = InstanceStatus.ADDED
        self._dirty = True
        self._add_loaded(wrapper)
        return wrapper

    def get_by_object_name(self, object_name: str, allow_case_insensitive: bool = True) -> Optional[W]:
        """
        Finds a wrapper by its exact name, then by a case-insensitive comparison.

        Returns:
            The wrapper or None when nothing matches
        """
        self._ensure_loaded()
        wrapper = self._entries.get(object_name)
        if wrapper is not None and wrapper.status not in (InstanceStatus.TO_BE_DELETED,
                                                          InstanceStatus.DELETED):
            return wrapper
        if not allow_case_insensitive:
            return None
        lowered = object_name.lower()
        for name, candidate in self._active_entries():
            if name.lower() == lowered:
                return candidate
        return None

    def remove(self, object_name: str) -> bool:
        """Marks the object for deletion on the next flush. Returns False when not found."""
        wrapper = self.get_by_object_name(object_name, allow_case_insensitive=False)
        if wrapper is None:
            return False
        wrapper.mark_for_deletion()
        self._dirty = True
        return True

    def named_children(self) -> Iterable[Tuple[Any, HierarchyNode]]:
        return list(self._active_entries())

    def get_child(self, child_name: Any) -> Optional[HierarchyNode]:
        return self.get_by_object_name(child_name, allow_case_insensitive=False)

    def __iter__(self) -> Iterator[W]:
        for _, wrapper in self._active_entries():
            yield wrapper

    def __len__(self) -> int:
        return sum(1 for _ in self._active_entries())

    def __contains__(self, object_name: object) -> bool:
        return isinstance(object_name, str) and \
            self.get_by_object_name(object_name, allow_case_insensitive=False) is not None

    def names(self) -> list:
        return [name for name, _ in self._active_entries()]

    def is_dirty(self) -> bool:
        if self._dirty:
            return True
        return any(wrapper.is_dirty() for wrapper in self._entries.values())

    def clear_dirty(self, propagate_to_children: bool) -> None:
        self._dirty = False
        if propagate_to_children:
            for wrapper in self._entries.values():
                wrapper.clear_dirty(True)

    def _all_wrappers(self) -> list:
        return list(self._entries.values())

    def flush(self) -> None:
        """Flushes every wrapper and forgets the deleted ones."""
        for wrapper in self._all_wrappers():
            wrapper.flush()
        self._entries = {name: wrapper for name, wrapper in self._entries.items()
                         if wrapper.status != InstanceStatus.DELETED}
        self._dirty = False

    def _propagate_hierarchy_id(self) -> None:
        if self.hierarchy_id is None:
            return
        for name, wrapper in self._entries.items():
            wrapper.hierarchy_id = self.hierarchy_id.append(name)
