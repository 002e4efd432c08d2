"""
Dirty tracking base classes of the metadata tree.

Every specification object derives from AbstractSpec and declares its
persisted fields with SpecField (plain values) and ChildField (child nodes).
Collections of named child nodes derive from DirtyTrackingSpecMap.

The dirty status of a node is never cached: is_dirty() checks the local flag
and then asks the children, so it always reflects the live state below.
"""

import copy
import logging
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    ValuesView,
)

from ..validation import MetadataStructureError
from .id import HierarchyNode

logger = logging.getLogger(__name__)

_MISSING = object()


class SpecField:
    """
    A persisted value field of a specification.

    Reading returns the stored value, assigning goes through the owner's
    _set_field() so unchanged values never mark the node dirty.
    """

    def __init__(self, default: Any = None, default_factory: Optional[Callable[[], Any]] = None):
        self.default = default
        self.default_factory = default_factory
        self.name: str = ""

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def create_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default)

    def is_default(self, value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, dict)) and not value:
            return True
        return value == self.create_default()

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.__dict__[self.name]

    def __set__(self, instance, value) -> None:
        instance._set_field(self.name, value)


class ChildField(SpecField):
    """
    A field holding a child node (a nested spec or a spec map).

    Assigning a node also stamps its hierarchy id from the owner's id.
    """

    def __init__(self, node_type: Type[HierarchyNode], create_empty: bool = False):
        super().__init__(default_factory=node_type if create_empty else None)
        self.node_type = node_type

    def is_default(self, value: Any) -> bool:
        if value is None:
            return True
        return isinstance(value, DirtyTrackingSpecMap) and len(value) == 0


class AbstractSpec(HierarchyNode):
    """
    Base class for specification nodes with dirty tracking.

    Subclasses declare their fields as class attributes:

        disabled = SpecField(default=False)
        columns = ChildField(ColumnSpecMap, create_empty=True)
    """

    _spec_fields: ClassVar[Dict[str, SpecField]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        fields: Dict[str, SpecField] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, SpecField):
                    fields[name] = value
        cls._spec_fields = fields

    def __init__(self, **values: Any):
        super().__init__()
        self._dirty = False
        for name, spec_field in self._spec_fields.items():
            self.__dict__[name] = spec_field.create_default()
        for name, value in values.items():
            if name not in self._spec_fields:
                raise TypeError(f"{type(self).__name__} has no field '{name}'")
            self.__dict__[name] = value

    # --- dirty tracking ---

    def is_dirty(self) -> bool:
        if self._dirty:
            return True
        return any(child.is_dirty() for child in self.children())

    def set_dirty(self) -> None:
        self._dirty = True

    def set_dirty_if(self, condition: bool) -> None:
        """Marks the node dirty when the condition is true, never clears the flag."""
        if condition:
            self._dirty = True

    def clear_dirty(self, propagate_to_children: bool) -> None:
        self._dirty = False
        if propagate_to_children:
            for child in self.children():
                child.clear_dirty(True)

    def _set_field(self, name: str, value: Any) -> None:
        old_value = self.__dict__[name]
        self.set_dirty_if(old_value != value)
        self.__dict__[name] = value
        if isinstance(self._spec_fields[name], ChildField) and value is not None \
                and self.hierarchy_id is not None:
            value.hierarchy_id = self.hierarchy_id.append(name)

    # --- hierarchy ---

    def named_children(self) -> Iterable[Tuple[Any, HierarchyNode]]:
        for name, spec_field in self._spec_fields.items():
            if isinstance(spec_field, ChildField):
                value = self.__dict__[name]
                if value is not None:
                    yield name, value

    # --- value semantics ---

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return all(self.__dict__[name] == other.__dict__[name] for name in self._spec_fields)

    __hash__ = None

    def deep_copy(self):
        """
        Returns an independent copy with all dirty flags cleared.

        The copy keeps the ids of the original until it is attached to a tree.
        """
        cloned = copy.deepcopy(self)
        cloned.clear_dirty(True)
        return cloned

    def to_dict(self) -> Dict[str, Any]:
        """Converts the spec to plain data, omitting empty and default values."""
        result: Dict[str, Any] = {}
        for name, spec_field in self._spec_fields.items():
            value = self.__dict__[name]
            if spec_field.is_default(value):
                continue
            if isinstance(spec_field, ChildField):
                result[name] = value.to_dict()
            else:
                result[name] = copy.deepcopy(value)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]):
        """Creates a clean spec from plain data produced by to_dict()."""
        spec = cls()
        for name, value in (data or {}).items():
            spec_field = cls._spec_fields.get(name)
            if spec_field is None:
                logger.debug(f"Ignoring unknown field '{name}' of {cls.__name__}")
                continue
            if isinstance(spec_field, ChildField):
                value = spec_field.node_type.from_dict(value) if value is not None else spec_field.create_default()
            spec.__dict__[name] = value
        return spec

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"


V = TypeVar("V", bound=HierarchyNode)


class DirtyTrackingSpecMap(HierarchyNode, Generic[V]):
    """
    Ordered map of named child nodes with dirty tracking.

    This is a wrapper around a plain dict, not a dict subclass. Every
    structural operation marks the map dirty unconditionally and increments
    structural_version; the return value tells whether the content changed.
    """

    value_type: ClassVar[Type[HierarchyNode]]

    def __init__(self, entries: Optional[Mapping[str, V]] = None):
        super().__init__()
        self._dirty = False
        self._structural_version = 0
        self._entries: Dict[str, V] = {}
        for key, value in (entries or {}).items():
            self._check_entry(key, value)
            self._entries[key] = value

    @staticmethod
    def _check_entry(key: Any, value: Any) -> None:
        if not isinstance(key, str) or not key:
            raise MetadataStructureError(f"Invalid key {key!r}, keys must be non-empty strings")
        if value is None:
            raise MetadataStructureError(f"Cannot store an empty value under the key '{key}'")

    @property
    def structural_version(self) -> int:
        return self._structural_version

    def _mark_structural_change(self) -> None:
        self._dirty = True
        self._structural_version += 1

    def _attach(self, key: str, value: V) -> None:
        if self.hierarchy_id is not None:
            value.hierarchy_id = self.hierarchy_id.append(key)

    # --- dirty tracking ---

    def is_dirty(self) -> bool:
        if self._dirty:
            return True
        return any(value.is_dirty() for value in self._entries.values())

    def set_dirty(self) -> None:
        self._dirty = True

    def clear_dirty(self, propagate_to_children: bool) -> None:
        self._dirty = False
        if propagate_to_children:
            for value in self._entries.values():
                value.clear_dirty(True)

    # --- hierarchy ---

    def named_children(self) -> Iterable[Tuple[Any, HierarchyNode]]:
        return list(self._entries.items())

    def get_child(self, child_name: Any) -> Optional[HierarchyNode]:
        return self._entries.get(child_name)

    # --- structural mutations ---

    def put(self, key: str, value: V) -> bool:
        """Adds or replaces an entry. Returns True when the stored node changed."""
        self._check_entry(key, value)
        self._mark_structural_change()
        changed = self._entries.get(key) is not value
        self._attach(key, value)
        self._entries[key] = value
        return changed

    def put_if_absent(self, key: str, value: V) -> bool:
        """Adds an entry only when the key is free. Returns True when added."""
        self._check_entry(key, value)
        self._mark_structural_change()
        if key in self._entries:
            return False
        self._attach(key, value)
        self._entries[key] = value
        return True

    def put_all(self, entries: Mapping[str, V]) -> bool:
        """Copies all entries into this map. Returns True when any stored node changed."""
        self._mark_structural_change()
        changed = False
        for key, value in entries.items():
            self._check_entry(key, value)
            changed = changed or self._entries.get(key) is not value
            self._attach(key, value)
            self._entries[key] = value
        return changed

    def replace(self, key: str, value: V) -> bool:
        """Replaces an existing entry. Returns False when the key was not present."""
        self._check_entry(key, value)
        self._mark_structural_change()
        if key not in self._entries:
            return False
        self._attach(key, value)
        self._entries[key] = value
        return True

    def remove(self, key: str) -> bool:
        """Removes an entry. Returns True when the key was present."""
        self._mark_structural_change()
        return self._entries.pop(key, _MISSING) is not _MISSING

    def clear(self) -> bool:
        """Removes all entries. Returns True when the map was not empty."""
        self._mark_structural_change()
        had_entries = bool(self._entries)
        self._entries.clear()
        return had_entries

    # --- read access ---

    def get(self, key: str, default: Optional[V] = None) -> Optional[V]:
        return self._entries.get(key, default)

    def __getitem__(self, key: str) -> V:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def keys(self) -> KeysView[str]:
        return self._entries.keys()

    def values(self) -> ValuesView[V]:
        return self._entries.values()

    def items(self) -> ItemsView[str, V]:
        return self._entries.items()

    # --- value semantics ---

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None

    def deep_copy(self):
        cloned = copy.deepcopy(self)
        cloned.clear_dirty(True)
        return cloned

    def to_dict(self) -> Dict[str, Any]:
        return {key: value.to_dict() for key, value in self._entries.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]):
        spec_map = cls()
        for key, value in (data or {}).items():
            key = str(key)
            node = cls.value_type.from_dict(value)
            cls._check_entry(key, node)
            spec_map._entries[key] = node
        return spec_map

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._entries)!r})"
