"""
Connections, tables and columns of the user home.

The in-memory classes in this module are complete on their own. The
file-backed subclasses in dqstore.metadata.storage only add lazy loading
and persistence.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from ..validation import MetadataStructureError, validate_object_name
from .basespecs import AbstractSpec, ChildField, DirtyTrackingSpecMap, SpecField
from .checks import CheckSpecMap
from .id import HierarchyId, HierarchyNode, NodeKind
from .patterns import StringPatternComparer
from .wrappers import AbstractElementWrapper, AbstractIndexingList, InstanceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhysicalTableName:
    """Schema and table name of a table in the monitored database."""

    schema_name: str
    table_name: str

    @classmethod
    def from_schema_table_filter(cls, schema_table_filter: str) -> "PhysicalTableName":
        """
        Parses a "schema.table" name or filter.

        A filter without a dot is a table name in any schema. The table name
        may contain dots, only the first dot separates the schema.
        """
        schema_name, dot, table_name = schema_table_filter.partition(".")
        if not dot:
            return cls("*", schema_table_filter)
        return cls(schema_name, table_name)

    def is_search_pattern(self) -> bool:
        return StringPatternComparer.is_search_pattern(self.schema_name) or \
            StringPatternComparer.is_search_pattern(self.table_name)

    def match_pattern(self, table_name_filter: "PhysicalTableName") -> bool:
        """True when this name satisfies the schema and table patterns of the filter."""
        return StringPatternComparer.match_search_pattern(self.schema_name, table_name_filter.schema_name) and \
            StringPatternComparer.match_search_pattern(self.table_name, table_name_filter.table_name)

    def to_table_search_filter(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    def __str__(self) -> str:
        return self.to_table_search_filter()


# --- Connections ---

class ConnectionSpec(AbstractSpec):
    """Connection parameters of a monitored data source."""

    node_kind = NodeKind.CONNECTION

    provider_type = SpecField()
    url = SpecField()
    database = SpecField()
    user = SpecField()
    password = SpecField()
    time_zone = SpecField()
    disabled = SpecField(default=False)
    properties = SpecField(default_factory=dict)


# --- Columns ---

class ColumnTypeSnapshotSpec(AbstractSpec):
    """Column type captured when the table metadata was imported."""

    node_kind = NodeKind.COLUMN_TYPE_SNAPSHOT

    column_type = SpecField()
    nullable = SpecField()
    length = SpecField()
    precision = SpecField()
    scale = SpecField()

    @classmethod
    def from_type(cls, data_type: Optional[str]) -> "ColumnTypeSnapshotSpec":
        """
        Parses a declared SQL type like INT, VARCHAR(100) or DECIMAL(10, 2).

        A non numeric argument, e.g. the MAX of NVARCHAR(MAX), keeps the whole
        declaration as the type name.
        """
        result = cls()
        if not data_type:
            return result

        index_of_open = data_type.find("(")
        index_of_close = data_type.find(")")
        if index_of_open < 0 or index_of_close != len(data_type) - 1:
            result.column_type = data_type
            return result

        result.column_type = data_type[:index_of_open]
        numbers_section = data_type[index_of_open + 1:index_of_close]
        components = numbers_section.split(",")
        if len(components) == 1:
            try:
                result.length = int(numbers_section.strip())
            except ValueError:
                result.column_type = data_type
        else:
            result.precision = int(components[0].strip())
            result.scale = int(components[1].strip())
        return result


class ColumnSpec(AbstractSpec):
    node_kind = NodeKind.COLUMN

    disabled = SpecField(default=False)
    type_snapshot = ChildField(ColumnTypeSnapshotSpec)
    checks = ChildField(CheckSpecMap, create_empty=True)
    labels = SpecField(default_factory=list)

    @property
    def column_name(self) -> Optional[str]:
        return self.hierarchy_id.last if self.hierarchy_id is not None else None


class ColumnSpecMap(DirtyTrackingSpecMap[ColumnSpec]):
    """Columns of a table keyed by the column name."""

    node_kind = NodeKind.COLUMN_MAP
    value_type = ColumnSpec


# --- Tables ---

class TableTargetSpec(AbstractSpec):
    node_kind = NodeKind.TABLE_TARGET

    schema_name = SpecField()
    table_name = SpecField()

    def to_physical_table_name(self) -> PhysicalTableName:
        return PhysicalTableName(self.schema_name, self.table_name)


class TableSpec(AbstractSpec):
    """Table configuration: target, columns and table-level checks."""

    node_kind = NodeKind.TABLE

    target = ChildField(TableTargetSpec)
    disabled = SpecField(default=False)
    stage = SpecField()
    filter = SpecField()
    columns = ChildField(ColumnSpecMap, create_empty=True)
    checks = ChildField(CheckSpecMap, create_empty=True)
    labels = SpecField(default_factory=list)


class TableWrapper(AbstractElementWrapper):
    """Table in a connection, keyed by "schema.table"."""

    node_kind = NodeKind.TABLE_WRAPPER

    def __init__(self, physical_table_name: PhysicalTableName):
        super().__init__(physical_table_name.to_table_search_filter())
        self.physical_table_name = physical_table_name

    def _load_spec(self) -> TableSpec:
        target = TableTargetSpec(schema_name=self.physical_table_name.schema_name,
                                 table_name=self.physical_table_name.table_name)
        return TableSpec(target=target)


class TableList(AbstractIndexingList[TableWrapper]):
    node_kind = NodeKind.TABLE_LIST

    def _create_wrapper(self, object_name: str) -> TableWrapper:
        return TableWrapper(PhysicalTableName.from_schema_table_filter(object_name))

    def create_and_add_new(self, physical_table_name) -> TableWrapper:
        """
        Adds a new table.

        Args:
            physical_table_name: PhysicalTableName or a "schema.table" string

        Raises:
            MetadataStructureError: When the table exists or the name has no
                schema or contains wildcards
        """
        if not isinstance(physical_table_name, PhysicalTableName):
            physical_table_name = PhysicalTableName.from_schema_table_filter(physical_table_name)
        if physical_table_name.is_search_pattern():
            raise MetadataStructureError(
                f"Cannot add a table named '{physical_table_name}', the schema and the table name must be exact")
        return super().create_and_add_new(physical_table_name.to_table_search_filter())

    def get_by_object_name(self, physical_table_name, allow_case_insensitive: bool = True) -> Optional[TableWrapper]:
        if isinstance(physical_table_name, PhysicalTableName):
            physical_table_name = physical_table_name.to_table_search_filter()
        return super().get_by_object_name(physical_table_name, allow_case_insensitive)


# --- Connections ---

class ConnectionWrapper(AbstractElementWrapper):
    """Connection with its tables."""

    node_kind = NodeKind.CONNECTION_WRAPPER
    CHILD_FIELDS = ("tables",)

    def __init__(self, connection_name: str):
        super().__init__(connection_name)
        self.tables = self._create_table_list()

    @property
    def name(self) -> str:
        """Connection name, taken from the hierarchy id once attached."""
        if self.hierarchy_id is not None:
            return self.hierarchy_id.last
        return self.object_name

    def _create_table_list(self) -> TableList:
        return TableList()

    def _load_spec(self) -> ConnectionSpec:
        return ConnectionSpec()

    def flush(self) -> None:
        if self.status not in (InstanceStatus.TO_BE_DELETED, InstanceStatus.DELETED):
            self.tables.flush()
        super().flush()


class ConnectionList(AbstractIndexingList[ConnectionWrapper]):
    node_kind = NodeKind.CONNECTION_LIST

    def _create_wrapper(self, object_name: str) -> ConnectionWrapper:
        return ConnectionWrapper(object_name)

    def create_and_add_new(self, object_name: str) -> ConnectionWrapper:
        # connection names become folder names
        validate_object_name(object_name, "connection_name")
        return super().create_and_add_new(object_name)


class UserHome(HierarchyNode):
    """Root of the metadata tree."""

    node_kind = NodeKind.USER_HOME

    def __init__(self, connections: Optional[ConnectionList] = None):
        super().__init__()
        self.connections = connections if connections is not None else ConnectionList()
        self.hierarchy_id = HierarchyId.root()

    def named_children(self) -> Iterable[Tuple[Any, HierarchyNode]]:
        yield "connections", self.connections

    def is_dirty(self) -> bool:
        return self.connections.is_dirty()

    def clear_dirty(self, propagate_to_children: bool) -> None:
        if propagate_to_children:
            self.connections.clear_dirty(True)

    def flush(self) -> None:
        """Applies the pending status transitions of all connections and tables."""
        self.connections.flush()

    def find_table(self, connection_name: str, physical_table_name: PhysicalTableName) -> Optional[TableWrapper]:
        """Exact lookup of a table, None when the connection or the table is missing."""
        connection = self.connections.get_by_object_name(connection_name, allow_case_insensitive=False)
        if connection is None:
            return None
        return connection.tables.get_by_object_name(physical_table_name, allow_case_insensitive=False)

    def require_table(self, connection_name: str, physical_table_name: PhysicalTableName) -> TableWrapper:
        table = self.find_table(connection_name, physical_table_name)
        if table is None:
            raise MetadataStructureError(
                f"Table {physical_table_name} not found in connection '{connection_name}'")
        return table
