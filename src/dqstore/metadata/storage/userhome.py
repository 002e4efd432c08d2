"""
File-backed user home.

Layout of the user home folder:

    sources/<connection>/connection.dqoconnection.yaml
    sources/<connection>/<schema>.<table>.dqotable.yaml
    .data/sensor_readings/...             (managed by dqstore.readings)

Lists are populated from the folders on first access and specs are read from
their files on first access. flush() serializes only the specs that changed.
"""

import logging
from typing import Optional

from ..sources import (
    ConnectionList,
    ConnectionSpec,
    ConnectionWrapper,
    PhysicalTableName,
    TableList,
    TableSpec,
    TableWrapper,
    UserHome,
)
from ..wrappers import InstanceStatus
from .filetree import FileContent, FolderTreeNode
from .yaml_serializer import KIND_SOURCE, KIND_TABLE, YamlSerializer

logger = logging.getLogger(__name__)

SOURCES_FOLDER_NAME = "sources"
DATA_FOLDER_NAME = ".data"
CONNECTION_SPEC_FILE_NAME = "connection.dqoconnection.yaml"
TABLE_SPEC_FILE_EXT = ".dqotable.yaml"


def _status_before_write(wrapper, spec_changed: bool) -> InstanceStatus:
    if wrapper.status == InstanceStatus.UNCHANGED and spec_changed:
        return InstanceStatus.MODIFIED
    return wrapper.status


def _write_spec_file(folder: FolderTreeNode, file_name: str, status: InstanceStatus, text: str) -> None:
    if status == InstanceStatus.ADDED:
        folder.add_child_file(file_name, FileContent(text))
    elif status == InstanceStatus.MODIFIED:
        file_node = folder.get_child_file_by_file_name(file_name)
        if file_node is None:
            folder.add_child_file(file_name, FileContent(text))
        else:
            file_node.change_content(FileContent(text))


# --- Tables ---

class FileTableWrapper(TableWrapper):
    """Table stored in <schema>.<table>.dqotable.yaml inside the connection folder."""

    def __init__(self, physical_table_name: PhysicalTableName, connection_folder: FolderTreeNode,
                 serializer: YamlSerializer):
        super().__init__(physical_table_name)
        self.connection_folder = connection_folder
        self.serializer = serializer

    @property
    def file_name(self) -> str:
        return self.physical_table_name.to_table_search_filter() + TABLE_SPEC_FILE_EXT

    def _load_spec(self) -> TableSpec:
        file_node = self.connection_folder.get_child_file_by_file_name(self.file_name)
        if file_node is None:
            return super()._load_spec()
        return self.serializer.deserialize(file_node.content.text, KIND_TABLE, TableSpec,
                                           str(file_node.file_path))

    def flush(self) -> None:
        if self.status == InstanceStatus.DELETED:
            return
        if self.status == InstanceStatus.TO_BE_DELETED:
            self.connection_folder.delete_child_file(self.file_name)
        else:
            spec_changed = self._dirty or (self.is_spec_loaded() and self.spec.is_dirty())
            self.status = _status_before_write(self, spec_changed)
            if self.status in (InstanceStatus.ADDED, InstanceStatus.MODIFIED):
                _write_spec_file(self.connection_folder, self.file_name, self.status,
                                 self.serializer.serialize(KIND_TABLE, self.spec))
                logger.debug(f"Serialized table {self.object_name} ({self.status.value})")
        super().flush()


class FileTableList(TableList):
    def __init__(self, connection_folder: FolderTreeNode, serializer: YamlSerializer):
        super().__init__()
        self.connection_folder = connection_folder
        self.serializer = serializer

    def _create_wrapper(self, object_name: str) -> FileTableWrapper:
        return FileTableWrapper(PhysicalTableName.from_schema_table_filter(object_name),
                                self.connection_folder, self.serializer)

    def _load(self) -> None:
        for file_node in self.connection_folder.files():
            if not file_node.file_name.endswith(TABLE_SPEC_FILE_EXT):
                continue
            schema_table = file_node.file_name[:-len(TABLE_SPEC_FILE_EXT)]
            wrapper = self._create_wrapper(schema_table)
            wrapper.status = InstanceStatus.UNCHANGED
            self._add_loaded(wrapper)


# --- Connections ---

class FileConnectionWrapper(ConnectionWrapper):
    """Connection stored in sources/<connection>/connection.dqoconnection.yaml."""

    def __init__(self, connection_name: str, connection_folder: FolderTreeNode, serializer: YamlSerializer):
        self.connection_folder = connection_folder
        self.serializer = serializer
        super().__init__(connection_name)

    def _create_table_list(self) -> FileTableList:
        return FileTableList(self.connection_folder, self.serializer)

    def _load_spec(self) -> ConnectionSpec:
        file_node = self.connection_folder.get_child_file_by_file_name(CONNECTION_SPEC_FILE_NAME)
        if file_node is None:
            return super()._load_spec()
        return self.serializer.deserialize(file_node.content.text, KIND_SOURCE, ConnectionSpec,
                                           str(file_node.file_path))

    def flush(self) -> None:
        if self.status == InstanceStatus.DELETED:
            return
        if self.status == InstanceStatus.TO_BE_DELETED:
            # the whole folder goes, including the table files
            self.connection_folder.delete_on_flush = True
        else:
            spec_changed = self._dirty or (self.is_spec_loaded() and self.spec.is_dirty())
            self.status = _status_before_write(self, spec_changed)
            if self.status in (InstanceStatus.ADDED, InstanceStatus.MODIFIED):
                _write_spec_file(self.connection_folder, CONNECTION_SPEC_FILE_NAME, self.status,
                                 self.serializer.serialize(KIND_SOURCE, self.spec))
                logger.debug(f"Serialized connection {self.object_name} ({self.status.value})")
        super().flush()


class FileConnectionList(ConnectionList):
    def __init__(self, sources_folder: FolderTreeNode, serializer: YamlSerializer):
        super().__init__()
        self.sources_folder = sources_folder
        self.serializer = serializer

    def _create_wrapper(self, object_name: str) -> FileConnectionWrapper:
        replaced = self._entries.get(object_name)
        if replaced is not None and replaced.status == InstanceStatus.TO_BE_DELETED:
            # the new connection must not see the table files of the replaced one
            replaced.connection_folder.delete_on_flush = True
        return FileConnectionWrapper(object_name, self.sources_folder.get_or_add_sub_folder(object_name),
                                     self.serializer)

    def _load(self) -> None:
        for folder in self.sources_folder.sub_folders():
            if folder.get_child_file_by_file_name(CONNECTION_SPEC_FILE_NAME) is None:
                logger.debug(f"Skipping folder {folder.folder_path} without a connection file")
                continue
            wrapper = FileConnectionWrapper(folder.folder_name, folder, self.serializer)
            wrapper.status = InstanceStatus.UNCHANGED
            self._add_loaded(wrapper)


class FileUserHome(UserHome):
    """User home backed by a folder tree."""

    def __init__(self, home_root: FolderTreeNode, serializer: Optional[YamlSerializer] = None):
        self.home_root = home_root
        self.serializer = serializer or YamlSerializer()
        super().__init__(FileConnectionList(home_root.get_or_add_sub_folder(SOURCES_FOLDER_NAME),
                                            self.serializer))
