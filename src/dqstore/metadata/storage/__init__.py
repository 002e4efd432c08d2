"""
Persistence of the user home in local YAML files.
"""

from .context import UserHomeContext, UserHomeContextFactory
from .filetree import FileContent, FileTreeNode, FileTreeNodeStatus, FolderTreeNode
from .userhome import (
    CONNECTION_SPEC_FILE_NAME,
    DATA_FOLDER_NAME,
    SOURCES_FOLDER_NAME,
    TABLE_SPEC_FILE_EXT,
    FileConnectionList,
    FileConnectionWrapper,
    FileTableList,
    FileTableWrapper,
    FileUserHome,
)
from .yaml_serializer import API_VERSION, KIND_SOURCE, KIND_TABLE, YamlSerializer

__all__ = [
    "UserHomeContext",
    "UserHomeContextFactory",
    "FileContent",
    "FileTreeNode",
    "FileTreeNodeStatus",
    "FolderTreeNode",
    "FileConnectionList",
    "FileConnectionWrapper",
    "FileTableList",
    "FileTableWrapper",
    "FileUserHome",
    "YamlSerializer",
    "API_VERSION",
    "KIND_SOURCE",
    "KIND_TABLE",
    "CONNECTION_SPEC_FILE_NAME",
    "DATA_FOLDER_NAME",
    "SOURCES_FOLDER_NAME",
    "TABLE_SPEC_FILE_EXT",
]
