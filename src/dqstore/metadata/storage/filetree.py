"""
Virtual file tree mirroring a folder on the local disk.

Folders are listed lazily on first access and file contents are read on
first access. Changes are kept in memory until flush() writes them to disk.
"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from ...validation import handle_file_error

logger = logging.getLogger(__name__)


class FileTreeNodeStatus(Enum):
    UNCHANGED = "unchanged"
    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"


class FileContent:
    """Text content of a spec file."""

    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FileContent) and self.text == other.text

    def __repr__(self) -> str:
        return f"FileContent({len(self.text)} chars)"


class FileTreeNode:
    """A file in a virtual folder."""

    def __init__(self, file_path: Path, content: Optional[FileContent] = None,
                 status: FileTreeNodeStatus = FileTreeNodeStatus.UNCHANGED):
        self.file_path = file_path
        self._content = content
        self.status = status

    @property
    def file_name(self) -> str:
        return self.file_path.name

    @property
    def content(self) -> FileContent:
        if self._content is None:
            try:
                self._content = FileContent(self.file_path.read_text(encoding="utf-8"))
            except OSError as e:
                handle_file_error(error=e, context=f"reading {self.file_path}", logger=logger)
        return self._content

    def change_content(self, content: FileContent) -> None:
        self._content = content
        if self.status == FileTreeNodeStatus.UNCHANGED:
            self.status = FileTreeNodeStatus.MODIFIED

    def mark_for_deletion(self) -> None:
        self.status = FileTreeNodeStatus.DELETED

    def flush(self) -> None:
        if self.status in (FileTreeNodeStatus.NEW, FileTreeNodeStatus.MODIFIED):
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text(self._content.text, encoding="utf-8")
            logger.debug(f"Saved file {self.file_path}")
            self.status = FileTreeNodeStatus.UNCHANGED
        elif self.status == FileTreeNodeStatus.DELETED:
            self.file_path.unlink(missing_ok=True)
            logger.debug(f"Deleted file {self.file_path}")


class FolderTreeNode:
    """A folder of the virtual file tree."""

    def __init__(self, folder_path: Path):
        self.folder_path = Path(folder_path)
        self.delete_on_flush = False
        self._files: Dict[str, FileTreeNode] = {}
        self._sub_folders: Dict[str, "FolderTreeNode"] = {}
        self._loaded = False

    @property
    def folder_name(self) -> str:
        return self.folder_path.name

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if not self.folder_path.is_dir():
            return
        for entry in sorted(self.folder_path.iterdir()):
            if entry.is_dir():
                self._sub_folders.setdefault(entry.name, FolderTreeNode(entry))
            elif entry.is_file():
                self._files.setdefault(entry.name, FileTreeNode(entry))
        logger.debug(f"Listed folder {self.folder_path}: {len(self._sub_folders)} folders, {len(self._files)} files")

    # --- files ---

    def files(self) -> List[FileTreeNode]:
        self._ensure_loaded()
        return [node for node in self._files.values() if node.status != FileTreeNodeStatus.DELETED]

    def get_child_file_by_file_name(self, file_name: str) -> Optional[FileTreeNode]:
        self._ensure_loaded()
        node = self._files.get(file_name)
        if node is None or node.status == FileTreeNodeStatus.DELETED:
            return None
        return node

    def add_child_file(self, file_name: str, content: FileContent) -> FileTreeNode:
        """Adds a new file, or replaces the content of an existing or deleted one."""
        self._ensure_loaded()
        node = self._files.get(file_name)
        if node is not None:
            if node.status == FileTreeNodeStatus.DELETED:
                node.status = FileTreeNodeStatus.MODIFIED
            node.change_content(content)
            return node
        node = FileTreeNode(self.folder_path / file_name, content, FileTreeNodeStatus.NEW)
        self._files[file_name] = node
        self.delete_on_flush = False
        return node

    def delete_child_file(self, file_name: str) -> bool:
        node = self.get_child_file_by_file_name(file_name)
        if node is None:
            return False
        node.mark_for_deletion()
        return True

    # --- folders ---

    def sub_folders(self) -> List["FolderTreeNode"]:
        self._ensure_loaded()
        return [folder for folder in self._sub_folders.values() if not folder.delete_on_flush]

    def get_sub_folder(self, folder_name: str) -> Optional["FolderTreeNode"]:
        self._ensure_loaded()
        folder = self._sub_folders.get(folder_name)
        if folder is None or folder.delete_on_flush:
            return None
        return folder

    def get_or_add_sub_folder(self, folder_name: str) -> "FolderTreeNode":
        self._ensure_loaded()
        folder = self._sub_folders.get(folder_name)
        if folder is None:
            folder = FolderTreeNode(self.folder_path / folder_name)
            folder._loaded = True
            self._sub_folders[folder_name] = folder
        elif folder.delete_on_flush:
            # a folder re-created before the flush starts empty
            folder._ensure_loaded()
            for node in folder._files.values():
                node.mark_for_deletion()
            for sub_folder in folder._sub_folders.values():
                sub_folder.delete_on_flush = True
            folder.delete_on_flush = False
        return folder

    def flush(self) -> None:
        """Writes the changes below this folder to the disk."""
        if self.delete_on_flush:
            if self.folder_path.exists():
                shutil.rmtree(self.folder_path)
                logger.debug(f"Deleted folder {self.folder_path}")
            self._files.clear()
            self._sub_folders.clear()
            return

        for file_name, node in list(self._files.items()):
            node.flush()
            if node.status == FileTreeNodeStatus.DELETED:
                del self._files[file_name]

        for folder_name, folder in list(self._sub_folders.items()):
            folder.flush()
            if folder.delete_on_flush:
                del self._sub_folders[folder_name]
