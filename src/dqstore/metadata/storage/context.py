"""
User home context: the unit of work over a user home folder.
"""

import logging
from pathlib import Path
from typing import Optional

from ...config import get_config
from ...models.config import StoreConfig
from ..completion import CompletionCache
from .filetree import FolderTreeNode
from .userhome import DATA_FOLDER_NAME, FileUserHome

logger = logging.getLogger(__name__)


class UserHomeContext:
    """
    Loaded user home together with its folder tree and completion cache.

    Changes made to the user home stay in memory until flush().
    """

    def __init__(self, home_root: FolderTreeNode, completion_cache: Optional[CompletionCache] = None):
        self.home_root = home_root
        self.user_home = FileUserHome(home_root)
        self.completion_cache = completion_cache or CompletionCache()

    @property
    def home_path(self) -> Path:
        return self.home_root.folder_path

    @property
    def data_path(self) -> Path:
        """Folder of the sensor readings and other data files."""
        return self.home_path / DATA_FOLDER_NAME

    def flush(self) -> None:
        """
        Saves the modified connections and tables to the disk.

        The spec files are updated in the folder tree first, then the tree is
        written to the disk. Cached completion candidates are dropped because
        they may list renamed or deleted objects.
        """
        self.user_home.flush()
        self.home_root.flush()
        self.completion_cache.invalidate_cache()
        logger.info(f"Flushed user home {self.home_path}")


class UserHomeContextFactory:
    """Opens user homes stored in local folders."""

    def __init__(self, store_config: Optional[StoreConfig] = None):
        self.store_config = store_config

    def _get_store_config(self) -> StoreConfig:
        return self.store_config or get_config().store

    def open_local_user_home(self, path: Optional[Path] = None) -> UserHomeContext:
        """
        Opens the user home in a local folder.

        Args:
            path: User home folder, the configured store.user_home when None

        Returns:
            A new context, nothing is read from the disk until the user home
            is accessed
        """
        store_config = self._get_store_config()
        home_path = Path(path).expanduser() if path is not None else store_config.user_home
        home_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Opening user home {home_path}")
        return UserHomeContext(FolderTreeNode(home_path), CompletionCache(store_config.completion_cache_size))
