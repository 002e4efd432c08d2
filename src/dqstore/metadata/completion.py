"""
Completion candidates for connection, table and column names.

Candidates are computed from the user home and cached until the next flush
of the user home context, which invalidates the cache.
"""

import logging
from collections import OrderedDict
from typing import Callable, Hashable, List

from ..validation import validate_positive_integer
from .sources import PhysicalTableName

logger = logging.getLogger(__name__)


class CompletionCache:
    """Bounded least recently used cache of completion candidate lists."""

    def __init__(self, max_size: int = 1000):
        self.max_size = validate_positive_integer(max_size, field_name="completion_cache_size")
        self._entries: "OrderedDict[Hashable, List[str]]" = OrderedDict()

    def get_cached_completion_candidates(self, key: Hashable, factory: Callable[[], List[str]]) -> List[str]:
        """
        Returns the cached candidates for the key, computing them on a miss.

        Args:
            key: Cache key, e.g. ("tables", connection_name)
            factory: Function computing the candidates
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            return self._entries[key]

        candidates = factory()
        self._entries[key] = candidates
        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        return candidates

    def invalidate_cache(self) -> None:
        if self._entries:
            logger.debug(f"Invalidating {len(self._entries)} cached completion lists")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def complete_connection_names(context) -> List[str]:
    """Names of all connections in the user home of the context."""
    user_home = context.user_home
    return context.completion_cache.get_cached_completion_candidates(
        ("connections",),
        lambda: [wrapper.name for wrapper in user_home.connections])


def complete_table_names(context, connection_name: str) -> List[str]:
    """"schema.table" names of the tables in a connection, empty for an unknown connection."""

    def compute() -> List[str]:
        connection = context.user_home.connections.get_by_object_name(connection_name, allow_case_insensitive=False)
        if connection is None:
            return []
        return [wrapper.object_name for wrapper in connection.tables]

    return context.completion_cache.get_cached_completion_candidates(("tables", connection_name), compute)


def complete_column_names(context, connection_name: str, schema_table_name: str) -> List[str]:
    """Column names of a table, empty when the connection or the table is unknown."""

    def compute() -> List[str]:
        table = context.user_home.find_table(connection_name,
                                             PhysicalTableName.from_schema_table_filter(schema_table_name))
        if table is None:
            return []
        return list(table.spec.columns.keys())

    return context.completion_cache.get_cached_completion_candidates(
        ("columns", connection_name, schema_table_name), compute)
