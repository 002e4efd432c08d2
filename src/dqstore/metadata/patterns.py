"""
Glob style name patterns used by the search filters.
"""

from fnmatch import fnmatchcase
from typing import Optional


class StringPatternComparer:
    """Matches object names against filters that may contain `*` wildcards."""

    @staticmethod
    def is_search_pattern(filter_text: Optional[str]) -> bool:
        return filter_text is not None and "*" in filter_text

    @staticmethod
    def match_search_pattern(text: Optional[str], pattern: str) -> bool:
        """
        Case-sensitive match of a name against a pattern or an exact name.

        Args:
            text: The name to test, None never matches
            pattern: Exact name or a pattern with `*` wildcards
        """
        if text is None:
            return False
        if not StringPatternComparer.is_search_pattern(pattern):
            return text == pattern
        return fnmatchcase(text, pattern)
