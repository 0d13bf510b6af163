"""
Name filters used to select entries and tags.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Pattern

from ..exit_codes import InvalidRegexError

# Patterns that select everything
MATCH_ALL_PATTERNS = frozenset({"", ".*"})


class FilterKind(Enum):
    ALWAYS = "always"
    SUBSTRING = "substring"
    REGEX = "regex"


@dataclass(frozen=True)
class EntryFilter:
    """
    Predicate over entry file names or tag text.

    Example:
        EntryFilter.from_pattern(None).matches("anything")        # True
        EntryFilter.substring("work").matches("..._0930-work")    # True
        EntryFilter.regex(r"^2024-03").matches("2024-03-05_0930")  # True
    """
    kind: FilterKind = FilterKind.ALWAYS
    pattern: str = ""
    _regex: Optional[Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.kind is FilterKind.REGEX:
            try:
                compiled = re.compile(self.pattern)
            except re.error as e:
                raise InvalidRegexError(self.pattern, str(e)) from None
            object.__setattr__(self, '_regex', compiled)

    @classmethod
    def always(cls) -> 'EntryFilter':
        return cls(FilterKind.ALWAYS)

    @classmethod
    def substring(cls, text: str) -> 'EntryFilter':
        return cls(FilterKind.SUBSTRING, text)

    @classmethod
    def regex(cls, pattern: str) -> 'EntryFilter':
        """
        Raises:
            InvalidRegexError: If pattern does not compile
        """
        return cls(FilterKind.REGEX, pattern)

    @classmethod
    def from_pattern(cls, pattern: Optional[str], fixed: bool = False) -> 'EntryFilter':
        """
        Build a filter from user input.

        Args:
            pattern: Regex (or literal text when fixed), None to match everything
            fixed: Treat pattern as a plain substring
        """
        if pattern is None or pattern in MATCH_ALL_PATTERNS:
            return cls.always()
        if fixed:
            return cls.substring(pattern)
        return cls.regex(pattern)

    def matches(self, text: str) -> bool:
        if self.kind is FilterKind.ALWAYS:
            return True
        if self.kind is FilterKind.SUBSTRING:
            return self.pattern in text
        return self._regex.search(text) is not None

    def matches_entry(self, entry) -> bool:
        return self.matches(entry.name)
