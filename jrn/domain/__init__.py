"""
Domain layer for jrn.

Contains pure domain objects with no I/O or side effects:
- TimeStamp: Minute-resolution creation time
- Entry: A journal file with its decoded time and tags
- EntryFilter: Name predicate used by list and tag operations

These objects are immutable and provide serialization
methods for JSONL output.
"""

from .timestamp import TimeStamp
from .entry import Entry
from .filter import EntryFilter, FilterKind

__all__ = [
    'TimeStamp',
    'Entry',
    'EntryFilter',
    'FilterKind',
]
