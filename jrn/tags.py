"""
Tag frequency counting for jrn.

The index is rebuilt from entry file names on every run and never stored.
"""

import logging
from collections import Counter
from typing import Iterable, Iterator, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class TagCount(NamedTuple):
    count: int
    tag: str


class TagFrequencyIndex:
    """
    Counts how many entries carry each tag.

    Example:
        index = TagFrequencyIndex(["A", "B", "B", "C"])
        index.sorted()  # [(2, 'B'), (1, 'A'), (1, 'C')]
    """

    def __init__(self, tags: Iterable[str] = ()):
        self._counts: Counter = Counter()
        for tag in tags:
            self.insert(tag)

    def insert(self, tag: str) -> None:
        self._counts[tag] += 1

    def remove(self, tag: str) -> None:
        """Decrement a tag's count, dropping it at zero. Unknown tags are ignored."""
        count = self._counts.get(tag)
        if count is None:
            logger.debug(f"Tag not in index: {tag!r}")
            return
        if count <= 1:
            del self._counts[tag]
        else:
            self._counts[tag] = count - 1

    def count(self, tag: str) -> Optional[int]:
        return self._counts.get(tag)

    def sorted(self) -> List[TagCount]:
        """Tags by descending count, ties broken by ascending tag."""
        return sorted(
            (TagCount(count, tag) for tag, count in self._counts.items()),
            key=lambda item: (-item.count, item.tag)
        )

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, tag: object) -> bool:
        return tag in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)
