"""
Entry domain object for jrn.

An Entry is one journal file: its creation time and tags are decoded from
the file name, so the object never needs to read the file itself.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .timestamp import TimeStamp


@dataclass(frozen=True, order=True)
class Entry:
    """
    A journal entry on disk.

    Entries sort by creation time, then tags, then path, which keeps the
    index order deterministic when two entries share a minute.
    """
    creation_time: TimeStamp
    tags: Tuple[str, ...] = ()
    file_path: Path = field(default_factory=Path)

    @property
    def name(self) -> str:
        return self.file_path.name

    @property
    def tag_set(self) -> FrozenSet[str]:
        return frozenset(self.tags)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def relative_path(self, root: Optional[Path] = None) -> Path:
        """Path relative to root, or the stored path if it is outside root."""
        if root is None:
            return self.file_path
        try:
            return self.file_path.relative_to(root)
        except ValueError:
            return self.file_path

    def to_dict(self, root: Optional[Path] = None) -> Dict[str, Any]:
        return {
            'time': str(self.creation_time),
            'datetime': self.creation_time.isoformat(),
            'tags': list(self.tags),
            'path': str(self.relative_path(root)),
        }

    def __str__(self) -> str:
        return self.name
