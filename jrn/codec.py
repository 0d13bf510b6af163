"""
Entry file name encoding and decoding.

A journal file name is its creation time followed by an optional tag suffix:

    2024-03-05_0930                  no tags
    2024-03-05_0930-work_meeting     tags "work" and "meeting"
    2024-03-05_0930-work.md          tag "work", extension ignored
    2024-03-05_0930work              tag "work", start marker omitted

The tag start ('-') and delimiter ('_') come from the config.
"""

import logging
import os
from typing import Iterable, List, Optional, Tuple

from .config import Config
from .domain.timestamp import TIMESTAMP_WIDTH, TimeStamp
from .exit_codes import TagFormatError

logger = logging.getLogger(__name__)

# Characters that can never appear in a tag embedded in a file name
FORBIDDEN_TAG_CHARS = frozenset({"/", os.sep, ".", "\0"})


def split_extension(file_name: str) -> Tuple[str, str]:
    """
    Split a trailing extension (a dot followed by letters and digits).

    Returns:
        (stem, extension); extension includes the dot or is empty

    Example:
        split_extension("2024-03-05_0930-foo.txt")  # ("2024-03-05_0930-foo", ".txt")
        split_extension("2024-03-05_0930")          # ("2024-03-05_0930", "")
    """
    index = file_name.rfind(".")
    if index <= 0:
        return file_name, ""
    suffix = file_name[index + 1:]
    if suffix and suffix.isascii() and suffix.isalnum():
        return file_name[:index], file_name[index:]
    return file_name, ""


def merge_tags(*tag_lists: Iterable[str]) -> List[str]:
    """Concatenate tag lists, keeping the first occurrence of each tag."""
    merged: List[str] = []
    for tags in tag_lists:
        for tag in tags:
            if tag not in merged:
                merged.append(tag)
    return merged


class EntryCodec:
    """
    Converts between (TimeStamp, tags) and entry file names.

    The codec reads tag_start and tag_delimiter from the config on every call,
    so runtime overrides made with Config.set() apply immediately.
    """

    def __init__(self, config: Config):
        self.config = config

    @property
    def tag_start(self) -> str:
        return self.config.tag_start

    @property
    def tag_delimiter(self) -> str:
        return self.config.tag_delimiter

    def validate_tag(self, tag: str) -> None:
        """
        Raises:
            TagFormatError: If the tag can not be embedded in a file name
        """
        if not tag:
            raise TagFormatError("Tags can not be empty")
        if self.tag_delimiter in tag:
            raise TagFormatError(
                f"Tag {tag!r} contains the tag delimiter {self.tag_delimiter!r}"
            )
        bad = sorted(set(tag) & FORBIDDEN_TAG_CHARS)
        if bad:
            raise TagFormatError(f"Tag {tag!r} contains forbidden character(s): {''.join(bad)!r}")

    def merge_tags(self, tags: Iterable[str] = ()) -> List[str]:
        """Requested tags followed by the config's default tags."""
        return merge_tags(tags, self.config.tags)

    def encode(self, creation_time: TimeStamp, tags: Iterable[str] = ()) -> str:
        """
        File name for a new entry.

        Args:
            creation_time: Entry creation time
            tags: Requested tags; config default tags are appended

        Raises:
            TagFormatError: If any tag is invalid
        """
        return self.format_name(creation_time, self.merge_tags(tags))

    def format_name(self, creation_time: TimeStamp, tags: Iterable[str] = (), validate: bool = True) -> str:
        """
        File name for exactly the given tags, without config defaults.

        Args:
            creation_time: Entry creation time
            tags: Tags in display order
            validate: Check every tag with validate_tag first
        """
        tags = list(tags)
        if validate:
            for tag in tags:
                self.validate_tag(tag)

        name = str(creation_time)
        if tags:
            name += self.tag_start + self.tag_delimiter.join(tags)
        return name

    def decode(self, file_name: str) -> Optional[Tuple[TimeStamp, Tuple[str, ...]]]:
        """
        Parse an entry file name.

        Returns:
            (creation_time, tags), or None if the name is not an entry name
        """
        stem, _ = split_extension(file_name)

        creation_time = TimeStamp.parse(stem[:TIMESTAMP_WIDTH])
        if creation_time is None:
            return None

        # The tag start marker is optional
        tail = stem[TIMESTAMP_WIDTH:]
        if tail.startswith(self.tag_start):
            tail = tail[len(self.tag_start):]

        tags = tuple(tag for tag in tail.split(self.tag_delimiter) if tag)
        return creation_time, tags
