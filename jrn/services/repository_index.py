"""
Repository index service for jrn.

Scans a journal directory once, keeps every entry in creation order along with
a tag frequency index, and performs entry mutations on disk.
"""

import bisect
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Union

from ..codec import EntryCodec, split_extension
from ..config import Config
from ..domain import Entry, EntryFilter, TimeStamp
from ..exit_codes import EntryExistsError, EntryIOError, NoEntriesFoundError, TagFormatError
from ..ignore import IgnoreMatcher
from ..infra import EditorLauncher
from ..tags import TagCount, TagFrequencyIndex

logger = logging.getLogger(__name__)

FilterArg = Union[EntryFilter, str, None]


def _as_filter(pattern: FilterArg, fixed: bool = False) -> EntryFilter:
    if isinstance(pattern, EntryFilter):
        return pattern
    return EntryFilter.from_pattern(pattern, fixed=fixed)


class RepositoryIndex:
    """
    In-memory view of a journal directory.

    Example:
        index = RepositoryIndex.init(load_config(), IgnoreMatcher.resolve())
        entry = index.create_entry(["work"], content="Standup notes", skip_edit=True)
        for entry in index.list_entries("work", limit=5):
            print(entry.name)
    """

    def __init__(
        self,
        config: Config,
        ignore: IgnoreMatcher,
        root: Optional[Path] = None,
        clock: Optional[Callable[[], TimeStamp]] = None,
        editor: Optional[EditorLauncher] = None
    ):
        """
        Initialize RepositoryIndex and scan the journal directory.

        Args:
            config: Resolved configuration
            ignore: Resolved ignore rules
            root: Journal directory (working directory if None)
            clock: Source of creation times (TimeStamp.now if None)
            editor: Editor launcher (creates default if None)
        """
        self.config = config
        self.ignore = ignore
        self.root = Path(root) if root is not None else Path.cwd()
        self.codec = EntryCodec(config)
        self.clock = clock or TimeStamp.now
        self.editor = editor or EditorLauncher(config)

        self.entries: List[Entry] = []
        self.tags = TagFrequencyIndex()
        self._scan()

    @classmethod
    def init(cls, config: Config, ignore: IgnoreMatcher, **kwargs) -> 'RepositoryIndex':
        return cls(config, ignore, **kwargs)

    def _scan(self) -> None:
        """Walk the directory tree depth-first, collecting entries."""
        stack = [self.root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    children = list(it)
            except OSError as e:
                logger.warning(f"Skipping unreadable directory {directory}: {e}")
                continue

            for child in children:
                path = Path(child.path)
                if self.ignore.matches(path):
                    logger.debug(f"Ignoring {path}")
                    continue
                try:
                    if child.is_dir(follow_symlinks=False):
                        stack.append(path)
                        continue
                    if not child.is_file():
                        continue
                except OSError as e:
                    logger.debug(f"Can not stat {path}: {e}")
                    continue

                entry = self._read_entry(path)
                if entry is not None:
                    self.entries.append(entry)
                    for tag in entry.tags:
                        self.tags.insert(tag)

        self.entries.sort()
        logger.debug(f"Indexed {len(self.entries)} entries under {self.root}")

    def _read_entry(self, path: Path) -> Optional[Entry]:
        name = path.name
        try:
            name.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning(f"Invalid UTF-8, skipping path: {os.fsdecode(path)!r}")
            return None

        decoded = self.codec.decode(name)
        if decoded is None:
            return None
        creation_time, tags = decoded
        return Entry(creation_time, tags, path)

    def _insert(self, entry: Entry) -> None:
        bisect.insort(self.entries, entry)
        for tag in entry.tags:
            self.tags.insert(tag)

    def _find_existing(
        self,
        directory: Path,
        creation_time: TimeStamp,
        tags: Iterable[str],
        exclude: Optional[Path] = None
    ) -> Optional[Path]:
        """
        Path of an entry in directory with the same time and tag set.

        Both the index and the files currently in directory are checked, since
        names differing only in extension or tag order decode to the same entry.
        """
        tag_set = frozenset(tags)
        for entry in self.entries:
            if (entry.file_path != exclude
                    and entry.file_path.parent == directory
                    and entry.creation_time == creation_time
                    and entry.tag_set == tag_set):
                return entry.file_path

        try:
            with os.scandir(directory) as it:
                names = [child.name for child in it]
        except OSError as e:
            logger.debug(f"Can not list {directory}: {e}")
            return None

        for name in names:
            path = directory / name
            if path == exclude or self.ignore.matches(path):
                continue
            decoded = self.codec.decode(name)
            if decoded is not None and decoded[0] == creation_time and frozenset(decoded[1]) == tag_set:
                return path
        return None

    def _write_new(self, path: Path, content: str) -> None:
        try:
            handle = open(path, "x", encoding="utf-8")
        except FileExistsError:
            raise EntryExistsError(path) from None
        except OSError as e:
            raise EntryIOError(f"Can not create entry {path}: {e}", path) from e

        try:
            with handle:
                handle.write(content)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise EntryIOError(f"Can not write entry {path}: {e}", path) from e

    def create_entry(
        self,
        tags: Optional[List[str]] = None,
        content: Optional[str] = None,
        skip_edit: bool = False
    ) -> Optional[Entry]:
        """
        Create a new entry stamped with the current time.

        With content or skip_edit the file is written directly. Otherwise the
        editor is opened on the new path and the entry only exists if the file
        was saved.

        Args:
            tags: Requested tags; config default tags are added
            content: Initial file content
            skip_edit: Do not open the editor

        Returns:
            The new Entry, or None if the editor closed without saving

        Raises:
            EntryExistsError: If an entry with the same time and tags already exists
            TagFormatError: If a tag can not be used in a file name
            EditorLaunchError: If the editor fails
        """
        creation_time = self.clock()
        merged = self.codec.merge_tags(tags or ())
        path = self.root / self.codec.format_name(creation_time, merged)
        entry = Entry(creation_time, tuple(merged), path)

        existing = self._find_existing(self.root, creation_time, merged)
        if existing is not None:
            raise EntryExistsError(existing)

        if content is not None or skip_edit:
            self._write_new(path, content or "")
            self._insert(entry)
            logger.info(f"Created {entry.name}")
            if not skip_edit:
                self.editor.launch(path)
            return entry

        self.editor.launch(path)
        if not path.is_file():
            logger.info("Editor closed without saving, no entry created")
            return None

        self._insert(entry)
        logger.info(f"Created {entry.name}")
        return entry

    def list_entries(
        self,
        pattern: FilterArg = None,
        limit: Optional[int] = None,
        fixed: bool = False
    ) -> List[Entry]:
        """
        Entries whose file name matches pattern, oldest first.

        Args:
            pattern: Regex, EntryFilter, or None for all entries
            limit: Keep only the most recent matches
            fixed: Treat a string pattern as a plain substring

        Raises:
            InvalidRegexError: If pattern is not a valid regex
        """
        entry_filter = _as_filter(pattern, fixed)
        matched = [entry for entry in self.entries if entry_filter.matches_entry(entry)]
        if limit is not None:
            if limit < 0:
                raise ValueError(f"limit must not be negative: {limit}")
            matched = matched[-limit:] if limit else []
        return matched

    def _find_target(self, descriptor: FilterArg) -> int:
        if not self.entries:
            raise NoEntriesFoundError()
        if descriptor is None:
            return len(self.entries) - 1

        entry_filter = _as_filter(descriptor)
        for position in range(len(self.entries) - 1, -1, -1):
            if entry_filter.matches_entry(self.entries[position]):
                return position
        raise NoEntriesFoundError(f"No entry matches {descriptor!r}")

    def push_tag(self, tag: str, descriptor: FilterArg = None) -> Entry:
        """
        Add a tag to an entry by renaming its file.

        Args:
            tag: Tag to append
            descriptor: Pattern selecting the newest matching entry (newest entry if None)

        Returns:
            The updated Entry

        Raises:
            NoEntriesFoundError: If there is no target entry
            TagFormatError: If the tag can not be used in a file name
            EntryExistsError: If an entry with the new tags already exists
            EntryIOError: If the rename fails
        """
        position = self._find_target(descriptor)
        entry = self.entries[position]
        if entry.has_tag(tag):
            logger.info(f"{entry.name} is already tagged {tag!r}")
            return entry

        # Existing tags came from a decoded name, only the new one needs checking
        self.codec.validate_tag(tag)
        new_tags = entry.tags + (tag,)
        _, extension = split_extension(entry.name)
        new_name = self.codec.format_name(entry.creation_time, new_tags, validate=False) + extension
        if self.codec.decode(new_name) != (entry.creation_time, new_tags):
            raise TagFormatError(f"Can not add {tag!r} to {entry.name}: the new name would not decode")

        new_path = entry.file_path.with_name(new_name)
        existing = self._find_existing(
            new_path.parent, entry.creation_time, new_tags, exclude=entry.file_path
        )
        if existing is not None:
            raise EntryExistsError(existing)
        if new_path.exists():
            raise EntryExistsError(new_path)

        self.tags.insert(tag)
        try:
            entry.file_path.rename(new_path)
        except OSError as e:
            self.tags.remove(tag)
            raise EntryIOError(f"Can not rename {entry.file_path}: {e}", entry.file_path) from e

        updated = replace(entry, tags=new_tags, file_path=new_path)
        del self.entries[position]
        bisect.insort(self.entries, updated)
        logger.info(f"Renamed {entry.name} -> {updated.name}")
        return updated

    def remove_latest(self) -> Optional[Entry]:
        """
        Delete the newest entry.

        Returns:
            The removed Entry, or None if the index is empty

        Raises:
            EntryIOError: If the file can not be deleted; the index is left unchanged
        """
        if not self.entries:
            return None

        entry = self.entries.pop()
        for tag in entry.tags:
            self.tags.remove(tag)

        try:
            entry.file_path.unlink()
        except FileNotFoundError:
            logger.warning(f"{entry.file_path} was already gone")
        except OSError as e:
            self.entries.append(entry)
            for tag in entry.tags:
                self.tags.insert(tag)
            raise EntryIOError(f"Can not delete {entry.file_path}: {e}", entry.file_path) from e

        logger.info(f"Removed {entry.name}")
        return entry

    def list_tags(self, pattern: FilterArg = None, fixed: bool = False) -> List[TagCount]:
        """
        Tag counts whose tag text matches pattern, most used first.

        Raises:
            InvalidRegexError: If pattern is not a valid regex
        """
        tag_filter = _as_filter(pattern, fixed)
        return [item for item in self.tags.sorted() if tag_filter.matches(item.tag)]

    @property
    def latest(self) -> Optional[Entry]:
        return self.entries[-1] if self.entries else None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)
