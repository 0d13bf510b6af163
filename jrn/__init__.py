"""
jrn - a plain-file journal with tags encoded in file names.

Every entry is a text file named after its creation time and tags, e.g.
`2024-03-05_0930-work_meeting`. Nothing else is stored: the index of entries
and tag counts is rebuilt from the directory tree on every run.

Quick Start:
    import jrn

    config = jrn.load_config()
    index = jrn.RepositoryIndex.init(config, jrn.IgnoreMatcher.resolve())

    # Write an entry without opening the editor
    entry = index.create_entry(["work"], content="Standup notes", skip_edit=True)

    # Five newest entries tagged work
    for entry in index.list_entries("work", limit=5):
        print(entry.creation_time, entry.tags)

    # Tag usage, most used first
    for count, tag in index.list_tags():
        print(count, tag)

Domain Objects:
    TimeStamp - Minute-resolution creation time
    Entry - A journal file with its decoded time and tags
    EntryFilter - Regex or substring predicate over names
"""

__version__ = "0.3.0"

from .codec import EntryCodec
from .config import Config, ConfigResolver, ConfigScope, load_config
from .domain import Entry, EntryFilter, TimeStamp
from .ignore import IgnoreMatcher
from .services import RepositoryIndex
from .tags import TagFrequencyIndex
from .tokens import split_tokens

__all__ = [
    '__version__',
    'Config',
    'ConfigResolver',
    'ConfigScope',
    'load_config',
    'IgnoreMatcher',
    'EntryCodec',
    'TagFrequencyIndex',
    'RepositoryIndex',
    'Entry',
    'EntryFilter',
    'TimeStamp',
    'split_tokens',
]
