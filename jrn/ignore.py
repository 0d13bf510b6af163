"""
Path exclusion rules for the journal scan.

Patterns are regular expressions, one per line in a `.jrnignore` file at the
repository root. A path is ignored when any pattern matches its whole file
name. Hidden files and directories are always ignored.
"""

import logging
import os
import re
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Pattern, Tuple, Union

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".jrnignore"


def read_ignore_patterns(path: Path) -> List[str]:
    """
    Read raw patterns from an ignore file.

    Blank lines and lines starting with '#' are skipped. A missing file yields
    no patterns; an unreadable one is skipped with a warning.
    """
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning(f"Skipping non-UTF-8 ignore file: {path}")
        return []
    except OSError as e:
        logger.warning(f"Can not read ignore file {path}: {e}")
        return []

    patterns = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.append(line)
    return patterns


def compile_patterns(patterns: Iterable[str]) -> List[Pattern]:
    """Compile patterns, dropping invalid ones with a warning."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning(f"Ignoring invalid ignore pattern {pattern!r}: {e}")
    return compiled


class IgnoreMatcher:
    """
    Decides which paths the journal scan skips.

    Example:
        ignore = IgnoreMatcher([r".*\\.bak"])
        ignore.matches("notes/.git")       # True
        ignore.matches("old.bak")          # True
        ignore.matches("2024-03-05_0930")  # False
    """

    DEFAULT_PATTERNS: Tuple[str, ...] = (r"\..*",)

    def __init__(self, patterns: Iterable[str] = ()):
        raw = list(self.DEFAULT_PATTERNS)
        for pattern in patterns:
            if pattern not in raw:
                raw.append(pattern)
        self._patterns = tuple(raw)
        self._compiled = compile_patterns(self._patterns)

    @classmethod
    def resolve(cls, root: Optional[Path] = None) -> 'IgnoreMatcher':
        """
        Build the matcher for a repository.

        Args:
            root: Repository root holding `.jrnignore` (working directory if None)
        """
        if root is None:
            root = Path.cwd()
        ignore_file = Path(root) / IGNORE_FILE_NAME
        patterns = read_ignore_patterns(ignore_file)
        if patterns:
            logger.debug(f"Loaded {len(patterns)} ignore pattern(s) from {ignore_file}")
        return cls(patterns)

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def matches(self, path: Union[str, os.PathLike]) -> bool:
        """True if the file name of path is fully matched by any pattern."""
        name = PurePath(path).name
        if not name:
            return False
        try:
            name.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning(f"Invalid UTF-8, skipping path: {os.fsdecode(path)!r}")
            return False
        return any(regex.fullmatch(name) for regex in self._compiled)

    def __repr__(self) -> str:
        return f"IgnoreMatcher({list(self._patterns)!r})"
