#!/usr/bin/env python3
"""
Layered configuration for jrn.

Settings are read from a `.jrnconfig` file in each of these locations, from
farthest to nearest scope:

    <user config dir>/.jrnconfig    (SYSTEM)
    ~/.jrnconfig                    (USER)
    ./.jrnconfig                    (LOCAL)

Each file holds one `key=value` pair per line. A nearer scope overrides a
farther one, except for `tags` whose lists are concatenated across scopes.
For example vim is the editor used here:

    ~/.jrnconfig
        editor=ed
    ./.jrnconfig
        editor=vim
"""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from platformdirs import user_config_dir

from .exit_codes import ConfigParseError
from .tokens import ARG_DELIMITERS, TAG_DELIMITERS, split_tokens

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".jrnconfig"
ENV_PREFIX = "JRN_"

# Keys
EDITOR = "editor"
EDITOR_ARGS = "editor_args"
TAG_START = "tag_start"
TAG_DELIMITER = "tag_delimiter"
TAGS = "tags"

SCALAR_KEYS = (EDITOR, EDITOR_ARGS, TAG_START, TAG_DELIMITER)
LIST_KEYS = (TAGS,)
KNOWN_KEYS = SCALAR_KEYS + LIST_KEYS

# Keys whose value must be exactly one character
SINGLE_CHAR_KEYS = frozenset({TAG_START, TAG_DELIMITER})

# Characters that would break file names if used as tag markers
RESERVED_MARKERS = frozenset({".", "/", os.sep, "\0"})


class ConfigScope(IntEnum):
    """Where a setting came from, ordered from farthest to nearest."""
    DEFAULT = 0
    SYSTEM = 1
    USER = 2
    LOCAL = 3
    RUNTIME = 4   # Overrides from the environment or the command line

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ScopedSetting:
    """A single key=value pair and the scope that defined it."""
    scope: ConfigScope
    key: str
    value: str


def default_settings() -> List[ScopedSetting]:
    """Compiled-in defaults, used when no scope defines a key."""
    return [
        ScopedSetting(ConfigScope.DEFAULT, EDITOR, "vim"),
        ScopedSetting(ConfigScope.DEFAULT, EDITOR_ARGS, "+star"),
        ScopedSetting(ConfigScope.DEFAULT, TAG_START, "-"),
        ScopedSetting(ConfigScope.DEFAULT, TAG_DELIMITER, "_"),
    ]


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def validate_setting(key: str, value: str) -> None:
    """
    Check a key and value against the closed set of config keys.

    Raises:
        ConfigParseError: If the key is unknown or the value is unusable
    """
    if key not in KNOWN_KEYS:
        raise ConfigParseError(f"Unknown config key: {key!r}")
    if key in SINGLE_CHAR_KEYS:
        if len(value) != 1:
            raise ConfigParseError(f"{key} must be a single character, got {value!r}")
        if value in RESERVED_MARKERS:
            raise ConfigParseError(f"{key} cannot be {value!r}")


class Config:
    """
    Collection of scoped settings with nearest-scope-wins lookup.

    Example:
        config = Config([ScopedSetting(ConfigScope.LOCAL, "editor", "ed")])
        config.editor            # "ed"
        config.source("editor")  # ConfigScope.LOCAL
    """

    def __init__(self, settings: Iterable[ScopedSetting] = ()):
        self._settings: List[ScopedSetting] = default_settings()
        for setting in settings:
            self.add(setting)

    @classmethod
    def defaults(cls) -> 'Config':
        return cls()

    @property
    def settings(self) -> Tuple[ScopedSetting, ...]:
        return tuple(self._settings)

    def add(self, setting: ScopedSetting) -> None:
        """Record a setting. Empty values are treated as unset."""
        if not setting.value:
            return
        self._settings.append(setting)

    def _effective(self, key: str) -> Optional[ScopedSetting]:
        found = None
        for setting in self._settings:
            # Later settings at the same scope replace earlier ones
            if setting.key == key and (found is None or setting.scope >= found.scope):
                found = setting
        return found

    def get(self, key: str) -> Optional[str]:
        """Effective value of a scalar key."""
        setting = self._effective(key)
        return setting.value if setting else None

    def source(self, key: str) -> Optional[ConfigScope]:
        """Scope that supplied the effective value of key."""
        if key in LIST_KEYS:
            scopes = [s.scope for s in self._settings if s.key == key]
            return max(scopes) if scopes else None
        setting = self._effective(key)
        return setting.scope if setting else None

    def get_list(self, key: str) -> List[str]:
        """
        Values of a list key from every scope, farthest scope first.

        Duplicates are dropped, keeping the first occurrence.
        """
        ordered = sorted(
            (s for s in self._settings if s.key == key),
            key=lambda s: s.scope
        )
        result: List[str] = []
        for setting in ordered:
            for token in split_tokens(setting.value, TAG_DELIMITERS):
                if token and token not in result:
                    result.append(token)
        return result

    def set(self, key: str, value: str) -> None:
        """
        Override a key for the rest of this process. Nothing is written to disk.

        An empty value removes a previous override.

        Raises:
            ConfigParseError: If the key is unknown or the value is unusable
        """
        key = _normalize_key(key)
        value = value.strip()
        if key not in KNOWN_KEYS:
            raise ConfigParseError(f"Unknown config key: {key!r}")
        self._settings = [
            s for s in self._settings
            if not (s.key == key and s.scope == ConfigScope.RUNTIME)
        ]
        if not value:
            return
        validate_setting(key, value)
        self._settings.append(ScopedSetting(ConfigScope.RUNTIME, key, value))

    @property
    def editor(self) -> str:
        return self.get(EDITOR)

    @property
    def editor_args(self) -> List[str]:
        raw = self.get(EDITOR_ARGS) or ""
        return [arg for arg in split_tokens(raw, ARG_DELIMITERS) if arg]

    @property
    def tag_start(self) -> str:
        return self.get(TAG_START)

    @property
    def tag_delimiter(self) -> str:
        return self.get(TAG_DELIMITER)

    @property
    def tags(self) -> List[str]:
        return self.get_list(TAGS)

    def items(self) -> List[Tuple[str, str, Optional[ConfigScope]]]:
        """(key, effective value, source scope) for every known key."""
        rows = []
        for key in KNOWN_KEYS:
            if key in LIST_KEYS:
                value = ",".join(self.get_list(key))
            else:
                value = self.get(key) or ""
            rows.append((key, value, self.source(key)))
        return rows

    def to_dict(self) -> Dict[str, object]:
        return {
            EDITOR: self.editor,
            EDITOR_ARGS: self.editor_args,
            TAG_START: self.tag_start,
            TAG_DELIMITER: self.tag_delimiter,
            TAGS: self.tags,
        }

    def __repr__(self) -> str:
        return f"Config({self.to_dict()!r})"


def parse_config_line(
    line: str,
    scope: ConfigScope,
    path: Optional[Path] = None,
    line_number: Optional[int] = None
) -> Optional[ScopedSetting]:
    """
    Parse one `key=value` line.

    Returns:
        The setting, or None when the value is empty

    Raises:
        ConfigParseError: For malformed lines and unknown keys
    """
    where = f"{path}:{line_number}" if path is not None else f"line {line_number}"
    if "=" not in line:
        raise ConfigParseError(f"{where}: expected key=value, got {line!r}", path, line_number)

    key, value = line.split("=", 1)
    key = _normalize_key(key)
    value = value.strip()

    if key not in KNOWN_KEYS:
        raise ConfigParseError(f"{where}: unknown key {key!r}", path, line_number)
    if not value:
        return None
    try:
        validate_setting(key, value)
    except ConfigParseError as e:
        raise ConfigParseError(f"{where}: {e}", path, line_number) from None

    return ScopedSetting(scope, key, value)


def parse_config_text(text: str, scope: ConfigScope, path: Optional[Path] = None) -> List[ScopedSetting]:
    """Parse a whole config file, skipping bad lines with a warning."""
    settings = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            setting = parse_config_line(line, scope, path, line_number)
        except ConfigParseError as e:
            logger.warning(f"Skipping config line: {e}")
            continue
        if setting is not None:
            settings.append(setting)
    return settings


def read_config_file(path: Path, scope: ConfigScope) -> List[ScopedSetting]:
    """
    Read settings from a config file.

    Missing files yield no settings. Unreadable files are skipped with a warning.
    """
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning(f"Skipping non-UTF-8 config file: {path}")
        return []
    except OSError as e:
        logger.warning(f"Can not read config file {path}: {e}")
        return []

    logger.debug(f"Loaded {scope.label} config from {path}")
    return parse_config_text(text, scope, path)


def apply_env_overrides(config: Config, environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern JRN_<KEY>,
    for example JRN_EDITOR=nano or JRN_TAG_DELIMITER=+.
    """
    environ = os.environ if environ is None else environ
    for key in KNOWN_KEYS:
        value = environ.get(ENV_PREFIX + key.upper())
        if not value:
            continue
        try:
            config.set(key, value)
        except ConfigParseError as e:
            logger.warning(f"Ignoring {ENV_PREFIX}{key.upper()}: {e}")
    return config


class ConfigResolver:
    """
    Finds, reads and merges every config location.

    Example:
        config = ConfigResolver().resolve()
        print(config.editor)
    """

    def __init__(
        self,
        system_dir: Optional[Path] = None,
        home_dir: Optional[Path] = None,
        local_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize ConfigResolver.

        Args:
            system_dir: Directory for the SYSTEM scope (platform config dir if None)
            home_dir: Directory for the USER scope (home directory if None)
            local_dir: Directory for the LOCAL scope (working directory if None)
            environ: Environment used for overrides (os.environ if None)
        """
        self.system_dir = system_dir
        self.home_dir = home_dir
        self.local_dir = local_dir
        self.environ = environ

    def candidates(self) -> List[Tuple[ConfigScope, Path]]:
        """Config file locations in merge order, farthest first."""
        directories = [
            (ConfigScope.SYSTEM, self.system_dir, lambda: Path(user_config_dir())),
            (ConfigScope.USER, self.home_dir, Path.home),
            (ConfigScope.LOCAL, self.local_dir, Path.cwd),
        ]

        paths = []
        for scope, directory, lookup in directories:
            if directory is None:
                try:
                    directory = lookup()
                except (OSError, RuntimeError) as e:
                    logger.debug(f"No {scope.label} config directory: {e}")
                    continue
            paths.append((scope, Path(directory) / CONFIG_FILE_NAME))
        return paths

    def resolve(self) -> Config:
        """
        Load configuration from every candidate location.

        Never raises: problems are logged and compiled-in defaults fill any gaps.
        """
        config = Config()
        for scope, path in self.candidates():
            for setting in read_config_file(path, scope):
                config.add(setting)
        return apply_env_overrides(config, self.environ)


def load_config() -> Config:
    """Load configuration for the current working directory."""
    return ConfigResolver().resolve()
