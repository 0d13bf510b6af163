"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
from functools import wraps
from typing import Iterable, List, Optional, Tuple

import click

from .config import Config, load_config
from .exit_codes import (
    CONFIG_ERROR, INTERRUPTED,
    CommandError, get_exit_code_for_exception
)
from .ignore import IgnoreMatcher
from .services import RepositoryIndex

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('table', 'jsonl', 'json', 'yaml')


def parse_overrides(overrides: Iterable[str]) -> List[Tuple[str, str]]:
    """
    Parse KEY=VALUE strings from --set options.

    Raises:
        CommandError: If an override has no '='
    """
    pairs = []
    for item in overrides:
        if "=" not in item:
            raise CommandError(f"Invalid override {item!r}, expected KEY=VALUE", CONFIG_ERROR)
        key, value = item.split("=", 1)
        pairs.append((key.strip(), value))
    return pairs


class JournalContext:
    """
    Lazily built state shared by all commands of one invocation.

    Config and ignore rules are resolved on first use; the repository
    index scan only happens for commands that need it.
    """

    def __init__(self, overrides: Iterable[str] = ()):
        self.overrides = list(overrides)
        self._config: Optional[Config] = None
        self._ignore: Optional[IgnoreMatcher] = None
        self._index: Optional[RepositoryIndex] = None

    @property
    def config(self) -> Config:
        if self._config is None:
            config = load_config()
            for key, value in parse_overrides(self.overrides):
                config.set(key, value)
            self._config = config
        return self._config

    @property
    def ignore(self) -> IgnoreMatcher:
        if self._ignore is None:
            self._ignore = IgnoreMatcher.resolve()
        return self._ignore

    @property
    def index(self) -> RepositoryIndex:
        if self._index is None:
            self._index = RepositoryIndex.init(self.config, self.ignore)
        return self._index


def format_option(func):
    """Add the standard -f/--format option."""
    return click.option(
        '-f', '--format', 'output_format',
        type=click.Choice(OUTPUT_FORMATS),
        default='table',
        show_default=True,
        help='Output format'
    )(func)


def standard_command():
    """
    Decorator that provides standard error handling:
    - CommandError subclasses exit with their own exit code
    - OS errors exit with a code derived from the exception type
    - Ctrl+C exits with INTERRUPTED

    Errors are reported on stderr so stdout only carries command output.
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                click.echo("Interrupted by user", err=True)
                sys.exit(INTERRUPTED)
            except click.ClickException:
                # Click exceptions already have their exit code
                raise
            except CommandError as e:
                logger.debug(f"{type(e).__name__}: {e}")
                click.echo(f"Error: {e}", err=True)
                sys.exit(e.exit_code)
            except (OSError, ValueError) as e:
                logger.debug(f"{type(e).__name__}: {e}")
                click.echo(f"Error: {e}", err=True)
                sys.exit(get_exit_code_for_exception(e))

        return wrapper
    return decorator
