"""
Standard exit codes and error types for jrn commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_ENTRIES_FOUND = 64    # No journal entries matched
IO_ERROR = 65            # Creating, renaming or deleting an entry failed
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
ENTRY_EXISTS = 68        # Entry name already taken
EDITOR_ERROR = 69        # Editor could not be launched
DATA_ERROR = 70          # Data format or validation error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'FileExistsError': ENTRY_EXISTS,
    'PermissionError': PERMISSION_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'UnicodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exit_code = getattr(exc, 'exit_code', None)
    if isinstance(exit_code, int):
        return exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class JrnError(CommandError):
    """Base class for failures of the journal core."""


class EntryIOError(JrnError):
    """Raised when an entry file cannot be created, written, renamed or deleted."""
    def __init__(self, message: str, path=None):
        super().__init__(message, IO_ERROR)
        self.path = path


class ConfigParseError(JrnError):
    """A config line could not be parsed. Logged by the resolver, never fatal."""
    def __init__(self, message: str, path=None, line_number: Optional[int] = None):
        super().__init__(message, CONFIG_ERROR)
        self.path = path
        self.line_number = line_number


class InvalidRegexError(JrnError):
    """Raised when a filter pattern is not a valid regular expression."""
    def __init__(self, pattern: str, reason: str = ""):
        message = f"Invalid regular expression: {pattern!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, USAGE_ERROR)
        self.pattern = pattern


class InvalidEncodingError(JrnError):
    """Raised when a path or file is not representable as text."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class EntryExistsError(JrnError):
    """Raised when a new entry name collides with an existing file."""
    def __init__(self, path):
        super().__init__(f"Entry already exists: {path}", ENTRY_EXISTS)
        self.path = path


class EditorLaunchError(JrnError):
    """Raised when the configured editor cannot be started or fails."""
    def __init__(self, message: str):
        super().__init__(message, EDITOR_ERROR)


class TagFormatError(JrnError):
    """Raised when a tag cannot be embedded in an entry file name."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class NoEntriesFoundError(JrnError):
    """Raised when an operation needs an entry and none matches."""
    def __init__(self, message: str = "No entries found"):
        super().__init__(message, NO_ENTRIES_FOUND)
