"""
Editor launcher infrastructure for jrn.

Provides a small abstraction over running the user's editor so that the
repository index never spawns processes itself, and tests can replace the
launcher with a fake.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, List

from ..config import Config
from ..exit_codes import EditorLaunchError, InvalidEncodingError

logger = logging.getLogger(__name__)


class EditorLauncher:
    """
    Opens entry files in the configured editor.

    Example:
        launcher = EditorLauncher(config)
        launcher.launch(Path("2024-03-05_0930-work"))
    """

    def __init__(self, config: Config, runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        """
        Initialize EditorLauncher.

        Args:
            config: Supplies editor and editor_args
            runner: Process runner, subprocess.run unless replaced in tests
        """
        self.config = config
        self.runner = runner

    def command(self, path: Path) -> List[str]:
        """
        Build the editor command line for a path.

        Raises:
            InvalidEncodingError: If the path is not valid UTF-8
        """
        target = os.fspath(path)
        try:
            target.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidEncodingError(f"Path is not valid UTF-8: {target!r}") from None
        return [self.config.editor, *self.config.editor_args, target]

    def launch(self, path: Path) -> None:
        """
        Run the editor on path and wait for it to exit.

        Raises:
            EditorLaunchError: If the editor can not be started or exits non-zero
        """
        cmd = self.command(path)
        logger.debug(f"Launching editor: {' '.join(cmd)}")
        try:
            result = self.runner(cmd)
        except OSError as e:
            raise EditorLaunchError(f"Failed to start editor {cmd[0]!r}: {e}") from e

        if result.returncode != 0:
            raise EditorLaunchError(
                f"Editor {cmd[0]!r} exited with status {result.returncode}"
            )
