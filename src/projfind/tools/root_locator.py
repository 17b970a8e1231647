"""
Project root detection for the Project File Finder.

The root is resolved in this order: an explicit override from the
configuration, the top-level directory of the version-controlled working tree
containing the start path, and finally the start directory itself.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..models.config import ProjectConfig
from .commands import Runner, run_command


logger = logging.getLogger(__name__)


def start_directory(start: Union[str, Path]) -> Path:
    """
    Return the absolute directory a lookup starts from.

    A file path (typically the file being edited) starts from its parent.
    """
    path = Path(start).expanduser().absolute()
    if path.is_file():
        return path.parent
    return path


class RootLocator:
    """
    Determines the project root directory for a starting path.

    The VCS executable always runs with the start directory as its working
    directory; the caller's process-wide working directory is never changed.
    """

    def __init__(self, config: ProjectConfig, runner: Runner = run_command):
        """
        Initialize the root locator.

        Args:
            config: Configuration providing the override and VCS executable
            runner: Subprocess runner, replaceable in tests
        """
        self.config = config
        self.runner = runner

    def locate(self, start: Union[str, Path]) -> Path:
        """
        Determine the project root for ``start``.

        Args:
            start: File or directory the lookup starts from

        Returns:
            Absolute project root directory
        """
        if self.config.project_root:
            logger.debug(f"Using configured project root: {self.config.project_root}")
            return Path(self.config.project_root)

        directory = start_directory(start)
        top_level = self.find_top_level(directory)
        if top_level is not None:
            logger.info(f"Project root from version control: {top_level}")
            return top_level

        logger.info(f"Not inside a repository, using start directory: {directory}")
        return directory

    def is_repository(self, directory: Union[str, Path]) -> bool:
        """Return True when ``directory`` lies inside a version-controlled working tree."""
        result = self._vcs(['rev-parse'], directory)
        if not result.ok:
            logger.debug(f"{directory} is not inside a repository: {result.stderr.strip()}")
        return result.ok

    def find_top_level(self, directory: Union[str, Path]) -> Optional[Path]:
        """
        Return the top-level directory of the working tree containing ``directory``.

        Returns None when ``directory`` is not inside a repository, or when the
        top-level query itself fails.
        """
        if not self.is_repository(directory):
            return None

        result = self._vcs(['rev-parse', '--show-cdup'], directory)
        if not result.ok:
            logger.warning(f"Cannot determine top level of {directory}: {result.stderr.strip()}")
            return None

        # Empty output means the directory is the top level itself.
        prefix = result.stdout.strip()
        return (Path(directory) / prefix).resolve()

    def _vcs(self, args, directory: Union[str, Path]):
        argv = [self.config.commands.vcs, *args]
        return self.runner(argv, cwd=str(directory), timeout=self.config.limits.timeout_seconds)
