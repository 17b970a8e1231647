"""
File enumeration for the Project File Finder.

Lists the files under a project root that match the configured filetype
patterns. When the root is inside a version-controlled working tree the VCS
index is listed; otherwise a ``find`` traversal is run that prunes metadata
directories. The strategy is chosen once, before any listing runs, from the
repository check alone: a failing listing is reported, never retried with the
other strategy.

This module owns the conversion from raw subprocess text to path strings;
nothing downstream parses subprocess output again.
"""

import logging
from pathlib import Path, PurePath
from typing import List, Union

from ..models.catalog import Strategy
from ..models.config import ProjectConfig
from .commands import CommandFailedError, Runner, run_command
from .root_locator import RootLocator


logger = logging.getLogger(__name__)


def parse_path_list(output: str, root: Union[str, Path]) -> List[str]:
    """
    Convert NUL-separated subprocess output into absolute path strings.

    Names are taken byte for byte between separators, so quotes, backslashes,
    whitespace and newlines inside a file name survive. Empty entries are
    dropped and relative paths are resolved against ``root``.

    Args:
        output: Raw stdout text, each path terminated by a NUL character
        root: Directory relative paths are relative to

    Returns:
        Absolute paths in output order
    """
    root_path = Path(root)
    paths = []
    for item in output.split('\0'):
        if not item:
            continue
        path = PurePath(item)
        if not path.is_absolute():
            path = root_path / path
        paths.append(str(path))
    return paths


def build_find_args(
    find: str,
    root: str,
    patterns: List[str],
    prune_dirs: List[str],
    print_action: str = '-print0',
) -> List[str]:
    """
    Build a find invocation that prunes metadata directories and matches file names.

    Produces ``find ROOT ( -name D1 -o -name D2 ) -prune -o -type f ( -name P1 -o
    -name P2 ) -print0``; either group is omitted when empty.
    """
    argv = [find, root]
    if prune_dirs:
        argv.append('(')
        argv.extend(_or_names(prune_dirs))
        argv.extend([')', '-prune', '-o'])
    argv.extend(['-type', 'f'])
    if patterns:
        argv.append('(')
        argv.extend(_or_names(patterns))
        argv.append(')')
    argv.append(print_action)
    return argv


def _or_names(names: List[str]) -> List[str]:
    args: List[str] = []
    for index, name in enumerate(names):
        if index:
            args.append('-o')
        args.extend(['-name', name])
    return args


class FileEnumerator:
    """
    Lists candidate files under a project root.

    The repository check is shared with ``RootLocator`` so both components
    agree on what counts as a repository.
    """

    def __init__(self, config: ProjectConfig, runner: Runner = run_command):
        self.config = config
        self.runner = runner
        self._locator = RootLocator(config, runner)

    def select_strategy(self, root: Union[str, Path]) -> Strategy:
        """Choose the accelerated strategy when ``root`` is inside a repository."""
        if self._locator.is_repository(root):
            return Strategy.ACCELERATED
        return Strategy.FALLBACK

    def enumerate(self, root: Union[str, Path]) -> List[str]:
        """Enumerate files under ``root``; see ``enumerate_with_strategy``."""
        files, _ = self.enumerate_with_strategy(root)
        return files

    def enumerate_with_strategy(self, root: Union[str, Path]):
        """
        Enumerate files under ``root`` matching the configured patterns.

        Args:
            root: Project root directory

        Returns:
            Tuple of (absolute paths, strategy used)

        Raises:
            CommandFailedError: If the listing subprocess fails or cannot start
        """
        root = str(Path(root).absolute())
        strategy = self.select_strategy(root)
        logger.info(f"Enumerating {root} using {strategy.value} strategy")

        if strategy is Strategy.ACCELERATED:
            argv = self._vcs_list_args()
        else:
            argv = build_find_args(
                self.config.commands.find,
                root,
                self.config.patterns,
                self.config.prune_dirs,
            )

        result = self.runner(argv, cwd=root, timeout=self.config.limits.timeout_seconds)
        if not result.ok:
            raise CommandFailedError(argv, result)

        # Sorted before truncation so the kept subset does not depend on output order.
        files = sorted(parse_path_list(result.stdout, root))
        max_files = self.config.limits.max_files
        if len(files) > max_files:
            logger.warning(f"Found {len(files)} files under {root}, keeping the first {max_files} in path order")
            files = files[:max_files]

        logger.debug(f"Enumerated {len(files)} files under {root}")
        return files, strategy

    def _vcs_list_args(self) -> List[str]:
        # -z disables C-style quoting of unusual names and NUL-terminates each path.
        argv = [self.config.commands.vcs, 'ls-files', '-z']
        if self.config.patterns:
            argv.append('--')
            argv.extend(self.config.patterns)
        return argv
