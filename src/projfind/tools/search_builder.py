"""
Scoped source search for the Project File Finder.

Builds the command that searches file contents under a project root. Inside
a repository the VCS grep is used, restricted to the filetype patterns;
otherwise a pruned ``find`` traversal is piped into ``xargs grep``. The query
is always a single argument following ``-e``, so neither quotes nor leading
dashes in it can change the command.
"""

import logging
from pathlib import Path
from typing import Union

from ..models.catalog import Strategy
from ..models.config import ProjectConfig
from ..models.search_command import SearchCommand
from .commands import CommandResult, Runner, run_command, run_pipeline
from .file_enumerator import FileEnumerator, build_find_args


logger = logging.getLogger(__name__)


class SearchCommandBuilder:
    """Constructs search commands using the same strategy selection as enumeration."""

    def __init__(self, config: ProjectConfig, runner: Runner = run_command):
        self.config = config
        self.runner = runner
        self._enumerator = FileEnumerator(config, runner)

    def build(self, query: str, root: Union[str, Path]) -> SearchCommand:
        """
        Build the search command for ``query`` scoped to ``root``.

        Args:
            query: Search pattern as typed by the user
            root: Project root directory

        Returns:
            SearchCommand ready to execute or render

        Raises:
            ValueError: If the query is empty
        """
        if not query or not query.strip():
            raise ValueError("Search query cannot be empty")

        root = str(Path(root).absolute())
        strategy = self._enumerator.select_strategy(root)
        commands = self.config.commands

        if strategy is Strategy.ACCELERATED:
            stage = [commands.vcs, '--no-pager', 'grep', '-n', '-e', query]
            if self.config.patterns:
                stage.append('--')
                stage.extend(self.config.patterns)
            stages = [stage]
        else:
            find_stage = build_find_args(
                commands.find,
                root,
                self.config.patterns,
                self.config.prune_dirs,
                print_action='-print0',
            )
            grep_stage = [commands.xargs, '-0', commands.grep, '-H', '-n', '-e', query]
            stages = [find_stage, grep_stage]

        command = SearchCommand(strategy=strategy, root=root, query=query, stages=stages)
        logger.debug(f"Built {strategy.value} search: {command.to_shell()}")
        return command


def run_search(command: SearchCommand, config: ProjectConfig) -> CommandResult:
    """
    Execute a built search command.

    The exit status is passed through unchanged; grep tools exit 1 when
    nothing matched, which is not treated as a failure here.
    """
    logger.info(f"Searching {command.root} for {command.query!r}")
    return run_pipeline(command.stages, cwd=command.root, timeout=config.limits.timeout_seconds)
