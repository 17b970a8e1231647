"""
Catalog construction for the Project File Finder.

Ties root detection, enumeration and disambiguation together into one
``Catalog`` per request.
"""

import logging
from pathlib import Path
from typing import List, Union

from ..models.catalog import Catalog, LabeledEntry
from ..models.config import ProjectConfig
from .commands import Runner, run_command
from .disambiguator import detect_collisions, disambiguate
from .file_enumerator import FileEnumerator
from .root_locator import RootLocator


logger = logging.getLogger(__name__)


def build_catalog(start: Union[str, Path], config: ProjectConfig, runner: Runner = run_command) -> Catalog:
    """
    Build a fresh catalog for the project containing ``start``.

    Args:
        start: File or directory inside the project
        config: Configuration threaded to every component
        runner: Subprocess runner, replaceable in tests

    Returns:
        Catalog of labeled entries, possibly empty

    Raises:
        CommandFailedError: If the file listing fails
    """
    root = RootLocator(config, runner).locate(start)
    files, strategy = FileEnumerator(config, runner).enumerate_with_strategy(root)
    entries = disambiguate(files, config.label_separator)
    entries = _drop_colliding(entries)
    if not entries:
        logger.info(f"No files matching {config.patterns} under {root}")
    return Catalog(root=str(root), strategy=strategy, entries=entries)


def _drop_colliding(entries: List[LabeledEntry]) -> List[LabeledEntry]:
    """Keep the first path (in sorted order) for each colliding label."""
    collisions = detect_collisions(entries)
    if not collisions:
        return entries

    kept = []
    seen = set()
    for entry in entries:
        if entry.label in seen:
            continue
        seen.add(entry.label)
        kept.append(entry)

    for label, paths in collisions.items():
        logger.warning(f"Label '{label}' is shared by {len(paths)} files; showing {paths[0]}, hiding {paths[1:]}")
    return kept
