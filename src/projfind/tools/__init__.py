"""
Project tools for the Project File Finder.

This module contains the components that locate the project root, enumerate
its files, label them, and build scoped search commands.
"""

from .commands import CommandFailedError, CommandResult, run_command, run_pipeline
from .root_locator import RootLocator
from .file_enumerator import FileEnumerator
from .disambiguator import disambiguate, detect_collisions
from .catalog_builder import build_catalog
from .search_builder import SearchCommandBuilder, run_search

__all__ = [
    'CommandFailedError',
    'CommandResult',
    'run_command',
    'run_pipeline',
    'RootLocator',
    'FileEnumerator',
    'disambiguate',
    'detect_collisions',
    'build_catalog',
    'SearchCommandBuilder',
    'run_search',
]
