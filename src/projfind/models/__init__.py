"""
Data models for the Project File Finder.

This module contains all the core data structures used throughout the system.
"""

from .catalog import Catalog, FileEntry, LabeledEntry, Strategy
from .config import ProjectConfig, CommandsConfig, LimitsConfig
from .search_command import SearchCommand, quote_token

__all__ = [
    'Catalog',
    'FileEntry',
    'LabeledEntry',
    'Strategy',
    'ProjectConfig',
    'CommandsConfig',
    'LimitsConfig',
    'SearchCommand',
    'quote_token',
]
