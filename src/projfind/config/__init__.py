"""
Configuration files for projfind.

A configuration file is a YAML mapping with the filetype patterns to catalog
and search, an optional fixed project root, the directories pruned when
walking a tree outside version control, the git/find/grep/xargs executables
and enumeration limits. When no path is given, ``.projfind.yaml`` or
``projfind.yml`` (and their variants) are looked up in the current directory,
the home directory and ``~/.config/projfind``; defaults apply when none exist.
"""

from ..models.config import ProjectConfig
from .parser import (
    ConfigParser,
    ConfigParseResult,
    ConfigurationError,
    create_config_template,
    load_config,
    validate_config_file,
)

__all__ = [
    'ProjectConfig',
    'ConfigParser',
    'ConfigParseResult',
    'ConfigurationError',
    'create_config_template',
    'load_config',
    'validate_config_file',
]
