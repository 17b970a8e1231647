"""
Configuration data models for the Project File Finder.

This module defines the configuration threaded through root detection, file
enumeration and search command construction: the filetype glob patterns, the
optional project root override, the directories pruned by the fallback
traversal, the executables used at the subprocess boundary and system limits.
"""

from typing import Dict, List, Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


DEFAULT_PATTERNS = [
    "*.html",
    "*.org",
    "*.txt",
    "*.md",
    "*.rst",
    "*.py",
    "*.rb",
    "*.js",
    "*.ts",
    "*.el",
    "*.clj",
    "*.pl",
    "*.sh",
    "*.erl",
    "*.hs",
    "*.ml",
    "*.go",
    "*.rs",
    "*.java",
    "*.c",
    "*.h",
    "*.cpp",
    "*.hpp",
    "*.yaml",
    "*.toml",
]

DEFAULT_PRUNE_DIRS = [".git", ".hg", ".svn"]

_GLOB_CHARS = set("*?[]")


class CommandsConfig(BaseModel):
    """
    Executables invoked at the subprocess boundary.

    Attributes:
        vcs: Version-control executable (git-compatible command line)
        find: Filesystem traversal executable supporting -prune and -name
        grep: Line-oriented pattern search executable supporting -H and -n
        xargs: Executable used to feed traversal output into grep
    """

    vcs: str = Field("git", min_length=1, description="Version-control executable")
    find: str = Field("find", min_length=1, description="Filesystem traversal executable")
    grep: str = Field("grep", min_length=1, description="Pattern search executable")
    xargs: str = Field("xargs", min_length=1, description="Argument feeding executable")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class LimitsConfig(BaseModel):
    """
    Configuration for system limits.

    Attributes:
        max_files: Maximum number of files kept from one enumeration pass
        timeout_seconds: Timeout applied to every subprocess, None for no timeout
    """

    max_files: int = Field(200000, gt=0, description="Maximum number of files to catalog")
    timeout_seconds: Optional[int] = Field(None, gt=0, description="Subprocess timeout in seconds")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class ProjectConfig(BaseModel):
    """
    Main configuration class for the Project File Finder.

    Instances are read-only from the point of view of the locating, enumerating
    and searching components; the CLI derives modified copies through
    ``with_overrides`` instead of mutating a shared instance.

    Attributes:
        patterns: Ordered filetype glob patterns (e.g. ``*.py``)
        project_root: Explicit project root override, used verbatim when set
        prune_dirs: Directory names skipped by the fallback traversal
        commands: Executables used at the subprocess boundary
        limits: System limits
        label_separator: Text placed between a base name and its parent
            directory name when disambiguating labels
    """

    patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PATTERNS),
        description="Filetype glob patterns"
    )
    project_root: Optional[str] = Field(None, description="Explicit project root override")
    prune_dirs: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PRUNE_DIRS),
        description="Directory names pruned by the fallback traversal"
    )
    commands: CommandsConfig = Field(default_factory=CommandsConfig, description="Subprocess executables")
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="System limits")
    label_separator: str = Field(": ", min_length=1, description="Separator used in disambiguated labels")

    @field_validator('patterns', mode='before')
    @classmethod
    def validate_patterns(cls, v) -> List[str]:
        """Normalize patterns: accept a single string, drop blanks and duplicates."""
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            raise ValueError(f"Patterns must be a list of glob strings, got {type(v).__name__}")

        normalized = []
        for pattern in v:
            if not isinstance(pattern, str):
                raise ValueError(f"Invalid pattern: {pattern!r}")
            pattern = pattern.strip()
            if not pattern or pattern in normalized:
                continue
            if '/' in pattern:
                raise ValueError(f"Pattern '{pattern}' must match file names, not paths")
            normalized.append(pattern)
        return normalized

    @field_validator('project_root')
    @classmethod
    def validate_project_root(cls, v: Optional[str]) -> Optional[str]:
        """Expand user and make the override absolute."""
        if v is None or not v.strip():
            return None
        return str(Path(v.strip()).expanduser().absolute())

    @field_validator('prune_dirs')
    @classmethod
    def validate_prune_dirs(cls, v: List[str]) -> List[str]:
        """Prune entries must be plain directory names."""
        names = []
        for name in v:
            name = name.strip()
            if not name:
                continue
            if '/' in name or '\\' in name or _GLOB_CHARS & set(name):
                raise ValueError(f"Prune entry '{name}' must be a plain directory name")
            if name not in names:
                names.append(name)
        return names

    def with_overrides(self, **overrides: Any) -> 'ProjectConfig':
        """
        Return a validated copy with the given top-level fields replaced.

        ``None`` values are ignored so that unset command line options leave
        the configured value in place.
        """
        data = self.model_dump()
        for key, value in overrides.items():
            if key not in type(self).model_fields:
                raise ValueError(f"Unknown configuration field: {key}")
            if value is not None:
                data[key] = value
        return type(self).model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        data = self.model_dump()
        data['commands'] = self.commands.to_dict()
        data['limits'] = self.limits.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Patterns: {len(self.patterns)}"]
        parts.append(f"Root override: {self.project_root or 'none'}")
        parts.append(f"Pruned: {', '.join(self.prune_dirs) or 'none'}")
        parts.append(f"VCS: {self.commands.vcs}")
        return " | ".join(parts)
