"""
Catalog data models for the Project File Finder.

This module defines the structures produced by one enumeration pass: raw file
entries grouped by base name, the labeled entries shown to the user, and the
immutable catalog mapping each label to its full path.
"""

from typing import Dict, List, Optional, Any
from enum import Enum
from pathlib import PurePath
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Strategy(Enum):
    """Enumeration and search strategies."""
    ACCELERATED = "accelerated"
    FALLBACK = "fallback"


class FileEntry(BaseModel):
    """
    One enumerated file, keyed by its base name.

    Attributes:
        base_name: Final path component of the file
        full_path: Absolute path of the file
    """

    model_config = ConfigDict(frozen=True)

    base_name: str = Field(..., min_length=1, description="File base name")
    full_path: str = Field(..., min_length=1, description="Absolute file path")

    @classmethod
    def from_path(cls, path: str) -> 'FileEntry':
        """Build an entry from a path string."""
        return cls(base_name=PurePath(path).name, full_path=path)

    @property
    def parent_name(self) -> str:
        """Name of the immediate parent directory of the full path."""
        return PurePath(self.full_path).parent.name


class LabeledEntry(BaseModel):
    """
    A file entry with the label displayed in the picker.

    Attributes:
        label: Human-readable label, unique within one catalog
        full_path: Absolute path of the file
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1, description="Display label")
    full_path: str = Field(..., min_length=1, description="Absolute file path")


class Catalog(BaseModel):
    """
    Immutable label to path mapping for one enumeration pass.

    Catalogs are built fresh for every request and never shared; entries keep
    the order they were given in, which the disambiguator sorts by label.

    Attributes:
        root: Project root the files were enumerated from
        strategy: Strategy used to enumerate the files
        entries: Labeled entries, labels pairwise unique
    """

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., min_length=1, description="Project root")
    strategy: Strategy = Field(..., description="Enumeration strategy")
    entries: List[LabeledEntry] = Field(default_factory=list, description="Labeled entries")

    @field_validator('strategy', mode='before')
    @classmethod
    def validate_strategy(cls, v) -> Strategy:
        """Validate and convert strategy to enum."""
        if isinstance(v, str):
            try:
                return Strategy(v)
            except ValueError:
                raise ValueError(f"Invalid strategy: {v}")
        return v

    @model_validator(mode='after')
    def validate_unique_labels(self):
        """Reject catalogs with duplicate labels."""
        seen = set()
        for entry in self.entries:
            if entry.label in seen:
                raise ValueError(f"Duplicate label in catalog: {entry.label}")
            seen.add(entry.label)
        return self

    def labels(self) -> List[str]:
        """Labels in display order."""
        return [entry.label for entry in self.entries]

    def paths(self) -> List[str]:
        """Full paths in display order."""
        return [entry.full_path for entry in self.entries]

    def lookup(self, label: str) -> Optional[str]:
        """Return the full path for a label, or None if the label is unknown."""
        return self.as_mapping().get(label)

    def as_mapping(self) -> Dict[str, str]:
        """Return a fresh label to path dictionary."""
        return {entry.label: entry.full_path for entry in self.entries}

    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert catalog to dictionary representation."""
        return {
            'root': self.root,
            'strategy': self.strategy.value,
            'total_files': len(self.entries),
            'entries': [entry.model_dump() for entry in self.entries],
        }
