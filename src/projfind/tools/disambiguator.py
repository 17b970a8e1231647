"""
Label disambiguation for the Project File Finder.

Files are grouped by base name. A base name that occurs once is its own
label; every file in a group of two or more is labeled with its base name
followed by the name of its immediate parent directory, e.g. ``foo.txt: a``.
Two files sharing both base name and parent directory name still collide;
``detect_collisions`` reports those.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from ..models.catalog import FileEntry, LabeledEntry


logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = ": "


def group_by_base_name(raw_files: Iterable[str]) -> Dict[str, List[FileEntry]]:
    """Group paths into buckets keyed by base name."""
    buckets: Dict[str, List[FileEntry]] = defaultdict(list)
    for path in raw_files:
        entry = FileEntry.from_path(path)
        buckets[entry.base_name].append(entry)
    return dict(buckets)


def disambiguate(raw_files: Iterable[str], separator: str = DEFAULT_SEPARATOR) -> List[LabeledEntry]:
    """
    Assign each file a display label.

    The result depends only on the content of ``raw_files``, not its order:
    entries are sorted by label, then by full path.

    Args:
        raw_files: Enumerated file paths
        separator: Text between base name and parent directory name

    Returns:
        Labeled entries sorted by (label, full_path)
    """
    labeled = []
    for base_name, bucket in group_by_base_name(raw_files).items():
        if len(bucket) == 1:
            labeled.append(LabeledEntry(label=base_name, full_path=bucket[0].full_path))
            continue
        for entry in bucket:
            label = f"{base_name}{separator}{entry.parent_name}"
            labeled.append(LabeledEntry(label=label, full_path=entry.full_path))

    labeled.sort(key=lambda item: (item.label, item.full_path))
    return labeled


def detect_collisions(entries: Iterable[LabeledEntry]) -> Dict[str, List[str]]:
    """Return labels shared by more than one path, mapped to their sorted paths."""
    by_label: Dict[str, List[str]] = defaultdict(list)
    for entry in entries:
        by_label[entry.label].append(entry.full_path)
    return {
        label: sorted(paths)
        for label, paths in sorted(by_label.items())
        if len(paths) > 1
    }
