"""
Data types shared by the collector, reconciler and reporter.

A report maps each tracked path to the per-file diff records found for it.
Insertion order of the mapping is the order paths appear in the config.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Mode(str, Enum):
    """Rendering mode selected on the command line."""
    COMPARISON = "comparison"
    SUMMARY = "summary"


@dataclass
class DiffRecord:
    """One file's diff segment within a tracked path."""
    file: Optional[str]
    hash: str
    diff_text: Optional[str] = None
    skip: bool = False


@dataclass
class IgnoredDiff:
    """An acknowledged fingerprint, or an explicit skip marker, for a file."""
    file: Optional[str]
    hash: Optional[str] = None
    skip: bool = False

    def matches(self, record: DiffRecord) -> bool:
        if record.file is None or self.file != record.file:
            return False
        return self.skip or self.hash == record.hash


@dataclass
class IgnoreEntry:
    """Acknowledged diffs for one tracked path."""
    path: str
    diffs: List[IgnoredDiff] = field(default_factory=list)


Report = Dict[str, List[DiffRecord]]
