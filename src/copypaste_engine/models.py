# Copypaste Engine - Find duplicated and copy-pasted code
# Copyright (C) 2025  Jonathan Louis
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Data models for copypaste-engine.

Every result type is a plain dataclass so a renderer can serialize the
whole report without calling back into the engine.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any


class CloneType(Enum):
    EXACT = "exact"
    SIMILAR = "similar"
    STRUCTURAL = "structural"  # Reserved, never produced


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _plain(items) -> Dict[str, Any]:
    """dict_factory for asdict() that flattens enums to their values."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in items
    }


@dataclass
class FileChange:
    """One file touched by a commit."""

    path: str
    additions: int = 0
    deletions: int = 0
    status: str = "modified"   # added, modified, deleted, renamed, copied
    old_path: Optional[str] = None


@dataclass
class Commit:
    """A commit as handed to every analyzer by the host."""

    hash: str
    author_name: str
    author_email: str
    date: datetime
    message: str = ""
    files: List[FileChange] = field(default_factory=list)


@dataclass
class SourceFile:
    """One analyzed file snapshot."""

    path: str                 # Relative POSIX path from the repo root
    content: str              # Full raw text
    lines: List[str] = field(init=False, repr=False)

    def __post_init__(self):
        self.lines = self.content.split("\n")

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def snippet(self, start_line: int, end_line: int) -> str:
        """Raw text of an inclusive, 1-indexed line range."""
        return "\n".join(self.lines[start_line - 1:end_line])


@dataclass
class Occurrence:
    """One placement of a duplicated block."""

    file: str
    start_line: int          # 1-indexed
    end_line: int            # Inclusive

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def location(self) -> str:
        return f"{self.file}:{self.start_line}-{self.end_line}"

    def overlaps(self, other: "Occurrence") -> bool:
        """True if either endpoint of this range falls inside other's range."""
        if self.file != other.file:
            return False
        return (
            other.start_line <= self.start_line <= other.end_line
            or other.start_line <= self.end_line <= other.end_line
        )


@dataclass
class CodeWindow:
    """A fixed-length run of lines, fingerprinted for exact matching."""

    file: str
    start_line: int
    end_line: int
    fingerprint: str

    @property
    def occurrence(self) -> Occurrence:
        return Occurrence(file=self.file, start_line=self.start_line, end_line=self.end_line)


@dataclass
class DuplicateBlock:
    """A fingerprint with at least two non-overlapping occurrences."""

    fingerprint: str
    content: str             # Raw text of the first occurrence
    lines: int
    occurrences: List[Occurrence]
    suggestion: str

    @property
    def files(self) -> List[str]:
        """Distinct participating files, in occurrence order."""
        return list(dict.fromkeys(o.file for o in self.occurrences))


@dataclass
class CloneInstance:
    file: str
    start_line: int
    end_line: int
    content: str


@dataclass
class CloneGroup:
    """The reportable unit bundling all occurrences of one duplicate block."""

    id: int
    instances: List[CloneInstance]
    similarity: int          # 0-100, always 100 for exact matches
    lines: int
    clone_type: CloneType
    sample: str
    suggestion: str

    @property
    def volume(self) -> int:
        """Total duplicated lines across all instances."""
        return self.lines * len(self.instances)


@dataclass
class SimilarFilePair:
    file1: str
    file2: str
    similarity: int          # 0-100
    shared_lines: int
    total_lines: int
    common_patterns: List[str]
    suggestion: str


@dataclass
class PatternOccurrence:
    file: str
    line: int                # 1-indexed
    content: str             # Truncated match text


@dataclass
class PatternDuplicate:
    """Repeated occurrences of one idiom from the pattern catalog."""

    pattern: str
    description: str
    occurrences: List[PatternOccurrence]   # Capped for display
    suggestion: str
    total_occurrences: int = 0             # Uncapped count


@dataclass
class Recommendation:
    priority: Priority
    category: str
    description: str
    files: List[str]
    impact: str
    action: str
    estimated_savings: int   # LOC


@dataclass
class DuplicationSummary:
    total_files_analyzed: int = 0
    total_lines_analyzed: int = 0
    duplicated_lines: int = 0
    duplication_percentage: float = 0.0
    clone_group_count: int = 0
    similar_file_pairs: int = 0
    estimated_refactoring_savings: int = 0   # LOC that could be removed


@dataclass
class CopyPasteStats:
    """Complete result of one analysis run."""

    summary: DuplicationSummary
    clone_groups: List[CloneGroup] = field(default_factory=list)
    similar_files: List[SimilarFilePair] = field(default_factory=list)
    duplicate_blocks: List[DuplicateBlock] = field(default_factory=list)
    pattern_duplicates: List[PatternDuplicate] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "CopyPasteStats":
        return cls(summary=DuplicationSummary())

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-ready representation."""
        return asdict(self, dict_factory=_plain)
