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
Pattern matcher - flags idioms that tend to come from copy-paste.

Runs independently of fingerprinting: each catalog entry is a regular
expression scanned over every file's raw text.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence
import re

from .corpus import map_per_file
from .models import PatternDuplicate, PatternOccurrence, SourceFile
from .normalizer import iter_matches


MIN_PATTERN_OCCURRENCES = 3   # Below this an idiom is not reported
MAX_PATTERN_OCCURRENCES = 10  # Occurrences kept for display
MAX_SNIPPET_CHARS = 100

PATTERN_SUGGESTION = "Consider extracting to a reusable function or using a higher-order function"


@dataclass(frozen=True)
class CopyPastePattern:
    regex: Pattern[str]
    description: str


COPYPASTE_PATTERNS = (
    CopyPastePattern(
        regex=re.compile(r"function\s+(\w+)(Handler|Callback|Listener)\s*\("),
        description="Similar handler/callback functions",
    ),
    CopyPastePattern(
        regex=re.compile(
            r"if\s*\([^)]+\)\s*\{\s*return\s+[^;]+;\s*\}\s*if\s*\([^)]+\)\s*\{\s*return"
        ),
        description="Repeated conditional return patterns",
    ),
    CopyPastePattern(
        regex=re.compile(r"catch\s*\([^)]+\)\s*\{[^}]+console\.(log|error)"),
        description="Similar error handling blocks",
    ),
    CopyPastePattern(
        regex=re.compile(r"\.map\s*\(\s*\([^)]+\)\s*=>\s*\{[^}]{50,}\}\s*\)"),
        description="Similar map transformations",
    ),
)


def scan_file(
    source: SourceFile,
    catalog: Sequence[CopyPastePattern] = COPYPASTE_PATTERNS,
) -> List[List[PatternOccurrence]]:
    """Matches of each catalog entry in one file, in catalog order."""
    content = source.content
    found = []

    for entry in catalog:
        occurrences = []
        for match in iter_matches(entry.regex, content):
            occurrences.append(PatternOccurrence(
                file=source.path,
                line=content.count("\n", 0, match.start()) + 1,
                content=match.group(0)[:MAX_SNIPPET_CHARS],
            ))
        found.append(occurrences)

    return found


def find_pattern_duplicates(
    files: Sequence[SourceFile],
    catalog: Sequence[CopyPastePattern] = COPYPASTE_PATTERNS,
    max_workers: Optional[int] = None,
) -> List[PatternDuplicate]:
    """
    Report every catalog idiom seen at least MIN_PATTERN_OCCURRENCES times.

    Returns:
        PatternDuplicates in catalog order
    """
    per_file: Dict[str, List[List[PatternOccurrence]]] = map_per_file(
        lambda source: scan_file(source, catalog),
        files,
        max_workers=max_workers,
    )

    duplicates = []
    for idx, entry in enumerate(catalog):
        occurrences = [
            occ
            for source in files
            if source.path in per_file
            for occ in per_file[source.path][idx]
        ]

        if len(occurrences) < MIN_PATTERN_OCCURRENCES:
            continue

        duplicates.append(PatternDuplicate(
            pattern=entry.description,
            description=f"{len(occurrences)} occurrences of {entry.description.lower()}",
            occurrences=occurrences[:MAX_PATTERN_OCCURRENCES],
            suggestion=PATTERN_SUGGESTION,
            total_occurrences=len(occurrences),
        ))

    return duplicates
