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
Summary counters, computed from already-produced results.
"""

from typing import Sequence, Set, Tuple

from .models import (
    CloneGroup,
    DuplicateBlock,
    DuplicationSummary,
    SimilarFilePair,
    SourceFile,
)


def duplicated_line_count(duplicate_blocks: Sequence[DuplicateBlock]) -> int:
    """Lines covered by duplicate occurrences, each (file, range) counted once."""
    counted: Set[Tuple[str, int, int]] = set()
    total = 0

    for block in duplicate_blocks:
        for occ in block.occurrences:
            key = (occ.file, occ.start_line, occ.end_line)
            if key not in counted:
                counted.add(key)
                total += occ.line_count

    return total


def refactoring_savings(duplicate_blocks: Sequence[DuplicateBlock]) -> int:
    """Lines removable if all but one instance of every duplicate went away."""
    return sum(block.lines * (len(block.occurrences) - 1) for block in duplicate_blocks)


def generate_summary(
    files: Sequence[SourceFile],
    duplicate_blocks: Sequence[DuplicateBlock],
    clone_groups: Sequence[CloneGroup],
    similar_files: Sequence[SimilarFilePair],
) -> DuplicationSummary:
    total_lines = sum(f.line_count for f in files)
    duplicated = duplicated_line_count(duplicate_blocks)

    if total_lines > 0:
        # Ranges from different blocks can overlap, so cap at 100
        percentage = min(duplicated / total_lines * 100, 100.0)
    else:
        percentage = 0.0

    return DuplicationSummary(
        total_files_analyzed=len(files),
        total_lines_analyzed=total_lines,
        duplicated_lines=duplicated,
        duplication_percentage=percentage,
        clone_group_count=len(clone_groups),
        similar_file_pairs=len(similar_files),
        estimated_refactoring_savings=refactoring_savings(duplicate_blocks),
    )
