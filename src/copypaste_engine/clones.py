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
Clone grouper - turns duplicate blocks into reportable clone groups.
"""

from typing import Dict, List, Sequence, Tuple

from .models import CloneGroup, CloneInstance, CloneType, DuplicateBlock, SourceFile


# Anti-flood guard: groups emitted per distinct set of participating files
MAX_GROUPS_PER_FILE_SET = 20
MAX_SAMPLE_CHARS = 200


def file_set_key(block: DuplicateBlock) -> Tuple[str, ...]:
    """Sorted, de-duplicated paths of the files a block appears in."""
    return tuple(sorted({o.file for o in block.occurrences}))


def group_clones(
    duplicate_blocks: Sequence[DuplicateBlock],
    files: Sequence[SourceFile],
) -> List[CloneGroup]:
    """
    Build one CloneGroup per duplicate block, capped per file set.

    Blocks past the cap for their file set are dropped, not merged.

    Returns:
        Groups sorted by total duplicated volume (lines x instances), largest first
    """
    files_by_path = {f.path: f for f in files}

    by_file_set: Dict[Tuple[str, ...], List[DuplicateBlock]] = {}
    for block in duplicate_blocks:
        by_file_set.setdefault(file_set_key(block), []).append(block)

    groups = []
    group_id = 1

    for blocks in by_file_set.values():
        for block in blocks[:MAX_GROUPS_PER_FILE_SET]:
            groups.append(CloneGroup(
                id=group_id,
                instances=[
                    CloneInstance(
                        file=occ.file,
                        start_line=occ.start_line,
                        end_line=occ.end_line,
                        content=_snippet(files_by_path, occ.file, occ.start_line, occ.end_line),
                    )
                    for occ in block.occurrences
                ],
                similarity=100,  # Exact by construction
                lines=block.lines,
                clone_type=CloneType.EXACT,
                sample=_truncate(block.content, MAX_SAMPLE_CHARS),
                suggestion=block.suggestion,
            ))
            group_id += 1

    groups.sort(key=lambda g: g.volume, reverse=True)
    return groups


def _snippet(files_by_path: Dict[str, SourceFile], path: str, start: int, end: int) -> str:
    source = files_by_path.get(path)
    if source is None:
        return ""
    return source.snippet(start, end)


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text
