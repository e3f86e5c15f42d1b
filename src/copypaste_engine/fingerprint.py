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
Block fingerprinter and duplicate block finder.

Slides a fixed-size window over every file, hashes the normalized text of
each window, and keeps fingerprints seen at two or more non-overlapping
places. Consecutive duplicate windows that move in lockstep are merged
back into one longer block.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import hashlib
import logging

from .corpus import map_per_file
from .models import CodeWindow, DuplicateBlock, Occurrence, SourceFile
from .normalizer import normalize_code, is_meaningful_line


logger = logging.getLogger(__name__)

MIN_BLOCK_LINES = 5       # Window length
FINGERPRINT_WIDTH = 16    # Hex chars kept from the SHA-256 digest


def fingerprint(normalized: str) -> str:
    """Short content address of a normalized block."""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:FINGERPRINT_WIDTH]


def fingerprint_file(
    source: SourceFile,
    block_lines: int = MIN_BLOCK_LINES,
) -> List[CodeWindow]:
    """
    Fingerprint every window of block_lines lines in a file.

    Windows with fewer than block_lines - 1 meaningful lines are dropped so
    blank or comment padding never counts as duplication.
    """
    lines = source.lines
    windows = []

    for i in range(len(lines) - block_lines + 1):
        block = lines[i:i + block_lines]

        meaningful = sum(1 for line in block if is_meaningful_line(line))
        if meaningful < block_lines - 1:
            continue

        windows.append(CodeWindow(
            file=source.path,
            start_line=i + 1,  # 1-indexed
            end_line=i + block_lines,
            fingerprint=fingerprint(normalize_code("\n".join(block))),
        ))

    return windows


def deduplicate_occurrences(occurrences: Sequence[Occurrence]) -> List[Occurrence]:
    """
    Greedily drop occurrences that overlap an earlier kept one in the same file.

    Occurrences are processed in the order given.
    """
    kept: List[Occurrence] = []
    kept_by_file: Dict[str, List[Occurrence]] = {}

    for occ in occurrences:
        same_file = kept_by_file.setdefault(occ.file, [])
        if any(occ.overlaps(k) for k in same_file):
            continue
        same_file.append(occ)
        kept.append(occ)

    return kept


def duplicate_suggestion(occurrences: Sequence[Occurrence]) -> str:
    """Remedy for a duplicate block, based on how many files it spans."""
    file_count = len({o.file for o in occurrences})

    if file_count == 1:
        return "Extract to a local helper function"
    elif file_count <= 3:
        return "Extract to a shared utility function"
    else:
        return "Create a reusable component or module"


def find_duplicate_blocks(
    files: Sequence[SourceFile],
    block_lines: int = MIN_BLOCK_LINES,
    max_workers: Optional[int] = None,
) -> List[DuplicateBlock]:
    """
    Find exact (post-normalization) duplicate blocks across the corpus.

    Args:
        files: Corpus snapshot, in the order occurrences should be discovered
        block_lines: Window length
        max_workers: Concurrent fingerprinting tasks

    Returns:
        DuplicateBlocks sorted by occurrence count (most first), ties by fingerprint
    """
    windows_by_file = map_per_file(
        lambda source: fingerprint_file(source, block_lines),
        files,
        max_workers=max_workers,
    )

    # Merge in corpus order so discovery order never depends on scheduling
    by_fingerprint: Dict[str, List[CodeWindow]] = {}
    for source in files:
        for window in windows_by_file.get(source.path, []):
            by_fingerprint.setdefault(window.fingerprint, []).append(window)

    candidates: List[Tuple[str, List[Occurrence]]] = []
    for fp, windows in by_fingerprint.items():
        if len(windows) < 2:
            continue
        unique = deduplicate_occurrences([w.occurrence for w in windows])
        if len(unique) >= 2:
            candidates.append((fp, unique))

    files_by_path = {source.path: source for source in files}
    blocks = _merge_adjacent(candidates, files_by_path, block_lines)

    logger.debug(
        f"{len(by_fingerprint)} fingerprints, {len(candidates)} duplicate windows, "
        f"{len(blocks)} blocks after merging"
    )

    blocks.sort(key=lambda b: (-len(b.occurrences), b.fingerprint))
    return blocks


def _signature(occurrences: Sequence[Occurrence], shift: int = 0) -> Tuple[Tuple[str, int], ...]:
    return tuple(sorted((o.file, o.start_line + shift) for o in occurrences))


def _has_overlap(occurrences: Sequence[Occurrence]) -> bool:
    """True if any two occurrences in the same file share a line."""
    ordered = sorted(occurrences, key=lambda o: (o.file, o.start_line))
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.file == cur.file and cur.start_line <= prev.end_line:
            return True
    return False


def _extend(occurrences: Sequence[Occurrence], extra: int) -> List[Occurrence]:
    return [
        Occurrence(file=o.file, start_line=o.start_line, end_line=o.end_line + extra)
        for o in occurrences
    ]


def _merge_adjacent(
    candidates: List[Tuple[str, List[Occurrence]]],
    files_by_path: Dict[str, SourceFile],
    block_lines: int,
) -> List[DuplicateBlock]:
    """
    Chain candidates whose occurrences are the previous candidate's shifted by one line.

    A window's predecessor always starts one line earlier in the same file, so
    it is discovered first; walking candidates in discovery order therefore
    reaches every chain at its head.
    """
    index_by_signature = {_signature(occs): i for i, (_, occs) in enumerate(candidates)}
    consumed = set()
    blocks = []

    for i, (fp, head) in enumerate(candidates):
        if i in consumed:
            continue
        consumed.add(i)

        current = head
        extra = 0
        while True:
            nxt = index_by_signature.get(_signature(current, shift=1))
            if nxt is None or nxt in consumed:
                break
            if _has_overlap(_extend(head, extra + 1)):
                break
            consumed.add(nxt)
            current = candidates[nxt][1]
            extra += 1

        occurrences = _extend(head, extra)
        first = occurrences[0]
        blocks.append(DuplicateBlock(
            fingerprint=fp,
            content=files_by_path[first.file].snippet(first.start_line, first.end_line),
            lines=block_lines + extra,
            occurrences=occurrences,
            suggestion=duplicate_suggestion(occurrences),
        ))

    return blocks
