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
File similarity scorer - finds whole files that share most of their lines.

Each file becomes the set of its distinct normalized lines. Pairwise
intersection sizes come from one sparse matrix product, then a Dice
coefficient turns them into a 0-100 score.
"""

from typing import List, Sequence, Set
import math
import re

import numpy as np
from sklearn.preprocessing import MultiLabelBinarizer

from .models import SimilarFilePair, SourceFile
from .normalizer import normalize_line, iter_matches


MIN_FILE_LINES = 20       # Files shorter than this are never paired
MIN_SIMILARITY = 70       # Minimum score to report a pair
MIN_LINE_LENGTH = 5       # Normalized lines must be longer than this
MAX_SHARED_FUNCTIONS = 3
MIN_SHARED_IMPORTS = 3

# Function declarations and const arrow/function bindings
_FUNCTION_DECL = re.compile(r"function\s+(\w+)|const\s+(\w+)\s*=\s*(?:async\s*)?\(")
_IMPORT_FROM = re.compile(r"import\s+.*\s+from\s+['\"]([^'\"]+)['\"]")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def line_set(lines: Sequence[str]) -> Set[str]:
    """Distinct normalized lines long enough to carry meaning."""
    return {n for n in (normalize_line(line) for line in lines) if len(n) > MIN_LINE_LENGTH}


def dice_score(shared: int, size1: int, size2: int) -> int:
    """2|A∩B| / (|A|+|B|) as a rounded percentage."""
    if size1 == 0 or size2 == 0:
        return 0
    return round_half_up((shared * 2) / (size1 + size2) * 100)


def calculate_similarity(lines1: Sequence[str], lines2: Sequence[str]) -> int:
    """Similarity of two line sequences, 0-100."""
    set1 = line_set(lines1)
    set2 = line_set(lines2)
    return dice_score(len(set1 & set2), len(set1), len(set2))


def find_common_patterns(content1: str, content2: str) -> List[str]:
    """Evidence for a similar pair: shared function names and import targets."""
    patterns = []

    funcs1 = _declared_names(content1)
    funcs2 = set(_declared_names(content2))
    common_funcs = [f for f in funcs1 if f in funcs2]
    if common_funcs:
        patterns.append(f"Similar functions: {', '.join(common_funcs[:MAX_SHARED_FUNCTIONS])}")

    imports1 = _import_targets(content1)
    imports2 = set(_import_targets(content2))
    common_imports = [i for i in imports1 if i in imports2]
    if len(common_imports) >= MIN_SHARED_IMPORTS:
        patterns.append(f"Common imports: {len(common_imports)}")

    return patterns


def similar_file_suggestion(similarity: int) -> str:
    if similarity >= 90:
        return "These files are nearly identical - consider merging or creating a shared base"
    elif similarity >= 80:
        return "High similarity - extract common logic to a shared module"
    else:
        return "Consider creating a base class or shared utilities"


def find_similar_files(
    files: Sequence[SourceFile],
    min_similarity: int = MIN_SIMILARITY,
    min_file_lines: int = MIN_FILE_LINES,
) -> List[SimilarFilePair]:
    """
    Score every pair of files with at least min_file_lines lines.

    O(k²) in the number of eligible files: callers should size or
    pre-filter the corpus accordingly.

    Returns:
        Pairs scoring at least min_similarity, most similar first
    """
    eligible = [f for f in files if f.line_count >= min_file_lines]
    if len(eligible) < 2:
        return []

    sets = [line_set(f.lines) for f in eligible]
    sizes = np.array([len(s) for s in sets])

    # Rows are files, columns are distinct lines across the corpus
    incidence = MultiLabelBinarizer(sparse_output=True).fit_transform(sets)
    shared = (incidence @ incidence.T).tocoo()

    scored = []
    for i, j, count in zip(shared.row, shared.col, shared.data):
        if i >= j:
            continue
        similarity = dice_score(int(count), int(sizes[i]), int(sizes[j]))
        if similarity >= min_similarity:
            scored.append((int(i), int(j), similarity))

    # Discovery order within equal scores
    scored.sort(key=lambda t: (-t[2], t[0], t[1]))

    pairs = []
    for i, j, similarity in scored:
        first, second = eligible[i], eligible[j]
        total = first.line_count + second.line_count
        pairs.append(SimilarFilePair(
            file1=first.path,
            file2=second.path,
            similarity=similarity,
            shared_lines=round_half_up(total * similarity / 200),
            total_lines=total,
            common_patterns=find_common_patterns(first.content, second.content),
            suggestion=similar_file_suggestion(similarity),
        ))

    return pairs


def _declared_names(content: str) -> List[str]:
    names = (m.group(1) or m.group(2) for m in iter_matches(_FUNCTION_DECL, content))
    return list(dict.fromkeys(names))


def _import_targets(content: str) -> List[str]:
    return list(dict.fromkeys(m.group(1) for m in iter_matches(_IMPORT_FROM, content)))
