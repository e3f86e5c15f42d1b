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
Recommendation engine - derives a prioritized action list from the results.

Each rule fires independently; a rule whose trigger is not met adds nothing.
"""

from typing import Iterable, List, Sequence

from .models import (
    CloneGroup,
    PatternDuplicate,
    Priority,
    Recommendation,
    SimilarFilePair,
)
from .similarity import round_half_up


HIGH_SIMILARITY = 80
LARGE_CLONE_LINES = 10
LARGE_CLONE_INSTANCES = 3
MINOR_CLONE_LINES = 5
MINOR_CLONE_MIN_GROUPS = 5    # More than this many minor groups triggers the rule
MINOR_CLONE_FILE_GROUPS = 10  # Groups whose files are listed
LINES_PER_CALL_SITE = 5      # Code Patterns savings count every hit, not only the displayed ones


def generate_recommendations(
    clone_groups: Sequence[CloneGroup],
    similar_files: Sequence[SimilarFilePair],
    pattern_duplicates: Sequence[PatternDuplicate],
) -> List[Recommendation]:
    recommendations = []

    # Very similar files
    high_similarity = [p for p in similar_files if p.similarity >= HIGH_SIMILARITY]
    if high_similarity:
        recommendations.append(Recommendation(
            priority=Priority.HIGH,
            category="Similar Files",
            description=f"{len(high_similarity)} file pairs are more than {HIGH_SIMILARITY}% similar",
            files=_unique(f for p in high_similarity for f in (p.file1, p.file2)),
            impact="Maintaining duplicate code leads to inconsistencies and bugs",
            action="Merge files or extract common functionality",
            estimated_savings=sum(round_half_up(p.shared_lines / 2) for p in high_similarity),
        ))

    # Large clone groups
    large = [
        g for g in clone_groups
        if g.lines >= LARGE_CLONE_LINES and len(g.instances) >= LARGE_CLONE_INSTANCES
    ]
    if large:
        recommendations.append(Recommendation(
            priority=Priority.HIGH,
            category="Duplicate Code Blocks",
            description=f"{len(large)} code blocks are duplicated {LARGE_CLONE_INSTANCES}+ times",
            files=_unique(i.file for g in large for i in g.instances),
            impact="Increases maintenance burden and risk of inconsistent fixes",
            action="Extract duplicated logic into shared functions/components",
            estimated_savings=sum(g.lines * (len(g.instances) - 1) for g in large),
        ))

    # Most frequent idiom
    if pattern_duplicates:
        top = max(pattern_duplicates, key=lambda p: p.total_occurrences)
        recommendations.append(Recommendation(
            priority=Priority.MEDIUM,
            category="Code Patterns",
            description=top.description,
            files=_unique(o.file for o in top.occurrences),
            impact="Similar patterns could benefit from abstraction",
            action=top.suggestion,
            estimated_savings=top.total_occurrences * LINES_PER_CALL_SITE,
        ))

    # Blocks that appear exactly twice
    minor = [
        g for g in clone_groups
        if g.lines >= MINOR_CLONE_LINES and len(g.instances) == 2
    ]
    if len(minor) > MINOR_CLONE_MIN_GROUPS:
        recommendations.append(Recommendation(
            priority=Priority.LOW,
            category="Minor Duplicates",
            description=f"{len(minor)} small code blocks appear twice",
            files=_unique(i.file for g in minor[:MINOR_CLONE_FILE_GROUPS] for i in g.instances),
            impact="Minor maintenance overhead",
            action="Consider extracting if the code is likely to change",
            estimated_savings=sum(g.lines for g in minor),
        ))

    return recommendations


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))
