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
Copy-paste analyzer - the entry point hosts call.

Loads the corpus, runs every detection stage, and folds the results into
one CopyPasteStats. Fingerprinting and pattern scanning run per file on a
bounded pool; dedup, merging and grouping run last on a single thread.
"""

from typing import Callable, List, Optional, Sequence
import logging

from .config import AnalysisConfig
from .corpus import load_corpus
from .fingerprint import find_duplicate_blocks
from .similarity import find_similar_files
from .clones import group_clones
from .patterns import find_pattern_duplicates
from .summary import generate_summary
from .recommendations import generate_recommendations
from .models import Commit, CopyPasteStats, SourceFile


logger = logging.getLogger(__name__)


def analyze_corpus(
    files: Sequence[SourceFile],
    max_workers: Optional[int] = None,
) -> CopyPasteStats:
    """
    Run every duplication stage over an in-memory corpus.

    The corpus is ordered by path first, so identical snapshots always give
    identical results regardless of the order they were supplied in.
    """
    files = sorted(files, key=lambda f: f.path)

    if not files:
        return CopyPasteStats.empty()

    duplicate_blocks = find_duplicate_blocks(files, max_workers=max_workers)
    similar_files = find_similar_files(files)
    clone_groups = group_clones(duplicate_blocks, files)
    pattern_duplicates = find_pattern_duplicates(files, max_workers=max_workers)

    summary = generate_summary(files, duplicate_blocks, clone_groups, similar_files)
    recommendations = generate_recommendations(clone_groups, similar_files, pattern_duplicates)

    logger.info(
        f"Analyzed {summary.total_files_analyzed} files: {len(duplicate_blocks)} duplicate blocks, "
        f"{len(similar_files)} similar pairs, {len(pattern_duplicates)} repeated idioms"
    )

    return CopyPasteStats(
        summary=summary,
        clone_groups=clone_groups,
        similar_files=similar_files,
        duplicate_blocks=duplicate_blocks,
        pattern_duplicates=pattern_duplicates,
        recommendations=recommendations,
    )


class CopyPasteAnalyzer:
    """Detects duplicated and copy-pasted code under a repository root."""

    name = "copypaste-analyzer"
    description = "Detects duplicated and copy-pasted code"

    def __init__(self, on_progress: Optional[Callable[[int, int, str], None]] = None):
        self.on_progress = on_progress

    def analyze(self, commits: List[Commit], config: AnalysisConfig) -> CopyPasteStats:
        """
        Analyze the working tree at config.repo_path.

        The commit history is part of the shared analyzer signature and is
        not used here.
        """
        files = load_corpus(
            root_path=config.repo_path,
            exclude_patterns=config.exclude_paths,
            focus_patterns=config.include_paths,
            extensions=config.extensions,
            max_workers=config.max_workers,
            on_progress=self.on_progress,
        )

        if not files:
            logger.info(f"No source files found under {config.repo_path}")
            return CopyPasteStats.empty()

        return analyze_corpus(files, max_workers=config.max_workers)


def create_copypaste_analyzer(
    on_progress: Optional[Callable[[int, int, str], None]] = None,
) -> CopyPasteAnalyzer:
    return CopyPasteAnalyzer(on_progress=on_progress)
