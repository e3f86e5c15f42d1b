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
Copypaste Engine - Find duplicated and near-duplicated code.

Combines content-addressed block matching, whole-file line-set similarity
and a catalog of copy-paste idioms into one prioritized refactoring report.
"""

__version__ = "0.1.0"

from .analyzer import CopyPasteAnalyzer, analyze_corpus, create_copypaste_analyzer
from .corpus import load_corpus
from .fingerprint import find_duplicate_blocks
from .similarity import find_similar_files
from .clones import group_clones
from .patterns import find_pattern_duplicates
from .reporter import report_stats, OutputFormat
from .config import AnalysisConfig, load_config, find_config_file

__all__ = [
    "__version__",
    "CopyPasteAnalyzer",
    "analyze_corpus",
    "create_copypaste_analyzer",
    "load_corpus",
    "find_duplicate_blocks",
    "find_similar_files",
    "group_clones",
    "find_pattern_duplicates",
    "report_stats",
    "OutputFormat",
    "AnalysisConfig",
    "load_config",
    "find_config_file",
]
