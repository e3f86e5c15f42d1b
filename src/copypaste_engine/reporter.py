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
Report generator - formats analysis results for output.

Supports text, markdown, and json output formats.
"""

from typing import List
from pathlib import Path
from enum import Enum
import json
from datetime import datetime

from .models import CopyPasteStats


class OutputFormat(Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


# Items shown per section in text and markdown output
MAX_LISTED = 10


def report_stats(
    stats: CopyPasteStats,
    root_path: Path,
    output_format: OutputFormat = OutputFormat.TEXT,
) -> str:
    """
    Generate a duplication report.

    Args:
        stats: Result of an analysis run
        root_path: Root path (for display)
        output_format: Desired output format

    Returns:
        Formatted report string
    """
    if output_format == OutputFormat.TEXT:
        return _format_text(stats, root_path)
    elif output_format == OutputFormat.MARKDOWN:
        return _format_markdown(stats, root_path)
    elif output_format == OutputFormat.JSON:
        return _format_json(stats, root_path)
    else:
        raise ValueError(f"Unknown format: {output_format}")


def _format_text(stats: CopyPasteStats, root_path: Path) -> str:
    """Plain text format with unicode decorations."""
    s = stats.summary
    lines = []

    lines.append(f"🔍 Duplication report for {root_path}")
    lines.append(
        f"   Files: {s.total_files_analyzed} | Lines: {s.total_lines_analyzed} | "
        f"Duplicated: {s.duplicated_lines} ({s.duplication_percentage:.1f}%)"
    )
    lines.append(
        f"   Clone groups: {s.clone_group_count} | Similar file pairs: {s.similar_file_pairs} | "
        f"Potential savings: ~{s.estimated_refactoring_savings} lines"
    )
    lines.append("")

    if stats.recommendations:
        lines.append("━" * 70)
        lines.append("Recommendations")
        lines.append("━" * 70)
        for rec in stats.recommendations:
            lines.append(f"[{rec.priority.value.upper()}] {rec.category}: {rec.description}")
            lines.append(f"   💡 {rec.action} (~{rec.estimated_savings} lines)")
        lines.append("")

    if stats.clone_groups:
        lines.append("━" * 70)
        lines.append("Clone Groups")
        lines.append("━" * 70)
        for group in stats.clone_groups[:MAX_LISTED]:
            lines.append(f"Group #{group.id}: {group.lines} lines x {len(group.instances)} instances")
            for inst in group.instances:
                lines.append(f"   • {inst.file}:{inst.start_line}-{inst.end_line}")
            lines.append(f"     └─ {group.suggestion}")
        lines.append("")

    if stats.similar_files:
        lines.append("━" * 70)
        lines.append("Similar Files")
        lines.append("━" * 70)
        for pair in stats.similar_files[:MAX_LISTED]:
            lines.append(f"{pair.similarity}%  {pair.file1} ↔ {pair.file2}")
            for pattern in pair.common_patterns:
                lines.append(f"     └─ {pattern}")
        lines.append("")

    if stats.pattern_duplicates:
        lines.append("━" * 70)
        lines.append("Repeated Patterns")
        lines.append("━" * 70)
        for dup in stats.pattern_duplicates:
            lines.append(f"{dup.description}")
            for occ in dup.occurrences:
                lines.append(f"   • {occ.file}:{occ.line}")
        lines.append("")

    if not (stats.clone_groups or stats.similar_files or stats.pattern_duplicates):
        lines.append("✨ No duplication found.")

    return "\n".join(lines)


def _format_markdown(stats: CopyPasteStats, root_path: Path) -> str:
    """Markdown format for documentation."""
    s = stats.summary
    lines: List[str] = []

    lines.append("# Duplication Report")
    lines.append("")
    lines.append(f"**Path:** `{root_path}`  ")
    lines.append(f"**Files Analyzed:** {s.total_files_analyzed}  ")
    lines.append(f"**Lines Analyzed:** {s.total_lines_analyzed}  ")
    lines.append(f"**Duplicated Lines:** {s.duplicated_lines} ({s.duplication_percentage:.1f}%)  ")
    lines.append(f"**Estimated Savings:** ~{s.estimated_refactoring_savings} lines")
    lines.append("")

    if stats.recommendations:
        lines.append("## Recommendations")
        lines.append("")
        lines.append("| Priority | Category | Description | Savings |")
        lines.append("|----------|----------|-------------|---------|")
        for rec in stats.recommendations:
            lines.append(
                f"| {rec.priority.value} | {rec.category} | {rec.description} | ~{rec.estimated_savings} |"
            )
        lines.append("")

    if stats.clone_groups:
        lines.append("## Clone Groups")
        lines.append("")
        for group in stats.clone_groups[:MAX_LISTED]:
            lines.append(f"### Group {group.id}: {group.lines} lines × {len(group.instances)}")
            lines.append("")
            lines.append("| File | Lines |")
            lines.append("|------|-------|")
            for inst in group.instances:
                lines.append(f"| `{inst.file}` | {inst.start_line}-{inst.end_line} |")
            lines.append("")
            lines.append("```")
            lines.append(group.sample)
            lines.append("```")
            lines.append("")
            lines.append(f"*{group.suggestion}*")
            lines.append("")

    if stats.similar_files:
        lines.append("## Similar Files")
        lines.append("")
        lines.append("| File 1 | File 2 | Similarity | Evidence |")
        lines.append("|--------|--------|------------|----------|")
        for pair in stats.similar_files[:MAX_LISTED]:
            evidence = "; ".join(pair.common_patterns) or "-"
            lines.append(f"| `{pair.file1}` | `{pair.file2}` | {pair.similarity}% | {evidence} |")
        lines.append("")

    if stats.pattern_duplicates:
        lines.append("## Repeated Patterns")
        lines.append("")
        for dup in stats.pattern_duplicates:
            lines.append(f"- **{dup.pattern}**: {dup.description}")
        lines.append("")

    return "\n".join(lines)


def _format_json(stats: CopyPasteStats, root_path: Path) -> str:
    """JSON format for programmatic use."""
    data = {
        "meta": {
            "path": str(root_path),
            "timestamp": datetime.now().isoformat(),
        },
    }
    data.update(stats.to_dict())

    return json.dumps(data, indent=2)
