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
CLI entry point for copypaste-engine.

Usage:
    cpe <path> [options]
    cpe --help
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .analyzer import create_copypaste_analyzer
from .config import AnalysisConfig, load_config
from .reporter import report_stats, OutputFormat


# Extension to output format mapping for -o FILE.EXT
EXTENSION_FORMAT_MAP = {
    '.md': 'markdown',
    '.json': 'json',
    '.txt': 'text',
}


def merge_config_with_cli(
    config: dict,
    cli_value,
    config_key: str,
    default_value,
):
    """
    Merge config file value with CLI value.

    If CLI value differs from default, use CLI (user explicitly set it).
    Otherwise, use config value if present, else use default.
    """
    if cli_value != default_value:
        return cli_value

    return config.get(config_key, default_value)


def print_progress(current: int, total: int, message: str, width: int = 30):
    """Print a progress bar with message."""
    filled = int(width * current / max(total, 1))
    bar = "=" * filled + ">" + " " * (width - filled - 1) if filled < width else "=" * width
    # Use \r to overwrite line, \033[K to clear to end of line
    click.echo(f"\r   [{bar}] {current}/{total} {message}\033[K", nl=False, err=True)
    if current >= total:
        click.echo(err=True)


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.option(
    "-o", "--output",
    type=str,
    default=None,
    help="Output file path (e.g., report.md, report.json, report.txt)"
)
@click.option(
    "-e", "--exclude",
    multiple=True,
    help="Glob patterns to exclude (repeatable)"
)
@click.option(
    "-f", "--focus",
    multiple=True,
    help="Only analyze matching paths (repeatable)"
)
@click.option(
    "--ext",
    multiple=True,
    help="File extensions to analyze, e.g. --ext .ts (repeatable, default: JS/TS)"
)
@click.option(
    "-w", "--workers",
    type=click.IntRange(min=0),
    default=0,
    help="Concurrent file workers (0 = automatic)"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show progress and debug logging"
)
@click.version_option(version=__version__)
def main(
    path: str,
    output: Optional[str],
    exclude: tuple,
    focus: tuple,
    ext: tuple,
    workers: int,
    verbose: bool,
):
    """
    Find duplicated and copy-pasted code.

    PATH is the root directory to analyze.

    Examples:

      # Print a text report
      cpe ./src

      # Write a markdown report, skipping generated code
      cpe ./src -e "*.generated.ts" -o duplication.md
    """
    root_path = Path(path).resolve()

    # Config file values, validated, with explicit CLI args on top
    analysis_config = AnalysisConfig.from_file(root_path)
    if exclude:
        analysis_config.exclude_paths = list(exclude)
    if focus:
        analysis_config.include_paths = list(focus)
    if ext:
        analysis_config.extensions = list(ext)
    if workers:
        analysis_config.max_workers = workers

    verbose = merge_config_with_cli(load_config(root_path), verbose, "verbose", False) is True

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_format = OutputFormat.TEXT
    if output:
        suffix = Path(output).suffix.lower()
        if suffix not in EXTENSION_FORMAT_MAP:
            valid_exts = ', '.join(EXTENSION_FORMAT_MAP.keys())
            click.echo(f"❌ Invalid output extension '{suffix}'. Valid: {valid_exts}", err=True)
            sys.exit(1)
        output_format = OutputFormat(EXTENSION_FORMAT_MAP[suffix])

    if verbose:
        click.echo(f"🔍 Analyzing: {root_path}", err=True)

    analyzer = create_copypaste_analyzer(on_progress=print_progress if verbose else None)
    stats = analyzer.analyze([], analysis_config)

    report = report_stats(stats, root_path, output_format)

    if output:
        output_path = Path(output)
        output_path.write_text(report, encoding="utf-8")
        click.echo(f"✅ Report written to: {output_path}")
    else:
        click.echo(report)


# Entry point alias for pyproject.toml
cli = main


if __name__ == "__main__":
    main()
