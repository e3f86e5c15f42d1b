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
Corpus loader - enumerates and reads the source files to analyze.

Also hosts the bounded per-file task runner used by every stage that
works one file at a time.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, TypeVar
from concurrent.futures import ThreadPoolExecutor, as_completed
import fnmatch
import logging
import os
import re

from .models import SourceFile


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Extensions analyzed when none are configured
DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

# Directory names never descended into
DEFAULT_EXCLUDED_DIRS = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    ".nuxt",
    "vendor",
})

TEST_FILE_PATTERN = re.compile(r"\.(test|spec)\.[jt]sx?$")

# Caps peak memory and open file descriptors
DEFAULT_MAX_WORKERS = min(8, os.cpu_count() or 1)


def resolve_workers(max_workers: Optional[int]) -> int:
    """Validate a worker count, falling back to the default."""
    if max_workers is None:
        return DEFAULT_MAX_WORKERS
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")
    return max_workers


def map_per_file(
    func: Callable[[SourceFile], T],
    files: Iterable[SourceFile],
    max_workers: Optional[int] = None,
) -> Dict[str, T]:
    """
    Run func once per file on a bounded thread pool.

    A file whose task raises is logged and left out of the result, so one
    bad file never aborts the whole run.

    Returns:
        Dict mapping file path to func's result
    """
    results: Dict[str, T] = {}

    with ThreadPoolExecutor(max_workers=resolve_workers(max_workers)) as executor:
        futures = {executor.submit(func, source): source.path for source in files}

        for future in as_completed(futures):
            path = futures[future]
            try:
                results[path] = future.result()
            except Exception as e:
                logger.warning(f"Skipping {path}: {e}")

    return results


def load_corpus(
    root_path: Path,
    exclude_patterns: Optional[List[str]] = None,
    focus_patterns: Optional[List[str]] = None,
    extensions: Optional[Iterable[str]] = None,
    max_workers: Optional[int] = None,
    on_progress: Optional[Callable[[int, int, str], None]] = None,
) -> List[SourceFile]:
    """
    Find and read every candidate source file under root_path.

    Args:
        root_path: Repository root
        exclude_patterns: Glob patterns to skip (matched on the relative path)
        focus_patterns: If given, only files matching one of these are kept
        extensions: File extensions to analyze (defaults to JS/TS)
        max_workers: Concurrent file reads
        on_progress: Optional callback(current, total, message)

    Returns:
        SourceFile list sorted by path. Unreadable files are omitted.
    """
    root_path = Path(root_path)
    paths = find_source_files(
        root_path=root_path,
        exclude_patterns=exclude_patterns or [],
        focus_patterns=focus_patterns or [],
        extensions=extensions,
    )

    logger.debug(f"Found {len(paths)} candidate files under {root_path}")

    files: List[SourceFile] = []
    done = 0

    with ThreadPoolExecutor(max_workers=resolve_workers(max_workers)) as executor:
        futures = {
            executor.submit(_read_file, root_path, rel_path): rel_path
            for rel_path in paths
        }

        for future in as_completed(futures):
            source = future.result()
            if source is not None:
                files.append(source)
            done += 1
            if on_progress:
                on_progress(done, len(paths), "files read")

    files.sort(key=lambda f: f.path)
    return files


def find_source_files(
    root_path: Path,
    exclude_patterns: List[str],
    focus_patterns: List[str],
    extensions: Optional[Iterable[str]] = None,
) -> List[str]:
    """Relative POSIX paths of every file that passes the filters, sorted."""
    allowed = {ext.lower() for ext in (extensions or DEFAULT_EXTENSIONS)}
    found = []

    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_on_walk_error):
        # Prune in place so os.walk never enters excluded trees
        dirnames[:] = sorted(d for d in dirnames if d not in DEFAULT_EXCLUDED_DIRS)

        for name in filenames:
            if os.path.splitext(name)[1].lower() not in allowed:
                continue
            if TEST_FILE_PATTERN.search(name):
                continue

            rel_path = Path(dirpath, name).relative_to(root_path).as_posix()

            if any(fnmatch.fnmatch(rel_path, pat) or fnmatch.fnmatch(name, pat)
                   for pat in exclude_patterns):
                continue

            if focus_patterns:
                if not any(fnmatch.fnmatch(rel_path, pat) or fnmatch.fnmatch(name, pat)
                           for pat in focus_patterns):
                    continue

            found.append(rel_path)

    return sorted(found)


def _read_file(root_path: Path, rel_path: str) -> Optional[SourceFile]:
    """Read one file, or None if it cannot be read."""
    try:
        content = (root_path / rel_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipping unreadable file {rel_path}: {e}")
        return None

    return SourceFile(path=rel_path, content=content)
