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
Analysis configuration and config file support.

Looks for .cperc or .cpe.toml in the analyzed directory or any parent.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore


CONFIG_NAMES = (".cperc", ".cpe.toml")
CONFIG_SECTION = "cpe"


@dataclass
class AnalysisConfig:
    """What every analyzer receives from the host alongside the commit history."""

    repo_path: Path
    exclude_paths: List[str] = field(default_factory=list)
    include_paths: List[str] = field(default_factory=list)
    extensions: Optional[List[str]] = None     # None means the default JS/TS set
    max_workers: Optional[int] = None          # None means the default pool size

    def __post_init__(self):
        self.repo_path = Path(self.repo_path)
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_file(cls, repo_path: Path) -> "AnalysisConfig":
        """Build a config from the nearest .cperc / .cpe.toml, or defaults."""
        values = load_config(Path(repo_path))
        max_workers = values.get("max_workers")
        return cls(
            repo_path=repo_path,
            exclude_paths=_str_list(values.get("exclude")),
            include_paths=_str_list(values.get("focus")),
            extensions=_str_list(values.get("extensions")) or None,
            max_workers=max_workers if isinstance(max_workers, int) and max_workers >= 1 else None,
        )


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for .cperc or .cpe.toml in start_path and parent directories.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_path.resolve()

    while True:
        for name in CONFIG_NAMES:
            config_path = current / name
            if config_path.is_file():
                return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load the [cpe] section of the nearest config file.

    Returns an empty dict when no file is found or it cannot be parsed.

    Example config file (.cperc or .cpe.toml):
        [cpe]
        exclude = ["legacy/**", "*.generated.ts"]
        focus = ["src/**"]
        extensions = [".ts", ".tsx"]
        max_workers = 4
        verbose = true
    """
    config_path = find_config_file(path)

    if config_path is None:
        return {}

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        section = data.get(CONFIG_SECTION, {})
        return section if isinstance(section, dict) else {}

    except (OSError, tomllib.TOMLDecodeError):
        # File unreadable or invalid TOML - return empty config
        return {}


def _str_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    return []
