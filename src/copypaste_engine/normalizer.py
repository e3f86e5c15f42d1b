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
Text normalization shared by the block fingerprinter and the file scorer.

Normalization strips comments, whitespace and literal values so that two
blocks differing only by a comment, a string or a number compare equal.
Identifiers are left alone on purpose.
"""

import re
from typing import Iterator, Pattern, Match


_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_WHITESPACE = re.compile(r"\s+")
_STRING_LITERAL = re.compile(r"['\"`][^'\"`]*['\"`]")
_NUMBER_LITERAL = re.compile(r"\d+")

STRING_PLACEHOLDER = '""'
NUMBER_PLACEHOLDER = "0"

COMMENT_PREFIXES = ("//", "*", "/*")


def normalize_code(code: str) -> str:
    """
    Canonicalize a block of code for equality and hashing.

    Applied in order: drop // and /* */ comments, collapse whitespace runs,
    replace quoted strings, replace digit runs, trim.
    """
    code = _LINE_COMMENT.sub("", code)
    code = _BLOCK_COMMENT.sub("", code)
    code = _WHITESPACE.sub(" ", code)
    code = _STRING_LITERAL.sub(STRING_PLACEHOLDER, code)
    code = _NUMBER_LITERAL.sub(NUMBER_PLACEHOLDER, code)
    return code.strip()


def normalize_line(line: str) -> str:
    """Trim a single line and collapse its inner whitespace."""
    return _WHITESPACE.sub(" ", line.strip())


def is_meaningful_line(line: str) -> bool:
    """A line that is neither blank nor comment-only."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIXES)


def iter_matches(pattern: Pattern[str], text: str) -> Iterator[Match[str]]:
    """
    Yield every non-overlapping match of pattern in text.

    The scan position is a local variable handed to each search call, so
    nothing carries over between scans of different texts.
    """
    pos = 0
    end = len(text)
    while pos <= end:
        match = pattern.search(text, pos)
        if match is None:
            return
        yield match
        # Step past empty matches so the scan always moves forward
        pos = match.end() if match.end() > match.start() else match.end() + 1
