"""Shared fixtures and corpus builders for copypaste-engine tests."""

import string

import pytest

from copypaste_engine.models import SourceFile


def _word(i: int) -> str:
    """Letters-only label for i (digits would be normalized away)."""
    letters = string.ascii_lowercase
    word = ""
    i += 1
    while i:
        i, rem = divmod(i - 1, 26)
        word = letters[rem] + word
    return word


def unique_lines(prefix: str, count: int):
    """count distinct, meaningful lines that never collide across prefixes."""
    return [
        f"const {prefix}{_word(i).capitalize()} = make{prefix.capitalize()}{_word(i).capitalize()}();"
        for i in range(count)
    ]


def source(path: str, lines) -> SourceFile:
    return SourceFile(path=path, content="\n".join(lines))


@pytest.fixture
def function_body():
    """An 8-line function with no internal repetition."""
    return [
        "function computeTotal(items, taxRate) {",
        "  let subtotal = 0;",
        "  for (const item of items) {",
        "    subtotal += item.price * item.quantity;",
        "  }",
        "  const tax = subtotal * taxRate;",
        "  return subtotal + tax;",
        "}",
    ]


@pytest.fixture
def six_line_block():
    return [
        "if (!user) {",
        "  throw new Error('missing user');",
        "}",
        "const profile = loadProfile(user.id);",
        "profile.touch();",
        "saveProfile(profile);",
    ]


@pytest.fixture
def catch_and_log():
    """Build a short file whose only idiom is a catch-and-log block."""

    def _build(name: str) -> str:
        return "\n".join([
            f"async function load{name}() {{",
            "  try {",
            f"    return await fetch{name}();",
            f"  }} catch (err{name}) {{",
            f"    console.error(err{name});",
            "  }",
            "}",
            "",
        ])

    return _build
