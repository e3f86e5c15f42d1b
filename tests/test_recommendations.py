"""Tests for the recommendation rules."""

from copypaste_engine.models import (
    CloneGroup,
    CloneInstance,
    CloneType,
    PatternDuplicate,
    PatternOccurrence,
    Priority,
    SimilarFilePair,
)
from copypaste_engine.recommendations import generate_recommendations


def _pair(file1, file2, similarity, shared_lines):
    return SimilarFilePair(file1, file2, similarity, shared_lines, shared_lines * 2, [], "")


def _group(gid, lines, files):
    instances = [CloneInstance(f, 1, lines, "") for f in files]
    return CloneGroup(gid, instances, 100, lines, CloneType.EXACT, "", "")


def _patterns(name, count):
    occurrences = [PatternOccurrence(f"{name}{i}.js", 1, "") for i in range(min(count, 10))]
    return PatternDuplicate(name, f"{count} occurrences of {name}", occurrences, "Extract it", count)


def _categories(recs):
    return [r.category for r in recs]


class TestRules:

    def test_nothing_triggers(self):
        assert generate_recommendations([], [], []) == []

    def test_similar_files(self):
        pairs = [_pair("a.js", "b.js", 92, 45), _pair("a.js", "c.js", 81, 31), _pair("d.js", "e.js", 75, 30)]
        [rec] = generate_recommendations([], pairs, [])

        assert rec.priority is Priority.HIGH
        assert rec.category == "Similar Files"
        assert rec.files == ["a.js", "b.js", "c.js"]
        assert rec.estimated_savings == 23 + 16

    def test_similar_files_below_eighty(self):
        assert generate_recommendations([], [_pair("a.js", "b.js", 75, 30)], []) == []

    def test_large_duplicate_blocks(self):
        groups = [
            _group(1, 12, ["a.js", "b.js", "c.js"]),
            _group(2, 9, ["a.js", "b.js", "c.js"]),
            _group(3, 20, ["d.js", "e.js"]),
        ]
        [rec] = generate_recommendations(groups, [], [])

        assert rec.category == "Duplicate Code Blocks"
        assert rec.priority is Priority.HIGH
        assert rec.files == ["a.js", "b.js", "c.js"]
        assert rec.estimated_savings == 12 * 2

    def test_code_patterns_uses_most_frequent(self):
        [rec] = generate_recommendations([], [], [_patterns("handlers", 4), _patterns("catches", 14)])

        assert rec.priority is Priority.MEDIUM
        assert rec.category == "Code Patterns"
        assert rec.description == "14 occurrences of catches"
        assert rec.estimated_savings == 14 * 5
        assert len(rec.files) == 10

    def test_minor_duplicates_need_more_than_five(self):
        five = [_group(i, 6, [f"a{i}.js", f"b{i}.js"]) for i in range(5)]
        assert generate_recommendations(five, [], []) == []

        six = five + [_group(6, 7, ["x.js", "y.js"])]
        [rec] = generate_recommendations(six, [], [])
        assert rec.priority is Priority.LOW
        assert rec.category == "Minor Duplicates"
        assert rec.estimated_savings == 5 * 6 + 7

    def test_rule_order(self):
        groups = [_group(1, 10, ["a.js", "b.js", "c.js"])] + [
            _group(i, 5, [f"m{i}.js", f"n{i}.js"]) for i in range(2, 9)
        ]
        recs = generate_recommendations(groups, [_pair("a.js", "b.js", 85, 40)], [_patterns("p", 3)])

        assert _categories(recs) == ["Similar Files", "Duplicate Code Blocks", "Code Patterns", "Minor Duplicates"]
        assert [r.priority for r in recs] == [Priority.HIGH, Priority.HIGH, Priority.MEDIUM, Priority.LOW]
