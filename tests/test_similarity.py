"""Tests for whole-file similarity scoring."""

import pytest

from copypaste_engine.similarity import (
    MIN_SIMILARITY,
    calculate_similarity,
    dice_score,
    find_common_patterns,
    find_similar_files,
    round_half_up,
    similar_file_suggestion,
)

from conftest import source, unique_lines


class TestScoring:

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(74.49) == 74
        assert round_half_up(0.0) == 0

    def test_dice_score(self):
        assert dice_score(30, 40, 40) == 75
        assert dice_score(0, 0, 10) == 0

    def test_identical(self):
        lines = unique_lines("a", 25)
        assert calculate_similarity(lines, lines) == 100

    def test_disjoint(self):
        assert calculate_similarity(unique_lines("a", 25), unique_lines("b", 25)) == 0

    def test_short_lines_ignored(self):
        assert calculate_similarity(["}", "{", "x++;"], ["}", "{", "x++;"]) == 0

    def test_whitespace_insensitive(self):
        first = ["const   total =  sum(values);"]
        second = ["    const total = sum(values);"]
        assert calculate_similarity(first, second) == 100

    def test_thirty_of_forty_shared(self):
        shared = unique_lines("shared", 30)
        first = shared + unique_lines("left", 10)
        second = shared + unique_lines("right", 10)
        assert calculate_similarity(first, second) == 75


class TestSuggestion:

    @pytest.mark.parametrize("score, expected", [
        (95, "These files are nearly identical - consider merging or creating a shared base"),
        (90, "These files are nearly identical - consider merging or creating a shared base"),
        (85, "High similarity - extract common logic to a shared module"),
        (75, "Consider creating a base class or shared utilities"),
    ])
    def test_tiers(self, score, expected):
        assert similar_file_suggestion(score) == expected


class TestCommonPatterns:

    def test_shared_functions_limited_to_three(self):
        content = "\n".join([
            "function loadUser(id) {}",
            "function saveUser(user) {}",
            "const removeUser = async (id) => {}",
            "const listUsers = (filter) => {}",
        ])
        patterns = find_common_patterns(content, content)
        assert patterns == ["Similar functions: loadUser, saveUser, removeUser"]

    def test_shared_imports_need_three(self):
        imports = [
            "import a from 'alpha';",
            "import { b } from 'beta';",
            "import * as c from 'gamma';",
        ]
        assert find_common_patterns("\n".join(imports), "\n".join(imports)) == ["Common imports: 3"]
        assert find_common_patterns("\n".join(imports[:2]), "\n".join(imports[:2])) == []

    def test_nothing_shared(self):
        assert find_common_patterns("function a() {}", "function b() {}") == []


class TestFindSimilarFiles:

    def test_pair_between_thresholds(self):
        shared = unique_lines("shared", 30)
        files = [
            source("a.js", shared + unique_lines("left", 10)),
            source("b.js", shared + unique_lines("right", 10)),
        ]
        [pair] = find_similar_files(files)

        assert (pair.file1, pair.file2) == ("a.js", "b.js")
        assert pair.similarity == 75
        assert pair.total_lines == 80
        assert pair.shared_lines == 30
        assert pair.suggestion == "Consider creating a base class or shared utilities"

    def test_short_files_never_paired(self):
        lines = unique_lines("same", 19)
        assert find_similar_files([source("a.js", lines), source("b.js", lines)]) == []

    def test_below_threshold_dropped(self):
        shared = unique_lines("shared", 10)
        files = [
            source("a.js", shared + unique_lines("left", 20)),
            source("b.js", shared + unique_lines("right", 20)),
        ]
        assert find_similar_files(files) == []

    def test_sorted_by_similarity(self):
        base = unique_lines("base", 40)
        files = [
            source("a.js", base),
            source("b.js", base[:36] + unique_lines("bee", 4)),
            source("c.js", base),
            source("d.js", unique_lines("dee", 40)),
        ]
        pairs = find_similar_files(files)
        scores = [p.similarity for p in pairs]

        assert scores == sorted(scores, reverse=True)
        assert (pairs[0].file1, pairs[0].file2, pairs[0].similarity) == ("a.js", "c.js", 100)
        assert all(MIN_SIMILARITY <= s <= 100 for s in scores)
        assert all("d.js" not in (p.file1, p.file2) for p in pairs)

    def test_single_file(self):
        assert find_similar_files([source("a.js", unique_lines("a", 30))]) == []
