"""Tests for block fingerprinting, occurrence dedup and duplicate block finding."""

from copypaste_engine.fingerprint import (
    FINGERPRINT_WIDTH,
    MIN_BLOCK_LINES,
    deduplicate_occurrences,
    duplicate_suggestion,
    find_duplicate_blocks,
    fingerprint_file,
)
from copypaste_engine.models import Occurrence, SourceFile

from conftest import source, unique_lines


def _assert_no_overlap(block):
    by_file = {}
    for occ in block.occurrences:
        by_file.setdefault(occ.file, []).append(occ)
    for occs in by_file.values():
        occs.sort(key=lambda o: o.start_line)
        for prev, cur in zip(occs, occs[1:]):
            assert cur.start_line > prev.end_line


class TestFingerprintFile:

    def test_one_window_per_start_line(self):
        windows = fingerprint_file(source("a.js", unique_lines("a", 8)))
        assert len(windows) == 8 - MIN_BLOCK_LINES + 1
        assert windows[0].start_line == 1
        assert windows[0].end_line == MIN_BLOCK_LINES
        assert windows[-1].end_line == 8

    def test_fingerprint_width(self):
        windows = fingerprint_file(source("a.js", unique_lines("a", 5)))
        assert len(windows[0].fingerprint) == FINGERPRINT_WIDTH

    def test_file_shorter_than_window(self):
        assert fingerprint_file(source("a.js", unique_lines("a", 4))) == []

    def test_blank_padding_window_discarded(self):
        assert fingerprint_file(SourceFile(path="a.js", content="\n\n\n\n}")) == []

    def test_window_with_one_blank_line_kept(self):
        lines = unique_lines("a", 2) + [""] + unique_lines("b", 2)
        assert len(fingerprint_file(source("a.js", lines))) == 1

    def test_comment_heavy_window_discarded(self):
        lines = ["// one", "// two", "x = y;", "z = w;", "/* three */"]
        assert fingerprint_file(source("a.js", lines)) == []

    def test_literals_and_comments_do_not_change_fingerprint(self):
        first = [
            "const limit = 10; // default",
            "const label = 'first';",
            "if (count > limit) {",
            "  warn(label, 404);",
            "}",
        ]
        second = [
            "const limit = 99;",
            "const label = \"second\"; /* renamed */",
            "if (count > limit) {",
            "  warn(label, 500);",
            "}",
        ]
        [w1] = fingerprint_file(source("a.js", first))
        [w2] = fingerprint_file(source("b.js", second))
        assert w1.fingerprint == w2.fingerprint

    def test_identifier_change_changes_fingerprint(self):
        first = ["a = b;", "c = d;", "e = f;", "g = h;", "i = j;"]
        second = ["a = b;", "c = d;", "e = f;", "g = h;", "i = k;"]
        [w1] = fingerprint_file(source("a.js", first))
        [w2] = fingerprint_file(source("b.js", second))
        assert w1.fingerprint != w2.fingerprint


class TestDeduplicateOccurrences:

    def test_drops_overlapping_same_file(self):
        occs = [
            Occurrence("a.js", 10, 14),
            Occurrence("a.js", 11, 15),
            Occurrence("a.js", 14, 18),
            Occurrence("a.js", 15, 19),
        ]
        kept = deduplicate_occurrences(occs)
        assert [(o.start_line, o.end_line) for o in kept] == [(10, 14), (15, 19)]

    def test_keeps_same_range_in_other_files(self):
        occs = [Occurrence("a.js", 1, 5), Occurrence("b.js", 1, 5), Occurrence("b.js", 3, 7)]
        kept = deduplicate_occurrences(occs)
        assert [(o.file, o.start_line) for o in kept] == [("a.js", 1), ("b.js", 1)]

    def test_greedy_in_discovery_order(self):
        occs = [Occurrence("a.js", 5, 9), Occurrence("a.js", 1, 5)]
        kept = deduplicate_occurrences(occs)
        assert kept == [Occurrence("a.js", 5, 9)]


class TestDuplicateSuggestion:

    def test_single_file(self):
        occs = [Occurrence("a.js", 1, 5), Occurrence("a.js", 10, 14)]
        assert duplicate_suggestion(occs) == "Extract to a local helper function"

    def test_few_files(self):
        occs = [Occurrence(f, 1, 5) for f in ("a.js", "b.js", "c.js")]
        assert duplicate_suggestion(occs) == "Extract to a shared utility function"

    def test_many_files(self):
        occs = [Occurrence(f, 1, 5) for f in ("a.js", "b.js", "c.js", "d.js")]
        assert duplicate_suggestion(occs) == "Create a reusable component or module"


class TestFindDuplicateBlocks:

    def test_no_duplicates(self):
        files = [source("a.js", unique_lines("a", 12)), source("b.js", unique_lines("b", 12))]
        assert find_duplicate_blocks(files) == []

    def test_repeated_block_in_one_file(self, six_line_block):
        lines = (
            unique_lines("head", 10)
            + six_line_block
            + unique_lines("middle", 14)
            + six_line_block
            + unique_lines("tail", 5)
        )
        blocks = find_duplicate_blocks([source("a.js", lines)])

        assert len(blocks) == 1
        block = blocks[0]
        assert block.lines == 6
        assert [(o.start_line, o.end_line) for o in block.occurrences] == [(11, 16), (31, 36)]
        assert block.suggestion == "Extract to a local helper function"
        assert block.content == "\n".join(six_line_block)
        _assert_no_overlap(block)

    def test_adjacent_windows_merge_across_files(self, function_body):
        files = [
            SourceFile("a.js", "// billing helpers\n" + "\n".join(function_body) + "\n"),
            SourceFile("b.js", "/* copied from billing */\n" + "\n".join(function_body) + "\n"),
        ]
        blocks = find_duplicate_blocks(files)

        assert len(blocks) == 1
        assert blocks[0].lines >= MIN_BLOCK_LINES
        assert blocks[0].files == ["a.js", "b.js"]
        assert blocks[0].suggestion == "Extract to a shared utility function"

    def test_self_repeating_text_stays_non_overlapping(self):
        blocks = find_duplicate_blocks([source("a.js", ["total += step;"] * 30)])

        assert len(blocks) == 1
        assert len(blocks[0].occurrences) == 6
        _assert_no_overlap(blocks[0])

    def test_sorted_by_occurrence_count(self, six_line_block, function_body):
        files = [
            source("a.js", unique_lines("a", 3) + function_body + unique_lines("aa", 3) + six_line_block),
            source("b.js", unique_lines("b", 3) + function_body + unique_lines("bb", 3) + six_line_block),
            source("c.js", unique_lines("c", 3) + six_line_block),
        ]
        blocks = find_duplicate_blocks(files)

        counts = [len(b.occurrences) for b in blocks]
        assert counts == sorted(counts, reverse=True)
        assert counts[0] == 3

    def test_equal_counts_ordered_by_fingerprint(self):
        files = [
            source(f"{name}.js", unique_lines("alpha", 5) + unique_lines(name, 3) + unique_lines("beta", 5))
            for name in ("a", "b")
        ]
        blocks = find_duplicate_blocks(files)

        assert len(blocks) == 2
        assert all(len(b.occurrences) == 2 for b in blocks)
        assert [b.fingerprint for b in blocks] == sorted(b.fingerprint for b in blocks)

    def test_single_worker_matches_pool(self, function_body):
        files = [
            source(f"{name}.js", unique_lines(name, 4) + function_body)
            for name in ("a", "b", "c")
        ]
        assert find_duplicate_blocks(files, max_workers=1) == find_duplicate_blocks(files, max_workers=4)
