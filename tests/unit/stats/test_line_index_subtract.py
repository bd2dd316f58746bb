from __future__ import annotations

from commit_stats.classify import LineKind, build_classifier_registry
from commit_stats.stats import LineIndex

BEFORE = "package main\n\n// old note\nvar a = 1\nvar b = 2\n"
AFTER = "package main\n\nvar a = 1\nvar c = 3\nvar d = 4\n\n"


def _build(text: str) -> LineIndex:
    return LineIndex.build(text, build_classifier_registry().select("main.go"))


def test_subtract_reports_reordered_identical_lines_as_unchanged() -> None:
    after = _build("var b = 2\nvar a = 1\n")
    after.subtract(_build("var a = 1\nvar b = 2\n"))
    stats = after.stats()

    assert stats.total.additions == 0
    assert stats.total.deletions == 0


def test_subtract_frequency_diff_counts_extra_and_missing_occurrences() -> None:
    after = _build("a\na\na\n")
    after.subtract(_build("a\nb\na\n"))
    stats = after.stats()

    assert after["a"].count == 1
    assert after["b"].count == -1
    assert stats.code.additions == 1
    assert stats.code.deletions == 1


def test_subtract_inserts_missing_lines_with_negated_count_and_other_kind() -> None:
    after = LineIndex()
    before = LineIndex()
    before.add("// gone", LineKind.COMMENT)
    before.add("// gone", LineKind.COMMENT)

    after.subtract(before)

    assert after["// gone"].count == -2
    assert after["// gone"].kind is LineKind.COMMENT
    assert before["// gone"].count == 2


def test_subtract_is_anti_symmetric_on_sign() -> None:
    forward = _build(AFTER)
    forward.subtract(_build(BEFORE))
    backward = _build(BEFORE)
    backward.subtract(_build(AFTER))

    forward_stats = forward.stats()
    backward_stats = backward.stats()

    for kind in LineKind:
        assert forward_stats.for_kind(kind).additions == backward_stats.for_kind(kind).deletions
        assert forward_stats.for_kind(kind).deletions == backward_stats.for_kind(kind).additions


def test_negated_flips_every_count_without_touching_source() -> None:
    index = _build("var a = 1\n\n")
    flipped = index.negated()

    assert flipped["var a = 1"].count == -1
    assert index["var a = 1"].count == 1
    assert flipped.stats().code.deletions == 1
    assert flipped.stats().blank.deletions == 1
