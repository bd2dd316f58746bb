from __future__ import annotations

import pytest

from commit_stats.classify import build_classifier_registry
from commit_stats.config import StatsOptions
from commit_stats.stats import (
    CancellationToken,
    ChangeAction,
    CommitStatsCalculator,
    InMemoryObjectStore,
    ObjectResolutionError,
    StatsCancelledError,
    blob_id,
    compute_commit_stats,
)


def _history() -> InMemoryObjectStore:
    store = InMemoryObjectStore()
    store.add_commit("root", {"main.go": b"package main\n"})
    store.add_commit(
        "second",
        {
            "main.go": b"package main\n",
            "util.go": b"package main\n\nvar a = 1\nvar b = 2\n",
        },
        parent="root",
    )
    store.add_commit(
        "third",
        {
            "main.go": b"package main\n\n// entry\nfunc main() {}\n",
            "README.md": b"# Title\n",
            "vendor/dep/dep.go": b"package dep\n",
            "logo.png": b"\x89PNG\r\n\x1a\n\x00\x00",
        },
        parent="second",
    )
    return store


def test_root_commit_has_no_stats() -> None:
    store = _history()
    profile: dict[str, object] = {}

    assert compute_commit_stats(store, "root", profile=profile) is None
    assert profile["has_parent"] is False
    assert profile["changes"] == 0


def test_inserted_file_lines_are_additions() -> None:
    stats = compute_commit_stats(_history(), "second")

    assert stats is not None
    assert stats.code.additions == 3
    assert stats.blank.additions == 1
    assert stats.comment.additions == 0
    assert stats.total.deletions == 0
    assert stats.files == 1
    assert str(stats) == (
        "Code (+3/-0)\n"
        "Comment (+0/-0)\n"
        "Blank (+1/-0)\n"
        "Total (+4/-0)\n"
        "Files (1)\n"
    )


def test_mixed_commit_skips_vendor_and_binary_paths() -> None:
    profile: dict[str, object] = {}
    stats = compute_commit_stats(_history(), "third", profile=profile)

    assert stats is not None
    # main.go modified, README.md inserted, util.go deleted (default: additions).
    assert stats.files == 3
    assert stats.code.additions == 1 + 1 + 3
    assert stats.comment.additions == 1
    assert stats.blank.additions == 1 + 1
    assert stats.total.deletions == 0
    assert profile["changes"] == 5
    assert profile["files"] == 3
    assert profile["vendor_skipped"] == 1
    assert profile["binary_skipped"] == 1
    assert profile["classification_misses"] == 0
    assert profile["has_parent"] is True
    assert isinstance(profile["total_seconds"], float)


def test_vendor_only_change_yields_zero_stats() -> None:
    store = InMemoryObjectStore()
    store.add_commit("a", {"vendor/x.go": b"var a = 1\n"})
    store.add_commit("b", {"vendor/x.go": b"var a = 2\n"}, parent="a")

    stats = compute_commit_stats(store, "b")

    assert stats is not None
    assert stats.files == 0
    assert stats.total.additions == 0
    assert stats.total.deletions == 0


def test_do_by_file_returns_paths_in_diff_order() -> None:
    calculator = CommitStatsCalculator(store=_history())

    file_stats = calculator.do_by_file("third")

    assert file_stats is not None
    assert [item.path for item in file_stats] == ["README.md", "main.go", "util.go"]
    assert [item.action for item in file_stats] == [
        ChangeAction.INSERT,
        ChangeAction.MODIFY,
        ChangeAction.DELETE,
    ]
    assert [item.language for item in file_stats] == ["Markdown", "Go", "Go"]


def test_total_equals_pointwise_sum_of_kinds() -> None:
    stats = compute_commit_stats(_history(), "third")

    assert stats is not None
    assert stats.total.additions == (
        stats.code.additions + stats.comment.additions + stats.blank.additions
    )
    assert stats.total.deletions == (
        stats.code.deletions + stats.comment.deletions + stats.blank.deletions
    )


def test_parallel_workers_match_sequential_result() -> None:
    store = _history()
    registry = build_classifier_registry()
    sequential = CommitStatsCalculator(store=store, registry=registry).do("third")
    parallel = CommitStatsCalculator(
        store=store, registry=registry, options=StatsOptions(max_workers=4)
    ).do("third")

    assert sequential is not None
    assert parallel is not None
    assert parallel.to_dict() == sequential.to_dict()


def test_cancelled_token_stops_computation() -> None:
    token = CancellationToken()
    token.cancel()

    with pytest.raises(StatsCancelledError) as exc_info:
        compute_commit_stats(_history(), "third", token=token)

    assert token.cancelled
    assert "third" in str(exc_info.value)


def test_unreadable_blob_propagates_error() -> None:
    store = _history()
    store.forget_blob(blob_id(b"# Title\n"))

    with pytest.raises(ObjectResolutionError):
        compute_commit_stats(store, "third")


def test_unknown_commit_propagates_error() -> None:
    with pytest.raises(ObjectResolutionError) as exc_info:
        compute_commit_stats(_history(), "missing")

    assert str(exc_info.value) == "resolve_commit failed for missing: commit is unknown"


def test_repeated_calls_are_independent() -> None:
    calculator = CommitStatsCalculator(store=_history())

    first = calculator.do("third")
    second = calculator.do("third")

    assert first is not None
    assert second is not None
    assert first.to_dict() == second.to_dict()


def test_latin1_source_change_is_counted() -> None:
    store = InMemoryObjectStore()
    store.add_commit("a", {"README.md": b"# Title\n"})
    store.add_commit(
        "b",
        {"README.md": b"# Title\n", "main.go": b"package main\n// caf\xe9\nvar a = 1\n"},
        parent="a",
    )

    stats = compute_commit_stats(store, "b")

    assert stats is not None
    assert stats.files == 1
    assert stats.code.additions == 2
    assert stats.comment.additions == 1


def test_explicit_base_compares_non_adjacent_commits() -> None:
    profile: dict[str, object] = {}
    stats = compute_commit_stats(_history(), "third", base="root", profile=profile)

    assert stats is not None
    # util.go exists in neither tree; main.go modified, README.md inserted.
    assert stats.files == 2
    assert stats.code.additions == 2
    assert stats.comment.additions == 1
    assert stats.blank.additions == 1
    assert stats.total.deletions == 0
    assert profile["changes"] == 4
    assert profile["has_parent"] is True


def test_explicit_base_applies_to_root_commit() -> None:
    calculator = CommitStatsCalculator(store=_history())

    file_stats = calculator.do_by_file("root", base="root")
    backwards = calculator.do("root", base="second")

    assert file_stats == []
    assert backwards is not None
    assert backwards.files == 1
    assert backwards.code.additions == 3
    assert backwards.blank.additions == 1


def test_unknown_base_propagates_error() -> None:
    with pytest.raises(ObjectResolutionError):
        compute_commit_stats(_history(), "third", base="missing")
