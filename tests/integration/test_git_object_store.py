from __future__ import annotations

import shutil
from pathlib import Path

import pytest

if shutil.which("git") is None:
    pytest.skip("git executable is not available", allow_module_level=True)

git = pytest.importorskip("git")

from commit_stats.config import StatsOptions  # noqa: E402
from commit_stats.repository import GitObjectStore  # noqa: E402
from commit_stats.stats import (  # noqa: E402
    ChangeAction,
    CommitStatsCalculator,
    ObjectResolutionError,
    compute_commit_stats,
)

_AUTHOR = git.Actor("Stats Tester", "stats@example.com")


def _commit(repo: git.Repo, message: str) -> str:
    return repo.index.commit(message, author=_AUTHOR, committer=_AUTHOR).hexsha


def _build_history(root: Path) -> tuple[git.Repo, list[str]]:
    repo = git.Repo.init(root)
    shas: list[str] = []

    (root / "main.go").write_text("package main\n", encoding="utf-8")
    repo.index.add(["main.go"])
    shas.append(_commit(repo, "root"))

    (root / "main.go").write_text("package main\n\n// entry\nfunc main() {}\n", encoding="utf-8")
    (root / "util.go").write_text("package main\n\nvar a = 1\nvar b = 2\n", encoding="utf-8")
    (root / "vendor").mkdir()
    (root / "vendor" / "dep.go").write_text("package dep\n", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00")
    repo.index.add(["main.go", "util.go", "vendor/dep.go", "logo.png"])
    shas.append(_commit(repo, "add files"))

    (root / "helpers.go").write_text(
        (root / "util.go").read_text(encoding="utf-8"), encoding="utf-8"
    )
    repo.index.remove(["util.go"], working_tree=True)
    repo.index.add(["helpers.go"])
    shas.append(_commit(repo, "rename util"))
    return repo, shas


def test_root_commit_resolves_without_parent(tmp_path: Path) -> None:
    repo, shas = _build_history(tmp_path)
    with GitObjectStore(repo) as store:
        assert store.resolve_parent(shas[0]) is None
        assert store.resolve_commit("HEAD") == shas[2]
        assert compute_commit_stats(store, shas[0]) is None


def test_commit_stats_from_real_repository(tmp_path: Path) -> None:
    repo, shas = _build_history(tmp_path)
    profile: dict[str, object] = {}
    with GitObjectStore(repo) as store:
        stats = compute_commit_stats(store, shas[1], profile=profile)

    assert stats is not None
    assert stats.files == 2
    assert stats.code.additions == 1 + 3
    assert stats.comment.additions == 1
    assert stats.blank.additions == 1 + 1
    assert stats.total.deletions == 0
    assert profile["vendor_skipped"] == 1
    assert profile["binary_skipped"] == 1


def test_rename_counts_both_paths(tmp_path: Path) -> None:
    repo, shas = _build_history(tmp_path)
    with GitObjectStore(repo) as store:
        calculator = CommitStatsCalculator(
            store=store, options=StatsOptions(deleted_lines_as_deletions=True)
        )
        file_stats = calculator.do_by_file(shas[2])

    assert file_stats is not None
    by_path = {item.path: item for item in file_stats}
    assert by_path["util.go"].action is ChangeAction.DELETE
    assert by_path["helpers.go"].action is ChangeAction.INSERT
    assert by_path["util.go"].stats.total.deletions == 4
    assert by_path["helpers.go"].stats.total.additions == 4


def test_parallel_workers_share_repository_safely(tmp_path: Path) -> None:
    repo, shas = _build_history(tmp_path)
    with GitObjectStore(repo) as store:
        sequential = CommitStatsCalculator(store=store).do(shas[1])
        parallel = CommitStatsCalculator(store=store, options=StatsOptions(max_workers=4)).do(
            shas[1]
        )

    assert sequential is not None
    assert parallel is not None
    assert parallel.to_dict() == sequential.to_dict()


def test_unknown_revision_and_blob_raise_object_resolution_error(tmp_path: Path) -> None:
    repo, _ = _build_history(tmp_path)
    with GitObjectStore(repo) as store:
        with pytest.raises(ObjectResolutionError) as exc_info:
            store.resolve_commit("does-not-exist")
        assert exc_info.value.operation == "resolve_commit"

        with pytest.raises(ObjectResolutionError) as blob_info:
            store.read_blob("0123456789abcdef0123456789abcdef01234567")
        assert blob_info.value.operation == "read_blob"


def test_open_rejects_non_repository(tmp_path: Path) -> None:
    with pytest.raises(ObjectResolutionError) as exc_info:
        GitObjectStore.open(tmp_path / "missing")

    assert exc_info.value.operation == "open_repository"
