from __future__ import annotations

from types import SimpleNamespace

import pytest

pytest.importorskip("git")

from commit_stats.repository import change_records_from_diff  # noqa: E402
from commit_stats.stats import ChangeAction, ChangeRecord  # noqa: E402

_FILE_MODE = 0o100644
_GITLINK_MODE = 0o160000


def _blob(path: str, sha: str) -> SimpleNamespace:
    return SimpleNamespace(path=path, hexsha=sha)


def _diff(
    a: tuple[str, str] | None = None,
    b: tuple[str, str] | None = None,
    a_mode: int = _FILE_MODE,
    b_mode: int = _FILE_MODE,
    copied: bool = False,
) -> SimpleNamespace:
    return SimpleNamespace(
        a_blob=_blob(*a) if a else None,
        b_blob=_blob(*b) if b else None,
        a_path=a[0] if a else None,
        b_path=b[0] if b else None,
        a_mode=a_mode if a else None,
        b_mode=b_mode if b else None,
        copied_file=copied,
    )


def test_added_file_becomes_insert() -> None:
    records = change_records_from_diff(_diff(b=("src/new.go", "b" * 40)))

    assert records == [ChangeRecord(path="src/new.go", action=ChangeAction.INSERT, new_ref="b" * 40)]


def test_deleted_file_becomes_delete() -> None:
    records = change_records_from_diff(_diff(a=("src/old.go", "a" * 40)))

    assert records == [ChangeRecord(path="src/old.go", action=ChangeAction.DELETE, old_ref="a" * 40)]


def test_same_path_becomes_modify() -> None:
    records = change_records_from_diff(_diff(a=("main.go", "a" * 40), b=("main.go", "b" * 40)))

    assert records == [
        ChangeRecord(path="main.go", action=ChangeAction.MODIFY, old_ref="a" * 40, new_ref="b" * 40)
    ]


def test_rename_is_split_into_delete_and_insert() -> None:
    records = change_records_from_diff(_diff(a=("old.go", "a" * 40), b=("new.go", "a" * 40)))

    assert [(record.path, record.action) for record in records] == [
        ("old.go", ChangeAction.DELETE),
        ("new.go", ChangeAction.INSERT),
    ]


def test_copy_keeps_only_the_new_path() -> None:
    records = change_records_from_diff(
        _diff(a=("src.go", "a" * 40), b=("copy.go", "a" * 40), copied=True)
    )

    assert records == [ChangeRecord(path="copy.go", action=ChangeAction.INSERT, new_ref="a" * 40)]


def test_submodule_entries_are_dropped() -> None:
    records = change_records_from_diff(
        _diff(a=("lib", "a" * 40), b=("lib", "b" * 40), a_mode=_GITLINK_MODE, b_mode=_GITLINK_MODE)
    )

    assert records == []


def test_file_replaced_by_submodule_keeps_file_side() -> None:
    records = change_records_from_diff(
        _diff(a=("lib", "a" * 40), b=("lib", "b" * 40), b_mode=_GITLINK_MODE)
    )

    assert records == [ChangeRecord(path="lib", action=ChangeAction.DELETE, old_ref="a" * 40)]
