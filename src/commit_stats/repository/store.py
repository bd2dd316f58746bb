"""GitPython-backed object store and tree differ."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

from git import Commit, Diff, Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from commit_stats.stats.models import ChangeAction, ChangeRecord
from commit_stats.stats.store import ObjectResolutionError

_GITLINK_MODE = 0o160000


class GitObjectStore:
    """Object store over a local git repository.

    Blob reads share one persistent ``git cat-file`` process, so they are
    serialized behind a lock when the calculator fans out over threads.
    """

    def __init__(self, repo: Repo) -> None:
        self._repo = repo
        self._read_lock = threading.Lock()

    @classmethod
    def open(cls, path: Path) -> GitObjectStore:
        """Open the repository rooted at path."""
        try:
            repo = Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as error:
            raise ObjectResolutionError(
                operation="open_repository", ref=str(path), detail=str(error)
            ) from error
        return cls(repo)

    def resolve_commit(self, rev: str) -> str:
        """Resolve a revision expression to a full commit sha."""
        return self._commit(rev).hexsha

    def resolve_parent(self, commit: str) -> str | None:
        """Return the first parent's sha, or None for a root commit."""
        parents = self._commit(commit).parents
        if not parents:
            return None
        return parents[0].hexsha

    def diff_trees(self, parent: str, commit: str) -> Iterator[ChangeRecord]:
        """Yield changes from parent's tree to commit's tree, without rename pairing."""
        old = self._commit(parent)
        new = self._commit(commit)
        with self._read_lock:
            try:
                diffs = list(old.diff(new))
            except GitCommandError as error:
                raise ObjectResolutionError(
                    operation="diff_trees", ref=f"{parent}..{commit}", detail=str(error)
                ) from error
        for diff in diffs:
            yield from change_records_from_diff(diff)

    def read_blob(self, ref: str) -> bytes:
        """Return raw blob bytes for a hex sha."""
        with self._read_lock:
            try:
                return self._repo.odb.stream(bytes.fromhex(ref)).read()
            except (BadName, BadObject, GitCommandError, ValueError) as error:
                raise ObjectResolutionError(
                    operation="read_blob", ref=ref, detail=str(error)
                ) from error

    def close(self) -> None:
        """Release git helper processes."""
        self._repo.close()

    def __enter__(self) -> GitObjectStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _commit(self, rev: str) -> Commit:
        try:
            return self._repo.commit(rev)
        except (BadName, BadObject, ValueError) as error:
            raise ObjectResolutionError(
                operation="resolve_commit", ref=rev, detail=str(error)
            ) from error


def change_records_from_diff(diff: Diff) -> list[ChangeRecord]:
    """Map one GitPython diff entry onto insert/delete/modify records.

    Submodule entries carry no blob and are dropped. Renames become a delete of
    the old path plus an insert of the new one; copies keep only the insert.
    """
    old_side: tuple[str, str] | None = None
    new_side: tuple[str, str] | None = None
    if diff.a_blob is not None and diff.a_mode != _GITLINK_MODE and not diff.copied_file:
        old_side = (diff.a_path or diff.a_blob.path, diff.a_blob.hexsha)
    if diff.b_blob is not None and diff.b_mode != _GITLINK_MODE:
        new_side = (diff.b_path or diff.b_blob.path, diff.b_blob.hexsha)

    if old_side is not None and new_side is not None:
        if old_side[0] == new_side[0]:
            return [
                ChangeRecord(
                    path=new_side[0],
                    action=ChangeAction.MODIFY,
                    old_ref=old_side[1],
                    new_ref=new_side[1],
                )
            ]
        return [
            ChangeRecord(path=old_side[0], action=ChangeAction.DELETE, old_ref=old_side[1]),
            ChangeRecord(path=new_side[0], action=ChangeAction.INSERT, new_ref=new_side[1]),
        ]
    if new_side is not None:
        return [ChangeRecord(path=new_side[0], action=ChangeAction.INSERT, new_ref=new_side[1])]
    if old_side is not None:
        return [ChangeRecord(path=old_side[0], action=ChangeAction.DELETE, old_ref=old_side[1])]
    return []
