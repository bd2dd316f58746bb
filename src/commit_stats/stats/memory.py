"""In-memory object store built from path -> content snapshots."""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from dataclasses import dataclass

from commit_stats.stats.models import ChangeAction, ChangeRecord
from commit_stats.stats.store import ObjectResolutionError


@dataclass(slots=True, frozen=True)
class _Snapshot:
    parent: str | None
    tree: dict[str, str]


def blob_id(content: bytes) -> str:
    """Return the git blob sha1 for content."""
    digest = hashlib.sha1(usedforsecurity=False)
    digest.update(f"blob {len(content)}\0".encode("ascii"))
    digest.update(content)
    return digest.hexdigest()


class InMemoryObjectStore:
    """Object store over named commit snapshots, for callers without a git repository."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._commits: dict[str, _Snapshot] = {}

    def add_commit(self, commit: str, files: dict[str, bytes], parent: str | None = None) -> None:
        """Record a commit whose tree holds exactly the given files."""
        if parent is not None and parent not in self._commits:
            raise ObjectResolutionError(
                operation="add_commit", ref=parent, detail="parent commit is unknown"
            )
        tree: dict[str, str] = {}
        for path, content in files.items():
            ref = blob_id(content)
            self._blobs[ref] = content
            tree[path] = ref
        self._commits[commit] = _Snapshot(parent=parent, tree=tree)

    def resolve_parent(self, commit: str) -> str | None:
        """Return the recorded parent, or None for a root commit."""
        return self._snapshot(commit).parent

    def diff_trees(self, parent: str, commit: str) -> Iterator[ChangeRecord]:
        """Yield inserted, deleted and modified paths in path order."""
        old = self._snapshot(parent).tree
        new = self._snapshot(commit).tree
        for path in sorted(old.keys() | new.keys()):
            old_ref = old.get(path)
            new_ref = new.get(path)
            if old_ref == new_ref:
                continue
            if old_ref is None:
                yield ChangeRecord(path=path, action=ChangeAction.INSERT, new_ref=new_ref)
            elif new_ref is None:
                yield ChangeRecord(path=path, action=ChangeAction.DELETE, old_ref=old_ref)
            else:
                yield ChangeRecord(
                    path=path, action=ChangeAction.MODIFY, old_ref=old_ref, new_ref=new_ref
                )

    def read_blob(self, ref: str) -> bytes:
        """Return stored blob content."""
        content = self._blobs.get(ref)
        if content is None:
            raise ObjectResolutionError(operation="read_blob", ref=ref, detail="object not found")
        return content

    def forget_blob(self, ref: str) -> None:
        """Drop a blob so later reads fail, simulating a corrupt object store."""
        self._blobs.pop(ref, None)

    def _snapshot(self, commit: str) -> _Snapshot:
        snapshot = self._commits.get(commit)
        if snapshot is None:
            raise ObjectResolutionError(
                operation="resolve_commit", ref=commit, detail="commit is unknown"
            )
        return snapshot
