"""Object store protocol consumed by the stats calculator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from commit_stats.stats.models import ChangeRecord


@dataclass(slots=True, frozen=True)
class ObjectResolutionError(Exception):
    """Raised when the object store cannot resolve a commit, tree or blob."""

    operation: str
    ref: str
    detail: str

    def __str__(self) -> str:
        return f"{self.operation} failed for {self.ref}: {self.detail}"


class ObjectStore(Protocol):
    """Repository access needed to compute commit statistics."""

    def resolve_parent(self, commit: str) -> str | None:
        """Return the first parent's id, or None for a root commit."""

    def diff_trees(self, parent: str, commit: str) -> Iterable[ChangeRecord]:
        """Yield per-path changes between the parent's tree and the commit's tree."""

    def read_blob(self, ref: str) -> bytes:
        """Return the raw content of a blob."""
