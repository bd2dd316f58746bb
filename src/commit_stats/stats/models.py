"""Typed models for commit statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from commit_stats.classify.base import LineKind


@dataclass(slots=True)
class KindStats:
    """Addition and deletion counts for one line kind."""

    additions: int = 0
    deletions: int = 0

    def add(self, other: KindStats) -> None:
        """Accumulate another KindStats into this one."""
        self.additions += other.additions
        self.deletions += other.deletions

    def record(self, count: int) -> None:
        """Record a signed line-count delta as an addition or deletion."""
        if count > 0:
            self.additions += count
        elif count < 0:
            self.deletions += -count

    def to_dict(self) -> dict[str, int]:
        return {"additions": self.additions, "deletions": self.deletions}


@dataclass(slots=True)
class Stats:
    """Per-kind line statistics accumulated over changed files.

    ``total`` is derived from the per-kind stats, so it always equals their
    pointwise sum.
    """

    files: int = 0
    code: KindStats = field(default_factory=KindStats)
    comment: KindStats = field(default_factory=KindStats)
    blank: KindStats = field(default_factory=KindStats)

    @property
    def total(self) -> KindStats:
        """Return the sum of code, comment and blank stats."""
        return KindStats(
            additions=self.code.additions + self.comment.additions + self.blank.additions,
            deletions=self.code.deletions + self.comment.deletions + self.blank.deletions,
        )

    def for_kind(self, kind: LineKind) -> KindStats:
        """Return the mutable KindStats bucket for a line kind."""
        if kind is LineKind.CODE:
            return self.code
        if kind is LineKind.COMMENT:
            return self.comment
        return self.blank

    def sum(self, other: Stats) -> None:
        """Accumulate another Stats, including its file count, into this one."""
        self.files += other.files
        self.code.add(other.code)
        self.comment.add(other.comment)
        self.blank.add(other.blank)

    def to_dict(self) -> dict[str, object]:
        """Return serializable stats payload."""
        return {
            "files": self.files,
            "code": self.code.to_dict(),
            "comment": self.comment.to_dict(),
            "blank": self.blank.to_dict(),
            "total": self.total.to_dict(),
        }

    def __str__(self) -> str:
        total = self.total
        return (
            f"Code (+{self.code.additions}/-{self.code.deletions})\n"
            f"Comment (+{self.comment.additions}/-{self.comment.deletions})\n"
            f"Blank (+{self.blank.additions}/-{self.blank.deletions})\n"
            f"Total (+{total.additions}/-{total.deletions})\n"
            f"Files ({self.files})\n"
        )


class ChangeAction(StrEnum):
    """Tree-diff action for one path."""

    INSERT = "insert"
    DELETE = "delete"
    MODIFY = "modify"


@dataclass(slots=True, frozen=True)
class ChangeRecord:
    """One path touched by a tree diff, with blob refs for each side present."""

    path: str
    action: ChangeAction
    old_ref: str | None = None
    new_ref: str | None = None


@dataclass(slots=True, frozen=True)
class FileStats:
    """Statistics contributed by one changed path."""

    path: str
    language: str | None
    action: ChangeAction
    stats: Stats

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "language": self.language,
            "action": str(self.action),
            "stats": self.stats.to_dict(),
        }
