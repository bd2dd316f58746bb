"""Signed multiset of classified lines for one file version."""

from __future__ import annotations

from dataclasses import dataclass

from commit_stats.classify.base import ClassificationMiss, LineClassifier, LineKind
from commit_stats.classify.registry import ClassifierRegistry
from commit_stats.stats.models import Stats


@dataclass(slots=True)
class LineInfo:
    """Classification and signed occurrence count of one distinct line."""

    kind: LineKind
    count: int = 0


class LineIndex:
    """Bag of lines keyed by exact line text; line position is discarded.

    A freshly built index holds positive counts. ``subtract`` turns an "after"
    index into a signed delta against a "before" index; ``stats`` then reads
    positive counts as additions and negative counts as deletions, so lines
    present equally often on both sides cancel out regardless of order.
    """

    __slots__ = ("_lines",)

    def __init__(self) -> None:
        self._lines: dict[str, LineInfo] = {}

    @classmethod
    def build(cls, text: str, classifier: LineClassifier) -> LineIndex:
        """Classify every line of text and index it."""
        index = cls()
        for line in classifier.classify(text):
            index.add(line.text, line.kind)
        return index

    def add(self, line: str, kind: LineKind) -> None:
        """Count one occurrence of line; the latest classification wins."""
        info = self._lines.get(line)
        if info is None:
            info = LineInfo(kind=kind)
            self._lines[line] = info
        info.count += 1
        info.kind = kind

    def subtract(self, other: LineIndex) -> None:
        """Subtract a "before" index from this "after" index in place.

        Calling it with the operands swapped flips every addition into a
        deletion and vice versa. ``other`` is left unchanged.
        """
        for line, info in other._lines.items():
            existing = self._lines.get(line)
            if existing is not None:
                existing.count -= info.count
            else:
                self._lines[line] = LineInfo(kind=info.kind, count=-info.count)

    def negated(self) -> LineIndex:
        """Return a copy with every count's sign flipped."""
        output = LineIndex()
        for line, info in self._lines.items():
            output._lines[line] = LineInfo(kind=info.kind, count=-info.count)
        return output

    def stats(self) -> Stats:
        """Fold signed counts into per-kind additions and deletions."""
        stats = Stats()
        for info in self._lines.values():
            stats.for_kind(info.kind).record(info.count)
        return stats

    def render(self) -> str:
        """Return a debug listing of signed counts, sorted by line text."""
        rows: list[str] = []
        for line in sorted(self._lines):
            count = self._lines[line].count
            sign = "+" if count > 0 else "-" if count < 0 else " "
            rows.append(f"{sign} [{count:3d}x] {line}")
        return "\n".join(rows) + ("\n" if rows else "")

    def __getitem__(self, line: str) -> LineInfo:
        return self._lines[line]

    def __contains__(self, line: object) -> bool:
        return line in self._lines

    def __len__(self) -> int:
        return len(self._lines)


def build_line_index(path: str, content: bytes, registry: ClassifierRegistry) -> LineIndex:
    """Build a LineIndex for one file version; unsupported languages yield an empty index."""
    try:
        classifier = registry.select(path)
    except ClassificationMiss:
        return LineIndex()
    text = content.decode("utf-8", errors="replace")
    return LineIndex.build(text, classifier)
