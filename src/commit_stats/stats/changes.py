"""Per-path statistics for one tree-diff change."""

from __future__ import annotations

from dataclasses import dataclass

from commit_stats.classify.registry import ClassifierRegistry
from commit_stats.config import FiltersConfig, StatsOptions
from commit_stats.filters import is_binary_content, is_vendor_path, sniff_sample
from commit_stats.stats.cancel import CancellationToken
from commit_stats.stats.line_index import LineIndex, build_line_index
from commit_stats.stats.models import ChangeAction, ChangeRecord, FileStats
from commit_stats.stats.store import ObjectResolutionError, ObjectStore

SKIP_VENDOR = "vendor"
SKIP_BINARY = "binary"


@dataclass(slots=True, frozen=True)
class ChangeOutcome:
    """Result of processing one change; file_stats is None when the path was filtered."""

    change: ChangeRecord
    file_stats: FileStats | None
    skipped: str | None = None

    @property
    def counted(self) -> bool:
        """Return True when the path counts toward the files total."""
        return self.file_stats is not None


class ChangeStatsComputer:
    """Turn ChangeRecords into per-path Stats deltas."""

    def __init__(
        self,
        store: ObjectStore,
        registry: ClassifierRegistry,
        filters: FiltersConfig | None = None,
        options: StatsOptions | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._filters = filters or FiltersConfig()
        self._options = options or StatsOptions()
        self._token = token

    def compute(self, change: ChangeRecord) -> ChangeOutcome:
        """Compute the stats delta contributed by one changed path."""
        if is_vendor_path(change.path, self._filters.vendor_globs):
            return ChangeOutcome(change=change, file_stats=None, skipped=SKIP_VENDOR)

        old_content: bytes | None = None
        new_content: bytes | None = None
        if change.action is not ChangeAction.INSERT:
            old_content = self._read_blob(change, change.old_ref)
        if change.action is not ChangeAction.DELETE:
            new_content = self._read_blob(change, change.new_ref)
        for content in (old_content, new_content):
            if content is not None and self._is_binary(content):
                return ChangeOutcome(change=change, file_stats=None, skipped=SKIP_BINARY)

        delta = self._delta(change, old_content, new_content)
        stats = delta.stats()
        stats.files = 1
        return ChangeOutcome(
            change=change,
            file_stats=FileStats(
                path=change.path,
                language=self._registry.language_for(change.path),
                action=change.action,
                stats=stats,
            ),
        )

    def _delta(
        self,
        change: ChangeRecord,
        old_content: bytes | None,
        new_content: bytes | None,
    ) -> LineIndex:
        if change.action is ChangeAction.INSERT:
            return self._index(change.path, new_content)
        if change.action is ChangeAction.DELETE:
            removed = self._index(change.path, old_content)
            if self._options.deleted_lines_as_deletions:
                return removed.negated()
            return removed
        after = self._index(change.path, new_content)
        after.subtract(self._index(change.path, old_content))
        return after

    def _index(self, path: str, content: bytes | None) -> LineIndex:
        if content is None:
            return LineIndex()
        return build_line_index(path, content, self._registry)

    def _read_blob(self, change: ChangeRecord, ref: str | None) -> bytes:
        if ref is None:
            raise ObjectResolutionError(
                operation="read_blob",
                ref=change.path,
                detail=f"{change.action} change is missing a blob reference",
            )
        if self._token is not None:
            self._token.raise_if_cancelled(ref)
        return self._store.read_blob(ref)

    def _is_binary(self, content: bytes) -> bool:
        return is_binary_content(sniff_sample(content, self._filters.binary_sniff_bytes))
