"""Commit-level orchestration: parent resolution, tree diff, accumulation."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass

from commit_stats.classify.registry import ClassifierRegistry
from commit_stats.classify.runtime import build_classifier_registry
from commit_stats.config import FiltersConfig, StatsConfig, StatsOptions
from commit_stats.stats.cancel import CancellationToken
from commit_stats.stats.changes import SKIP_BINARY, SKIP_VENDOR, ChangeOutcome, ChangeStatsComputer
from commit_stats.stats.models import ChangeRecord, FileStats, Stats
from commit_stats.stats.store import ObjectStore


@dataclass(slots=True, frozen=True)
class CalculationProfile:
    """Deterministic diagnostics for one commit computation."""

    has_parent: bool
    changes: int
    files: int
    vendor_skipped: int
    binary_skipped: int
    classification_misses: int
    total_seconds: float


class CommitStatsCalculator:
    """Compute line statistics for a commit against its first parent.

    Each call is independent; nothing computed for one commit is reused for
    another. Changes are processed sequentially unless ``options.max_workers``
    is above one, in which case per-path deltas are computed on a thread pool
    and summed afterwards in diff order.
    """

    def __init__(
        self,
        store: ObjectStore,
        registry: ClassifierRegistry | None = None,
        filters: FiltersConfig | None = None,
        options: StatsOptions | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self._store = store
        self._options = options or StatsOptions()
        self._token = token or CancellationToken()
        self._computer = ChangeStatsComputer(
            store=store,
            registry=registry or build_classifier_registry(),
            filters=filters,
            options=self._options,
            token=self._token,
        )

    def do(
        self,
        commit: str,
        base: str | None = None,
        profile: dict[str, object] | None = None,
    ) -> Stats | None:
        """Return accumulated Stats, or None for a root commit without a base."""
        file_stats = self.do_by_file(commit, base=base, profile=profile)
        if file_stats is None:
            return None
        total = Stats()
        for item in file_stats:
            total.sum(item.stats)
        return total

    def do_by_file(
        self,
        commit: str,
        base: str | None = None,
        profile: dict[str, object] | None = None,
    ) -> list[FileStats] | None:
        """Return per-path stats in diff order.

        The commit is compared against ``base`` when given, otherwise against
        its first parent; None means there is no base and no parent.
        """
        started = time.perf_counter()
        self._token.raise_if_cancelled(commit)
        parent = base if base is not None else self._store.resolve_parent(commit)
        if parent is None:
            if profile is not None:
                profile.update(asdict(_build_profile(False, [], started)))
            return None

        changes = list(self._store.diff_trees(parent, commit))
        outcomes = self._process(changes)
        if profile is not None:
            profile.update(asdict(_build_profile(True, outcomes, started)))
        return [outcome.file_stats for outcome in outcomes if outcome.file_stats is not None]

    def _process(self, changes: list[ChangeRecord]) -> list[ChangeOutcome]:
        if self._options.max_workers <= 1 or len(changes) <= 1:
            return [self._compute_one(change) for change in changes]
        with ThreadPoolExecutor(max_workers=self._options.max_workers) as executor:
            futures = [executor.submit(self._compute_one, change) for change in changes]
            try:
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _compute_one(self, change: ChangeRecord) -> ChangeOutcome:
        self._token.raise_if_cancelled(change.path)
        return self._computer.compute(change)


def compute_commit_stats(
    store: ObjectStore,
    commit: str,
    base: str | None = None,
    *,
    registry: ClassifierRegistry | None = None,
    config: StatsConfig | None = None,
    token: CancellationToken | None = None,
    profile: dict[str, object] | None = None,
) -> Stats | None:
    """Compute Stats for one commit; None signals a root commit without a base."""
    calculator = CommitStatsCalculator(
        store=store,
        registry=registry or build_classifier_registry(config.classifiers if config else None),
        filters=config.filters if config else None,
        options=config.stats if config else None,
        token=token,
    )
    return calculator.do(commit, base=base, profile=profile)


def _build_profile(
    has_parent: bool,
    outcomes: list[ChangeOutcome],
    started: float,
) -> CalculationProfile:
    counted = [outcome.file_stats for outcome in outcomes if outcome.file_stats is not None]
    return CalculationProfile(
        has_parent=has_parent,
        changes=len(outcomes),
        files=len(counted),
        vendor_skipped=sum(1 for outcome in outcomes if outcome.skipped == SKIP_VENDOR),
        binary_skipped=sum(1 for outcome in outcomes if outcome.skipped == SKIP_BINARY),
        classification_misses=sum(1 for item in counted if item.language is None),
        total_seconds=time.perf_counter() - started,
    )
