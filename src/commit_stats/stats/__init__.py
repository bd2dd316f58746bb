"""Commit line statistics engine."""

from .calculator import CalculationProfile, CommitStatsCalculator, compute_commit_stats
from .cancel import CancellationToken, StatsCancelledError
from .changes import ChangeOutcome, ChangeStatsComputer
from .line_index import LineIndex, LineInfo, build_line_index
from .memory import InMemoryObjectStore, blob_id
from .models import ChangeAction, ChangeRecord, FileStats, KindStats, Stats
from .store import ObjectResolutionError, ObjectStore

__all__ = [
    "CalculationProfile",
    "CancellationToken",
    "ChangeAction",
    "ChangeOutcome",
    "ChangeRecord",
    "ChangeStatsComputer",
    "CommitStatsCalculator",
    "FileStats",
    "InMemoryObjectStore",
    "KindStats",
    "LineIndex",
    "LineInfo",
    "ObjectResolutionError",
    "ObjectStore",
    "Stats",
    "StatsCancelledError",
    "blob_id",
    "build_line_index",
    "compute_commit_stats",
]
