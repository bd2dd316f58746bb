"""Git repository access."""

from .store import GitObjectStore, change_records_from_diff

__all__ = ["GitObjectStore", "change_records_from_diff"]
