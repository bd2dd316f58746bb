"""Core classifier protocol and data types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class LineKind(StrEnum):
    """Kind assigned to one physical line by a classifier."""

    CODE = "code"
    COMMENT = "comment"
    BLANK = "blank"


@dataclass(slots=True, frozen=True)
class ClassifiedLine:
    """Single classified line; text is whitespace-trimmed."""

    text: str
    kind: LineKind


@dataclass(slots=True, frozen=True)
class ClassificationMiss(LookupError):
    """Raised when no classifier rule covers a path's language."""

    path: str

    def __str__(self) -> str:
        return f"No line classifier supports path: {self.path}"


class LineClassifier(Protocol):
    """Protocol implemented by line classifiers."""

    name: str

    def supports_path(self, path: str) -> bool:
        """Return True when classifier handles a file path."""

    def classify(self, text: str) -> Iterator[ClassifiedLine]:
        """Yield one classified line per physical line of text."""
