"""Classifier registry with deterministic selection behavior."""

from __future__ import annotations

from dataclasses import dataclass, field

from commit_stats.classify.base import ClassificationMiss, LineClassifier


@dataclass(slots=True)
class ClassifierRegistry:
    """Ordered classifier registry; the first classifier supporting a path wins."""

    _classifiers: list[LineClassifier] = field(default_factory=list)

    def register(self, classifier: LineClassifier) -> None:
        """Register a classifier in deterministic insertion order."""
        self._classifiers.append(classifier)

    def select(self, path: str) -> LineClassifier:
        """Select the first classifier that supports the path."""
        for classifier in self._classifiers:
            if classifier.supports_path(path):
                return classifier
        raise ClassificationMiss(path=path)

    def language_for(self, path: str) -> str | None:
        """Return the detected language name, or None when no classifier applies."""
        try:
            return self.select(path).name
        except ClassificationMiss:
            return None

    def names(self) -> tuple[str, ...]:
        """Return registered classifier names in deterministic order."""
        return tuple(classifier.name for classifier in self._classifiers)
