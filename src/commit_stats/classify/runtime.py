"""Runtime classifier registry construction."""

from __future__ import annotations

from commit_stats.classify.languages import BUILTIN_LANGUAGES, RuleBasedClassifier
from commit_stats.classify.registry import ClassifierRegistry
from commit_stats.config import ClassifiersConfig


def build_classifier_registry(config: ClassifiersConfig | None = None) -> ClassifierRegistry:
    """Build classifier registry from effective config."""
    disabled = set(config.disabled_languages) if config is not None else set()
    registry = ClassifierRegistry()
    for definition in BUILTIN_LANGUAGES:
        if definition.name in disabled:
            continue
        registry.register(RuleBasedClassifier(definition))
    return registry
