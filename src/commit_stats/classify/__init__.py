"""Line classifier interfaces."""

from .base import ClassificationMiss, ClassifiedLine, LineClassifier, LineKind
from .languages import BUILTIN_LANGUAGES, LanguageDefinition, RuleBasedClassifier
from .lexical import LexicalRules, classify_lines
from .registry import ClassifierRegistry
from .runtime import build_classifier_registry

__all__ = [
    "BUILTIN_LANGUAGES",
    "ClassificationMiss",
    "ClassifiedLine",
    "ClassifierRegistry",
    "LanguageDefinition",
    "LexicalRules",
    "LineClassifier",
    "LineKind",
    "RuleBasedClassifier",
    "build_classifier_registry",
    "classify_lines",
]
