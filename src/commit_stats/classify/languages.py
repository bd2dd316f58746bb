"""Built-in language definitions and the rule-based classifier."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import PurePosixPath

from commit_stats.classify.base import ClassifiedLine
from commit_stats.classify.lexical import LexicalRules, classify_lines

_C_STYLE = LexicalRules(line_comment_prefixes=("//",), block_comment_pairs=(("/*", "*/"),))
_HASH = LexicalRules(line_comment_prefixes=("#",))
_MARKUP = LexicalRules(line_comment_prefixes=("<!--",), block_comment_pairs=(("<!--", "-->"),))
_PLAIN = LexicalRules()


@dataclass(slots=True, frozen=True)
class LanguageDefinition:
    """Comment rules plus the paths a language is detected from."""

    name: str
    rules: LexicalRules
    extensions: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()

    def matches(self, path: str) -> bool:
        """Return True when the path's filename or extension belongs to the language."""
        pure = PurePosixPath(path)
        if pure.name in self.filenames:
            return True
        return pure.suffix.lower() in self.extensions


BUILTIN_LANGUAGES: tuple[LanguageDefinition, ...] = (
    LanguageDefinition("Go", _C_STYLE, (".go",)),
    LanguageDefinition(
        "Python",
        LexicalRules(line_comment_prefixes=("#",), block_comment_pairs=(('"""', '"""'),)),
        (".py", ".pyi"),
    ),
    LanguageDefinition("Java", _C_STYLE, (".java",)),
    LanguageDefinition("JavaScript", _C_STYLE, (".js", ".mjs", ".cjs", ".jsx")),
    LanguageDefinition("TypeScript", _C_STYLE, (".ts", ".tsx")),
    LanguageDefinition("C", _C_STYLE, (".c",)),
    LanguageDefinition("C Header", _C_STYLE, (".h",)),
    LanguageDefinition("C++", _C_STYLE, (".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx")),
    LanguageDefinition("C#", _C_STYLE, (".cs",)),
    LanguageDefinition(
        "Rust",
        LexicalRules(line_comment_prefixes=("//", "///", "//!"), block_comment_pairs=(("/*", "*/"),)),
        (".rs",),
    ),
    LanguageDefinition("Kotlin", _C_STYLE, (".kt", ".kts")),
    LanguageDefinition("Scala", _C_STYLE, (".scala",)),
    LanguageDefinition("Swift", _C_STYLE, (".swift",)),
    LanguageDefinition(
        "PHP",
        LexicalRules(line_comment_prefixes=("#", "//"), block_comment_pairs=(("/*", "*/"),)),
        (".php",),
    ),
    LanguageDefinition(
        "Ruby",
        LexicalRules(line_comment_prefixes=("#",), block_comment_pairs=(("=begin", "=end"),)),
        (".rb", ".rake"),
        ("Rakefile", "Gemfile"),
    ),
    LanguageDefinition("Bourne Shell", _HASH, (".sh", ".bash")),
    LanguageDefinition("Zsh", _HASH, (".zsh",)),
    LanguageDefinition(
        "Lua",
        LexicalRules(line_comment_prefixes=("--",), block_comment_pairs=(("--[[", "]]"),)),
        (".lua",),
    ),
    LanguageDefinition(
        "SQL",
        LexicalRules(line_comment_prefixes=("--",), block_comment_pairs=(("/*", "*/"),)),
        (".sql",),
    ),
    LanguageDefinition(
        "Haskell",
        LexicalRules(line_comment_prefixes=("--",), block_comment_pairs=(("{-", "-}"),)),
        (".hs",),
    ),
    LanguageDefinition("CSS", LexicalRules(block_comment_pairs=(("/*", "*/"),)), (".css",)),
    LanguageDefinition("HTML", _MARKUP, (".html", ".htm")),
    LanguageDefinition("XML", _MARKUP, (".xml", ".xsd", ".xsl")),
    LanguageDefinition("YAML", _HASH, (".yaml", ".yml")),
    LanguageDefinition("TOML", _HASH, (".toml",)),
    LanguageDefinition("Makefile", _HASH, (".mk", ".mak"), ("Makefile", "makefile", "GNUmakefile")),
    LanguageDefinition("Dockerfile", _HASH, (".dockerfile",), ("Dockerfile",)),
    LanguageDefinition("Protocol Buffers", LexicalRules(line_comment_prefixes=("//",)), (".proto",)),
    LanguageDefinition("JSON", _PLAIN, (".json",)),
    LanguageDefinition("Markdown", _PLAIN, (".md", ".markdown")),
)


class RuleBasedClassifier:
    """Classifier for one language backed by lexical comment rules."""

    def __init__(self, definition: LanguageDefinition) -> None:
        self._definition = definition
        self.name = definition.name

    def supports_path(self, path: str) -> bool:
        """Return True when path belongs to this classifier's language."""
        return self._definition.matches(path)

    def classify(self, text: str) -> Iterator[ClassifiedLine]:
        """Classify text with this language's comment rules."""
        return classify_lines(text, self._definition.rules)
