"""Deterministic lexical line classification driven by comment markers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from commit_stats.classify.base import ClassifiedLine, LineKind

_BOM = "\ufeff"
_SHEBANG = "#!"


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Comment markers for one language."""

    line_comment_prefixes: tuple[str, ...] = ()
    block_comment_pairs: tuple[tuple[str, str], ...] = ()


def classify_lines(text: str, rules: LexicalRules) -> Iterator[ClassifiedLine]:
    """Classify each physical line of text as code, comment, or blank.

    Lines are yielded whitespace-trimmed. A line holding any non-comment,
    non-whitespace character is code, even when it also opens or closes a
    block comment. Block comments nest, except for pairs whose start and end
    markers are identical (Python docstrings), which toggle.
    """
    line_prefixes = tuple(
        sorted(
            (prefix for prefix in rules.line_comment_prefixes if prefix),
            key=len,
            reverse=True,
        )
    )
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    block_starts = tuple(start for start, _ in block_pairs)

    stack: list[tuple[str, str]] = []
    for line_number, raw_line in enumerate(_physical_lines(text), start=1):
        line = raw_line.strip()
        if not line:
            yield ClassifiedLine(text=line, kind=LineKind.BLANK)
            continue

        if line_number == 1 and line.startswith(_SHEBANG):
            yield ClassifiedLine(text=line, kind=LineKind.CODE)
            continue

        if not stack:
            if line_number == 1:
                line = line.lstrip(_BOM)
            if _starts_line_comment(line, line_prefixes, block_starts):
                yield ClassifiedLine(text=line, kind=LineKind.COMMENT)
                continue
            if not block_pairs or not any(start in line for start in block_starts):
                yield ClassifiedLine(text=line, kind=LineKind.CODE)
                continue

        is_code = _scan_block_comments(line, block_pairs, stack)
        kind = LineKind.CODE if is_code else LineKind.COMMENT
        yield ClassifiedLine(text=line, kind=kind)


def _physical_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _starts_line_comment(
    line: str,
    prefixes: tuple[str, ...],
    block_starts: tuple[str, ...],
) -> bool:
    if not any(line.startswith(prefix) for prefix in prefixes):
        return False
    # A block opener that shares a line-comment prefix (Lua "--[[") wins.
    return not any(line.startswith(start) for start in block_starts)


def _scan_block_comments(
    line: str,
    pairs: tuple[tuple[str, str], ...],
    stack: list[tuple[str, str]],
) -> bool:
    is_code = False
    length = len(line)
    pos = 0
    while pos < length:
        opened = _match_block_start(line, pos, pairs, stack)
        if opened is not None:
            stack.append(opened)
            pos += len(opened[0])
            continue
        if stack and line.startswith(stack[-1][1], pos):
            pos += len(stack[-1][1])
            stack.pop()
            continue
        if not stack and not line[pos].isspace():
            is_code = True
        pos += 1
    return is_code


def _match_block_start(
    line: str,
    pos: int,
    pairs: tuple[tuple[str, str], ...],
    stack: list[tuple[str, str]],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if not line.startswith(start, pos):
            continue
        if start == end and stack:
            continue
        return start, end
    return None
