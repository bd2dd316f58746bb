"""Binary content sniffing."""

from __future__ import annotations

from commit_stats.config import DEFAULT_BINARY_SNIFF_BYTES


def is_binary_content(sample: bytes) -> bool:
    """Flag content holding a NUL byte as binary.

    Text in legacy encodings is not binary; undecodable bytes are replaced
    when the content is classified.
    """
    return b"\x00" in sample


def sniff_sample(content: bytes, limit: int = DEFAULT_BINARY_SNIFF_BYTES) -> bytes:
    """Return the prefix of content inspected by is_binary_content."""
    return content[:limit]
