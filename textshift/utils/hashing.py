"""
Content Digests and Batch Deduplication
=======================================

Cache keys never embed raw fragment text; they carry a fixed-length digest
of it instead. SHA-256 keeps collisions out of the picture for keys that are
persisted across runs.
"""

import hashlib
from collections.abc import Iterable, Sequence


def content_hash(content: str | bytes, length: int = 64) -> str:
    """
    Digest used in cache keys.

    Args:
        content: String or bytes to hash
        length: Length of the hex digest to keep (max 64)

    Returns:
        Hexadecimal digest truncated to ``length``
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()[:length]


def dedupe(values: Sequence[str]) -> tuple[list[str], list[int]]:
    """
    Collapse a batch into distinct values plus an index map.

    Returns ``(distinct, index)`` where ``distinct`` keeps first-appearance
    order and ``distinct[index[i]] == values[i]`` for every position.
    """
    positions: dict[str, int] = {}
    distinct: list[str] = []
    index: list[int] = []
    for value in values:
        slot = positions.get(value)
        if slot is None:
            slot = len(distinct)
            positions[value] = slot
            distinct.append(value)
        index.append(slot)
    return distinct, index


def expand(distinct_results: Sequence[str], index: Iterable[int]) -> list[str]:
    """Inverse of :func:`dedupe` applied to per-distinct results."""
    return [distinct_results[i] for i in index]
