"""Near-duplicate removal by fingerprint of normalized leading text."""

from __future__ import annotations

import hashlib
import re
from typing import List, Sequence, TypeVar

INTRA_SOURCE_PREFIX = 100
CROSS_SOURCE_PREFIX = 150

_WHITESPACE_RE = re.compile(r"\s+")

T = TypeVar("T")


def normalize_prefix(text: str, length: int) -> str:
    """Lowercase, collapse whitespace, trim, then keep the first ``length`` chars."""
    collapsed = _WHITESPACE_RE.sub(" ", str(text or "").lower()).strip()
    return collapsed[: max(0, int(length))]


def fingerprint64(text: str) -> int:
    """Unsigned 64-bit BLAKE2b fingerprint of ``text`` (UTF-8)."""
    digest = hashlib.blake2b(str(text).encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def text_fingerprint(text: str, length: int) -> int:
    return fingerprint64(normalize_prefix(text, length))


def dedup_by_prefix(items: Sequence[T], length: int) -> List[T]:
    """
    Keep the first item for every distinct fingerprint of its leading text.

    Items need a ``text`` attribute. Fingerprint collisions between different
    texts are accepted and drop the later item.
    """
    unique: List[T] = []
    seen = set()
    for item in items:
        key = text_fingerprint(getattr(item, "text", ""), length)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def dedup_intra_source(items: Sequence[T]) -> List[T]:
    return dedup_by_prefix(items, INTRA_SOURCE_PREFIX)


def dedup_cross_source(items: Sequence[T]) -> List[T]:
    return dedup_by_prefix(items, CROSS_SOURCE_PREFIX)


def dedup_ids(items: Sequence[T]) -> List[T]:
    """Drop repeated ids, first occurrence wins."""
    unique: List[T] = []
    seen = set()
    for item in items:
        key = str(getattr(item, "id", ""))
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique
