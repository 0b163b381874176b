"""Character n-gram feature extraction for raw text."""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType

from .types import FeatureVector

MIN_NGRAM = 2
MAX_NGRAM = 6


def make_vector(content: str, *, min_n: int = MIN_NGRAM, max_n: int = MAX_NGRAM) -> FeatureVector:
    """Count every overlapping substring of ``min_n`` to ``max_n`` characters.

    Line breaks are removed before counting. The returned mapping is read-only.
    """

    if min_n < 1 or max_n < min_n:
        raise ValueError(f"Invalid n-gram range: {min_n}..{max_n}")
    if not content:
        return MappingProxyType({})

    text = content.replace("\r", "").replace("\n", "")
    counts: Counter[str] = Counter()
    length = len(text)
    for start in range(length):
        for size in range(min_n, max_n + 1):
            if start + size > length:
                break
            counts[text[start : start + size]] += 1
    return MappingProxyType(dict(counts))


__all__ = ["MAX_NGRAM", "MIN_NGRAM", "make_vector"]
