"""
Similarity primitives shared by the policy and FAQ resolvers.

- cosine_similarity: dense vectors (numpy)
- dice_coefficient: bigram overlap between two strings
- lexical_best_match: best candidate for a query by dice coefficient
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class BestMatch:
    target: str
    rating: float
    index: int


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        ValueError: if the vectors have different dimensionality.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector dimension mismatch: {va.shape} vs {vb.shape}")

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def dice_coefficient(first: str, second: str) -> float:
    """
    Sørensen–Dice coefficient over character bigrams, in [0, 1].

    Whitespace is ignored and comparison is case-sensitive.
    """
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    overlap = _bigrams(first) & _bigrams(second)
    intersection = sum(overlap.values())
    return (2.0 * intersection) / (len(first) + len(second) - 2)


def lexical_best_match(query: str, candidates: Sequence[str]) -> Optional[BestMatch]:
    """Return the highest-rated candidate (first one on ties), or None if there are none."""
    best: Optional[BestMatch] = None
    for index, candidate in enumerate(candidates):
        rating = dice_coefficient(query, candidate)
        if best is None or rating > best.rating:
            best = BestMatch(target=candidate, rating=rating, index=index)
    return best
