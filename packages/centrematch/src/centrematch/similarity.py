"""Edit distance and normalized string similarity."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def levenshtein(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity in [0, 1]; 1.0 means identical."""
    s1 = a.lower()
    s2 = b.lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    return 1 - levenshtein(s1, s2) / max(len(s1), len(s2))
