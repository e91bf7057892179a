"""Fuzzy matching of search keywords against product category names."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from centrematch.similarity import similarity
from centrematch.synonyms import expand_category_keyword, has_synonyms

_WORD_SPLIT = re.compile(r"[\s&,\-]+")


def _category_words(category_name: str) -> list[str]:
    return [w for w in _WORD_SPLIT.split(category_name.lower()) if len(w) > 2]


def fuzzy_match_category(keyword: str, category_name: str, threshold: float = 0.6) -> bool:
    """Check whether a keyword matches a category name.

    Substring containment always wins; edit-distance similarity against the
    individual category words is the fallback for typos.
    """
    kw = keyword.lower()
    cat = category_name.lower()

    if kw in cat:
        return True

    for word in _category_words(cat):
        if kw in word:
            return True
        if similarity(kw, word) >= threshold:
            return True

    return False


def _category_score(kw: str, category_name: str) -> float:
    cat = category_name.lower()
    if kw in cat:
        return 1.0

    best = 0.0
    for word in _category_words(cat):
        if kw in word:
            best = max(best, 0.9)
        else:
            best = max(best, similarity(kw, word))
    return best


def find_best_category_matches(
    keyword: str,
    categories: Iterable[str],
    max_results: int = 5,
    threshold: float = 0.5,
) -> list[str]:
    """Rank category names by how well they match a keyword.

    Ties keep the input order.
    """
    kw = keyword.lower()
    scored = [(cat, _category_score(kw, cat)) for cat in categories]
    kept = [item for item in scored if item[1] >= threshold]
    kept.sort(key=lambda item: item[1], reverse=True)
    return [cat for cat, _ in kept[:max_results]]


def matches_with_synonyms(keyword: str, category_name: str, threshold: float = 0.6) -> bool:
    """Check a keyword, or any of its synonyms, against a category name."""
    return any(
        fuzzy_match_category(kw, category_name, threshold)
        for kw in expand_category_keyword(keyword)
    )


def detect_category_keyword(
    tokens: Sequence[str],
    categories: Iterable[str],
    threshold: float = 0.85,
    ignore: Iterable[str] = (),
    match_threshold: float = 0.6,
) -> str | None:
    """Pick the first query token that names one of the given categories.

    A token qualifies when it is close to a whole word of some category
    name, or when it has a synonym class and one of its synonyms matches a
    category. Plain substring containment is not enough here ("mall" must
    not pick "Small Goods"), and a synonym class alone is not either
    ("garden" stays part of "Garden City" when no category is about
    gardens).
    """
    categories = list(categories)
    words = {w for cat in categories for w in _category_words(cat)}
    skip = set(ignore)

    for token in tokens:
        if len(token) <= 2 or not token.isalpha() or token in skip:
            continue
        if any(similarity(token, w) >= threshold for w in words):
            return token
        if has_synonyms(token) and any(
            matches_with_synonyms(token, cat, match_threshold) for cat in categories
        ):
            return token

    return None
