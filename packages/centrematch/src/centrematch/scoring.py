"""Scoring of centre candidates against residual query tokens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from centrematch.types import LocationEntry, ScoredCandidate


def scoring_tokens(tokens: Iterable[str]) -> list[str]:
    """Drop single-character tokens; they carry no discriminating signal."""
    return [t.lower() for t in tokens if len(t) > 1]


def _token_fraction(tokens: Sequence[str], text: str | None) -> float:
    if not text or not tokens:
        return 0.0
    haystack = text.lower()
    found = sum(1 for t in tokens if t in haystack)
    return found / len(tokens)


def score_candidate(entry: LocationEntry, tokens: Sequence[str]) -> ScoredCandidate:
    """Score an entry as the better of its name and suburb token coverage.

    Name and suburb are scored independently, not as one merged text.
    """
    usable = scoring_tokens(tokens)
    name_score = _token_fraction(usable, entry.centre_name)
    suburb_score = _token_fraction(usable, entry.suburb)
    return ScoredCandidate(
        entry=entry,
        score=max(name_score, suburb_score),
        name_score=name_score,
        suburb_score=suburb_score,
    )


def rank_candidates(
    entries: Iterable[LocationEntry], tokens: Sequence[str]
) -> list[ScoredCandidate]:
    """Score entries, drop zero scores, and sort best first (stable on ties)."""
    scored = [score_candidate(e, tokens) for e in entries]
    ranked = [c for c in scored if c.score > 0]
    ranked.sort(key=lambda c: c.score, reverse=True)
    return ranked
