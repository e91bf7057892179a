"""Query parsing: site requirements, tokens, stopwords and state words."""

from __future__ import annotations

import re
from collections.abc import Sequence

from centrematch.synonyms import expand_category_keyword
from centrematch.types import ParsedQuery

STOPWORDS: frozenset[str] = frozenset(
    {"at", "in", "on", "for", "near", "by", "from", "to", "the", "a", "an"}
)

# Multi-word state names are checked before the short codes.
STATE_PHRASES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("australian", "capital", "territory"), "ACT"),
    (("new", "south", "wales"), "NSW"),
    (("northern", "territory"), "NT"),
    (("south", "australia"), "SA"),
    (("western", "australia"), "WA"),
    (("victoria",), "VIC"),
    (("queensland",), "QLD"),
    (("tasmania",), "TAS"),
    (("nsw",), "NSW"),
    (("vic",), "VIC"),
    (("qld",), "QLD"),
    (("sa",), "SA"),
    (("wa",), "WA"),
    (("tas",), "TAS"),
    (("nt",), "NT"),
    (("act",), "ACT"),
)

_DIMENSIONS = re.compile(r"(\d+\.?\d*)\s*m?\s*[x×]\s*(\d+\.?\d*)\s*m", re.IGNORECASE)
_AREA = re.compile(r"(\d+\.?\d*)\s*(?:sqm|sq\s*m|square\s*met(?:er|re)s?|m2|m\s*2)", re.IGNORECASE)
_TABLES = re.compile(r"(\d+)\s*(?:trestle\s*)?tables?", re.IGNORECASE)


def _parse_size(query: str) -> float | None:
    dims = _DIMENSIONS.search(query)
    if dims:
        return float(dims.group(1)) * float(dims.group(2))

    area = _AREA.search(query)
    if area:
        return float(area.group(1))

    return None


def _parse_tables(query: str) -> int | None:
    tables = _TABLES.search(query)
    return int(tables.group(1)) if tables else None


def _strip_requirements(query: str) -> str:
    text = _DIMENSIONS.sub("", query)
    text = _AREA.sub("", text)
    text = _TABLES.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def parse_search_query(query: str) -> ParsedQuery:
    """Split a query into its centre text and site size/table requirements.

    Supports "3x4m", "3m x 4m", "12sqm", "15 m2" and "5 trestle tables".
    """
    trimmed = query.strip()
    return ParsedQuery(
        centre_name=_strip_requirements(trimmed),
        original_query=trimmed,
        min_size_m2=_parse_size(trimmed),
        min_tables=_parse_tables(trimmed),
    )


def tokenize(query: str) -> list[str]:
    return query.lower().split()


def residual_tokens(query: str, category_keyword: str | None = None) -> list[str]:
    """Tokens left once the category keyword, its synonyms and stopwords are gone."""
    removed: set[str] = set(STOPWORDS)
    if category_keyword:
        removed.add(category_keyword.strip().lower())
        removed.update(expand_category_keyword(category_keyword))

    return [t for t in tokenize(query) if t not in removed]


def find_state(tokens: Sequence[str]) -> tuple[str | None, tuple[str, ...], list[str]]:
    """Find the first Australian state named in the tokens.

    Returns the state code, the matched words and the remaining tokens.
    """
    tokens = list(tokens)
    for phrase, code in STATE_PHRASES:
        size = len(phrase)
        for i in range(len(tokens) - size + 1):
            if tuple(tokens[i : i + size]) == phrase:
                return code, phrase, tokens[:i] + tokens[i + size :]
    return None, (), tokens


def extract_state(tokens: Sequence[str]) -> tuple[str | None, list[str]]:
    """Return the first state code in the tokens and the tokens without it."""
    code, _, remaining = find_state(tokens)
    return code, remaining
