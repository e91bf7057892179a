"""Category synonym table and keyword expansion."""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import MappingProxyType

import structlog

from centrematch.config import DATA_DIR

log = structlog.get_logger()


def _load_synonyms() -> Mapping[str, tuple[str, ...]]:
    path = DATA_DIR / "category_synonyms.json"
    if not path.exists():
        log.error("synonym_table_missing", path=str(path))
        return MappingProxyType({})
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        log.error("synonym_table_invalid", path=str(path), error=str(e))
        return MappingProxyType({})

    return MappingProxyType({
        key.strip().lower(): tuple(s.strip().lower() for s in values)
        for key, values in raw.items()
    })


CATEGORY_SYNONYMS: Mapping[str, tuple[str, ...]] = _load_synonyms()


def synonym_table() -> Mapping[str, tuple[str, ...]]:
    """Read-only view of the configured synonym classes."""
    return CATEGORY_SYNONYMS


def has_synonyms(keyword: str) -> bool:
    return keyword.strip().lower() in CATEGORY_SYNONYMS


def expand_category_keyword(keyword: str) -> set[str]:
    """Expand a keyword to itself plus its configured synonyms.

    Unknown keywords expand to a singleton set.
    """
    lower = keyword.strip().lower()
    expanded = {lower}
    expanded.update(CATEGORY_SYNONYMS.get(lower, ()))
    return expanded
