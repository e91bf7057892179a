"""CSV/JSONL input and output for centre snapshots and query results."""

from __future__ import annotations

import csv
import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from centrematch.types import QueryResolution

SNAPSHOT_FIELDS = (
    "id", "name", "slug", "suburb", "city", "state", "postcode", "latitude", "longitude",
)


def read_centres(path: str | Path) -> list[dict[str, Any]]:
    """Read raw centre rows from CSV or JSONL.

    Rows are returned as-is; validation happens when the index is built.
    """
    path = Path(path)

    if path.suffix == ".jsonl":
        return _read_jsonl(path)
    else:
        return _read_csv(path)


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return [
            {k: row.get(k) for k in SNAPSHOT_FIELDS if k in row}
            for row in reader
        ]


def _read_jsonl(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append(json.loads(line))
    return rows


def read_categories(path: str | Path) -> list[str]:
    """Read category names, one per line; blank lines are ignored."""
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


class FileSnapshotSource:
    """Snapshot source that reads centres from a CSV/JSONL file on every fetch."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def fetch_centres(self) -> Sequence[Mapping[str, Any]]:
        return read_centres(self.path)


def resolution_rows(resolution: QueryResolution) -> list[dict[str, Any]]:
    """Flatten a resolution into one row per returned centre."""
    base = {
        "query": resolution.query,
        "category": resolution.category_keyword or "",
        "state": resolution.state_filter or "",
        "collapsed": resolution.collapsed,
    }
    if resolution.candidates:
        return [
            {
                **base,
                "centre_id": c.entry.centre_id,
                "centre_name": c.entry.centre_name,
                "suburb": c.entry.suburb or "",
                "score": round(c.score, 4),
                "source": "category" if resolution.pure_category else "name",
            }
            for c in resolution.candidates
        ]
    return [
        {
            **base,
            "centre_id": e.centre_id,
            "centre_name": e.centre_name,
            "suburb": e.suburb or "",
            "score": "",
            "source": "area",
        }
        for e in resolution.area_matches
    ]


def write_results(results: list[QueryResolution], path: str | Path) -> None:
    """Write query resolutions to CSV or JSONL."""
    path = Path(path)
    rows = [row for r in results for row in resolution_rows(r)]

    if path.suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row) + "\n")
        return

    fieldnames = [
        "query", "category", "state", "collapsed",
        "centre_id", "centre_name", "suburb", "score", "source",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
