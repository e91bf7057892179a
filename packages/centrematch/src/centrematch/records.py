"""Validation of raw centre rows from the persistence layer."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from centrematch.geo import is_valid_coordinate
from centrematch.types import LocationEntry

log = structlog.get_logger()


class CentreRecord(BaseModel):
    """One row of the centre snapshot as delivered by the data owner.

    Blank text becomes None. Coordinates that are unparseable or out of
    range are dropped as a pair rather than rejected.
    """

    id: int
    name: str
    slug: str | None = None
    suburb: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("centre name is empty")
        return v

    @field_validator("slug", "suburb", "city", "state", "postcode", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        if isinstance(v, float) and math.isnan(v):
            return None
        text = str(v).strip()
        return text or None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _parse_coordinate(cls, v: Any) -> float | None:
        if v is None or isinstance(v, bool):
            return None
        try:
            value = float(str(v).strip()) if isinstance(v, str) else float(v)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None

    @model_validator(mode="after")
    def _coordinate_pair(self) -> "CentreRecord":
        if not is_valid_coordinate(self.latitude, self.longitude):
            self.latitude = None
            self.longitude = None
        return self

    def to_entry(self) -> LocationEntry:
        return LocationEntry(
            centre_id=self.id,
            centre_name=self.name,
            slug=self.slug,
            suburb=self.suburb,
            city=self.city,
            state=self.state,
            postcode=self.postcode,
            latitude=self.latitude,
            longitude=self.longitude,
        )


def build_entries(rows: Iterable[Mapping[str, Any]]) -> tuple[LocationEntry, ...]:
    """Validate snapshot rows into entries, skipping rows that cannot be used."""
    entries: list[LocationEntry] = []
    skipped = 0
    for row in rows:
        try:
            entries.append(CentreRecord.model_validate(dict(row)).to_entry())
        except ValidationError as e:
            skipped += 1
            log.warning(
                "centre_record_skipped",
                centre_id=row.get("id"),
                errors=[err["msg"] for err in e.errors()],
            )

    if skipped:
        log.info("centre_records_skipped", skipped=skipped, kept=len(entries))
    return tuple(entries)
