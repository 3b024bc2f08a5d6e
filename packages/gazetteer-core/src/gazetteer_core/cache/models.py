"""Data models for the gazetteer cache."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class EntityKind(str, Enum):
    """Kinds of name-bearing records, each mapped to one fixed NER tag."""

    organization = "organization"
    person = "person"
    equipment = "equipment"

    @property
    def tag(self) -> str:
        return _KIND_TAGS[self][0]

    @property
    def overridable(self) -> str:
        """Tags assigned by the statistical tagger that this row may replace."""
        return _KIND_TAGS[self][1]

    @property
    def priority(self) -> int:
        return _KIND_TAGS[self][2]

    @classmethod
    def _missing_(cls, value: object) -> EntityKind | None:
        if isinstance(value, str):
            return _KIND_ALIASES.get(value.strip().lower())
        return None


_KIND_TAGS: dict[EntityKind, tuple[str, str, int]] = {
    EntityKind.organization: ("ORGANIZATION", "LOCATION,PERSON,MISC", 3),
    EntityKind.person: ("PERSON", "LOCATION,MISC", 2),
    EntityKind.equipment: ("MISC", "LOCATION", 1),
}

_KIND_ALIASES: dict[str, EntityKind] = {
    "organization": EntityKind.organization,
    "organisation": EntityKind.organization,
    "org": EntityKind.organization,
    "person": EntityKind.person,
    "pers": EntityKind.person,
    "equipment": EntityKind.equipment,
    "equip": EntityKind.equipment,
    "misc": EntityKind.equipment,
}


class NameEntry(NamedTuple):
    """A single categorised name of a tenant."""

    kind: EntityKind
    value: str

    @classmethod
    def coerce(cls, item: NameEntry | tuple[str, str]) -> NameEntry:
        """Accept a NameEntry or any ``(label, value)`` pair."""
        label, value = item
        try:
            kind = EntityKind(label)
        except ValueError:
            raise ValueError(f"Unknown entity label: {label!r}") from None
        return cls(kind, value)


class CacheEntry(BaseModel):
    """Provenance record of one tenant's cached gazetteer.

    ``source_timestamp`` tracks data freshness (the newest name record seen
    when the content was rendered). ``cache_timestamp`` tracks check
    freshness (the last time the oracle confirmed the content). The two are
    independent clocks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tenant: str = Field(min_length=1)
    source_timestamp: datetime
    cache_timestamp: datetime

    @field_validator("tenant")
    @classmethod
    def validate_tenant(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("tenant cannot be empty or whitespace")
        return v

    @field_validator("source_timestamp", "cache_timestamp")
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def touched(self, now: datetime) -> CacheEntry:
        """Copy of this entry confirmed fresh at *now*."""
        return self.model_copy(update={"cache_timestamp": ensure_utc(now)})
