"""Capabilities the gazetteer cache consumes from the name store."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from gazetteer_core.cache.models import NameEntry


@runtime_checkable
class FreshnessOracle(Protocol):
    """Newest modification time across a tenant's name-bearing records."""

    def latest_update(self, tenant: str) -> datetime | None: ...


@runtime_checkable
class NameSource(Protocol):
    """Full current set of a tenant's categorised names."""

    def all_names(self, tenant: str) -> Sequence[NameEntry | tuple[str, str]]: ...


@runtime_checkable
class NameStore(FreshnessOracle, NameSource, Protocol):
    """A single backend serving both queries."""

    ...
