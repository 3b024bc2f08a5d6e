"""Shared test fixtures for the gazetteer cache."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from gazetteer_core.cache import GazetteerCache
from gazetteer_core.config.models import GazetteerConfig, GazetteerSettings


T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeStore:
    """In-memory oracle + name source that counts its queries."""

    def __init__(self) -> None:
        self.latest: dict[str, datetime] = {}
        self.names: dict[str, list[tuple[str, str]]] = {}
        self.latest_calls = 0
        self.names_calls = 0

    def set(self, tenant: str, names: list[tuple[str, str]], updated: datetime) -> None:
        self.names[tenant] = list(names)
        self.latest[tenant] = updated

    def latest_update(self, tenant: str) -> datetime | None:
        self.latest_calls += 1
        return self.latest.get(tenant)

    def all_names(self, tenant: str) -> list[tuple[str, str]]:
        self.names_calls += 1
        return list(self.names.get(tenant, []))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir):
    return GazetteerSettings(directory=str(cache_dir), min_check_interval=60)


@pytest.fixture
def cache(settings, store, clock):
    return GazetteerCache(settings, oracle=store, names=store, clock=clock)


@pytest.fixture
def sample_config():
    return GazetteerConfig()
