"""Keeps one RegexNER gazetteer per tenant fresh, lazily, on demand.

Freshness is tracked with two clocks. ``cache_timestamp`` records when the
entry was last confirmed and gates how often the freshness oracle is asked
at all. ``source_timestamp`` records the newest name record the content was
rendered from and decides whether the content must be rebuilt.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from pathlib import Path

from gazetteer_core.cache.generator import render
from gazetteer_core.cache.models import CacheEntry, ensure_utc
from gazetteer_core.cache.scanner import DirectoryScanner
from gazetteer_core.cache.serializer import WriteSerializer
from gazetteer_core.config.models import GazetteerSettings
from gazetteer_core.interfaces.source import FreshnessOracle, NameSource

logger = logging.getLogger(__name__)


class CacheAction(str, Enum):
    """What resolve() does for a tenant, one per state of its cache entry."""

    serve = "serve"            # present and fresh
    touch = "touch"            # present, stale, source unchanged
    regenerate = "regenerate"  # present, stale, source changed
    generate = "generate"      # missing
    absent = "absent"          # no source data


@dataclass(frozen=True)
class Decision:
    action: CacheAction
    source_timestamp: datetime | None = None


def decide(
    entry: CacheEntry | None,
    now: datetime,
    min_check_interval: timedelta,
    latest_update: Callable[[], datetime | None],
) -> Decision:
    """Pick the next action for a tenant.

    *latest_update* is only called when the entry is missing or its debounce
    window has elapsed; a fresh entry is served without asking the oracle.
    """
    if entry is not None:
        age = now - entry.cache_timestamp
        if age <= min_check_interval:
            return Decision(CacheAction.serve, entry.source_timestamp)
        logger.debug(
            "Cache time elapsed (%s > %s). Check for new state.", age, min_check_interval
        )

    latest = latest_update()
    if latest is None:
        return Decision(CacheAction.absent)
    latest = ensure_utc(latest)

    if entry is None:
        return Decision(CacheAction.generate, latest)
    if latest == entry.source_timestamp:
        return Decision(CacheAction.touch, latest)
    return Decision(CacheAction.regenerate, latest)


class GazetteerCache:
    """Resolves a tenant id to the path of an up-to-date gazetteer file."""

    def __init__(
        self,
        settings: GazetteerSettings,
        oracle: FreshnessOracle,
        names: NameSource,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.directory = Path(settings.directory)
        self._oracle = oracle
        self._names = names
        self._clock = clock or (lambda: datetime.now(UTC))
        self.scanner = DirectoryScanner(self.directory)
        self.serializer = WriteSerializer(self.directory)

    def resolve(self, tenant: str) -> Path | None:
        """Return the tenant's gazetteer path, or None when there is nothing to recognise.

        Oracle, name source and filesystem errors propagate to the caller.
        """
        if not self.settings.enabled:
            return None
        if not tenant or not tenant.strip():
            raise ValueError("tenant cannot be empty or whitespace")

        now = ensure_utc(self._clock())
        entry = self.scanner.find(tenant)
        decision = decide(
            entry,
            now,
            self.settings.min_check_delta,
            lambda: self._oracle.latest_update(tenant),
        )

        if decision.action is CacheAction.serve:
            return self.scanner.content_path(tenant)

        if decision.action is CacheAction.absent:
            logger.debug("No names for tenant '%s', no gazetteer needed", tenant)
            return None

        if decision.action is CacheAction.touch:
            logger.debug("No state change detected for tenant '%s'.", tenant)
            self.serializer.touch(entry.touched(now))
            return self.scanner.content_path(tenant)

        if decision.action is CacheAction.regenerate:
            logger.debug(
                "There have been state changes for tenant '%s'. Reload gazetteer.", tenant
            )
        return self._generate(tenant, decision.source_timestamp, now)

    def _generate(self, tenant: str, source_timestamp: datetime, now: datetime) -> Path | None:
        logger.info("Generating gazetteer for tenant '%s'", tenant)
        content = render(self._names.all_names(tenant))
        if not content:
            logger.debug("Tenant '%s' has no usable names, nothing written", tenant)
            return None
        entry = CacheEntry(tenant=tenant, source_timestamp=source_timestamp, cache_timestamp=now)
        return self.serializer.write(entry, content)
