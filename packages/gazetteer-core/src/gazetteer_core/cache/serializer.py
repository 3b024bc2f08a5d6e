"""Serialized, crash-safe writes of a tenant's content + sidecar pair."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from gazetteer_core.cache.codec import encode
from gazetteer_core.cache.models import CacheEntry
from gazetteer_core.cache.scanner import content_path, sidecar_path

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to a temp sibling, fsync it, then move it over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class WriteSerializer:
    """Grants one writer at a time per tenant.

    Locks are created on demand and keyed by tenant id, so writes for
    different tenants run in parallel while two writers can never interleave
    on the same pair of files.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, tenant: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(tenant)
            if lock is None:
                lock = self._locks[tenant] = threading.Lock()
            return lock

    @contextmanager
    def lock(self, tenant: str) -> Iterator[None]:
        """Critical section for all writes touching *tenant*'s files."""
        with self._lock_for(tenant):
            yield

    def write(self, entry: CacheEntry, content: str) -> Path:
        """Replace the tenant's pair: content first, then the sidecar.

        The content is durable before the sidecar moves, so a crash in between
        leaves the old sidecar next to new, complete content and never a
        sidecar pointing at a missing or partial file.
        """
        target = content_path(self.directory, entry.tenant)
        with self.lock(entry.tenant):
            logger.debug("Writing gazetteer for tenant '%s' to %s", entry.tenant, target)
            atomic_write_bytes(target, content.encode("utf-8"))
            atomic_write_bytes(sidecar_path(self.directory, entry.tenant), encode(entry))
        return target

    def touch(self, entry: CacheEntry) -> None:
        """Rewrite only the sidecar, leaving the content file as it is."""
        with self.lock(entry.tenant):
            atomic_write_bytes(sidecar_path(self.directory, entry.tenant), encode(entry))
