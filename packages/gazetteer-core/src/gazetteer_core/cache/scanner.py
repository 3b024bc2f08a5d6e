"""Locates a tenant's cached gazetteer pair inside the cache directory."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

from gazetteer_core.cache.codec import MetadataDecodeError, decode
from gazetteer_core.cache.models import CacheEntry

logger = logging.getLogger(__name__)

CONTENT_SUFFIX = ".txt"
SIDECAR_SUFFIX = ".json"

_SAFE_STEM_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_\-.@]*")
_DIGEST_SUFFIX_RE = re.compile(r"-[0-9a-f]{12}$")


def tenant_stem(tenant: str) -> str:
    """Filesystem-safe file stem shared by a tenant's content and sidecar.

    Ids that are already safe are used as-is. Anything else is sanitized and
    suffixed with a short digest of the raw id, so no id can escape the cache
    directory. Safe ids that end in a digest-shaped suffix are digested too:
    only digested stems end that way, and distinct raw ids give distinct
    digests.
    """
    if (
        _SAFE_STEM_RE.fullmatch(tenant)
        and ".." not in tenant
        and not _DIGEST_SUFFIX_RE.search(tenant)
    ):
        return tenant
    name = re.sub(r"[^A-Za-z0-9_\-.@]", "_", tenant)
    name = name.replace("..", "_").strip(".")
    digest = hashlib.sha256(tenant.encode("utf-8")).hexdigest()[:12]
    return f"{name or '_tenant'}-{digest}"


def content_path(directory: Path, tenant: str) -> Path:
    return directory / f"{tenant_stem(tenant)}{CONTENT_SUFFIX}"


def sidecar_path(directory: Path, tenant: str) -> Path:
    return directory / f"{tenant_stem(tenant)}{SIDECAR_SUFFIX}"


class DirectoryScanner:
    """Read-only view over the cache directory. Never takes a write lock."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def content_path(self, tenant: str) -> Path:
        return content_path(self.directory, tenant)

    def sidecar_path(self, tenant: str) -> Path:
        return sidecar_path(self.directory, tenant)

    def find(self, tenant: str) -> CacheEntry | None:
        """Return the tenant's cache entry, or None if there is no usable pair.

        Half pairs, empty or corrupt sidecars, and sidecars recorded for a
        different tenant all count as a miss.
        """
        sidecar = self.sidecar_path(tenant)
        content = self.content_path(tenant)
        has_sidecar = sidecar.is_file()
        has_content = content.is_file()

        if not (has_sidecar and has_content):
            if has_sidecar or has_content:
                logger.debug("Incomplete cache pair for tenant '%s', ignoring", tenant)
            return None

        entry = self._read(sidecar)
        if entry is None:
            return None
        if entry.tenant != tenant:
            logger.warning(
                "Sidecar %s belongs to tenant '%s', not '%s'", sidecar, entry.tenant, tenant
            )
            return None
        return entry

    def entries(self) -> list[CacheEntry]:
        """All complete, decodable entries in the cache directory."""
        if not self.directory.is_dir():
            return []
        result: list[CacheEntry] = []
        for sidecar in sorted(self.directory.glob(f"*{SIDECAR_SUFFIX}")):
            entry = self._read(sidecar)
            if entry is None:
                continue
            if sidecar.stem != tenant_stem(entry.tenant):
                continue
            if not self.content_path(entry.tenant).is_file():
                continue
            result.append(entry)
        return result

    def _read(self, sidecar: Path) -> CacheEntry | None:
        data = sidecar.read_bytes()
        if not data.strip():
            return None
        try:
            return decode(data)
        except MetadataDecodeError:
            logger.warning("Corrupt sidecar %s, treating as missing", sidecar, exc_info=True)
            return None
