"""Sidecar metadata codec: CacheEntry <-> JSON bytes."""

from __future__ import annotations

import json

from pydantic import ValidationError

from gazetteer_core.cache.models import CacheEntry


class MetadataDecodeError(ValueError):
    """Raised when sidecar bytes do not hold a valid CacheEntry."""


def encode(entry: CacheEntry) -> bytes:
    """Serialize *entry* as a flat, two-space indented JSON object."""
    payload = {
        "tenant": entry.tenant,
        "source_timestamp": entry.source_timestamp.isoformat(),
        "cache_timestamp": entry.cache_timestamp.isoformat(),
    }
    return json.dumps(payload, indent=2).encode("utf-8")


def decode(data: bytes) -> CacheEntry:
    """Parse sidecar bytes. Anything malformed raises MetadataDecodeError."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MetadataDecodeError(f"sidecar is not valid UTF-8: {e}") from e
    try:
        return CacheEntry.model_validate_json(text, strict=True)
    except ValidationError as e:
        raise MetadataDecodeError(f"invalid sidecar: {e}") from e
