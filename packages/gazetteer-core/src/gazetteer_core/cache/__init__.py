"""Gazetteer cache: sidecar codec, rendering, scanning, serialized writes, freshness."""

from gazetteer_core.cache.codec import MetadataDecodeError, decode, encode
from gazetteer_core.cache.generator import render
from gazetteer_core.cache.models import CacheEntry, EntityKind, NameEntry
from gazetteer_core.cache.orchestrator import (
    CacheAction,
    Decision,
    GazetteerCache,
    decide,
)
from gazetteer_core.cache.scanner import DirectoryScanner
from gazetteer_core.cache.serializer import WriteSerializer

__all__ = [
    "CacheAction",
    "CacheEntry",
    "Decision",
    "DirectoryScanner",
    "EntityKind",
    "GazetteerCache",
    "MetadataDecodeError",
    "NameEntry",
    "WriteSerializer",
    "decide",
    "decode",
    "encode",
    "render",
]
