"""Gazetteer Core - per-tenant RegexNER gazetteer cache."""

from gazetteer_core.cache import CacheEntry, EntityKind, GazetteerCache, NameEntry
from gazetteer_core.config import GazetteerConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "EntityKind",
    "GazetteerCache",
    "GazetteerConfig",
    "NameEntry",
    "load_config",
]
