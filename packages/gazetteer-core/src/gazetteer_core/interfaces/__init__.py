from gazetteer_core.interfaces.source import FreshnessOracle, NameSource, NameStore

__all__ = [
    "FreshnessOracle",
    "NameSource",
    "NameStore",
]
