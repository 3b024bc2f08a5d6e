from .loader import load_config
from .models import (
    GazetteerConfig,
    GazetteerSettings,
    StoreConfig,
)

__all__ = [
    "GazetteerConfig",
    "GazetteerSettings",
    "StoreConfig",
    "load_config",
]
