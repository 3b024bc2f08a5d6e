from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, Field


class GazetteerSettings(BaseModel):
    enabled: bool = True
    directory: str = ".gazetteer/cache"
    min_check_interval: float = Field(default=60.0, ge=0)

    @property
    def min_check_delta(self) -> timedelta:
        """Debounce window between two freshness checks of one tenant."""
        return timedelta(seconds=self.min_check_interval)


class StoreConfig(BaseModel):
    db_path: str = ".gazetteer/names.db"


class GazetteerConfig(BaseModel):
    gazetteer: GazetteerSettings = Field(default_factory=GazetteerSettings)
    store: StoreConfig = Field(default_factory=StoreConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
