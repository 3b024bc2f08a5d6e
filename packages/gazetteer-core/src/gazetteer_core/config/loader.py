"""YAML config loading with env var expansion."""

import os
import re
from collections.abc import Iterator
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import GazetteerConfig

# Only these variables may be referenced as ${VAR} inside a config file.
_ALLOWED_ENV_VARS = frozenset({
    "GAZETTEER_HOME",
    "GAZETTEER_CACHE_DIR",
    "GAZETTEER_DB_PATH",
    "HOME",
    "TMPDIR",
    "XDG_CACHE_HOME",
    "XDG_DATA_HOME",
})

_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def config_candidates(cli_path: str | None = None) -> Iterator[Path]:
    """Existing config files, highest priority first.

    An explicit ``cli_path`` must exist; the project-local and user-global
    files are optional.
    """
    if cli_path:
        path = Path(cli_path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        yield path
    for path in (Path("gazetteer.yaml"), Path.home() / ".gazetteer" / "config.yaml"):
        if path.is_file():
            yield path


def load_config(cli_path: str | None = None) -> GazetteerConfig:
    """First non-empty file from config_candidates(), else defaults."""
    for path in config_candidates(cli_path):
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            return GazetteerConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
    return GazetteerConfig()


def _read_yaml(path: Path) -> object:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Expand allow-listed ${VAR} references in every string of a YAML tree."""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(_lookup_env, obj)
    return obj


def _lookup_env(match: re.Match) -> str:
    name = match.group(1)
    if name not in _ALLOWED_ENV_VARS:
        return ""
    return os.environ.get(name, "")


# Default YAML template for `gazetteer config init`
DEFAULT_CONFIG_TEMPLATE = """\
# gazetteer.yaml

# Regex-NER gazetteer cache
gazetteer:
  enabled: true
  directory: ".gazetteer/cache"
  min_check_interval: 60       # seconds between freshness checks per tenant

# Local name store (SQLite)
store:
  db_path: ".gazetteer/names.db"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
