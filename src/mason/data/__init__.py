"""Bundled configuration defaults and the config schema."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_SCHEMA = "config.schema.yaml"


def get_data_path(kind: str) -> Path:
    """Directory holding bundled ``config`` or ``schemas`` files."""
    return Path(str(resources.files(__name__) / kind))


@lru_cache(maxsize=None)
def config_schema() -> Dict[str, Any]:
    """JSON schema the merged configuration is validated against (cached)."""
    path = get_data_path("schemas") / CONFIG_SCHEMA
    return yaml.safe_load(path.read_text(encoding="utf-8"))


__all__ = ["CONFIG_SCHEMA", "config_schema", "get_data_path"]
