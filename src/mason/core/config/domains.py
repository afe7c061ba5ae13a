"""Typed accessors for the configuration sections Mason reads.

Usage:
    cfg = DeferConfig(repo_root=Path("/path/to/project"))
    cfg.nested_policy  # "same_flush"

A pre-loaded config mapping can be passed instead of a repo root, which is
how requests built in tests avoid touching the filesystem.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .manager import ConfigManager

SAME_FLUSH = "same_flush"
NEXT_FLUSH = "next_flush"


class BaseDomainConfig(ABC):
    """Abstract base class for section accessors."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            repo_root: Repository root path. Uses the current directory if None.
            config: Already merged configuration; skips loading when given.
        """
        self._repo_root = repo_root
        if config is None:
            config = ConfigManager(repo_root=repo_root).load_config(validate=True)
        self._config = dict(config)

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's configuration section (empty dict when missing)."""
        section = self._config.get(self._config_section(), {}) or {}
        return section if isinstance(section, dict) else {}


class DeferConfig(BaseDomainConfig):
    """Settings for marker construction and flush behaviour."""

    def _config_section(self) -> str:
        return "defer"

    @cached_property
    def marker_prefix(self) -> str:
        return str(self.section.get("marker_prefix", "__MASON_DEFER_"))

    @cached_property
    def marker_suffix(self) -> str:
        return str(self.section.get("marker_suffix", "__"))

    @cached_property
    def nested_policy(self) -> str:
        return str(self.section.get("nested", SAME_FLUSH))

    @cached_property
    def max_entries_per_flush(self) -> int:
        return int(self.section.get("max_entries_per_flush", 10000))


class FiltersConfig(BaseDomainConfig):
    """Settings for filter resolution and the bundled cache filter."""

    def _config_section(self) -> str:
        return "filters"

    @cached_property
    def pipe_separator(self) -> str:
        return str(self.section.get("pipe_separator", ","))

    @cached_property
    def cache_default_expires_in(self) -> Optional[float]:
        cache = self._config.get("cache") or {}
        value = cache.get("default_expires_in") if isinstance(cache, dict) else None
        return float(value) if value is not None else None


__all__ = [
    "BaseDomainConfig",
    "DeferConfig",
    "FiltersConfig",
    "SAME_FLUSH",
    "NEXT_FLUSH",
]
