"""Mason configuration: layered YAML with environment overrides."""
from .manager import ConfigManager
from .domains import BaseDomainConfig, DeferConfig, FiltersConfig, NEXT_FLUSH, SAME_FLUSH

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "DeferConfig",
    "FiltersConfig",
    "SAME_FLUSH",
    "NEXT_FLUSH",
]
