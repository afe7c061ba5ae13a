"""Deferred substitution: markers now, content at flush time."""
from .markers import MarkerGenerator
from .registry import DeferEntry, DeferRegistry, RegistryState

__all__ = ["MarkerGenerator", "DeferEntry", "DeferRegistry", "RegistryState"]
