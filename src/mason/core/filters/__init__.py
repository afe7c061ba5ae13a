"""Filter composition: filter types, registries and the standard filter set."""
from .base import (
    ContentProducer,
    DynamicFilter,
    Filter,
    FilterPipeline,
    SimpleFilter,
    YieldBlock,
    as_filter,
    as_producer,
    compose,
    flatten_filters,
)
from .cache import CacheBackend, MemoryCache, cache_filter
from .registry import FilterRegistry
from .standard import standard_registry

__all__ = [
    "ContentProducer",
    "YieldBlock",
    "Filter",
    "SimpleFilter",
    "DynamicFilter",
    "FilterPipeline",
    "FilterRegistry",
    "CacheBackend",
    "MemoryCache",
    "as_filter",
    "as_producer",
    "cache_filter",
    "compose",
    "flatten_filters",
    "standard_registry",
]
