"""Filter types and the composition rule used for filtered content blocks.

A filter list ``[F1, F2, ..., Fn]`` wraps a content producer ``C`` so that
the effective rendering function is ``F1(F2(...Fn(C)...))``: the last
declared filter sits closest to the raw content.

Two filter variants share one capability, ``apply(inner) -> producer``:

- SimpleFilter  - ``str -> str``; the inner content is fully rendered first.
- DynamicFilter - receives the inner producer itself (the yield block) and
                  decides whether, when and how often to call it.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Union

from mason.core.exceptions import InvalidFilterError

logger = logging.getLogger(__name__)

# Zero-argument callable returning rendered text.
ContentProducer = Callable[[], str]
YieldBlock = ContentProducer


class Filter(ABC):
    """Abstract base class for filters.

    Example:
        class Upper(Filter):
            def apply(self, inner: ContentProducer) -> ContentProducer:
                return lambda: inner().upper()
    """

    name: Optional[str] = None

    @abstractmethod
    def apply(self, inner: ContentProducer) -> ContentProducer:
        """Wrap ``inner`` and return the filtered producer."""
        ...

    def __call__(self, content: Union[str, ContentProducer]) -> str:
        """Apply this filter to a string or a content producer."""
        return self.apply(as_producer(content))()

    def get_name(self) -> str:
        """Get filter name for logging/debugging."""
        return self.name or self.__class__.__name__


class SimpleFilter(Filter):
    """Filter over already rendered text."""

    def __init__(self, func: Callable[[str], str], name: Optional[str] = None) -> None:
        self.func = func
        self.name = name or getattr(func, "__name__", None)

    def apply(self, inner: ContentProducer) -> ContentProducer:
        func = self.func

        def render() -> str:
            return func(inner())

        return render

    def __repr__(self) -> str:
        return f"SimpleFilter({self.get_name()!r})"


class DynamicFilter(Filter):
    """Filter that controls execution of the wrapped content.

    ``filter`` is called with the yield block uncalled. If it never calls
    the block, the wrapped content never renders.
    """

    def __init__(self, filter: Callable[[YieldBlock], str], name: Optional[str] = None) -> None:
        self.filter = filter
        self.name = name or getattr(filter, "__name__", None)

    def apply(self, inner: ContentProducer) -> ContentProducer:
        func = self.filter

        def render() -> str:
            return func(inner)

        return render

    def __repr__(self) -> str:
        return f"DynamicFilter({self.get_name()!r})"


def as_producer(content: Union[str, ContentProducer]) -> ContentProducer:
    """Turn literal text into a producer; pass callables through."""
    if callable(content):
        return content
    text = str(content)
    return lambda: text


def as_filter(obj: Any) -> Filter:
    """Coerce ``obj`` to a Filter. Plain callables become simple filters."""
    if isinstance(obj, Filter):
        return obj
    if callable(obj):
        return SimpleFilter(obj)
    raise InvalidFilterError(
        f"Object of type {type(obj).__name__} cannot be used as a filter",
        context={"filter": repr(obj)},
    )


def flatten_filters(filters: Iterable[Any]) -> List[Filter]:
    """Flatten nested filter lists in declaration order.

    A capability lookup may return either one filter or a list of them; both
    forms are accepted anywhere in a filter list.
    """
    flat: List[Filter] = []
    for item in filters:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten_filters(item))
        else:
            flat.append(as_filter(item))
    return flat


def compose(filters: Iterable[Any], producer: Union[str, ContentProducer]) -> ContentProducer:
    """Build the effective rendering function for ``filters`` around ``producer``.

    Args:
        filters: Filters in declaration order (left to right)
        producer: Raw content producer or literal text

    Returns:
        Zero-argument callable equal to ``F1(F2(...Fn(producer)...))``
    """
    flat = flatten_filters(filters)
    result = as_producer(producer)
    for flt in reversed(flat):
        result = flt.apply(result)
    if flat:
        logger.debug("Composed filters: %s", ", ".join(f.get_name() for f in flat))
    return result


class FilterPipeline:
    """A reusable filter list.

    Example:
        pipeline = FilterPipeline([Trim(), H()])
        result = pipeline.render("  <b>  ")
    """

    def __init__(self, filters: Optional[Iterable[Any]] = None) -> None:
        self.filters: List[Filter] = flatten_filters(filters or [])

    def compose(self, producer: Union[str, ContentProducer]) -> ContentProducer:
        return compose(self.filters, producer)

    def render(self, content: Union[str, ContentProducer]) -> str:
        """Run the composed pipeline and return the filtered text."""
        return self.compose(content)()

    def add_filter(self, flt: Any) -> None:
        """Add a filter as the new innermost filter."""
        self.filters.append(as_filter(flt))

    def insert_filter(self, index: int, flt: Any) -> None:
        """Insert a filter at a specific position."""
        self.filters.insert(index, as_filter(flt))

    def __len__(self) -> int:
        return len(self.filters)


__all__ = [
    "ContentProducer",
    "YieldBlock",
    "Filter",
    "SimpleFilter",
    "DynamicFilter",
    "FilterPipeline",
    "as_filter",
    "as_producer",
    "flatten_filters",
    "compose",
]
