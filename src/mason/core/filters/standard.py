"""Standard filters every component inherits.

Simple filters (pipe or block invocation):
    Trim          - strip leading and trailing whitespace
    CompressSpace - collapse whitespace runs to a single space
    NoBlankLines  - drop lines containing only whitespace
    H             - HTML-escape
    U             - URI-escape
    HTMLPara      - wrap blank-line separated paragraphs in <p> tags

Dynamic filters:
    Repeat(times)          - render the block ``times`` times
    Capture(sink)          - hand the rendered block to ``sink``, output nothing
    Defer                  - render the block at flush time
    Cache(key, expires_in) - serve the block from the request cache
"""
from __future__ import annotations

import html
import re
from typing import Any, Callable, List, Optional, Union
from urllib.parse import quote

from .base import DynamicFilter, SimpleFilter, YieldBlock
from .cache import CacheBackend, cache_filter
from .registry import FilterRegistry

standard_registry = FilterRegistry(name="standard")

_WHITESPACE_RUN = re.compile(r"\s+")
_BLANK_LINE = re.compile(r"^\s*\n", re.MULTILINE)
_PARAGRAPH_BREAK = re.compile(r"\n{2,}")


@standard_registry.register("Trim")
def trim() -> SimpleFilter:
    return SimpleFilter(str.strip, name="Trim")


@standard_registry.register("CompressSpace")
def compress_space() -> SimpleFilter:
    return SimpleFilter(lambda text: _WHITESPACE_RUN.sub(" ", text), name="CompressSpace")


@standard_registry.register("NoBlankLines")
def no_blank_lines() -> SimpleFilter:
    return SimpleFilter(lambda text: _BLANK_LINE.sub("", text), name="NoBlankLines")


@standard_registry.register("H")
def html_escape() -> SimpleFilter:
    return SimpleFilter(lambda text: html.escape(text, quote=True), name="H")


@standard_registry.register("U")
def uri_escape() -> SimpleFilter:
    return SimpleFilter(lambda text: quote(text, safe=""), name="U")


def _html_para(text: str) -> str:
    paragraphs = _PARAGRAPH_BREAK.split(text.strip("\n"))
    return "<p>\n" + "\n</p>\n\n<p>\n".join(paragraphs) + "\n</p>\n"


@standard_registry.register("HTMLPara")
def html_para() -> SimpleFilter:
    return SimpleFilter(_html_para, name="HTMLPara")


@standard_registry.register("Repeat")
def repeat(times: int) -> DynamicFilter:
    """Call the yield block ``times`` times and concatenate the results."""
    count = int(times)

    def run(yield_block: YieldBlock) -> str:
        return "".join(yield_block() for _ in range(count))

    return DynamicFilter(run, name="Repeat")


@standard_registry.register("Capture")
def capture(sink: Union[Callable[[str], Any], List[str]]) -> DynamicFilter:
    """Render the block into ``sink`` (a callable or list) and output nothing."""
    def run(yield_block: YieldBlock) -> str:
        text = yield_block()
        if isinstance(sink, list):
            sink.append(text)
        else:
            sink(text)
        return ""

    return DynamicFilter(run, name="Capture")


@standard_registry.register("Defer")
def defer() -> DynamicFilter:
    """Emit a marker now; the block renders when the request buffer flushes."""
    def run(yield_block: YieldBlock) -> str:
        from mason.core.context import current_request

        return current_request().defer(yield_block)

    return DynamicFilter(run, name="Defer")


@standard_registry.register("Cache")
def cache(
    key: str,
    expires_in: Optional[float] = None,
    *,
    backend: Optional[CacheBackend] = None,
) -> DynamicFilter:
    return cache_filter(key, expires_in, cache=backend)


__all__ = [
    "standard_registry",
    "trim",
    "compress_space",
    "no_blank_lines",
    "html_escape",
    "uri_escape",
    "html_para",
    "repeat",
    "capture",
    "defer",
    "cache",
]
