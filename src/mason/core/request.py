"""Request: the buffer, filters and deferred content of one render.

Usage:
    from mason.core.filters.standard import repeat

    request = Request()
    title: list[str] = []

    def page(req: Request) -> None:
        req.write("<title>", req.defer(lambda: title[0]), "</title>")
        req.write(req.filter(repeat(2), "ab"))
        title.append("Done")

    output = request.run(page)

Output written during rendering accumulates in the request buffer. Before
the buffer is emitted, pre-flush hooks run with mutable access to it; the
defer registry is always the first hook.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, TextIO, Union

from mason.core.buffer import RequestBuffer
from mason.core.config import ConfigManager, DeferConfig, FiltersConfig
from mason.core.context import use_request
from mason.core.defer import DeferRegistry, MarkerGenerator
from mason.core.exceptions import DeferLimitError, RequestStateError
from mason.core.filters.base import ContentProducer, compose
from mason.core.filters.cache import CacheBackend, MemoryCache
from mason.core.filters.registry import FilterRegistry
from mason.core.filters.standard import standard_registry

logger = logging.getLogger(__name__)

PreFlushHook = Callable[[RequestBuffer], None]
OutputSink = Union[Callable[[str], Any], TextIO]
Block = Callable[["Request"], Any]


class Request:
    """State of one rendering request.

    Args:
        filters: Capability set filter names resolve in; defaults to a
            registry inheriting the standard filters
        out: Where flushed output goes (callable or text stream); output is
            also collected in ``output``
        cache: Backend used by the Cache filter
        config: Merged configuration mapping; bundled defaults when None
        marker_generator: Source of distinct marker strings

    Raises:
        ConfigError: ``config`` is None and the layered configuration is
            invalid. Any ``MASON_*`` environment variable counts as an
            override, so a stray one such as ``MASON_X__`` or
            ``MASON_LOGGING=debug`` fails here; pass ``config`` explicitly to
            build a request independent of the environment.
    """

    def __init__(
        self,
        *,
        filters: Optional[FilterRegistry] = None,
        out: Optional[OutputSink] = None,
        cache: Optional[CacheBackend] = None,
        config: Optional[Mapping[str, Any]] = None,
        marker_generator: Optional[MarkerGenerator] = None,
    ) -> None:
        if config is None:
            config = ConfigManager().load_config(validate=True)
        defer_config = DeferConfig(config=config)
        filters_config = FiltersConfig(config=config)

        self.filters = filters or standard_registry.child(name="request")
        self.pipe_separator = filters_config.pipe_separator
        self.cache: CacheBackend = cache or MemoryCache(filters_config.cache_default_expires_in)
        self.defers = DeferRegistry.from_config(defer_config, generator=marker_generator)
        self.out = out
        self.output = io.StringIO()

        self._buffers: List[RequestBuffer] = [RequestBuffer()]
        self._pre_flush_hooks: List[PreFlushHook] = [self.defers.apply]
        self._terminated = False

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    @property
    def buffer(self) -> RequestBuffer:
        """The request buffer flushes operate on (bottom of the stack)."""
        return self._buffers[0]

    @property
    def current_buffer(self) -> RequestBuffer:
        return self._buffers[-1]

    def write(self, *chunks: Any) -> None:
        """Append text to the current buffer."""
        self.current_buffer.write(*("" if c is None else str(c) for c in chunks))

    print = write

    def capture(self, block: Callable[[], Any]) -> str:
        """Run ``block`` with a fresh buffer and return what it wrote.

        A string returned by the block is appended to the captured text.
        """
        self._buffers.append(RequestBuffer())
        try:
            result = block()
            if isinstance(result, str):
                self.current_buffer.write(result)
        finally:
            captured = self._buffers.pop()
        return captured.getvalue()

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _content_producer(self, content: Union[str, Callable[[], Any]]) -> ContentProducer:
        if callable(content):
            return lambda: self.capture(content)
        text = "" if content is None else str(content)
        return lambda: text

    def filter(self, *args: Any) -> str:
        """Block invocation: ``filter(F1, ..., Fn, content)``.

        ``content`` is a string or a zero-argument block; output the block
        writes to the request is captured as its content.
        """
        if not args:
            raise TypeError("filter() requires content")
        *filters, content = args
        with use_request(self):
            return compose(filters, self._content_producer(content))()

    def filter_named(self, name: str, *args: Any, content: Union[str, Callable[[], Any]], **kwargs: Any) -> str:
        """Block invocation of a filter looked up by name with arguments.

        Example:
            req.filter_named("Repeat", 3, content=lambda: req.write("x"))
        """
        filters = self.filters.create(name, *args, **kwargs)
        return self.filter(*filters, content)

    def apply_pipe(self, value: Any, spec: Union[str, Sequence[str]]) -> str:
        """Pipe invocation: resolve ``spec`` by name and filter ``value``."""
        resolved = self.filters.resolve_pipe(spec, self.pipe_separator)
        with use_request(self):
            return compose(resolved, self._content_producer(value))()

    # ------------------------------------------------------------------
    # Defer
    # ------------------------------------------------------------------

    def defer(self, producer: Callable[[], Any]) -> str:
        """Register deferred content and return its marker."""
        if self._terminated:
            raise RequestStateError(
                "Cannot defer content after the request has terminated",
                context={"pending": len(self.defers)},
            )
        return self.defers.defer(self._bind(producer))

    def _bind(self, producer: Callable[[], Any]) -> Callable[[], Any]:
        def run() -> Any:
            with use_request(self):
                return producer()
        return run

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    def add_pre_flush_hook(self, hook: PreFlushHook) -> None:
        """Register a hook run with the buffer before each flush."""
        self._pre_flush_hooks.append(hook)

    def flush_buffer(self) -> str:
        """Run pre-flush hooks, emit the buffer and reset it.

        Text from the first marker still pending (a defer nested under the
        ``next_flush`` policy) onwards stays in the buffer and is emitted by
        a later flush once that marker is substituted.

        Returns:
            The emitted text
        """
        if len(self._buffers) > 1:
            raise RequestStateError("Cannot flush while output is being captured")
        for hook in self._pre_flush_hooks:
            hook(self.buffer)
        pending = self.buffer.getvalue()
        held = self._held_from(pending)
        text = pending[:held]
        self.buffer.set(pending[held:])
        self._emit(text)
        logger.debug("Flushed %d characters, holding %d", len(text), len(pending) - held)
        return text

    def _held_from(self, text: str) -> int:
        """Offset of the first marker still waiting for a later flush."""
        positions = [text.find(entry.marker) for entry in self.defers.pending]
        found = [pos for pos in positions if pos >= 0]
        return min(found) if found else len(text)

    def _emit(self, text: str) -> None:
        self.output.write(text)
        if self.out is None or not text:
            return
        if callable(self.out):
            self.out(text)
        else:
            self.out.write(text)

    def run(self, block: Block) -> str:
        """Render ``block`` into the buffer, flush and terminate.

        Flushing repeats until no deferred entry is pending, so content
        deferred for a later flush still lands before the request ends.

        Returns:
            All output emitted by this request
        """
        if self._terminated:
            raise RequestStateError("Request has already terminated")
        try:
            with use_request(self):
                result = block(self)
                if isinstance(result, str):
                    self.write(result)
            self.flush_buffer()
            rounds = 0
            while len(self.defers):
                rounds += 1
                if rounds > self.defers.max_entries_per_flush:
                    self.defers.clear()
                    raise DeferLimitError(
                        f"Deferred content still pending after {rounds - 1} extra flushes",
                        context={"limit": self.defers.max_entries_per_flush},
                    )
                self.flush_buffer()
        finally:
            self.terminate()
        return self.output.getvalue()

    def terminate(self) -> None:
        """End the request; pending defers are dropped and defer() is refused."""
        if self._terminated:
            return
        if len(self.defers):
            logger.debug("Dropping %d unflushed deferred entries", len(self.defers))
        self.defers.clear()
        self._terminated = True

    @property
    def terminated(self) -> bool:
        return self._terminated


__all__ = ["Request", "PreFlushHook"]
