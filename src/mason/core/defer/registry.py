"""Per-request registry of deferred content.

During rendering, ``defer(producer)`` returns a marker that the caller puts
in the output in place of the real content. When the request buffer is
flushed, every pending producer runs in the order its ``defer()`` call
happened and its text replaces the first occurrence of its marker in the
then-current buffer. Text inserted by an earlier substitution is visible to
later ones, so deferred content may itself contain markers.

States::

    EMPTY --defer()--> ACCUMULATING --flush()--> DRAINING --> EMPTY

Defers registered while DRAINING (from inside a producer) are resolved in
the same flush after everything queued before them, or kept for the next
flush when the nested policy is ``next_flush``.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple, Union

from mason.core.buffer import RequestBuffer
from mason.core.config.domains import NEXT_FLUSH, SAME_FLUSH, DeferConfig
from mason.core.exceptions import DeferLimitError, DeferredProducerError

from .markers import MarkerGenerator

logger = logging.getLogger(__name__)

Producer = Callable[[], str]


class RegistryState(str, Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    DRAINING = "draining"


@dataclass(frozen=True)
class DeferEntry:
    marker: str
    producer: Producer


class DeferRegistry:
    """Pending deferred computations for one request."""

    def __init__(
        self,
        generator: Optional[MarkerGenerator] = None,
        *,
        nested_policy: str = SAME_FLUSH,
        max_entries_per_flush: int = 10000,
    ) -> None:
        if nested_policy not in (SAME_FLUSH, NEXT_FLUSH):
            raise ValueError(f"Unknown nested defer policy: {nested_policy!r}")
        self.generator = generator or MarkerGenerator()
        self.nested_policy = nested_policy
        self.max_entries_per_flush = max_entries_per_flush
        self._entries: Deque[DeferEntry] = deque()
        self._carry: List[DeferEntry] = []
        self._draining = False

    @classmethod
    def from_config(cls, config: DeferConfig, generator: Optional[MarkerGenerator] = None) -> "DeferRegistry":
        return cls(
            generator or MarkerGenerator.from_config(config),
            nested_policy=config.nested_policy,
            max_entries_per_flush=config.max_entries_per_flush,
        )

    @property
    def state(self) -> RegistryState:
        if self._draining:
            return RegistryState.DRAINING
        return RegistryState.ACCUMULATING if self._entries else RegistryState.EMPTY

    @property
    def pending(self) -> Tuple[DeferEntry, ...]:
        """Entries waiting for a flush, in call order."""
        return tuple(self._entries) + tuple(self._carry)

    def __len__(self) -> int:
        return len(self._entries) + len(self._carry)

    def defer(self, producer: Producer) -> str:
        """Register ``producer`` and return the marker to embed in the output."""
        marker = self.generator.next_distinct_string()
        entry = DeferEntry(marker=marker, producer=producer)
        if self._draining and self.nested_policy == NEXT_FLUSH:
            self._carry.append(entry)
        else:
            self._entries.append(entry)
        logger.debug("Deferred %s (state=%s)", marker, self.state.value)
        return marker

    def flush(self, buffer: Union[str, RequestBuffer]) -> str:
        """Substitute all pending deferred content into ``buffer``.

        Args:
            buffer: Text, or a RequestBuffer which is updated in place

        Returns:
            The fully substituted text

        Raises:
            DeferredProducerError: a producer raised; earlier substitutions
                stay applied and later entries are dropped
            DeferLimitError: nested defers exceeded ``max_entries_per_flush``
        """
        target = buffer if isinstance(buffer, RequestBuffer) else RequestBuffer(buffer)
        self.apply(target)
        return target.getvalue()

    def apply(self, buffer: RequestBuffer) -> None:
        """Pre-flush hook: drain pending entries into ``buffer``."""
        if not self._entries:
            return
        self._draining = True
        processed = 0
        try:
            while self._entries:
                if processed >= self.max_entries_per_flush:
                    self._discard()
                    raise DeferLimitError(
                        f"More than {self.max_entries_per_flush} deferred entries in one flush",
                        context={"limit": self.max_entries_per_flush},
                    )
                entry = self._entries.popleft()
                index = processed
                processed += 1
                try:
                    text = entry.producer()
                except Exception as exc:
                    dropped = self._discard()
                    if dropped:
                        logger.warning(
                            "Deferred producer for %s failed; dropping %d pending entries",
                            entry.marker,
                            dropped,
                        )
                    raise DeferredProducerError(
                        f"Deferred producer #{index} failed: {exc}",
                        marker=entry.marker,
                        index=index,
                        partial_output=buffer.getvalue(),
                    ) from exc
                if not buffer.replace_first(entry.marker, "" if text is None else str(text)):
                    logger.debug("Marker %s not found in buffer; skipped", entry.marker)
        finally:
            self._draining = False
            if self._carry:
                self._entries.extend(self._carry)
                self._carry = []
        logger.debug("Flushed %d deferred entries", processed)

    def clear(self) -> None:
        """Drop all pending entries without running them."""
        self._discard()

    def _discard(self) -> int:
        dropped = len(self._entries) + len(self._carry)
        self._entries.clear()
        self._carry = []
        return dropped


__all__ = ["DeferEntry", "DeferRegistry", "RegistryState", "Producer"]
