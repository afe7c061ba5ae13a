from __future__ import annotations

from typing import Any, Dict, Mapping


class MasonError(Exception):
    """Base exception for Mason."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class UnknownFilterError(MasonError, LookupError):
    """Raised when a pipe-invocation names a filter that cannot be resolved."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class InvalidFilterArgumentError(MasonError, ValueError):
    """Raised when arguments are supplied where pipe-invocation forbids them."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InvalidFilterError(MasonError, TypeError):
    """Raised when an object in a filter list is not usable as a filter."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        TypeError.__init__(self, message)


class DeferredProducerError(MasonError, RuntimeError):
    """Raised when a deferred producer fails while the buffer is flushed.

    The original exception is chained as ``__cause__``. Substitutions applied
    before the failing entry are kept; ``partial_output`` holds that text.
    """

    def __init__(
        self,
        message: str,
        *,
        marker: str | None = None,
        index: int | None = None,
        partial_output: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if marker is not None:
            ctx["marker"] = marker
        if index is not None:
            ctx["index"] = index
        MasonError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.partial_output = partial_output


class DeferLimitError(MasonError, RuntimeError):
    """Raised when nested defers keep a flush from reaching a fixed point."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class RequestStateError(MasonError, RuntimeError):
    """Raised when a request is used after it was terminated."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(MasonError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        MasonError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "MasonError",
    "UnknownFilterError",
    "InvalidFilterArgumentError",
    "InvalidFilterError",
    "DeferredProducerError",
    "DeferLimitError",
    "RequestStateError",
    "ConfigError",
]
