"""Tracks the request currently rendering.

Filters such as ``Defer`` and ``Cache`` are resolved by name without
arguments, so they look up the active request here when they run.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator, Optional

from mason.core.exceptions import RequestStateError

if TYPE_CHECKING:
    from mason.core.request import Request

_current_request: ContextVar[Optional["Request"]] = ContextVar("mason_current_request", default=None)


def current_request() -> "Request":
    """Return the active request or raise RequestStateError."""
    request = _current_request.get()
    if request is None:
        raise RequestStateError("No request is currently rendering")
    return request


@contextmanager
def use_request(request: "Request") -> Iterator["Request"]:
    """Make ``request`` the active request for the duration of the block."""
    token = _current_request.set(request)
    try:
        yield request
    finally:
        _current_request.reset(token)


__all__ = ["current_request", "use_request"]
