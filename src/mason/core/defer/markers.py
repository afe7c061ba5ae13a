"""Distinct marker strings for deferred content.

A marker has the form ``<prefix><salt>_<n><suffix>``. The salt is random per
generator so markers do not occur in ordinary rendered text, the counter
makes every marker of one generator unique, and the non-empty suffix keeps
``..._1__`` from being a prefix of ``..._12__``. Only ``[A-Za-z0-9_]`` is
used, so markers carry no regex metacharacters.
"""
from __future__ import annotations

import itertools
import re
import secrets
from typing import Optional

from mason.core.config.domains import DeferConfig

_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_SUFFIX_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class MarkerGenerator:
    """Produce distinct strings for one request (or one process)."""

    def __init__(
        self,
        prefix: str = "__MASON_DEFER_",
        suffix: str = "__",
        salt: Optional[str] = None,
    ) -> None:
        if not _PREFIX_PATTERN.match(prefix):
            raise ValueError(f"Marker prefix must match [A-Za-z0-9_]+: {prefix!r}")
        if not _SUFFIX_PATTERN.match(suffix):
            raise ValueError(f"Marker suffix must be non-empty and start with a letter or '_': {suffix!r}")
        if salt is not None and not _PREFIX_PATTERN.match(salt):
            raise ValueError(f"Marker salt must match [A-Za-z0-9_]+: {salt!r}")
        self.prefix = prefix
        self.suffix = suffix
        self.salt = salt or secrets.token_hex(8)
        self._counter = itertools.count(1)

    @classmethod
    def from_config(cls, config: DeferConfig, salt: Optional[str] = None) -> "MarkerGenerator":
        return cls(prefix=config.marker_prefix, suffix=config.marker_suffix, salt=salt)

    def next_distinct_string(self) -> str:
        return f"{self.prefix}{self.salt}_{next(self._counter)}{self.suffix}"


__all__ = ["MarkerGenerator"]
