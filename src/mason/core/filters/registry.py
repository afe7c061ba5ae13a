"""Filter registries: the capability set a component resolves filter names in.

Entries are factories. Calling a factory with the invocation arguments
returns a Filter, a plain ``str -> str`` callable, or a list of those.

    registry = FilterRegistry(parent=standard_registry)

    @registry.register("Upper")
    def upper():
        return SimpleFilter(str.upper)

    @registry.filter_block("Wrap")
    def wrap(yield_, tag="div"):
        return f"<{tag}>{yield_()}</{tag}>"

Registries chain to a parent, so a component sees its own filters first and
then everything it inherits.
"""
from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from mason.core.exceptions import InvalidFilterArgumentError, UnknownFilterError

from .base import DynamicFilter, Filter, SimpleFilter, YieldBlock, flatten_filters

logger = logging.getLogger(__name__)

FilterFactory = Callable[..., Any]

NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FilterRegistry:
    """Named filter factories with optional parent lookup."""

    def __init__(self, parent: Optional["FilterRegistry"] = None, name: str = "component") -> None:
        self._factories: Dict[str, FilterFactory] = {}
        self.parent = parent
        self.name = name

    def register(self, name: str) -> Callable[[FilterFactory], FilterFactory]:
        """Decorator to register a filter factory under ``name``."""
        def decorator(factory: FilterFactory) -> FilterFactory:
            self.add(name, factory)
            return factory
        return decorator

    def add(self, name: str, factory: FilterFactory) -> None:
        """Add a filter factory to the registry."""
        if not NAME_PATTERN.match(name):
            raise ValueError(f"Invalid filter name: {name!r}")
        self._factories[name] = factory

    def register_simple(self, name: str) -> Callable[[Callable[[str], str]], Callable[[str], str]]:
        """Decorator registering a ``str -> str`` function as an argument-less filter."""
        def decorator(func: Callable[[str], str]) -> Callable[[str], str]:
            self.add(name, lambda: SimpleFilter(func, name=name))
            return func
        return decorator

    def filter_block(self, name: str) -> Callable[[Callable[..., str]], Callable[..., str]]:
        """Decorator defining a named dynamic filter with inline logic.

        The decorated body takes the yield block first, then its own
        parameters. Invoking the registered filter binds the parameters and
        returns a DynamicFilter.
        """
        def decorator(body: Callable[..., str]) -> Callable[..., str]:
            def factory(*args: Any, **kwargs: Any) -> DynamicFilter:
                def run(yield_block: YieldBlock) -> str:
                    return body(yield_block, *args, **kwargs)
                return DynamicFilter(run, name=name)

            # Expose the body's parameters minus the yield block so pipe
            # resolution can tell whether the filter needs arguments.
            sig = inspect.signature(body)
            params = list(sig.parameters.values())[1:]
            factory.__signature__ = sig.replace(parameters=params)  # type: ignore[attr-defined]
            factory.__name__ = getattr(body, "__name__", name)
            self.add(name, factory)
            return body
        return decorator

    def get(self, name: str) -> Optional[FilterFactory]:
        """Get a factory by name, searching parent registries."""
        factory = self._factories.get(name)
        if factory is None and self.parent is not None:
            return self.parent.get(name)
        return factory

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def list_filters(self) -> List[str]:
        """List all visible filter names, own names shadowing inherited ones."""
        names = set(self._factories)
        if self.parent is not None:
            names.update(self.parent.list_filters())
        return sorted(names)

    def child(self, name: str = "component") -> "FilterRegistry":
        """Create a registry inheriting from this one."""
        return FilterRegistry(parent=self, name=name)

    def create(self, name: str, *args: Any, **kwargs: Any) -> List[Filter]:
        """Instantiate a filter by name with block-invocation arguments."""
        factory = self.get(name)
        if factory is None:
            raise UnknownFilterError(
                f"No filter named '{name}' in {self.name}",
                context={"filter": name, "registry": self.name},
            )
        return flatten_filters([factory(*args, **kwargs)])

    # ---------------------------------------------------------------------
    # Pipe invocation
    # ---------------------------------------------------------------------

    def parse_pipe(self, spec: Union[str, Sequence[str]], separator: str = ",") -> List[str]:
        """Split a pipe filter list into names, rejecting arguments.

        Args:
            spec: ``"Trim,H"`` or ``["Trim", "H"]``
            separator: Separator used when ``spec`` is a string

        Returns:
            Filter names in declaration order
        """
        items = spec.split(separator) if isinstance(spec, str) else list(spec)
        names: List[str] = []
        for raw in items:
            item = str(raw).strip()
            if not item:
                raise InvalidFilterArgumentError(
                    f"Empty filter name in filter list '{_describe(spec, separator)}'",
                    context={"filters": _describe(spec, separator)},
                )
            if "(" in item or ")" in item or any(ch.isspace() for ch in item):
                raise InvalidFilterArgumentError(
                    f"Filter '{item}' has arguments; pipe filters must be bare names",
                    context={"filter": item, "filters": _describe(spec, separator)},
                )
            names.append(item)
        return names

    def resolve_pipe(self, spec: Union[str, Sequence[str]], separator: str = ",") -> List[Filter]:
        """Resolve a pipe filter list to filter instances in declaration order.

        Raises:
            UnknownFilterError: a name is not in this registry or its parents
            InvalidFilterArgumentError: an entry carries arguments, is empty,
                or names a filter that cannot be created without arguments
        """
        described = _describe(spec, separator)
        resolved: List[Filter] = []
        for name in self.parse_pipe(spec, separator):
            factory = self.get(name) if NAME_PATTERN.match(name) else None
            if factory is None:
                raise UnknownFilterError(
                    f"Unknown filter '{name}' in filter list '{described}'",
                    context={"filter": name, "filters": described, "registry": self.name},
                )
            if not _accepts_no_arguments(factory):
                raise InvalidFilterArgumentError(
                    f"Filter '{name}' requires arguments and cannot be used in filter list '{described}'",
                    context={"filter": name, "filters": described},
                )
            resolved.extend(flatten_filters([factory()]))
        logger.debug("Resolved filter list '%s' to %d filter(s)", described, len(resolved))
        return resolved


def _describe(spec: Union[str, Sequence[str]], separator: str) -> str:
    return spec if isinstance(spec, str) else separator.join(str(s) for s in spec)


def _accepts_no_arguments(factory: FilterFactory) -> bool:
    try:
        inspect.signature(factory).bind()
    except TypeError:
        return False
    except ValueError:
        # Builtins without introspectable signatures: assume callable bare.
        return True
    return True


__all__ = ["FilterRegistry", "FilterFactory"]
