"""
Mason filter list command.

SUMMARY: List filters available to pipe and block invocation
"""

from __future__ import annotations

import argparse
import inspect

from mason.cli import OutputFormatter, add_json_flag
from mason.core.filters import standard_registry

SUMMARY = "List filters available to pipe and block invocation"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def _describe(name: str) -> dict:
    factory = standard_registry.get(name)
    params = list(inspect.signature(factory).parameters.values()) if factory else []
    required = [
        p.name for p in params
        if p.default is inspect.Parameter.empty
        and p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    optional = [p.name for p in params if p.default is not inspect.Parameter.empty]
    return {
        "name": name,
        "arguments": required,
        "options": optional,
        "pipe": not required,
    }


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    filters = [_describe(name) for name in standard_registry.list_filters()]

    if formatter.json_mode:
        formatter.json_output({"filters": filters})
        return 0

    for info in filters:
        signature = ", ".join(info["arguments"] + [f"{o}=..." for o in info["options"]])
        usage = "pipe, block" if info["pipe"] else "block"
        formatter.text(f"{info['name']}({signature})  [{usage}]")
    return 0
