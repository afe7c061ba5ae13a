"""
Mason config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, project overrides
(.mason/config/*.yaml) and MASON_* environment variables.
"""

from __future__ import annotations

import argparse

import yaml

from mason.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from mason.core.config import ConfigManager
from mason.core.exceptions import MasonError

SUMMARY = "Show current configuration"

_MISSING = object()


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'defer.nested')",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Show configuration - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(get_repo_root(args))
        config = manager.load_config(validate=True)
    except MasonError as exc:
        formatter.error(exc, error_code="config_error")
        return 1

    if args.key:
        value = manager.get(args.key, _MISSING)
        if value is _MISSING:
            formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="not_found")
            return 1
        data = {args.key: value}
    else:
        data = config

    if formatter.json_mode:
        formatter.json_output(data)
    else:
        formatter.text(yaml.safe_dump(data, default_flow_style=False, sort_keys=True).rstrip())
    return 0
