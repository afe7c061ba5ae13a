"""
Mason filter apply command.

SUMMARY: Apply a pipe filter list to text from stdin or a file

Example:
    echo "  <b>hi</b>  " | mason filter apply "Trim,H"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mason.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from mason.core.config import ConfigManager
from mason.core.exceptions import MasonError
from mason.core.request import Request

SUMMARY = "Apply a pipe filter list to text from stdin or a file"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "filters",
        help="Filter names in declaration order, e.g. 'Trim,H'",
    )
    parser.add_argument(
        "--file",
        type=str,
        help="Read input from this file instead of stdin",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = ConfigManager(get_repo_root(args)).load_config(validate=True)
        if args.file:
            text = Path(args.file).read_text(encoding="utf-8")
        else:
            text = sys.stdin.read()

        request = Request(config=config)
        output = request.run(lambda req: req.apply_pipe(text, args.filters))
    except MasonError as exc:
        formatter.error(exc, error_code="filter_error")
        return 1
    except OSError as exc:
        formatter.error(exc, error_code="io_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"filters": args.filters, "output": output})
    else:
        sys.stdout.write(output)
    return 0
