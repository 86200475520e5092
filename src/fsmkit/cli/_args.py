"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_input_arg(parser: argparse.ArgumentParser, *, allow_dot: bool = False) -> None:
    """Add -i/--input for a machine definition.

    Args:
        parser: ArgumentParser to add the argument to
        allow_dot: Whether a ready-made .dot document is an accepted input
    """
    kinds = ".yaml, .yml, .json" + (", .dot" if allow_dot else "")
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        help=f"Definition file ({kinds}) or 'package.module:attribute' naming a MachineFactory",
    )


__all__ = ["add_json_flag", "add_input_arg"]
