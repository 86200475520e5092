"""
fsmkit graph validate command.

SUMMARY: Validate a machine definition file
"""

from __future__ import annotations

import argparse

from fsmkit.cli import OutputFormatter, add_input_arg, add_json_flag, load_factory

SUMMARY = "Validate a machine definition file"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Check a definition against the schema and build its graph."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        factory = load_factory(args.input)
    except Exception as e:
        formatter.error(e)
        return 1

    formatter.success(
        {
            "input": args.input,
            "states": len(factory.states),
            "transitions": len(factory.edges),
        },
        f"✓ {args.input}: {len(factory.states)} states, {len(factory.edges)} transitions",
        status="valid",
    )
    return 0
