"""
fsmkit graph path command.

SUMMARY: Plan the shortest path through a chain of states

Prints the (from, to) pairs a machine at ``--from`` would walk through to
reach each waypoint in order, and the transitions ``thru`` would run.
"""

from __future__ import annotations

import argparse

from fsmkit.cli import OutputFormatter, add_input_arg, add_json_flag, load_factory

SUMMARY = "Plan the shortest path through a chain of states"


def _state_value(raw: str, states: tuple) -> object:
    """Map a CLI string onto a declared state, accepting integer states."""
    if raw in states:
        return raw
    try:
        number = int(raw)
    except ValueError:
        return raw
    return number if number in states else raw


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser)
    parser.add_argument(
        "--from",
        dest="start",
        required=True,
        help="State the machine starts in",
    )
    parser.add_argument(
        "waypoints",
        nargs="+",
        help="States to pass through, in order",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Print the planned path, or fail when it is unreachable."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        factory = load_factory(args.input)
        start = _state_value(args.start, factory.states)
        waypoints = [_state_value(w, factory.states) for w in args.waypoints]
        steps = factory({factory.state_key: start}).plan(*waypoints)
    except Exception as e:
        formatter.error(e)
        return 1

    formatter.success(
        {
            "from": start,
            "waypoints": waypoints,
            "path": [list(pair) for _, pair in steps],
            "transitions": [name for name, _ in steps],
        },
        "\n".join(f"{name}: {a} -> {b}" for name, (a, b) in steps),
    )
    return 0
