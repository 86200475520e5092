"""
fsmkit graph show command.

SUMMARY: Show the states and transitions of a machine definition
"""

from __future__ import annotations

import argparse

from fsmkit.cli import OutputFormatter, add_input_arg, add_json_flag, load_factory

SUMMARY = "Show the states and transitions of a machine definition"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Print states, transitions and terminal states."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        factory = load_factory(args.input)
    except Exception as e:
        formatter.error(e)
        return 1

    origins = {source for source, _ in factory.graph.all_edges}
    terminal = [state for state in factory.states if state not in origins]

    if formatter.json_mode:
        formatter.json_output(
            {
                "stateKey": factory.state_key,
                "allowCyclicalTransitions": factory.allow_cyclical_transitions,
                "states": list(factory.states),
                "terminal": terminal,
                "transitions": {
                    name: [list(pair) for pair in pairs] for name, pairs in factory.edges.items()
                },
            }
        )
        return 0

    formatter.text(f"States ({len(factory.states)}): {', '.join(str(s) for s in factory.states)}")
    formatter.text(f"Terminal: {', '.join(str(s) for s in terminal) or '-'}")
    formatter.text("Transitions:")
    for name, pairs in factory.edges.items():
        rendered = ", ".join(f"{a} -> {b}" for a, b in pairs)
        formatter.text_kv(name, rendered)
    return 0
