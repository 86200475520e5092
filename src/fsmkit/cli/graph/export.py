"""
fsmkit graph export command.

SUMMARY: Export a machine's graph as a DOT or JSON document

DOT output can be rendered with Graphviz, e.g. ``fsmkit graph export -i fsm.yaml | dot -Tsvg``.
A ``.dot`` input is passed through unchanged.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from fsmkit.cli import OutputFormatter, add_input_arg, load_factory, load_styles
from fsmkit.core.export import to_document, to_dot

SUMMARY = "Export a machine's graph as a DOT or JSON document"


def _parse_format(value: str) -> str:
    cleaned = value.lstrip(".").lower()
    if cleaned not in ("dot", "json"):
        raise argparse.ArgumentTypeError("Unsupported output type, please specify either dot or json")
    return cleaned


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_input_arg(parser, allow_dot=True)
    parser.add_argument(
        "-g",
        "--graph",
        default="fsm",
        help="Name of the graph (default: fsm)",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=_parse_format,
        default="dot",
        help="Output format, either dot or json (default: dot)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file; writes to stdout when omitted",
    )
    parser.add_argument(
        "-s",
        "--styles",
        help="YAML/JSON styles mapping (.graph, .node, .edge selectors)",
    )


def render(args: argparse.Namespace) -> str:
    """Return the exported document for ``args`` as text."""
    if Path(args.input).suffix.lower() == ".dot":
        if args.format != "dot":
            raise ValueError("A .dot input can only be exported as dot")
        return Path(args.input).read_text(encoding="utf-8")

    factory = load_factory(args.input)
    if args.format == "json":
        return json.dumps(to_document(factory.states, factory.edges), indent=2, default=str)

    styles = load_styles(args.styles) if args.styles else None
    return to_dot(factory.states, factory.edges, name=args.graph, styles=styles)


def main(args: argparse.Namespace) -> int:
    """Export a graph to stdout or a file."""
    formatter = OutputFormatter()
    try:
        out = render(args)
    except Exception as e:
        formatter.error(e)
        return 1

    if args.output:
        Path(args.output).write_text(out, encoding="utf-8")
    else:
        formatter.text(out)
    return 0
