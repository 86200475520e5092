"""Graph export for machine definitions.

Turns the states/edges artifacts of a factory into a Graphviz DOT document
or a plain JSON-friendly document. Rendering DOT to an image is left to
external tools (e.g. ``dot -Tsvg``).

Styles are a mapping of selector -> attribute mapping:

- ``.graph``: graph attributes
- ``.node`` / ``.node <STATE>``: node attributes
- ``.edge`` / ``.edge <name>``: attributes for every edge of a transition
- ``.edge[<a>-><b>]`` / ``.edge <name>[<a>-><b>]``: a single edge
"""
from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Dict, List, Optional

Styles = Mapping[str, Mapping[str, Any]]


def _attrs(attrs: Mapping[str, Any]) -> str:
    out = ""
    for key, value in attrs.items():
        cleaned = str(value).replace('"', "").replace("'", "")
        out += f' {key} = "{cleaned}" '
    return out


def _merge(*parts: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for part in parts:
        if part:
            merged.update(part)
    return merged


def states_to_dot(states: Iterable[Hashable], styles: Styles) -> List[str]:
    lines = []
    for state in states:
        attrs = _merge({"label": f" {state} "}, styles.get(".node"), styles.get(f".node {state}"))
        lines.append(f'  "{state}" [{_attrs(attrs)}];')
    return lines


def edges_to_dot(edges: Mapping[str, Iterable[tuple[Hashable, Hashable]]], styles: Styles) -> List[str]:
    lines = []
    for name, pairs in edges.items():
        base = _merge({"label": f" {name} "}, styles.get(".edge"), styles.get(f".edge {name}"))
        for source, target in pairs:
            attrs = _merge(
                base,
                styles.get(f".edge[{source}->{target}]"),
                styles.get(f".edge {name}[{source}->{target}]"),
            )
            lines.append(f'  "{source}" -> "{target}" [{_attrs(attrs)}];')
    return lines


def graph_attrs_to_dot(styles: Styles) -> List[str]:
    return [f"  {key}={value};" for key, value in (styles.get(".graph") or {}).items()]


def to_dot(
    states: Iterable[Hashable],
    edges: Mapping[str, Iterable[tuple[Hashable, Hashable]]],
    *,
    name: str = "fsm",
    styles: Optional[Styles] = None,
) -> str:
    """Return a ``digraph`` document for ``states`` and ``edges``."""
    styles = styles or {}
    graph_str = "\n".join(graph_attrs_to_dot(styles))
    state_str = "\n".join(states_to_dot(states, styles))
    edge_str = "\n".join(edges_to_dot(edges, styles))
    return f'digraph "{name}" {{\n{graph_str}\n{state_str}\n{edge_str}\n}}'


def to_document(
    states: Iterable[Hashable],
    edges: Mapping[str, Iterable[tuple[Hashable, Hashable]]],
) -> Dict[str, Any]:
    """Return ``{"states": [...], "edges": {name: [[from, to], ...]}}``."""
    return {
        "states": list(states),
        "edges": {name: [[source, target] for source, target in pairs] for name, pairs in edges.items()},
    }


__all__ = ["to_dot", "to_document", "states_to_dot", "edges_to_dot", "graph_attrs_to_dot"]
