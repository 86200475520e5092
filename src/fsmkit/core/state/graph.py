"""Transition graph built from declarative transition definitions.

A definition maps each transition name to ``{"from": ..., "to": ...}`` where
``from`` is a single state or a list of states. The graph keeps three views
of the same data:

- ``states``: every state named by any transition, in first-appearance order
- ``edges``: transition name -> tuple of ``(source, target)`` pairs
- ``all_edges``: deduplicated union of every per-transition edge

plus a reverse-adjacency index (``joins``) used by the path planner.
"""
from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from types import MappingProxyType
from typing import Any, Iterable

from ..exceptions import DefinitionError, InvalidEdgeError, InvalidTransitionError, NoTransitionsError

logger = logging.getLogger(__name__)

Edge = tuple[Hashable, Hashable]


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _unique(items: Iterable[Any]) -> list[Any]:
    seen: set[Any] = set()
    out: list[Any] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def _definition_ends(name: str, definition: Any) -> tuple[list[Any], list[Any]]:
    if not isinstance(definition, Mapping):
        raise DefinitionError(
            f"Transition '{name}' must be a mapping with 'from' and 'to'",
            context={"transition": name},
        )
    if "from" in definition:
        sources = definition["from"]
    elif "from_" in definition:
        sources = definition["from_"]
    else:
        raise DefinitionError(f"Transition '{name}' is missing 'from'", context={"transition": name})
    if "to" not in definition:
        raise DefinitionError(f"Transition '{name}' is missing 'to'", context={"transition": name})
    return _as_list(sources), _as_list(definition["to"])


def get_states(transitions: Mapping[str, Any]) -> tuple[Hashable, ...]:
    """Return every state referenced by ``transitions``, first appearance first."""
    found: list[Any] = []
    for name, definition in transitions.items():
        sources, targets = _definition_ends(name, definition)
        found.extend(sources)
        found.extend(targets)
    return tuple(_unique(found))


def get_edges(transitions: Mapping[str, Any]) -> dict[str, tuple[Edge, ...]]:
    """Expand each transition's sources x target into its own edge list."""
    edges: dict[str, tuple[Edge, ...]] = {}
    for name, definition in transitions.items():
        sources, targets = _definition_ends(name, definition)
        edges[name] = tuple(_unique((s, t) for s in sources for t in targets))
    return edges


def get_all_edges(edges: Mapping[str, Iterable[Edge]]) -> tuple[Edge, ...]:
    """Flatten per-transition edges into one deduplicated list."""
    return tuple(_unique(edge for pairs in edges.values() for edge in pairs))


class TransitionGraph:
    """Immutable graph over a set of named transitions.

    States are interned to integer indices so the reverse-adjacency index is a
    plain tuple of tuples. Sources feeding a target are ordered by where the
    source first appears as an edge origin in ``all_edges``.
    """

    def __init__(self, transitions: Mapping[str, Any] | None) -> None:
        if not transitions:
            raise NoTransitionsError()
        if not isinstance(transitions, Mapping):
            raise DefinitionError(
                f"Transitions must be a mapping, got {type(transitions).__name__}"
            )

        self.states: tuple[Hashable, ...] = get_states(transitions)
        self.edges: Mapping[str, tuple[Edge, ...]] = MappingProxyType(get_edges(transitions))
        self.all_edges: tuple[Edge, ...] = get_all_edges(self.edges)
        self.names: tuple[str, ...] = tuple(self.edges.keys())

        self._index: dict[Hashable, int] = {state: i for i, state in enumerate(self.states)}
        self._edge_set = frozenset(self.all_edges)
        self.joins: tuple[tuple[int, ...], ...] = self._build_joins()

        logger.debug(
            "Built transition graph: %d states, %d transitions, %d edges",
            len(self.states),
            len(self.names),
            len(self.all_edges),
        )

    def _build_joins(self) -> tuple[tuple[int, ...], ...]:
        origin_rank: dict[int, int] = {}
        for source, _ in self.all_edges:
            origin_rank.setdefault(self._index[source], len(origin_rank))

        incoming: list[set[int]] = [set() for _ in self.states]
        for source, target in self.all_edges:
            incoming[self._index[target]].add(self._index[source])

        return tuple(tuple(sorted(sources, key=origin_rank.__getitem__)) for sources in incoming)

    # ------------------------------------------------------------------
    # Index helpers
    # ------------------------------------------------------------------
    def index_of(self, state: Hashable) -> int | None:
        try:
            idx = self._index.get(state)
        except TypeError:
            # Unhashable values are never states.
            return None
        # Equal hashes are not enough: True and 1.0 are not the state 1.
        if idx is None or type(self.states[idx]) is not type(state):
            return None
        return idx

    def state_at(self, index: int) -> Hashable:
        return self.states[index]

    def has_state(self, state: Any) -> bool:
        return self.index_of(state) is not None

    def sources_of(self, state: Hashable) -> list[Hashable]:
        """Return the states with a direct edge into ``state``."""
        idx = self.index_of(state)
        if idx is None:
            return []
        return [self.states[i] for i in self.joins[idx]]

    # ------------------------------------------------------------------
    # Edge queries
    # ------------------------------------------------------------------
    def has_edge(self, source: Any, target: Any) -> bool:
        if not (self.has_state(source) and self.has_state(target)):
            return False
        return (source, target) in self._edge_set

    def edge_from(self, name: str, source: Any) -> Edge | None:
        """Return the first edge of ``name`` leaving ``source``."""
        for edge in self.edges.get(name, ()):
            if edge[0] == source:
                return edge
        return None

    def names_from(self, source: Any) -> list[str]:
        """Return transition names with at least one edge leaving ``source``."""
        return [name for name, pairs in self.edges.items() if any(s == source for s, _ in pairs)]

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------
    def find_names(self, pair: Edge) -> list[str]:
        """Return every transition name realizing ``pair``, in declaration order."""
        source, target = pair
        if not self.has_edge(source, target):
            return []
        return [
            name
            for name, pairs in self.edges.items()
            if any(s == source and t == target for s, t in pairs)
        ]

    def resolve_direct(self, source: Any, target: Any, *, edge: bool = False) -> str:
        """Resolve a single-hop request. The last matching name wins."""
        names = self.find_names((source, target))
        if not names:
            ctx = {"from": source, "to": target}
            if edge:
                raise InvalidEdgeError(context=ctx)
            raise InvalidTransitionError(context=ctx)
        return names[-1]

    def resolve_path_names(self, pairs: Iterable[Edge]) -> list[str]:
        """Resolve a planned chain of pairs. The first matching name wins per pair."""
        resolved: list[str] = []
        for pair in pairs:
            names = self.find_names(pair)
            if not names:
                raise InvalidTransitionError(context={"from": pair[0], "to": pair[1]})
            resolved.append(names[0])
        return resolved


__all__ = [
    "Edge",
    "TransitionGraph",
    "get_states",
    "get_edges",
    "get_all_edges",
]
