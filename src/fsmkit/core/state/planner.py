"""Shortest-path planning for multi-hop (``thru``) transitions."""
from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from typing import Iterable, TypeVar

from .graph import Edge, TransitionGraph

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_pairs(items: Sequence[T]) -> list[tuple[T, T]]:
    """Return consecutive pairs: ``[A, B, C]`` -> ``[(A, B), (B, C)]``."""
    return [(items[i], items[i + 1]) for i in range(len(items) - 1)]


def join_segments(segments: Iterable[Sequence[T]]) -> list[T]:
    """Concatenate state sequences, dropping each shared joint state."""
    sequence: list[T] = []
    for segment in segments:
        if sequence:
            sequence.extend(segment[1:])
        else:
            sequence.extend(segment)
    return sequence


class PathPlanner:
    """Backward search over a graph's reverse-adjacency index.

    The search walks from the goal toward the start, depth first, using an
    explicit stack. Every branch carries its own chain of visited nodes, so a
    node reached by one branch can still be reached by a sibling. Among the
    completed paths, the shortest one wins and ties go to the first one
    discovered.
    """

    def __init__(self, graph: TransitionGraph) -> None:
        self.graph = graph

    def shortest(self, start: Hashable, goal: Hashable) -> list[Hashable] | None:
        """Return the shortest forward state sequence from ``start`` to ``goal``.

        ``start == goal`` searches for a cycle back to ``start``; it is never
        answered with a zero-length path.
        """
        a = self.graph.index_of(start)
        b = self.graph.index_of(goal)
        if a is None or b is None:
            return None

        joins = self.graph.joins
        best: tuple[int, ...] | None = None

        # Items are (node, chain, complete). ``chain`` runs from ``node`` to the
        # goal; ``complete`` marks a chain that already starts at ``start``.
        stack: list[tuple[int, tuple[int, ...], bool]] = [(b, (b,), False)]
        while stack:
            node, chain, complete = stack.pop()
            if complete:
                if best is None or len(chain) < len(best):
                    best = chain
                continue
            if node in chain[1:]:
                continue
            if best is not None and len(chain) + 1 >= len(best):
                continue

            children = [
                (src, (src,) + chain, src == a)
                for src in joins[node]
            ]
            stack.extend(reversed(children))

        if best is None:
            return None
        return [self.graph.state_at(i) for i in best]

    def plan(self, chain: Sequence[Hashable], *, allow_cycles: bool = False) -> list[Edge] | None:
        """Plan a waypoint chain into consecutive ``(from, to)`` pairs.

        Returns ``None`` when any leg is unreachable, or when the chain is a
        bare same-state request and cycles are not allowed.
        """
        if len(chain) == 2 and chain[0] == chain[-1] and not allow_cycles:
            return None
        if len(chain) < 2:
            return []

        segments: list[list[Hashable]] = []
        for start, goal in get_pairs(chain):
            segment = self.shortest(start, goal)
            if segment is None:
                logger.debug("No path from %r to %r", start, goal)
                return None
            segments.append(segment)

        pairs = get_pairs(join_segments(segments))
        logger.debug("Planned %r as %r", list(chain), pairs)
        return pairs


__all__ = ["PathPlanner", "get_pairs", "join_segments"]
