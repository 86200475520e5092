"""Lifecycle pipeline for a single named transition.

Execution order (each step awaited before the next starts):
1. ``onBefore<Transition>``
2. ``onLeave<OldState>``
3. ``on<Transition>``
4. state commit
5. ``onEnter<NewState>``
6. ``on<NewState>``
7. ``onAfter<Transition>``

A failing hook stops the pipeline. Nothing is rolled back: once step 4 has
run, the machine stays in the new state even if a later hook raises.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import InvalidTransitionError
from .graph import TransitionGraph
from .hooks import HookRegistry, pipeline_hook_names

if TYPE_CHECKING:
    from .machine import Machine

logger = logging.getLogger(__name__)

# Capability token for state writes; only the executor passes it to Machine._commit.
_LOCK = object()

_PHASES = ("before", "leave", "transition", "commit", "enter", "state", "after")


class LifecycleExecutor:
    """Runs transitions for every machine created by one factory."""

    def __init__(self, graph: TransitionGraph, hooks: HookRegistry) -> None:
        self.graph = graph
        self.hooks = hooks

    async def run(self, machine: "Machine", name: str) -> Any:
        """Run transition ``name`` on ``machine`` and return the new state.

        Raises:
            InvalidTransitionError: If ``name`` has no edge leaving the current state
        """
        old_state = machine.state
        edge = self.graph.edge_from(name, old_state)
        if edge is None:
            raise InvalidTransitionError(
                context={"transition": name, "from": old_state},
            )
        new_state = edge[1]
        hook_names = pipeline_hook_names(name, old_state, new_state)

        for phase in _PHASES:
            try:
                if phase == "commit":
                    machine._commit(_LOCK, new_state)
                    logger.debug("%s: %r -> %r", name, old_state, new_state)
                else:
                    await self.hooks.invoke(hook_names[phase], machine)
            except Exception:
                logger.debug("Transition %r stopped in %s phase", name, phase)
                raise

        return new_state


__all__ = ["LifecycleExecutor"]
