"""Machine factory and live machine instances.

Usage:
    factory = create_machine_factory(
        transitions={
            "init": {"from": ["A", "B"], "to": "C"},
            "reset": {"from": ["B", "C"], "to": "A"},
        },
        handlers={"onEnterC": lambda ctx: print("entered C")},
    )
    machine = factory({"state": "A"})
    await machine.init()          # or: await machine.to("C")
    machine.state                 # "C"
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Hashable, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Coroutine, Dict, List, Optional, Tuple

from ..config import DEFAULT_STATE_KEY, FactoryConfig, load_definition
from ..exceptions import (
    CyclicTransitionError,
    InvalidInitialStateError,
    InvalidTransitionError,
    MissingLockError,
)
from ..export import to_document
from .graph import Edge, TransitionGraph
from .hooks import HookRegistry
from .lifecycle import _LOCK, LifecycleExecutor
from .planner import PathPlanner

logger = logging.getLogger(__name__)

_MISSING = object()


class Machine:
    """A context bound to a factory's transition graph.

    Context fields are readable and writable as attributes or items, except
    the state field, which only changes through transitions. Transition names
    resolve to coroutine functions; a transition whose name collides with a
    method below is reachable through :meth:`trigger`.

    Transitions on one machine are serialized by an ``asyncio.Lock``. A hook
    that awaits another transition of its own machine runs it inline, inside
    the outer pipeline; transitions started from other tasks wait their turn.
    """

    def __init__(self, factory: "MachineFactory", context: Dict[str, Any]) -> None:
        object.__setattr__(self, "_factory", factory)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_mutex", asyncio.Lock())
        object.__setattr__(self, "_owner", None)

    # ------------------------------------------------------------------
    # Context access
    # ------------------------------------------------------------------
    @property
    def state(self) -> Hashable:
        """Current state, read from the configured state key."""
        return self._context[self._factory.state_key]

    def _is_state_field(self, name: str) -> bool:
        return name == self._factory.state_key or name == "state"

    def _commit(self, lock: object, value: Hashable) -> None:
        if lock is not _LOCK:
            raise MissingLockError(context={"key": self._factory.state_key})
        self._context[self._factory.state_key] = value

    def __getattr__(self, name: str) -> Any:
        factory = self.__dict__.get("_factory")
        if factory is None:
            raise AttributeError(name)
        if name in factory.graph.edges:
            return self._transition_method(name)
        try:
            return self.__dict__["_context"][name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if self._is_state_field(name):
            raise MissingLockError(context={"key": name})
        self._context[name] = value

    def __delattr__(self, name: str) -> None:
        if self._is_state_field(name):
            raise MissingLockError(context={"key": name})
        try:
            del self._context[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, key: str) -> Any:
        return self._context[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key == self._factory.state_key:
            raise MissingLockError(context={"key": key})
        self._context[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._context

    def __repr__(self) -> str:
        return f"<Machine {self._factory.state_key}={self.state!r}>"

    def snapshot(self) -> Dict[str, Any]:
        """Return a shallow copy of the context, state included."""
        return dict(self._context)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        # A hook awaiting a transition on its own machine runs inside the
        # task that already holds the mutex; the nested call runs inline.
        task = asyncio.current_task()
        if task is not None and self._owner is task:
            yield
            return
        async with self._mutex:
            object.__setattr__(self, "_owner", task)
            try:
                yield
            finally:
                object.__setattr__(self, "_owner", None)

    def _transition_method(self, name: str) -> Callable[[], Coroutine[Any, Any, Hashable]]:
        async def transition() -> Hashable:
            async with self._exclusive():
                return await self._factory.executor.run(self, name)

        transition.__name__ = name
        transition.__qualname__ = f"Machine.{name}"
        return transition

    async def trigger(self, name: str) -> Hashable:
        """Run the transition called ``name`` and return the new state."""
        if name not in self._factory.graph.edges:
            raise InvalidTransitionError(context={"transition": name})
        return await self._transition_method(name)()

    # ------------------------------------------------------------------
    # Default method set
    # ------------------------------------------------------------------
    def can(self, to: Any) -> bool:
        """True if a single edge leads from the current state to ``to``."""
        return self._factory.graph.has_edge(self.state, to)

    async def to(self, to: Any) -> Hashable:
        """Run the transition leading directly to ``to``.

        When several transitions share the edge, the last declared one runs.

        Raises:
            InvalidTransitionError: If no direct edge exists
        """
        async with self._exclusive():
            name = self._factory.graph.resolve_direct(self.state, to)
            return await self._factory.executor.run(self, name)

    def edge(self, to: Any) -> str:
        """Return the name of the transition leading directly to ``to``.

        Raises:
            InvalidEdgeError: If no direct edge exists
        """
        return self._factory.graph.resolve_direct(self.state, to, edge=True)

    def path(self, *to: Any) -> Optional[List[Edge]]:
        """Return the planned ``(from, to)`` pairs through ``to``, or None."""
        return self._factory.planner.plan(
            [self.state, *to],
            allow_cycles=self._factory.allow_cyclical_transitions,
        )

    def will(self, *to: Any) -> bool:
        """True if the machine can pass through every state in ``to``, in order."""
        return self.path(*to) is not None

    def plan(self, *to: Any) -> List[Tuple[str, Edge]]:
        """Return the ``(name, (from, to))`` steps :meth:`thru` would run.

        Raises:
            CyclicTransitionError: For a bare same-state request while cycles are disallowed
            InvalidTransitionError: If no path exists
        """
        if (
            not self._factory.allow_cyclical_transitions
            and len(to) == 1
            and to[0] == self.state
        ):
            raise CyclicTransitionError(context={"state": self.state})

        pairs = self.path(*to)
        if pairs is None:
            raise InvalidTransitionError(context={"from": self.state, "thru": list(to)})
        return list(zip(self._factory.graph.resolve_path_names(pairs), pairs))

    async def thru(self, *to: Any) -> List[str]:
        """Pass through every state in ``to`` along the shortest path.

        Each transition's whole pipeline completes before the next starts. A
        failing hook stops the chain; transitions already run stay committed.
        Returns the transition names that ran.

        Raises:
            CyclicTransitionError: For a bare same-state request while cycles are disallowed
            InvalidTransitionError: If no path exists
        """
        async with self._exclusive():
            names = [name for name, _ in self.plan(*to)]
            for name in names:
                await self._factory.executor.run(self, name)
            return names

    def transitions(self) -> List[str]:
        """Names of the transitions available from the current state."""
        return self._factory.graph.names_from(self.state)


class MachineFactory:
    """Builds the transition graph once and binds machines to contexts."""

    def __init__(self, config: FactoryConfig) -> None:
        self.config = config
        self.graph = TransitionGraph(config.transitions)
        self.hooks = HookRegistry(config.handlers)
        self.planner = PathPlanner(self.graph)
        self.executor = LifecycleExecutor(self.graph, self.hooks)
        logger.debug(
            "Created machine factory (state_key=%r, cyclical=%s)",
            config.state_key,
            config.allow_cyclical_transitions,
        )

    @classmethod
    def from_file(cls, path: Path, *, handlers: Optional[Mapping[str, Any]] = None) -> "MachineFactory":
        """Build a factory from a YAML or JSON definition file."""
        return cls(load_definition(Path(path), handlers=handlers))

    @property
    def state_key(self) -> str:
        return self.config.state_key

    @property
    def allow_cyclical_transitions(self) -> bool:
        return self.config.allow_cyclical_transitions

    @property
    def states(self) -> tuple[Hashable, ...]:
        return self.graph.states

    @property
    def edges(self) -> Mapping[str, tuple[Edge, ...]]:
        return self.graph.edges

    def to_document(self) -> Dict[str, Any]:
        return to_document(self.states, self.edges)

    def __call__(self, context: Any = None) -> Machine:
        """Bind a copy of ``context`` to a new machine.

        Raises:
            InvalidInitialStateError: If the context has no known initial state
        """
        if context is None:
            raise InvalidInitialStateError(None)
        if isinstance(context, Mapping):
            data = dict(context)
        else:
            try:
                data = dict(vars(context))
            except TypeError:
                raise TypeError(
                    f"Context must be a mapping or an object with attributes, got {type(context).__name__}"
                ) from None

        value = data.get(self.state_key, _MISSING)
        if value is _MISSING or not self.graph.has_state(value):
            shown = None if value is _MISSING else value
            raise InvalidInitialStateError(shown, context={"key": self.state_key})

        return Machine(self, data)


def create_machine_factory(
    transitions: Optional[Mapping[str, Any]] = None,
    handlers: Optional[Mapping[str, Any]] = None,
    state_key: str = DEFAULT_STATE_KEY,
    allow_cyclical_transitions: bool = False,
    *,
    config: Optional[FactoryConfig] = None,
) -> MachineFactory:
    """Create a :class:`MachineFactory` from transitions and handlers.

    Raises:
        NoTransitionsError: If ``transitions`` is missing or empty
        DefinitionError: If a transition lacks ``from`` or ``to``
    """
    if config is None:
        config = FactoryConfig(
            transitions=transitions or {},
            handlers=dict(handlers or {}),
            state_key=state_key,
            allow_cyclical_transitions=allow_cyclical_transitions,
        )
    return MachineFactory(config)


__all__ = ["Machine", "MachineFactory", "create_machine_factory"]
