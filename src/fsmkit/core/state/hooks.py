"""Lifecycle hook registry.

Hooks are keyed by phase plus a transition or state name, e.g.
``onBeforeInit``, ``onLeaveA``, ``onEnterC``. Lookups for hooks that were
never supplied return a no-op, so the lifecycle pipeline can ask for every
phase without checking first.

Example:
    hooks = HookRegistry({"onEnterC": lambda ctx: print("entered C")})
    hooks.get("onEnterC")   # the supplied handler
    hooks.get("onLeaveA")   # no-op
"""
from __future__ import annotations

import inspect
from collections.abc import Iterator, Mapping
from typing import Any, Awaitable, Callable, Dict, Optional, Union

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


def _noop(ctx: Any) -> None:
    return None


def enforce_uppercase(value: Any) -> str:
    """Upper-case the first character of ``str(value)``, leave the rest alone."""
    text = str(value)
    return text[:1].upper() + text[1:]


def pipeline_hook_names(transition: str, old_state: Any, new_state: Any) -> Dict[str, str]:
    """Return the hook name for each handler phase, in execution order."""
    name = enforce_uppercase(transition)
    old = enforce_uppercase(old_state)
    new = enforce_uppercase(new_state)
    return {
        "before": f"onBefore{name}",
        "leave": f"onLeave{old}",
        "transition": f"on{name}",
        "enter": f"onEnter{new}",
        "state": f"on{new}",
        "after": f"onAfter{name}",
    }


class HookRegistry(Mapping[str, Handler]):
    """Read-only mapping of hook name to handler with a no-op fallback."""

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None) -> None:
        self._handlers: Dict[str, Handler] = {}
        for name, handler in (handlers or {}).items():
            if not callable(handler):
                raise TypeError(f"handler must be callable: {name}")
            self._handlers[str(name)] = handler

    def __getitem__(self, name: str) -> Handler:
        return self._handlers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def get(self, name: str, default: Optional[Handler] = None) -> Handler:  # type: ignore[override]
        """Get a handler by name, falling back to ``default`` or a no-op."""
        handler = self._handlers.get(name)
        if handler is not None:
            return handler
        return default if default is not None else _noop

    def has(self, name: str) -> bool:
        return name in self._handlers

    async def invoke(self, name: str, ctx: Any) -> Any:
        """Call the hook and await its result when it returns an awaitable."""
        result = self.get(name)(ctx)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__ = ["Handler", "HookRegistry", "enforce_uppercase", "pipeline_hook_names"]
