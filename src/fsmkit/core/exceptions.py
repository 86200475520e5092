from __future__ import annotations

from typing import Any, Dict, Mapping


class FsmError(Exception):
    """Base exception for fsmkit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class DefinitionError(FsmError, ValueError):
    """Raised when a machine definition is malformed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FsmError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class NoTransitionsError(DefinitionError):
    """Raised when a factory is created without any transitions."""

    def __init__(self, message: str = "No transitions supplied", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


class MachineStateError(FsmError, ValueError):
    """Raised when a machine cannot be created or moved as requested."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FsmError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InvalidInitialStateError(MachineStateError):
    """Raised when a context does not carry a known initial state."""

    def __init__(self, value: Any = None, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(f"Invalid initial state of: {value}", context=context)
        self.value = value


class InvalidTransitionError(MachineStateError):
    """Raised when no transition leads from the current state to the target."""

    def __init__(self, message: str = "Invalid transition", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


class InvalidEdgeError(MachineStateError):
    """Raised when an edge lookup finds no transition name."""

    def __init__(self, message: str = "Invalid edge", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


class CyclicTransitionError(MachineStateError):
    """Raised for a same-state ``thru`` request while cycles are disallowed."""

    def __init__(
        self, message: str = "Potential cyclic transition", *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context)


class MissingLockError(FsmError, AttributeError):
    """Raised on any write to the state field outside a transition."""

    def __init__(self, message: str = "Missing lock", *, context: Mapping[str, Any] | None = None) -> None:
        FsmError.__init__(self, message, context=context)
        AttributeError.__init__(self, message)


__all__ = [
    "FsmError",
    "DefinitionError",
    "NoTransitionsError",
    "MachineStateError",
    "InvalidInitialStateError",
    "InvalidTransitionError",
    "InvalidEdgeError",
    "CyclicTransitionError",
    "MissingLockError",
]
