"""
fsmkit - declarative finite state machines

Builds machine factories from named transitions and lifecycle handlers.
Machines guard their state field, run an ordered asyncio hook pipeline on
every transition, and plan multi-hop transitions along shortest paths.
"""

from .core.config import FactoryConfig, load_definition
from .core.exceptions import (
    CyclicTransitionError,
    DefinitionError,
    FsmError,
    InvalidEdgeError,
    InvalidInitialStateError,
    InvalidTransitionError,
    MachineStateError,
    MissingLockError,
    NoTransitionsError,
)
from .core.state import Machine, MachineFactory, create_machine_factory

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "create_machine_factory",
    "Machine",
    "MachineFactory",
    "FactoryConfig",
    "load_definition",
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
