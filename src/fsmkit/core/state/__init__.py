from .graph import Edge, TransitionGraph, get_all_edges, get_edges, get_states
from .hooks import HookRegistry, enforce_uppercase, pipeline_hook_names
from .lifecycle import LifecycleExecutor
from .machine import Machine, MachineFactory, create_machine_factory
from .planner import PathPlanner, get_pairs, join_segments

__all__ = [
    # Graph
    "Edge",
    "TransitionGraph",
    "get_states",
    "get_edges",
    "get_all_edges",
    # Planning
    "PathPlanner",
    "get_pairs",
    "join_segments",
    # Hooks and lifecycle
    "HookRegistry",
    "LifecycleExecutor",
    "enforce_uppercase",
    "pipeline_hook_names",
    # Machines
    "Machine",
    "MachineFactory",
    "create_machine_factory",
]
