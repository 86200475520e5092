"""Shared CLI utility functions."""
from __future__ import annotations

import importlib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict

from fsmkit.core.config import FactoryConfig, read_definition
from fsmkit.core.exceptions import DefinitionError
from fsmkit.core.state import MachineFactory

DEFINITION_SUFFIXES = (".yaml", ".yml", ".json")


def _load_reference(ref: str) -> MachineFactory:
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Expected 'package.module:attribute', got '{ref}'")
    module = importlib.import_module(module_name)
    try:
        target: Any = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from None

    if isinstance(target, MachineFactory):
        return target
    if isinstance(target, Mapping):
        return MachineFactory(FactoryConfig.from_mapping(target, source=ref))
    raise ValueError(f"'{ref}' is neither a MachineFactory nor a definition mapping")


def load_factory(ref: str) -> MachineFactory:
    """Resolve a CLI ``--input`` value into a :class:`MachineFactory`.

    Args:
        ref: Path to a definition file, or ``package.module:attribute``

    Raises:
        FileNotFoundError: If a path is given and does not exist
        DefinitionError: If the definition is malformed
        ValueError: If the input type is unsupported
    """
    path = Path(ref)
    if path.suffix.lower() in DEFINITION_SUFFIXES:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return MachineFactory.from_file(path)
    if ":" in ref and not path.exists():
        return _load_reference(ref)
    raise ValueError("Unsupported input type, please supply .yaml, .yml, .json or 'module:attribute'")


def load_styles(path: str) -> Dict[str, Dict[str, Any]]:
    """Load a styles mapping (selector -> attributes) from YAML or JSON."""
    style_path = Path(path)
    if style_path.suffix.lower() not in DEFINITION_SUFFIXES:
        raise ValueError("Unsupported style type, please supply a .yaml, .yml or .json file")
    try:
        data = read_definition(style_path)
    except DefinitionError as exc:
        raise ValueError(str(exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping) or not all(isinstance(v, Mapping) for v in data.values()):
        raise ValueError("Styles must map selectors to attribute mappings")
    return {str(k): dict(v) for k, v in data.items()}


__all__ = ["DEFINITION_SUFFIXES", "load_factory", "load_styles"]
