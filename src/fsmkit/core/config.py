"""Factory configuration and definition-file loading.

A definition document looks like::

    stateKey: state
    allowCyclicalTransitions: false
    transitions:
      init: {from: [A, B], to: C}
      reset: {from: [B, C], to: A}

A bare mapping of transitions (no ``transitions`` key) is also accepted.
Option keys may be camelCase or snake_case.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import DefinitionError
from .schemas import validate_payload

logger = logging.getLogger(__name__)

DEFINITION_SCHEMA = "definition.schema.yaml"
DEFAULT_STATE_KEY = "state"

_OPTION_ALIASES = {
    "stateKey": "state_key",
    "allowCyclicalTransitions": "allow_cyclical_transitions",
}


@dataclass(frozen=True)
class FactoryConfig:
    """Everything a machine factory is built from."""

    transitions: Mapping[str, Any]
    handlers: Mapping[str, Any] = field(default_factory=dict)
    state_key: str = DEFAULT_STATE_KEY
    allow_cyclical_transitions: bool = False

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        handlers: Optional[Mapping[str, Any]] = None,
        source: Optional[str] = None,
    ) -> "FactoryConfig":
        """Build a config from a parsed definition document.

        Raises:
            DefinitionError: If the document does not match the definition schema
        """
        document = normalize_document(data)
        validate_payload(document, DEFINITION_SCHEMA, context={"source": source} if source else None)

        options: Dict[str, Any] = {}
        for key, value in document.items():
            if key == "transitions":
                continue
            options[_OPTION_ALIASES.get(key, key)] = value

        return cls(
            transitions=document["transitions"],
            handlers=dict(handlers or {}),
            state_key=options.get("state_key", DEFAULT_STATE_KEY),
            allow_cyclical_transitions=bool(options.get("allow_cyclical_transitions", False)),
        )


def _looks_like_transition(value: Any) -> bool:
    return isinstance(value, Mapping) and "to" in value and ("from" in value or "from_" in value)


def normalize_document(data: Any) -> Dict[str, Any]:
    """Wrap a bare transitions mapping into the full document shape."""
    if not isinstance(data, Mapping):
        raise DefinitionError(
            f"Definition must be a mapping, got {type(data).__name__}",
        )
    transitions = data.get("transitions")
    if isinstance(transitions, Mapping) and not _looks_like_transition(transitions):
        return dict(data)
    return {"transitions": dict(data)}


def read_definition(path: Path) -> Any:
    """Parse a ``.yaml``/``.yml``/``.json`` definition file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
        if suffix == ".json":
            return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise DefinitionError(f"Could not parse {path}: {exc}", context={"source": str(path)}) from exc
    raise DefinitionError(
        f"Unsupported definition type '{suffix}', please supply .yaml, .yml or .json",
        context={"source": str(path)},
    )


def load_definition(path: Path, *, handlers: Optional[Mapping[str, Any]] = None) -> FactoryConfig:
    """Load and validate a definition file into a :class:`FactoryConfig`."""
    data = read_definition(path)
    if data is None:
        data = {}
    logger.debug("Loaded definition from %s", path)
    return FactoryConfig.from_mapping(data, handlers=handlers, source=str(path))


__all__ = [
    "FactoryConfig",
    "DEFAULT_STATE_KEY",
    "DEFINITION_SCHEMA",
    "normalize_document",
    "read_definition",
    "load_definition",
]
