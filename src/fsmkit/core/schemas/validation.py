"""JSON Schema validation for machine definition documents.

Schemas are stored as YAML files (JSON Schema expressed in YAML) under
``fsmkit/data/schemas/`` and loaded the same way everywhere.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import jsonschema
from jsonschema import Draft202012Validator

from fsmkit.core.exceptions import DefinitionError
from fsmkit.data import get_data_path, read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    if not get_data_path("schemas", schema_name).exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return a list of error messages (empty if valid)."""
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)

    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(
    payload: Any,
    schema_name: str,
    *,
    context: Optional[Mapping[str, Any]] = None,
) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        DefinitionError: If validation fails. ``context["errors"]`` lists
            every problem found.
    """
    try:
        errors = validate_payload_safe(payload, schema_name)
    except jsonschema.SchemaError as exc:
        raise DefinitionError(f"Invalid schema '{schema_name}': {exc.message}") from exc

    if errors:
        ctx = dict(context or {})
        ctx["schema"] = schema_name
        ctx["errors"] = errors
        raise DefinitionError(
            f"Validation failed against schema '{schema_name}': {errors[0]}",
            context=ctx,
        )


__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
]
