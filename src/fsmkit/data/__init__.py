"""Bundled fsmkit resources.

Only the JSON Schemas under ``schemas/`` live here; they are YAML files read
through importlib.resources so they work from an installed wheel.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """Path of ``filename`` inside a resource directory, e.g. ``("schemas", "definition.schema.yaml")``."""
    base = Path(str(resources.files(__name__) / subpackage))
    return base / filename if filename else base


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> Any:
    # Cached per process; the definition schema is read for every loaded file.
    return yaml.safe_load(get_data_path(subpackage, filename).read_text(encoding="utf-8"))


def clear_caches() -> None:
    read_yaml.cache_clear()


__all__ = ["get_data_path", "read_yaml", "clear_caches"]
