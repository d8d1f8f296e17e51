"""JSON I/O utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read a JSON document.

    Mirrors :func:`docfold.core.utils.io.yaml.read_yaml`: a missing or invalid
    file yields ``default`` unless ``raise_on_error`` is set.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError):
        if raise_on_error:
            raise
        return default


__all__ = ["read_json"]
