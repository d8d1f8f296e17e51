"""Shared schema validation utilities.

docfold validates composed site configs using JSON Schema. Schemas are stored
as YAML files (JSON Schema expressed in YAML) and loaded in one consistent way.

Schema resolution:
1) An explicit path (absolute, or relative to the project root)
2) Bundled schemas: ``docfold.data/schemas/<name>.schema.yaml``
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import jsonschema
from jsonschema import Draft202012Validator

from docfold.core.exceptions import SchemaValidationError
from docfold.core.utils.io import read_json, read_yaml
from docfold.data import get_data_path

SchemaRef = Union[str, Path, Mapping[str, Any]]


def _bundled_candidates(name: str) -> List[Path]:
    schemas_dir = get_data_path("schemas")
    if name.endswith((".yaml", ".yml")):
        return [schemas_dir / name]
    return [schemas_dir / f"{name}.schema.yaml", schemas_dir / f"{name}.yaml"]


def resolve_schema_path(name: Union[str, Path], *, repo_root: Optional[Path] = None) -> Path:
    """Resolve a schema reference to an existing file.

    Raises:
        FileNotFoundError: If no candidate exists.
    """
    raw = Path(str(name)).expanduser()
    candidates: List[Path] = []
    if raw.is_absolute():
        candidates.append(raw)
    else:
        if repo_root is not None:
            candidates.append(Path(repo_root) / raw)
        candidates.extend(_bundled_candidates(str(name)))

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    searched = "\n".join(f"- {p}" for p in candidates)
    raise FileNotFoundError(f"Schema not found: {name}\nSearched:\n{searched}")


def load_schema(name: SchemaRef, *, repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load a schema dict by bundled name, file path, or pass a mapping through.

    Args:
        name: Bundled schema name (e.g. ``"app-config"``), a ``.yaml``/``.json``
            path, or an already-loaded schema mapping.
        repo_root: Base directory for relative paths.

    Returns:
        Parsed schema dictionary.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a mapping.
    """
    if isinstance(name, Mapping):
        return dict(name)

    path = resolve_schema_path(name, repo_root=repo_root)
    if path.suffix == ".json":
        schema = read_json(path, default=None, raise_on_error=True)
    else:
        schema = read_yaml(path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a mapping, got {type(schema).__name__}")
    return schema


def validate_payload(
    payload: Any,
    schema: SchemaRef,
    *,
    repo_root: Optional[Path] = None,
) -> None:
    """Validate a payload against a JSON schema.

    Raises:
        SchemaValidationError: If validation fails.
        FileNotFoundError: If the schema doesn't exist.
    """
    errors = validate_payload_safe(payload, schema, repo_root=repo_root)
    if errors:
        label = schema if isinstance(schema, (str, Path)) else "<inline>"
        raise SchemaValidationError(
            f"Validation failed against schema '{label}': {errors[0]}",
            errors=errors,
            context={"schema": str(label)},
        )


def validate_payload_safe(
    payload: Any,
    schema: SchemaRef,
    *,
    repo_root: Optional[Path] = None,
) -> List[str]:
    """Validate a payload and return error messages (empty if valid).

    Messages are ``"<dotted.path>: <message>"`` sorted by path.
    """
    loaded = load_schema(schema, repo_root=repo_root)
    try:
        Draft202012Validator.check_schema(loaded)
    except jsonschema.SchemaError as exc:
        return [f"Invalid schema: {exc.message}"]

    validator = Draft202012Validator(loaded)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


__all__ = [
    "load_schema",
    "resolve_schema_path",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
