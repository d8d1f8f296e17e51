"""Build layers from files.

These helpers are the upstream producers of a composition:
- a single YAML or JSON file becomes one layer
- a directory of YAML files is merged alphabetically into one layer
- a JSON Schema's declared defaults become the lowest layer

Malformed sources raise :class:`LayerLoadError`; configuration must never
silently ignore invalid YAML.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from docfold.core.exceptions import LayerLoadError
from docfold.core.schemas.defaults import defaults_from_schema
from docfold.core.utils.io import iter_yaml_files, read_json, read_yaml
from docfold.core.utils.merge import deep_merge
from docfold.core.utils.profiling import span

from .model import Layer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_YAML_SUFFIXES = {".yaml", ".yml"}


def _default_name(path: Path) -> str:
    name = path.name
    for suffix in (".yaml", ".yml", ".json"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    return name or str(path)


def read_layer_tree(path: PathLike) -> Dict[str, Any]:
    """Read one YAML/JSON file as a config mapping.

    Empty files yield ``{}``.

    Raises:
        LayerLoadError: missing file, parse error, unsupported suffix, or a
            top-level document that is not a mapping.
    """
    p = Path(path)
    ctx = {"path": str(p)}
    if not p.is_file():
        raise LayerLoadError(f"Layer file not found: {p}", context=ctx)

    suffix = p.suffix.lower()
    try:
        if suffix in _YAML_SUFFIXES:
            data = read_yaml(p, default={}, raise_on_error=True)
        elif suffix == ".json":
            if not p.read_text(encoding="utf-8").strip():
                data = {}
            else:
                data = read_json(p, default={}, raise_on_error=True)
        else:
            raise LayerLoadError(
                f"Unsupported layer file type '{p.suffix}': {p} (expected .yaml, .yml or .json)",
                context=ctx,
            )
    except (yaml.YAMLError, json.JSONDecodeError, OSError) as exc:
        raise LayerLoadError(f"Failed to parse layer file {p}: {exc}", context=ctx) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LayerLoadError(
            f"Expected a mapping at the top of layer file {p}, got {type(data).__name__}",
            context=ctx,
        )
    return data


def load_layer_file(path: PathLike, name: Optional[str] = None) -> Layer:
    """Load a single YAML or JSON file as a :class:`Layer`."""
    p = Path(path)
    with span("layers.load_file", path=str(p)):
        tree = read_layer_tree(p)
    logger.debug("Loaded layer %s from %s (%d top-level keys)", name or _default_name(p), p, len(tree))
    return Layer(name=name or _default_name(p), tree=tree, source=str(p))


def load_layer_directory(directory: PathLike, name: Optional[str] = None) -> Layer:
    """Merge every YAML file in ``directory`` (alphabetical order) into one layer.

    Missing directories yield an empty layer.
    """
    d = Path(directory)
    tree: Dict[str, Any] = {}
    with span("layers.load_directory", path=str(d)):
        for path in iter_yaml_files(d):
            tree = deep_merge(tree, read_layer_tree(path))
    return Layer(name=name or d.name or str(d), tree=tree, source=str(d))


def load_layer(path: PathLike, name: Optional[str] = None) -> Layer:
    """Load a file or a directory, whichever ``path`` is."""
    p = Path(path)
    if p.is_dir():
        return load_layer_directory(p, name=name)
    return load_layer_file(p, name=name)


def schema_defaults_layer(
    schema: Mapping[str, Any],
    *,
    name: str = "schema-defaults",
    source: Optional[str] = None,
) -> Layer:
    """Return the schema's declared defaults as a layer."""
    return Layer(name=name, tree=defaults_from_schema(schema), source=source)


__all__ = [
    "read_layer_tree",
    "load_layer_file",
    "load_layer_directory",
    "load_layer",
    "schema_defaults_layer",
]
