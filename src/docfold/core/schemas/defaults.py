"""Extract declared defaults from a JSON Schema.

Theme schemas declare a ``default`` on every option, and object options may
also carry a ``default`` mapping of their own. The extracted tree is the
lowest layer of a composition. Only local ``#/...`` references are followed.
"""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, Mapping, Optional

from docfold.core.utils.merge import copy_tree, deep_merge, is_mapping

_MISSING = object()


def _resolve_local_ref(ref: str, root: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    if not ref.startswith("#/"):
        return None
    cur: Any = root
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not is_mapping(cur) or part not in cur:
            return None
        cur = cur[part]
    return cur if is_mapping(cur) else None


def _extract(node: Mapping[str, Any], root: Mapping[str, Any], seen: FrozenSet[str]) -> Any:
    ref = node.get("$ref")
    if isinstance(ref, str) and ref not in seen:
        target = _resolve_local_ref(ref, root)
        if target is not None:
            node = {**target, **{k: v for k, v in node.items() if k != "$ref"}}
            seen = seen | {ref}

    props = node.get("properties")
    derived: Any = _MISSING
    if is_mapping(props):
        collected: Dict[str, Any] = {}
        for key, sub in props.items():
            if not is_mapping(sub):
                continue
            value = _extract(sub, root, seen)
            if value is not _MISSING:
                collected[key] = value
        if collected:
            derived = collected

    if "default" not in node:
        return derived
    declared = copy_tree(node["default"])
    if derived is _MISSING:
        return declared
    if is_mapping(declared):
        # Property-level defaults refine the object's own default.
        return deep_merge(declared, derived)
    return declared


def defaults_from_schema(schema: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the tree of ``default`` values declared in ``schema``.

    Example:
        >>> defaults_from_schema({"properties": {"main": {"properties": {
        ...     "fluid": {"type": "boolean", "default": True}}}}})
        {'main': {'fluid': True}}
    """
    value = _extract(schema, schema, frozenset())
    if value is _MISSING or not is_mapping(value):
        return {}
    return value


__all__ = ["defaults_from_schema"]
