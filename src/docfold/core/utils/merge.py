"""Canonical deep merge utilities.

This module is the single source of truth for merging configuration trees
throughout docfold. Every other module imports from here.

Merge rules (``override`` is the higher-precedence side):
- mapping + mapping: union of keys, shared keys merged recursively
- sequence + sequence: override replaces base wholesale
- anything else (scalars, ``None``, differing kinds): override wins

Neither input is ever mutated and the result shares no mutable structure
with the inputs.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Tuple

# (kind, key path, base value, override value)
ConflictHook = Callable[[str, Tuple[str, ...], Any, Any], None]

TYPE_MISMATCH = "type_mismatch"
SEQUENCE_DISCARDED = "sequence_discarded"


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def tree_kind(value: Any) -> str:
    """Return the structural kind of a config value."""
    if value is None:
        return "null"
    if is_mapping(value):
        return "mapping"
    if is_sequence(value):
        return "sequence"
    return "scalar"


def copy_tree(value: Any) -> Any:
    """Deep-copy a config tree into plain ``dict``/``list`` containers.

    Read-only mapping views (e.g. ``MappingProxyType``) are accepted and
    copied into regular dicts; tuples become lists.
    """
    if is_mapping(value):
        return {key: copy_tree(item) for key, item in value.items()}
    if is_sequence(value):
        return [copy_tree(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return copy.deepcopy(value)


def _merge(base: Any, override: Any, path: Tuple[str, ...], on_conflict: Optional[ConflictHook]) -> Any:
    if is_mapping(base) and is_mapping(override):
        result: Dict[str, Any] = {}
        for key, value in base.items():
            if key in override:
                result[key] = _merge(value, override[key], path + (str(key),), on_conflict)
            else:
                result[key] = copy_tree(value)
        for key, value in override.items():
            if key not in base:
                result[key] = copy_tree(value)
        return result

    if on_conflict is not None:
        base_kind = tree_kind(base)
        override_kind = tree_kind(override)
        if "null" not in (base_kind, override_kind) and base_kind != override_kind:
            on_conflict(TYPE_MISMATCH, path, base, override)
        elif base_kind == "sequence" and override_kind == "sequence" and base and not override:
            on_conflict(SEQUENCE_DISCARDED, path, base, override)

    if is_sequence(base) and is_sequence(override):
        return merge_arrays(base, override)
    return copy_tree(override)


def deep_merge(base: Any, override: Any, *, on_conflict: Optional[ConflictHook] = None) -> Any:
    """Recursively merge two config trees without mutating inputs.

    Args:
        base: Base tree (lower priority)
        override: Override tree (higher priority)
        on_conflict: Optional hook called for type mismatches and for empty
            sequences that discard a non-empty base sequence. It only observes;
            the merged result is the same with or without it.

    Returns:
        New merged tree

    Example:
        >>> base = {"a": 1, "b": {"c": 2}}
        >>> override = {"b": {"d": 3}}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    return _merge(base, override, (), on_conflict)


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge two sequences: the override replaces the base entirely.

    Sequences are never concatenated or merged by index, so an empty
    override clears the base.

    Example:
        >>> merge_arrays([1, 2], [3])
        [3]
        >>> merge_arrays([1, 2], [])
        []
    """
    return copy_tree(override)


__all__ = [
    "deep_merge",
    "merge_arrays",
    "copy_tree",
    "tree_kind",
    "is_mapping",
    "is_sequence",
    "ConflictHook",
    "TYPE_MISMATCH",
    "SEQUENCE_DISCARDED",
]
