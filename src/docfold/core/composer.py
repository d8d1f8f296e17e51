"""Configuration composer.

Folds an ordered sequence of config layers (lowest precedence first) into a
single merged tree using :func:`docfold.core.utils.merge.deep_merge`.

Composition is total: it never raises for any config tree, never mutates its
inputs, and keeps no state between calls. Optional diagnostics report type
mismatches and sequences wiped out by an empty override; they never change the
result.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from docfold.core.utils.merge import (
    SEQUENCE_DISCARDED,
    TYPE_MISMATCH,
    deep_merge,
    is_mapping,
    tree_kind,
)
from docfold.core.utils.profiling import span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeDiagnostic:
    """A non-fatal observation made while folding two layers."""

    kind: str
    path: str
    layer: str
    detail: str

    def format(self) -> str:
        where = self.path or "<root>"
        return f"[{self.kind}] {where} (layer '{self.layer}'): {self.detail}"


@dataclass(frozen=True)
class CompositionResult:
    config: Any
    layer_names: Tuple[str, ...] = ()
    diagnostics: Tuple[MergeDiagnostic, ...] = ()
    provenance: Dict[str, str] = field(default_factory=dict)


def _unpack(item: Any, index: int) -> Tuple[str, Any]:
    """Return ``(name, tree)`` for a Layer-like object or a bare tree."""
    name = getattr(item, "name", None)
    if isinstance(name, str) and hasattr(item, "tree") and not isinstance(item, Mapping):
        return name, item.tree
    return f"layer[{index}]", item


def _dotted(path: Sequence[Any]) -> str:
    return ".".join(str(p) for p in path)


def compose(*layers: Any) -> Any:
    """Fold config layers left to right; later layers take precedence.

    Each argument is either a bare config tree or a ``Layer``.

    Example:
        >>> compose({"a": {"x": 1, "y": 2}}, {"a": {"y": 3, "z": 4}})
        {'a': {'x': 1, 'y': 3, 'z': 4}}
        >>> compose()
        {}
    """
    return compose_layers(layers)


def compose_layers(layers: Iterable[Any]) -> Any:
    """Same as :func:`compose` but takes the layers as one iterable."""
    # Snapshot first so a caller appending to its list cannot change the fold.
    snapshot = list(layers)
    with span("compose.fold", layers=len(snapshot)):
        merged: Any = {}
        for index, item in enumerate(snapshot):
            _, tree = _unpack(item, index)
            merged = deep_merge(merged, tree)
        return merged


def compose_with_diagnostics(
    layers: Iterable[Any],
    *,
    log_level: Optional[int] = None,
) -> CompositionResult:
    """Compose layers and also report diagnostics and per-key provenance.

    Args:
        layers: Layers or bare trees, lowest precedence first.
        log_level: When set, each diagnostic is also logged at this level.

    Returns:
        CompositionResult whose ``config`` equals ``compose_layers(layers)``.
    """
    snapshot = [_unpack(item, index) for index, item in enumerate(layers)]
    diagnostics: List[MergeDiagnostic] = []

    with span("compose.diagnostics", layers=len(snapshot)):
        merged: Any = {}
        for index, (name, tree) in enumerate(snapshot):
            if index == 0:
                merged = deep_merge({}, tree)
                continue

            def _record(kind: str, path: Tuple[str, ...], base: Any, override: Any, _name: str = name) -> None:
                if kind == TYPE_MISMATCH:
                    detail = f"{tree_kind(base)} replaced by {tree_kind(override)}"
                elif kind == SEQUENCE_DISCARDED:
                    detail = f"empty sequence discards {len(base)} inherited item(s)"
                else:
                    detail = kind
                diagnostics.append(MergeDiagnostic(kind=kind, path=_dotted(path), layer=_name, detail=detail))

            merged = deep_merge(merged, tree, on_conflict=_record)

        provenance = _provenance(merged, snapshot)

    if log_level is not None:
        for diag in diagnostics:
            logger.log(log_level, "Config composition: %s", diag.format())

    return CompositionResult(
        config=merged,
        layer_names=tuple(name for name, _ in snapshot),
        diagnostics=tuple(diagnostics),
        provenance=provenance,
    )


def _has_path(tree: Any, path: Tuple[Any, ...]) -> bool:
    cur = tree
    for part in path:
        if not is_mapping(cur) or part not in cur:
            return False
        cur = cur[part]
    return True


def _iter_leaves(tree: Any, prefix: Tuple[Any, ...] = ()) -> Iterable[Tuple[Any, ...]]:
    if is_mapping(tree) and tree:
        for key, value in tree.items():
            yield from _iter_leaves(value, prefix + (key,))
    elif prefix:
        yield prefix


def _provenance(merged: Any, snapshot: Sequence[Tuple[str, Any]]) -> Dict[str, str]:
    """Map each leaf of ``merged`` to the layer that supplied it.

    A leaf that survives the fold always comes from the last layer that
    mentions its full key path: any later layer replacing an ancestor with a
    non-mapping would have removed it.
    """
    out: Dict[str, str] = {}
    for path in _iter_leaves(merged):
        for name, tree in reversed(snapshot):
            if _has_path(tree, path):
                out[_dotted(path)] = name
                break
    return out


__all__ = [
    "compose",
    "compose_layers",
    "compose_with_diagnostics",
    "CompositionResult",
    "MergeDiagnostic",
]
