"""Ordered layer stacks.

A :class:`LayerStack` is an immutable snapshot of layers in low → high
precedence order. Every "mutator" returns a new stack, so whoever composes a
stack always folds a consistent list.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from docfold.core.composer import CompositionResult, compose_layers, compose_with_diagnostics

from .model import Layer


@dataclass(frozen=True)
class LayerStack:
    """Resolved layer stack, lowest precedence first."""

    layers: Tuple[Layer, ...] = ()

    @classmethod
    def of(cls, layers: Iterable[Layer]) -> "LayerStack":
        return cls(layers=tuple(layers))

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def __len__(self) -> int:
        return len(self.layers)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(layer.name for layer in self.layers)

    def layer_by_name(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def with_layer(self, layer: Layer) -> "LayerStack":
        """Return a stack with ``layer`` replacing its namesake, or appended on top."""
        out: List[Layer] = []
        replaced = False
        for existing in self.layers:
            if existing.name == layer.name:
                out.append(layer)
                replaced = True
            else:
                out.append(existing)
        if not replaced:
            out.append(layer)
        return LayerStack(layers=tuple(out))

    def without_layer(self, name: str) -> "LayerStack":
        return LayerStack(layers=tuple(layer for layer in self.layers if layer.name != name))

    def compose(self) -> Any:
        return compose_layers(self.layers)

    def compose_with_diagnostics(self, *, log_level: Optional[int] = None) -> CompositionResult:
        return compose_with_diagnostics(self.layers, log_level=log_level)


__all__ = ["LayerStack"]
