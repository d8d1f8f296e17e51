"""Core library for docfold (composition engine, layers, config, schemas)."""
from __future__ import annotations

from .composer import CompositionResult, MergeDiagnostic, compose, compose_with_diagnostics
from .layers import Layer, LayerStack

__all__ = [
    "compose",
    "compose_with_diagnostics",
    "CompositionResult",
    "MergeDiagnostic",
    "Layer",
    "LayerStack",
]
