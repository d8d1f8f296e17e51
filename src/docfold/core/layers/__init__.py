"""Config layers: the model, ordered stacks, and the producers that build them."""
from __future__ import annotations

from .env import DEFAULT_ENV_PREFIX, env_layer, env_tree
from .loader import (
    load_layer,
    load_layer_directory,
    load_layer_file,
    read_layer_tree,
    schema_defaults_layer,
)
from .model import Layer
from .stack import LayerStack

__all__ = [
    "Layer",
    "LayerStack",
    "DEFAULT_ENV_PREFIX",
    "env_layer",
    "env_tree",
    "load_layer",
    "load_layer_file",
    "load_layer_directory",
    "read_layer_tree",
    "schema_defaults_layer",
]
