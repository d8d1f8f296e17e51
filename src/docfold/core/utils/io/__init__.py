"""I/O utilities for docfold.

- YAML: read, dump, deterministic directory listing
- JSON: read
"""
from __future__ import annotations

from .json import read_json
from .yaml import dump_yaml_string, iter_yaml_files, read_yaml

__all__ = [
    "read_json",
    "read_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
