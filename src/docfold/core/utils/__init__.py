"""Shared utilities for docfold (merging, file I/O, profiling)."""
from __future__ import annotations

from .merge import copy_tree, deep_merge, merge_arrays
from .profiling import span

__all__ = ["deep_merge", "merge_arrays", "copy_tree", "span"]
