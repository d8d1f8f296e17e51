"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path

from docfold.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get the project root from ``--repo-root`` or auto-detect it."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).expanduser().resolve()
    return resolve_project_root()


def nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


__all__ = ["get_repo_root", "nest_key"]
