"""Project root and manifest resolution.

Resolution priority:
1. ``DOCFOLD_PROJECT_ROOT`` environment variable
2. Nearest ancestor of the start directory holding ``docfold.yaml``/``docfold.yml``
3. The start directory itself (a project with no manifest composes nothing
   but the env layer)
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from docfold.core.exceptions import ConfigError

PROJECT_ROOT_ENV = "DOCFOLD_PROJECT_ROOT"
MANIFEST_NAMES = ("docfold.yaml", "docfold.yml")


def find_manifest(directory: Path) -> Optional[Path]:
    """Return the project manifest in ``directory``, preferring ``.yaml``."""
    for name in MANIFEST_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Raises:
        ConfigError: If ``DOCFOLD_PROJECT_ROOT`` points at a missing directory.
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        path = Path(env_root).expanduser().resolve()
        if not path.is_dir():
            raise ConfigError(
                f"{PROJECT_ROOT_ENV} points at missing directory: {path}",
                context={"path": str(path)},
            )
        return path

    cwd = Path(start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if find_manifest(candidate) is not None:
            return candidate
    return cwd


def expand_project_path(raw: str, *, repo_root: Path) -> Path:
    """Expand ``~``/``$VAR`` and anchor relative paths at ``repo_root``."""
    s = os.path.expandvars(str(raw)).strip()
    p = Path(s).expanduser()
    if not p.is_absolute():
        p = Path(repo_root) / p
    return p.resolve()


__all__ = [
    "PROJECT_ROOT_ENV",
    "MANIFEST_NAMES",
    "find_manifest",
    "resolve_project_root",
    "expand_project_path",
]
