"""docfold configuration system.

Usage:
    from docfold.core.config import ConfigManager

    manager = ConfigManager(repo_root=Path("/path/to/site"))
    config = manager.load_config()

    # Long-lived processes keep a store and refresh it on change
    store = manager.create_store()
    manager.refresh(store)
"""
from __future__ import annotations

from .manager import ConfigManager, LayerSpec
from .store import AppConfigStore, freeze_tree, lookup

__all__ = [
    "ConfigManager",
    "LayerSpec",
    "AppConfigStore",
    "freeze_tree",
    "lookup",
]
