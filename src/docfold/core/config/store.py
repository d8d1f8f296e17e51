"""Caller-held runtime configuration.

An :class:`AppConfigStore` owns one composed config built from a
:class:`LayerStack`. Updates (a reloaded layer file, a hot-swapped theme)
never mutate the current config: a new one is composed from a new stack and
the reference is swapped under a lock, so readers always see either the old
or the new config, never a mix.

Published configs are frozen all the way down (mappings become
``MappingProxyType``, sequences become tuples). ``snapshot()`` and ``get()``
return plain mutable copies.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Callable, List, Optional, Tuple

from docfold.core.composer import CompositionResult
from docfold.core.layers import Layer, LayerStack
from docfold.core.utils.merge import copy_tree, is_mapping, is_sequence, tree_kind

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

_SENTINEL = object()


def freeze_tree(value: Any) -> Any:
    """Return a read-only deep copy of a config tree."""
    if is_mapping(value):
        return MappingProxyType({key: freeze_tree(item) for key, item in value.items()})
    if is_sequence(value):
        return tuple(freeze_tree(item) for item in value)
    return copy_tree(value)


def lookup(config: Any, key: str, default: Any = None) -> Any:
    """Resolve a dot-notation key (``"docus.github.branch"``) in a config tree."""
    cur = config
    for part in [p for p in str(key).split(".") if p]:
        if not is_mapping(cur) or part not in cur:
            return default
        cur = cur[part]
    return cur


class AppConfigStore:
    """Holds the current composed config and rebuilds it on layer changes.

    Listeners run after the swap with no lock held, so a listener may itself
    call :meth:`update_layer` and friends.
    """

    def __init__(self, stack: Optional[LayerStack] = None, *, diagnostics_level: Optional[int] = None) -> None:
        self._lock = threading.Lock()
        # Serializes writers so read-modify-swap updates are never lost.
        self._update_lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._diagnostics_level = diagnostics_level
        self._stack = stack if stack is not None else LayerStack()
        self._result = self._compose(self._stack)

    @property
    def stack(self) -> LayerStack:
        return self._stack

    @property
    def config(self) -> Any:
        """Current config, read-only at every level."""
        return self._result.config

    @property
    def result(self) -> CompositionResult:
        """Current composition result; its ``config`` is the frozen config."""
        return self._result

    def snapshot(self) -> Any:
        """Return a deep, mutable copy of the current config."""
        return copy_tree(self._result.config)

    def get(self, key: str, default: Any = None) -> Any:
        value = lookup(self._result.config, key, _SENTINEL)
        if value is _SENTINEL:
            return default
        return copy_tree(value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for new configs; returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def replace_stack(self, stack: LayerStack) -> Any:
        """Compose ``stack`` and make it current."""
        with self._update_lock:
            config, listeners = self._swap(stack)
        self._notify(listeners, config)
        return config

    def update_layer(self, layer: Layer) -> Any:
        """Replace the layer with the same name (or push it on top) and recompose."""
        with self._update_lock:
            config, listeners = self._swap(self._stack.with_layer(layer))
        self._notify(listeners, config)
        return config

    def remove_layer(self, name: str) -> Any:
        with self._update_lock:
            config, listeners = self._swap(self._stack.without_layer(name))
        self._notify(listeners, config)
        return config

    def _compose(self, stack: LayerStack) -> CompositionResult:
        result = stack.compose_with_diagnostics(log_level=self._diagnostics_level)
        if not is_mapping(result.config):
            logger.warning(
                "Composed config is a %s, not a mapping (top layer: %s)",
                tree_kind(result.config),
                stack.names[-1] if len(stack) else "<none>",
            )
        return replace(
            result,
            config=freeze_tree(result.config),
            provenance=MappingProxyType(dict(result.provenance)),
        )

    def _swap(self, stack: LayerStack) -> Tuple[Any, List[Listener]]:
        result = self._compose(stack)
        with self._lock:
            self._stack = stack
            self._result = result
            listeners = list(self._listeners)
        logger.debug("Config swapped (%d layers: %s)", len(stack), ", ".join(stack.names))
        return result.config, listeners

    def _notify(self, listeners: List[Listener], config: Any) -> None:
        for listener in listeners:
            try:
                listener(config)
            except Exception:
                logger.exception("Config listener %r failed", listener)


__all__ = ["AppConfigStore", "freeze_tree", "lookup"]
