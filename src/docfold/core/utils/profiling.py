"""Timing spans for ``docfold --profile``.

Loaders, the composer and the manager wrap their work in :func:`span`. Unless
the CLI has installed a :class:`Profiler` for the running command, a span is
just a ``yield``.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Dict, Iterator, List, Optional

_current: ContextVar[Optional["Profiler"]] = ContextVar("docfold_profiler", default=None)


@dataclass(frozen=True)
class Timing:
    name: str
    depth: int
    elapsed_ms: float
    meta: Dict[str, Any] = field(default_factory=dict)


class Profiler:
    """Collects one :class:`Timing` per finished span, in finishing order."""

    def __init__(self) -> None:
        self.timings: List[Timing] = []
        self._open = 0

    @contextmanager
    def measure(self, name: str, **meta: Any) -> Iterator[None]:
        depth = self._open
        self._open += 1
        started = perf_counter()
        try:
            yield
        finally:
            self._open -= 1
            self.timings.append(Timing(name, depth, (perf_counter() - started) * 1000.0, meta))

    def format_summary(self) -> str:
        """One ``[docfold][profile]`` line per span name, slowest total first."""
        totals: Dict[str, float] = {}
        counts: Dict[str, int] = {}
        for t in self.timings:
            totals[t.name] = totals.get(t.name, 0.0) + t.elapsed_ms
            counts[t.name] = counts.get(t.name, 0) + 1
        ranked = sorted(totals, key=totals.__getitem__, reverse=True)
        return "\n".join(
            f"[docfold][profile] {name}: {totals[name]:.3f} ms ({counts[name]}x)" for name in ranked
        )


@contextmanager
def enable_profiler(profiler: Profiler) -> Iterator[None]:
    token = _current.set(profiler)
    try:
        yield
    finally:
        _current.reset(token)


@contextmanager
def span(name: str, **meta: Any) -> Iterator[None]:
    profiler = _current.get()
    if profiler is None:
        yield
        return
    with profiler.measure(name, **meta):
        yield


__all__ = ["Profiler", "Timing", "enable_profiler", "span"]
