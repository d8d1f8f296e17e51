from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Layer:
    """A single named config layer (theme defaults, site overrides, env, ...).

    ``tree`` is treated as immutable once the layer is built; the composer
    only ever reads it.
    """

    name: str
    tree: Any
    source: Optional[str] = None

    def describe(self) -> str:
        return f"{self.name} ({self.source})" if self.source else self.name


__all__ = ["Layer"]
