"""Environment variable overrides as a config layer.

``DOCFOLD_docus__github__branch=dev`` becomes ``{"docus": {"github": {"branch": "dev"}}}``.
Segments are split on ``__`` (or on ``_`` when the key has no ``__``) and
matched case-insensitively against an optional reference tree so that
camelCase keys such as ``showLinkIcon`` can be addressed from the shell.
"""
from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from docfold.core.exceptions import ConfigError
from docfold.core.utils.merge import is_mapping

from .model import Layer

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "DOCFOLD_"

# Tool settings read straight from the environment, never folded into the site config.
RESERVED_ENV_KEYS = frozenset({"PROJECT_ROOT", "LOG_LEVEL"})


def _as_bool(v: str) -> Optional[bool]:
    low = v.strip().lower()
    if low in {"true", "false"}:
        return low == "true"
    return None


def _as_int(v: str) -> Optional[int]:
    if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
        return int(v)
    return None


def _as_float(v: str) -> Optional[float]:
    s = v.strip()
    if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
        return float(s)
    return None


def _as_json(v: str) -> Optional[Any]:
    s = v.strip()
    if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            return None
    return None


def coerce_env_value(value: str) -> Any:
    """Best-effort typing of an environment value.

    Tries bool, int, float, then a JSON array/object; anything else is the
    stripped string. ``"null"`` stays a string: an env var cannot unset a key.
    """
    for caster in (_as_bool, _as_int, _as_float, _as_json):
        result = caster(value)
        if result is not None:
            return result
    return value.strip()


def parse_env_key(raw: str, *, strict: bool = False) -> List[str]:
    if not raw:
        return []
    segs = raw.split("__") if "__" in raw else raw.split("_")
    processed: List[str] = []
    for seg in segs:
        if seg == "":
            if strict:
                raise ConfigError(
                    f"Malformed environment override key: empty segment in '{raw}'.",
                    context={"key": raw},
                )
            return []
        processed.append(seg.lower())
    return processed


def iter_env_overrides(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Optional[Mapping[str, str]] = None,
    *,
    strict: bool = False,
) -> Iterator[Tuple[List[str], Any, str]]:
    env = os.environ if environ is None else environ
    for key in sorted(env.keys()):
        if not key.startswith(prefix):
            continue
        raw = key[len(prefix):]
        if raw.upper() in RESERVED_ENV_KEYS:
            continue
        if not raw:
            if strict:
                raise ConfigError(f"Malformed environment override key: '{key}'", context={"key": key})
            continue
        path = parse_env_key(raw, strict=strict)
        if not path:
            logger.debug("Ignoring malformed environment override %s", key)
            continue
        yield path, coerce_env_value(env[key]), key


def _canonical_key(segment: str, reference: Any) -> str:
    if is_mapping(reference):
        lower_map = {k.lower(): k for k in reference.keys() if isinstance(k, str)}
        return lower_map.get(segment, segment)
    return segment


def _set_nested(root: Dict[str, Any], path: List[str], value: Any, reference: Any) -> None:
    cur = root
    ref = reference
    for i, part in enumerate(path):
        key = _canonical_key(part, ref)
        ref = ref.get(key) if is_mapping(ref) else None
        if i == len(path) - 1:
            cur[key] = value
            return
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            # A deeper override wins over a shallower one set earlier.
            nxt = {}
            cur[key] = nxt
        cur = nxt


def env_tree(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Optional[Mapping[str, str]] = None,
    *,
    reference: Any = None,
    strict: bool = False,
) -> Dict[str, Any]:
    """Build a config tree from ``<prefix>*`` environment variables."""
    tree: Dict[str, Any] = {}
    for path, typed_value, key in iter_env_overrides(prefix, environ, strict=strict):
        logger.debug("Environment override %s -> %s", key, ".".join(path))
        _set_nested(tree, path, typed_value, reference)
    return tree


def env_layer(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Optional[Mapping[str, str]] = None,
    *,
    reference: Any = None,
    strict: bool = False,
    name: str = "env",
) -> Layer:
    """Return environment overrides as the ``env`` layer."""
    return Layer(
        name=name,
        tree=env_tree(prefix, environ, reference=reference, strict=strict),
        source=f"environment ({prefix}*)",
    )


__all__ = [
    "DEFAULT_ENV_PREFIX",
    "RESERVED_ENV_KEYS",
    "coerce_env_value",
    "parse_env_key",
    "iter_env_overrides",
    "env_tree",
    "env_layer",
]
