"""
docfold project configuration management.

A project declares its layers in ``docfold.yaml`` at the project root. The
composed site config is built from (lowest to highest priority):

1. Schema defaults: ``default`` values declared by the configured schema
2. Declared layers: ``layers:`` entries in manifest order (theme defaults
   first, the site's own app config last)
3. Environment overrides: ``DOCFOLD_*`` variables

The manifest itself is merged over the bundled ``docfold.data/config/defaults.yaml``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from docfold.core.composer import CompositionResult, compose_layers
from docfold.core.exceptions import ConfigError, LayerLoadError
from docfold.core.layers import DEFAULT_ENV_PREFIX, Layer, LayerStack, env_layer, load_layer, schema_defaults_layer
from docfold.core.schemas import load_schema, validate_payload, validate_payload_safe
from docfold.core.utils.io import read_yaml
from docfold.core.utils.merge import deep_merge
from docfold.core.utils.paths import expand_project_path, find_manifest, resolve_project_root
from docfold.core.utils.profiling import span
from docfold.data import read_yaml as read_data_yaml

from .store import AppConfigStore, lookup

# Module logger (warnings are user-visible via CLI log config).
logger = logging.getLogger(__name__)

_DIAGNOSTIC_LEVELS = {
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
}
_DIAGNOSTICS_OFF = {"off", "none", "false", "0"}

# Names of the layers the manager adds itself.
RESERVED_LAYER_IDS = frozenset({"schema-defaults", "env"})


@dataclass(frozen=True)
class LayerSpec:
    """A single declared layer (file or directory) from the manifest."""

    id: str
    path: Path
    optional: bool = False


class ConfigManager:
    """Load the project manifest, build the layer stack, compose and validate."""

    def __init__(self, repo_root: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self.repo_root = Path(repo_root).resolve() if repo_root else resolve_project_root()
        self.manifest_path = find_manifest(self.repo_root)
        self._environ = environ

    @property
    def project_root(self) -> Path:
        """Alias for repo_root."""
        return self.repo_root

    # ========== Tool settings ==========

    @cached_property
    def settings(self) -> Dict[str, Any]:
        """Bundled tool defaults with the project manifest merged on top."""
        defaults = read_data_yaml("config", "defaults.yaml")
        manifest: Any = {}
        if self.manifest_path is not None:
            try:
                # Fail closed: the manifest must never silently ignore invalid YAML.
                manifest = read_yaml(self.manifest_path, default={}, raise_on_error=True)
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(
                    f"Failed to read project manifest {self.manifest_path}: {exc}",
                    context={"path": str(self.manifest_path)},
                ) from exc
            if not isinstance(manifest, dict):
                raise ConfigError(
                    f"Project manifest must be a mapping: {self.manifest_path}",
                    context={"path": str(self.manifest_path)},
                )
        settings = deep_merge(defaults, manifest)
        errors = validate_payload_safe(settings, "manifest")
        if errors:
            raise ConfigError(
                f"Invalid project manifest {self.manifest_path}: " + "; ".join(errors),
                context={"path": str(self.manifest_path), "errors": errors},
            )
        return settings

    def layer_specs(self) -> List[LayerSpec]:
        """Parse ``layers:`` entries (low → high precedence).

        Entries are either a path string or ``{id, path, optional}``.
        """
        raw = self.settings.get("layers") or []
        if not isinstance(raw, list):
            raise ConfigError("'layers' must be a list", context={"path": str(self.manifest_path)})

        specs: List[LayerSpec] = []
        seen: set[str] = set()
        for index, item in enumerate(raw):
            if isinstance(item, str):
                item = {"path": item}
            if not isinstance(item, dict):
                raise ConfigError(
                    f"layers[{index}] must be a path or a mapping, got {type(item).__name__}",
                    context={"index": index},
                )
            path_raw = item.get("path")
            if not isinstance(path_raw, str) or not path_raw.strip():
                raise ConfigError(f"layers[{index}] is missing 'path'", context={"index": index})
            path = expand_project_path(path_raw, repo_root=self.repo_root)
            layer_id = str(item.get("id") or "").strip() or _stem(path)
            if layer_id in RESERVED_LAYER_IDS:
                raise ConfigError(f"Layer id '{layer_id}' is reserved", context={"index": index, "id": layer_id})
            if layer_id in seen:
                raise ConfigError(f"Duplicate layer id '{layer_id}'", context={"index": index, "id": layer_id})
            seen.add(layer_id)
            specs.append(LayerSpec(id=layer_id, path=path, optional=bool(item.get("optional", False))))
        return specs

    @property
    def diagnostics_level(self) -> Optional[int]:
        raw = self.settings.get("diagnostics", "warn")
        mode = str(raw).strip().lower() if raw is not None else "off"
        if mode in _DIAGNOSTICS_OFF:
            return None
        return _DIAGNOSTIC_LEVELS.get(mode, logging.WARNING)

    @property
    def env_settings(self) -> Dict[str, Any]:
        env = self.settings.get("env")
        return env if isinstance(env, dict) else {}

    @cached_property
    def schema(self) -> Optional[Dict[str, Any]]:
        ref = self.settings.get("schema")
        if not ref:
            return None
        return load_schema(str(ref), repo_root=self.repo_root)

    # ========== Layer stack ==========

    def _declared_layers(self) -> List[Layer]:
        layers: List[Layer] = []
        for spec in self.layer_specs():
            if not spec.path.exists():
                if spec.optional:
                    logger.warning("Optional layer '%s' not found at %s; skipping", spec.id, spec.path)
                    continue
                raise LayerLoadError(
                    f"Layer '{spec.id}' not found: {spec.path}",
                    context={"id": spec.id, "path": str(spec.path)},
                )
            layers.append(load_layer(spec.path, name=spec.id))
        return layers

    def build_stack(self) -> LayerStack:
        """Resolve the full layer stack (schema defaults → declared → env)."""
        with span("config.build_stack"):
            layers: List[Layer] = []
            if self.schema is not None and self.settings.get("schemaDefaults", True):
                layers.append(schema_defaults_layer(self.schema, source=str(self.settings.get("schema"))))
            layers.extend(self._declared_layers())

            env = self.env_settings
            if env.get("enabled", True):
                prefix = str(env.get("prefix") or DEFAULT_ENV_PREFIX)
                # Match env segments against the keys the other layers already use.
                reference = compose_layers(layers)
                layer = env_layer(prefix, self._environ, reference=reference)
                if layer.tree:
                    layers.append(layer)
            return LayerStack.of(layers)

    # ========== Composition ==========

    def explain(self) -> CompositionResult:
        """Compose with diagnostics and per-key provenance."""
        with span("config.explain"):
            return self.build_stack().compose_with_diagnostics(log_level=self.diagnostics_level)

    def load_config(self, validate: Optional[bool] = None) -> Dict[str, Any]:
        """Compose the site config.

        Args:
            validate: Validate against the configured schema. ``None`` uses the
                manifest's ``validate`` setting.

        Raises:
            SchemaValidationError: If validation is requested and fails.
        """
        with span("config.load_config.total"):
            cfg = self.explain().config
            should_validate = self.settings.get("validate", False) if validate is None else validate
            if should_validate and self.schema is not None:
                with span("config.load_config.validate"):
                    validate_payload(cfg, self.schema)
            return cfg

    def validate(self) -> List[str]:
        """Return schema errors for the composed config (empty if valid or no schema)."""
        if self.schema is None:
            return []
        return validate_payload_safe(self.explain().config, self.schema)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key (e.g. ``"docus.github.branch"``)."""
        return lookup(self.load_config(validate=False), key, default)

    def get_all(self) -> Dict[str, Any]:
        return self.load_config(validate=False)

    # ========== Runtime store ==========

    def create_store(self) -> AppConfigStore:
        return AppConfigStore(self.build_stack(), diagnostics_level=self.diagnostics_level)

    def refresh(self, store: AppConfigStore) -> Any:
        """Re-read every layer source and swap the result into ``store``."""
        self.__dict__.pop("settings", None)
        self.__dict__.pop("schema", None)
        return store.replace_stack(self.build_stack())


def _stem(path: Path) -> str:
    name = path.name
    for suffix in (".yaml", ".yml", ".json"):
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


__all__ = ["ConfigManager", "LayerSpec"]
