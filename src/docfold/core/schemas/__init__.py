"""JSON Schema support: bundled schema loading, validation, default extraction."""
from __future__ import annotations

from .defaults import defaults_from_schema
from .validation import (
    SchemaValidationError,
    load_schema,
    resolve_schema_path,
    validate_payload,
    validate_payload_safe,
)

__all__ = [
    "defaults_from_schema",
    "load_schema",
    "resolve_schema_path",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
