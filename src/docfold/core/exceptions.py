from __future__ import annotations

from typing import Any, Dict, Mapping


class DocfoldError(Exception):
    """Base exception for docfold."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class LayerLoadError(DocfoldError, ValueError):
    """Raised when a layer source cannot be read or is not a mapping."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DocfoldError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigError(DocfoldError, ValueError):
    """Raised for a malformed project manifest or environment override."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DocfoldError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class SchemaValidationError(DocfoldError, ValueError):
    """Raised when a composed config fails schema validation."""

    def __init__(
        self,
        message: str = "",
        *,
        errors: list[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if errors:
            ctx["errors"] = list(errors)
        DocfoldError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.errors = list(errors or [])


__all__ = [
    "DocfoldError",
    "LayerLoadError",
    "ConfigError",
    "SchemaValidationError",
]
