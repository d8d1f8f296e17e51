"""Unified CLI output formatting utilities.

Every docfold command prints through :class:`OutputFormatter` so JSON mode
stays machine-readable (data on stdout, errors as JSON on stderr).
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from docfold.core.exceptions import DocfoldError
from docfold.core.utils.io import dump_yaml_string


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(self, error: Exception, message: Optional[str] = None, *, error_code: str = "error") -> None:
        """Output error result.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {"error": error_code, "message": msg}
            if isinstance(error, DocfoldError) and error.context:
                output["context"] = error.context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def yaml_output(self, data: Any) -> None:
        print(dump_yaml_string(data, sort_keys=False).rstrip())

    def text(self, message: str) -> None:
        print(message)


def format_value(value: Any, indent: int = 0) -> str:
    """Format a config value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = []
        for k, v in value.items():
            formatted = format_value(v, indent + 1)
            if "\n" in formatted or (isinstance(v, dict) and v):
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        if all(isinstance(v, (str, int, float, bool)) for v in value):
            return f"[{', '.join(str(v) for v in value)}]"
        return "\n".join(f"{prefix}- {format_value(v, indent + 1).strip()}" for v in value)
    if value is None:
        return "null"
    return str(value)


__all__ = ["OutputFormatter", "format_value"]
