"""
docfold config validate command.

SUMMARY: Validate the composed configuration against the configured schema
"""

from __future__ import annotations

import argparse

from docfold.cli import OutputFormatter, add_standard_flags, get_repo_root
from docfold.core.config import ConfigManager
from docfold.core.schemas import validate_payload_safe

SUMMARY = "Validate the composed configuration against the configured schema"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--schema",
        help="Schema name or path to validate against (overrides the manifest)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        manager = ConfigManager(get_repo_root(args))
        if args.schema:
            errors = validate_payload_safe(manager.load_config(validate=False), args.schema, repo_root=manager.repo_root)
            schema_label = args.schema
        else:
            schema_label = manager.settings.get("schema")
            if not schema_label:
                formatter.success({"valid": True, "schema": None, "errors": []}, "No schema configured; nothing to validate.")
                return 0
            errors = manager.validate()

        if errors:
            if formatter.json_mode:
                formatter.json_output({"status": "invalid", "valid": False, "schema": schema_label, "errors": errors})
            else:
                formatter.text(f"Configuration does not match schema '{schema_label}':")
                for err in errors:
                    formatter.text(f"  - {err}")
            return 1

        formatter.success({"valid": True, "schema": schema_label, "errors": []}, f"Configuration matches schema '{schema_label}'.")
        return 0
    except Exception as e:
        formatter.error(e, error_code="config_validate_error")
        return 1
