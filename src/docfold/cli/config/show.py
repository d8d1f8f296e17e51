"""
docfold config show command.

SUMMARY: Show the composed site configuration

Displays the configuration folded from schema defaults, the declared layers
and environment overrides. Supports filtering by key and multiple output formats.
"""

from __future__ import annotations

import argparse
import sys

from docfold.cli import OutputFormatter, add_format_flag, add_standard_flags, format_value, get_repo_root, nest_key
from docfold.core.config import ConfigManager, lookup

SUMMARY = "Show the composed site configuration"

_MISSING = object()


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'docus.github.branch')",
    )
    add_format_flag(parser)
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Fail if the composed config does not match the configured schema",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Show configuration - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(get_repo_root(args))
        config = manager.load_config(validate=True if args.validate else None)
        output_format = "json" if args.json else args.format

        if args.key:
            value = lookup(config, args.key, _MISSING)
            if value is _MISSING:
                formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="key_not_found")
                return 1
            if output_format == "json":
                formatter.json_output({args.key: value})
            elif output_format == "yaml":
                formatter.yaml_output(nest_key(args.key, value))
            else:
                formatted = format_value(value, indent=1)
                if "\n" in formatted:
                    formatter.text(f"{args.key}:")
                    formatter.text(formatted)
                else:
                    formatter.text(f"{args.key}: {formatted.strip()}")
            return 0

        if output_format == "json":
            formatter.json_output(config)
        elif output_format == "yaml":
            formatter.yaml_output(config)
        else:
            formatter.text("Site Configuration")
            formatter.text("=" * 60)
            for section, value in config.items():
                formatter.text("")
                formatter.text(f"[{section}]")
                formatter.text(format_value(value, indent=1) if isinstance(value, dict) else f"  {format_value(value)}")
        return 0

    except Exception as e:
        formatter.error(e, error_code="config_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
