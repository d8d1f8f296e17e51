"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for project root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root path (directory holding docfold.yaml)",
    )


def add_format_flag(parser: argparse.ArgumentParser, *, default: str = "table") -> None:
    choices = ["json", "yaml", "table"] if default == "table" else ["json", "yaml"]
    parser.add_argument(
        "--format",
        choices=choices,
        default=default,
        help=f"Output format (default: {default})",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


__all__ = ["add_json_flag", "add_repo_root_flag", "add_format_flag", "add_standard_flags"]
