"""
docfold config explain command.

SUMMARY: Show which layer supplied each value, plus merge diagnostics

Diagnostics are informational: a type mismatch between layers at the same
key, or an empty list that discards inherited entries.
"""

from __future__ import annotations

import argparse

from docfold.cli import OutputFormatter, add_standard_flags, get_repo_root
from docfold.core.config import ConfigManager, lookup

SUMMARY = "Show which layer supplied each value, plus merge diagnostics"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Restrict output to a key prefix (e.g., 'docus.header')",
    )
    add_standard_flags(parser)


def _matches(path: str, prefix: str | None) -> bool:
    if not prefix:
        return True
    return path == prefix or path.startswith(prefix + ".")


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        manager = ConfigManager(get_repo_root(args))
        result = manager.explain()
        provenance = {k: v for k, v in result.provenance.items() if _matches(k, args.key)}
        diagnostics = [d for d in result.diagnostics if _matches(d.path, args.key)]

        if formatter.json_mode:
            formatter.json_output(
                {
                    "layers": list(result.layer_names),
                    "provenance": provenance,
                    "diagnostics": [
                        {"kind": d.kind, "path": d.path, "layer": d.layer, "detail": d.detail}
                        for d in diagnostics
                    ],
                }
            )
            return 0

        formatter.text("Layers: " + (" < ".join(result.layer_names) or "(none)"))
        formatter.text("")
        for path, layer in sorted(provenance.items()):
            value = lookup(result.config, path)
            formatter.text(f"  {path} = {value!r}  <- {layer}")
        if diagnostics:
            formatter.text("")
            formatter.text("Diagnostics:")
            for diag in diagnostics:
                formatter.text(f"  {diag.format()}")
        return 0
    except Exception as e:
        formatter.error(e, error_code="config_explain_error")
        return 1
