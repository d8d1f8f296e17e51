"""
docfold config layers command.

SUMMARY: List layers in precedence order
"""

from __future__ import annotations

import argparse

from docfold.cli import OutputFormatter, add_standard_flags, get_repo_root
from docfold.core.config import ConfigManager

SUMMARY = "List layers in precedence order (lowest first)"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        manager = ConfigManager(get_repo_root(args))
        stack = manager.build_stack()
        rows = [
            {
                "precedence": index,
                "name": layer.name,
                "source": layer.source,
                "keys": sorted(layer.tree.keys()) if isinstance(layer.tree, dict) else [],
            }
            for index, layer in enumerate(stack)
        ]
        if formatter.json_mode:
            formatter.json_output({"root": str(manager.repo_root), "layers": rows})
            return 0

        if not rows:
            formatter.text("No layers declared.")
            return 0
        formatter.text("Layers (lowest precedence first):")
        for row in rows:
            keys = ", ".join(row["keys"]) or "-"
            formatter.text(f"  {row['precedence']}. {row['name']:<18} {row['source'] or ''}  [{keys}]")
        return 0
    except Exception as e:
        formatter.error(e, error_code="config_layers_error")
        return 1
