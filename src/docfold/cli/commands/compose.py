"""
docfold compose command.

SUMMARY: Compose layer files given on the command line

Layers are folded left to right: the last file wins. No project manifest,
schema or environment layer is involved.
"""

from __future__ import annotations

import argparse
import sys

from docfold.cli import OutputFormatter, add_format_flag
from docfold.core.layers import LayerStack, load_layer

SUMMARY = "Compose layer files (lowest precedence first) and print the result"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "files",
        nargs="+",
        help="YAML/JSON layer files or YAML directories, lowest precedence first",
    )
    add_format_flag(parser, default="yaml")
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print merge diagnostics to stderr",
    )


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.format == "json")
    try:
        stack = LayerStack.of(load_layer(path) for path in args.files)
        result = stack.compose_with_diagnostics()
        if args.explain:
            for diag in result.diagnostics:
                print(diag.format(), file=sys.stderr)
        if args.format == "json":
            formatter.json_output(result.config)
        else:
            formatter.yaml_output(result.config)
        return 0
    except Exception as e:
        formatter.error(e, error_code="compose_error")
        return 1
