"""
docfold CLI package.

Commands are auto-discovered from subfolders (``config/``) and from
``commands/`` for top-level commands. Each command module exposes
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""
from ._args import add_format_flag, add_json_flag, add_repo_root_flag, add_standard_flags
from ._output import OutputFormatter, format_value
from ._utils import get_repo_root, nest_key

__all__ = [
    "OutputFormatter",
    "format_value",
    "add_json_flag",
    "add_repo_root_flag",
    "add_format_flag",
    "add_standard_flags",
    "get_repo_root",
    "nest_key",
]
