from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command line schema of the dirshape tool (the 'describe' and
'resolve' commands plus the shared diagnostic flags) and translates the
parsed namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the dirshape CLI.

    Shared flags are accepted both before and after the command name.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    common = _build_common_parser()

    p = argparse.ArgumentParser(
        prog="dirshape",
        description="Inspect and resolve typed directory contracts.",
        parents=[common],
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    # --- describe ---
    describe = sub.add_parser(
        "describe",
        parents=[common],
        help="List the operations of a contract and how each one resolves.",
        argument_default=argparse.SUPPRESS,
    )
    describe.add_argument(
        "contract",
        help="Contract reference as 'package.module:ClassName'.",
    )

    # --- resolve ---
    resolve = sub.add_parser(
        "resolve",
        parents=[common],
        help="Bind a contract to a directory and invoke one operation.",
        argument_default=argparse.SUPPRESS,
    )
    resolve.add_argument(
        "contract",
        help="Contract reference as 'package.module:ClassName'.",
    )
    resolve.add_argument("path", help="Anchor directory of the binding.")
    resolve.add_argument("operation", help="Operation name to invoke.")
    resolve.add_argument(
        "argument",
        nargs="?",
        default=None,
        help="Optional sub-path argument passed to the operation.",
    )

    return p


def _build_common_parser() -> argparse.ArgumentParser:
    # SUPPRESS keeps a flag given before the command from being reset after it
    c = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)

    # --- Contract Discovery ---
    c.add_argument(
        "-I", "--search-path",
        dest="search_paths",
        action="append",
        help="Directory prepended to the import path before loading contracts (repeatable).",
    )

    # --- Binding Behavior ---
    c.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Descend into symlinked directories while walking.",
    )

    # --- Configuration and Diagnostic Tools ---
    c.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    c.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    c.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration as the new saved defaults.",
    )
    c.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    c.add_argument(
        "--log-file",
        dest="log_file",
        help="Also write log records to this rotating file.",
    )

    # --- Format Selection ---
    c.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine readable JSON.",
    )
    return c

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def flag(args: argparse.Namespace, name: str) -> bool:
    """Read a store_true flag that may be absent from the namespace."""
    return bool(getattr(args, name, False))


def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if flag(args, "follow_symlinks"):
        overrides["follow_symlinks"] = True
    if flag(args, "json_output"):
        overrides["output_format"] = "json"
    if flag(args, "debug"):
        overrides["log_level"] = "DEBUG"

    search_paths = _flatten_csv(getattr(args, "search_paths", None))
    if search_paths:
        overrides["search_paths"] = search_paths

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _flatten_csv(values: Optional[List[str]]) -> Optional[List[str]]:
    """Split every comma separated entry and drop the empty ones."""
    if values is None:
        return None
    parts = [x.strip() for v in values for x in v.split(",")]
    return [x for x in parts if x]
