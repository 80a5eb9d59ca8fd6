from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, persistent storage and CLI overrides), contract loading, command
execution and result rendering. Resolution failures are reported with exit
code 1, usage and loading problems with exit code 2.
"""

import importlib
import json
import logging
import os
import sys
from pathlib import PurePath
from typing import Any, Dict, List, Optional

from dirshape.core.binding import Binding, anchor_of, bind
from dirshape.core.table import TABLES
from dirshape.core.validator import validate_config
from dirshape.domain.config import (
    bind_options_from_config,
    get_config_file,
    get_default_config,
    load_config,
    save_config,
)
from dirshape.domain.contracts import is_contract
from dirshape.domain.descriptors import OperationDescriptor
from dirshape.domain.errors import DirShapeError
from dirshape.infra.fs import normalize_path
from dirshape.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from dirshape.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


class ContractLoadError(Exception):
    """Raised when a 'module:ClassName' reference cannot be turned into a contract."""

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if cli_args.flag(args, "use_defaults") else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    log_file = getattr(args, "log_file", None)
    if log_file is None and conf["log_to_file"]:
        log_file = get_default_log_path()
    configure_logging(
        LoggingConfig(level=conf["log_level"], console=True, log_file=log_file),
        force=True,
    )
    logger.debug("CLI execution initiated.")

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if cli_args.flag(args, "save_config"):
        if not save_config(conf):
            print("ERROR: the configuration could not be saved.", file=sys.stderr)
            return EXIT_FAILURE
        logger.info(f"Configuration saved to {get_config_file()}")

    if cli_args.flag(args, "dump_config"):
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if not args.command:
        if cli_args.flag(args, "save_config"):
            return EXIT_OK
        parser.print_usage(sys.stderr)
        print("ERROR: a command is required (describe, resolve).", file=sys.stderr)
        return EXIT_USAGE

    # 4. Contract loading phase
    try:
        contract = load_contract(args.contract, conf["search_paths"])
    except ContractLoadError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 5. Command execution phase
    as_json = conf["output_format"] == "json"
    try:
        if args.command == "describe":
            report = describe_contract(contract)
            _print_report(report, as_json)
            return EXIT_OK

        result = resolve_operation(
            contract,
            args.path,
            args.operation,
            args.argument,
            follow_symlinks=conf["follow_symlinks"],
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except DirShapeError as e:
        logger.error(f"Resolution failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 6. Output rendering phase
    _print_result(result, as_json)
    return EXIT_OK

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def load_contract(reference: str, search_paths: Optional[List[str]] = None) -> type:
    """
    Import a contract from a 'package.module:ClassName' reference.

    Nested classes are reachable with a dotted attribute path
    ('module:Outer.Inner').

    Args:
        reference: Contract reference.
        search_paths: Directories prepended to sys.path before importing.

    Returns:
        type: The contract class.

    Raises:
        ContractLoadError: On a malformed reference, an import failure, a
            missing attribute or a class that is not a contract.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ContractLoadError(f"Invalid contract reference '{reference}', expected 'module:ClassName'.")

    for raw in reversed(search_paths or []):
        entry = os.path.abspath(str(normalize_path(raw)))
        if entry not in sys.path:
            sys.path.insert(0, entry)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ContractLoadError(f"Cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ContractLoadError(f"'{module_name}' has no attribute '{attr_path}'") from e

    if not is_contract(target):
        raise ContractLoadError(f"'{reference}' is not a contract type.")
    return target


def describe_contract(contract: type) -> Dict[str, Any]:
    """
    Build the descriptor report of every operation of a contract.

    Args:
        contract: The contract class.

    Returns:
        Dict[str, Any]: Contract name and one entry per operation, either a
            descriptor summary or the classification error.
    """
    operations: List[Dict[str, Any]] = []
    for name, outcome in TABLES.table(contract).describe_all():
        if isinstance(outcome, OperationDescriptor):
            operations.append(outcome.summary())
        else:
            operations.append({"name": name, "error": str(outcome)})
    return {"contract": contract.__qualname__, "operations": operations}


def resolve_operation(
        contract: type,
        path: str,
        operation: str,
        argument: Optional[str] = None,
        *,
        follow_symlinks: bool = False,
) -> Any:
    """
    Bind a contract and invoke one of its operations.

    Args:
        contract: The contract class.
        path: Anchor directory.
        operation: Operation name.
        argument: Optional sub-path argument.
        follow_symlinks: Walk into symlinked directories.

    Returns:
        Any: The operation result, collections materialized as lists.

    Raises:
        DirShapeError: If the operation is unknown or its resolution fails.
    """
    options = bind_options_from_config({"follow_symlinks": follow_symlinks})
    binding = bind(contract, normalize_path(path), options=options)

    # Unknown or private names fail with a typed error
    if operation.startswith("_") or not callable(getattr(binding, operation, None)):
        TABLES.table(contract).describe(operation)

    method = getattr(binding, operation)
    result = method(argument) if argument is not None else method()
    if result is not None and not isinstance(result, (str, bytes, PurePath, Binding)):
        if hasattr(result, "__iter__") and not isinstance(result, dict):
            return list(result)
    return result

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge override values into the base configuration.

    Only known keys are merged; None means "not given on the command line".
    """
    out = dict(base)
    keys_to_merge = ["output_format", "follow_symlinks", "search_paths", "log_level"]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def render_value(value: Any) -> Any:
    """Convert a resolution result into printable, JSON-compatible data."""
    if isinstance(value, Binding):
        return str(anchor_of(value))
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [render_value(v) for v in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def _print_result(result: Any, as_json: bool) -> None:
    rendered = render_value(result)
    if as_json:
        print(json.dumps({"result": rendered}, ensure_ascii=False, indent=2))
        return
    if isinstance(rendered, list):
        for item in rendered:
            print(item)
    elif rendered is not None:
        print(rendered)


def _print_report(report: Dict[str, Any], as_json: bool) -> None:
    if as_json:
        print(json.dumps(report, ensure_ascii=False, indent=2))
        return

    print(f"Contract: {report['contract']}")
    for op in report["operations"]:
        if "error" in op:
            print(f"  {op['name']}: ERROR {op['error']}")
            continue
        if op["kind"] == "capability":
            print(f"  {op['name']}: capability")
            continue

        details = [op["shape"], f"target={op['target']}"]
        if op["parent_depth"] is not None:
            details.append(f"parent={op['parent_depth']}")
        if op["action"] != "none":
            details.append(f"action={op['action']}")
        if op["walk"] is not None:
            details.append(f"walk={op['walk'][0]}..{op['walk'][1]}")
        if op["filters"]:
            details.append(f"filters={','.join(op['filters'])}")
        if op["must_exist"]:
            details.append("must_exist")
        print(f"  {op['name']}: {' '.join(details)}")


if __name__ == "__main__":
    sys.exit(main())
