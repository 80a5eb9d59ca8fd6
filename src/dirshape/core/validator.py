from __future__ import annotations

"""
Configuration Validation Service.

Ensures that the CLI configuration dictionary conforms to the expected
schema before it drives a run. Handles type coercion and default value
injection, collecting a warning for every value it had to repair.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from dirshape.domain.config import LOG_LEVELS, OUTPUT_FORMATS, get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Converts untrusted inputs (e.g. a hand-edited JSON file or CLI
    overrides) into strictly typed parameters and fills missing keys with
    defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.

    Raises:
        TypeError: In strict mode, on a value of the wrong type.
        ValueError: In strict mode, on a value outside its allowed set.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing & Normalization
    for field in ("follow_symlinks", "log_to_file"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["search_paths"] = _as_list_str(
        merged.get("search_paths"), defaults["search_paths"], "search_paths", warnings, strict
    )

    merged["output_format"] = _as_choice(
        merged.get("output_format"), OUTPUT_FORMATS, defaults["output_format"],
        "output_format", warnings, strict, upper=False,
    )
    merged["log_level"] = _as_choice(
        merged.get("log_level"), LOG_LEVELS, defaults["log_level"],
        "log_level", warnings, strict, upper=True,
    )

    # 3. Unknown keys are dropped
    for key in sorted(set(merged) - set(defaults)):
        merged.pop(key)
        warnings.append(f"Unknown config key '{key}' ignored.")

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(
        value: Any,
        fallback: List[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> List[str]:
    """Normalize a list of strings, splitting comma separated input."""
    if value is None:
        return list(fallback)

    if isinstance(value, str):
        if strict:
            raise TypeError(f"Invalid field '{field}': expected list, received str.")
        warnings.append(f"Field '{field}' converted from comma separated string to list.")
        return [part.strip() for part in value.split(",") if part.strip()]

    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value if v is not None and str(v).strip()]
        if len(items) != len(value):
            warnings.append(f"Field '{field}' dropped empty entries.")
        return items

    msg = f"Invalid field '{field}': expected list, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_choice(
        value: Any,
        choices: Sequence[str],
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        *,
        upper: bool,
) -> str:
    """Validate a string against a closed set of values."""
    if value is None:
        return fallback
    if not isinstance(value, str):
        msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    normalized = value.strip().upper() if upper else value.strip().lower()
    if normalized in choices:
        return normalized

    msg = f"Invalid field '{field}': '{value}' is not one of {', '.join(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
