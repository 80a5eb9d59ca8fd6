from __future__ import annotations

"""
Configuration Domain Management.

Holds the per-binding options record and the persistent settings of the
command line tool. CLI settings are a plain dictionary with defaults,
stored as JSON in the user data directory and merged over the defaults on
load so new keys always exist.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dirshape.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class BindOptions:
    """
    Options carried by a binding and inherited by every nested binding.

    Attributes:
        follow_symlinks: Descend into symlinked directories while walking.
    """
    follow_symlinks: bool = False


DEFAULT_BIND_OPTIONS = BindOptions()


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default CLI configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Output
        "output_format": "text",

        # Binding behavior
        "follow_symlinks": False,

        # Contract discovery
        "search_paths": [],

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": False,
    }


def get_config_file() -> str:
    """Resolve the absolute location of the persisted configuration."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def bind_options_from_config(config: Dict[str, Any]) -> BindOptions:
    """Project the binding-related keys of a configuration onto BindOptions."""
    return BindOptions(follow_symlinks=bool(config.get("follow_symlinks", False)))


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the CLI configuration from disk, merged over the defaults.

    Args:
        path: Explicit file location, defaults to the user data directory.

    Returns:
        Dict[str, Any]: The loaded configuration or the defaults on failure.
    """
    config_file = path or get_config_file()
    defaults = get_default_config()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return defaults

    data.pop("version", None)
    defaults.update(data)
    return defaults


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist the CLI configuration to disk.

    Args:
        config: The configuration dictionary to save.
        path: Explicit file location, defaults to the user data directory.

    Returns:
        bool: True if the file was written.
    """
    config_file = path or get_config_file()
    payload = dict(config)
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_file)), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
