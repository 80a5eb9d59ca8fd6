from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Type coercion (String to Bool/List).
2. Default value injection and unknown key removal.
3. Strict mode validation.
"""

import pytest

from dirshape.core.validator import validate_config
from dirshape.domain.config import get_default_config


def test_validate_none_returns_defaults() -> None:
    """Passing None should return the full default configuration."""
    cfg, warnings = validate_config(None)

    assert cfg == get_default_config()
    assert len(warnings) == 1


def test_validate_empty_dict_returns_defaults() -> None:
    """Passing an empty dict should merge with defaults without warnings."""
    cfg, warnings = validate_config({})

    assert cfg == get_default_config()
    assert warnings == []


def test_validate_converts_strings_to_bools() -> None:
    """CLI/config string inputs ('yes', 'off') become native booleans."""
    cfg, warnings = validate_config({"follow_symlinks": "yes", "log_to_file": "off"})

    assert cfg["follow_symlinks"] is True
    assert cfg["log_to_file"] is False
    assert len(warnings) == 2


def test_validate_invalid_bool_falls_back() -> None:
    """Unrecognized values fall back to the default with a warning."""
    cfg, warnings = validate_config({"follow_symlinks": "maybe"})

    assert cfg["follow_symlinks"] is False
    assert any("follow_symlinks" in w for w in warnings)


def test_validate_splits_comma_separated_search_paths() -> None:
    """A comma separated string becomes a list of trimmed entries."""
    cfg, _ = validate_config({"search_paths": "src, lib ,,"})
    assert cfg["search_paths"] == ["src", "lib"]


def test_validate_normalizes_choices() -> None:
    """Levels are upper-cased and formats lower-cased before checking."""
    cfg, warnings = validate_config({"log_level": "debug", "output_format": "JSON"})

    assert cfg["log_level"] == "DEBUG"
    assert cfg["output_format"] == "json"
    assert warnings == []


def test_validate_invalid_choice_falls_back() -> None:
    """Values outside the allowed set revert to the default."""
    cfg, warnings = validate_config({"output_format": "yaml"})

    assert cfg["output_format"] == "text"
    assert "yaml" in warnings[0]


def test_validate_drops_unknown_keys() -> None:
    """Keys that no component reads are removed and reported."""
    cfg, warnings = validate_config({"theme": "dark"})

    assert "theme" not in cfg
    assert warnings == ["Unknown config key 'theme' ignored."]


def test_strict_mode_raises() -> None:
    """Strict mode rejects instead of repairing."""
    with pytest.raises(TypeError):
        validate_config([], strict=True)
    with pytest.raises(TypeError):
        validate_config({"follow_symlinks": "yes"}, strict=True)
    with pytest.raises(TypeError):
        validate_config({"search_paths": "a,b"}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"log_level": "LOUD"}, strict=True)
