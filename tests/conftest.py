from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures to lay out directory trees and configuration dictionaries.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Iterable[str]], Path]:
    """
    Return a factory that materializes relative paths below tmp_path.

    Entries ending with '/' become directories, every other entry becomes an
    empty file (its parents are created as needed).

    Returns:
        Callable[[Iterable[str]], Path]: Factory returning the tree root.
    """
    def _make(entries: Iterable[str]) -> Path:
        for entry in entries:
            target = tmp_path / entry
            if entry.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.touch()
        return tmp_path

    return _make


@pytest.fixture
def repository_tree(make_tree: Callable[[Iterable[str]], Path]) -> Path:
    """Four artifact paths nested four levels below 'repository/'."""
    return make_tree([
        "repository/org.color/red/1/1.4/foo.txt",
        "repository/org.color.bright/green/1/1.4/foo.txt",
        "repository/junit/junit/4/4.12/bar.txt",
        "repository/io.tomitribe/crest/5/5.4.1.2/baz.txt",
    ])


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete CLI configuration dictionary for testing.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        "output_format": "json",
        "follow_symlinks": True,
        "search_paths": ["/tmp/contracts"],
        "log_level": "DEBUG",
        "log_to_file": False,
    }


@pytest.fixture
def as_relative() -> Callable[[Path, Iterable[Path]], List[str]]:
    """
    Return a renderer of paths relative to a base directory.

    The base itself renders as "/", directories get a trailing "/".
    """
    def _render(base: Path, paths: Iterable[Path]) -> List[str]:
        rendered: List[str] = []
        for p in paths:
            rel = p.relative_to(base).as_posix()
            if rel == ".":
                rendered.append("/")
            elif p.is_dir():
                rendered.append(f"/{rel}/")
            else:
                rendered.append(f"/{rel}")
        return rendered

    return _render
