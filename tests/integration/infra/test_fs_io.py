from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates the local file store (sorted listings, bounded traversal,
creation and deletion), path normalization and cross-platform data
directory resolution.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dirshape.infra.fs import LocalFileStore, get_user_data_dir, normalize_path

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            # We mock makedirs to avoid physical side effects during OS-spoofing
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "dirshape" in path
                assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix() -> None:
    """Verify resolution of ~/.dirshape on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                normalized_path = path.replace("\\", "/")
                assert normalized_path.endswith("/home/testuser/.dirshape")


def test_normalize_path_expansion() -> None:
    """Verify expansion of environment variables and user shortcuts."""
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("  $TEST_VAR/sub ")
        assert path == Path("my_folder") / "sub"

        with patch("os.path.expanduser", side_effect=lambda p: p.replace("~", "/home/user")):
            path = normalize_path("~/code")
            assert path == Path("/home/user/code")


# -----------------------------------------------------------------------------
# FILE STORE TESTS
# -----------------------------------------------------------------------------

def test_list_children_is_sorted(make_tree) -> None:
    """Children come back sorted by name regardless of creation order."""
    root = make_tree(["zeta.txt", "alpha/", "Mid.txt", "beta.txt"])
    names = [p.name for p in LocalFileStore().list_children(root)]
    assert names == ["Mid.txt", "alpha", "beta.txt", "zeta.txt"]


def test_walk_subtree_reports_depths(make_tree) -> None:
    """Every visited path carries its depth; the root is depth 0."""
    root = make_tree(["a/b/c.txt", "d.txt"])
    visited = [(p.relative_to(root).as_posix(), depth) for p, depth in LocalFileStore().walk_subtree(root)]

    assert visited == [(".", 0), ("a", 1), ("a/b", 2), ("a/b/c.txt", 3), ("d.txt", 1)]


def test_walk_subtree_stops_at_max_depth(make_tree) -> None:
    """Directories at max_depth are yielded but not descended."""
    root = make_tree(["a/b/c.txt"])
    visited = [depth for _, depth in LocalFileStore().walk_subtree(root, max_depth=1)]
    assert visited == [0, 1]
    assert [d for _, d in LocalFileStore().walk_subtree(root, max_depth=0)] == [0]


def test_walk_subtree_listing_error_propagates(tmp_path) -> None:
    """Listing failures surface as OSError while iterating."""
    store = LocalFileStore()
    with patch.object(LocalFileStore, "list_children", side_effect=PermissionError("denied")):
        iterator = store.walk_subtree(tmp_path)
        assert next(iterator) == (tmp_path, 0)
        with pytest.raises(PermissionError):
            next(iterator)


def test_create_directory_and_directories(tmp_path) -> None:
    """Single-level creation needs the parent; recursive creation does not."""
    store = LocalFileStore()

    store.create_directory(tmp_path / "one")
    assert store.is_dir(tmp_path / "one")

    with pytest.raises(FileNotFoundError):
        store.create_directory(tmp_path / "missing" / "two")

    store.create_directories(tmp_path / "missing" / "two")
    assert store.is_dir(tmp_path / "missing" / "two")


def test_delete_recursive(make_tree) -> None:
    """Trees and single files are removed; absent paths are ignored."""
    root = make_tree(["tree/a/b.txt", "single.txt"])
    store = LocalFileStore()

    store.delete_recursive(root / "tree")
    store.delete_recursive(root / "single.txt")
    store.delete_recursive(root / "absent")

    assert not store.exists(root / "tree")
    assert not store.exists(root / "single.txt")
