from __future__ import annotations

"""
Unit tests for the Bounded Walk Engine.

Verifies:
1. Default enumeration (direct children only).
2. Depth windows (min/max depth) and deterministic pre-order.
3. Eager failure on a missing root.
4. Symbolic link handling.
"""

import os
from pathlib import Path

import pytest

from dirshape.core.walker import walk, walk_files
from dirshape.domain.errors import WalkFailed
from dirshape.domain.operations import WalkBounds

LEVEL_TWO = [
    "/repository/io.tomitribe/",
    "/repository/junit/",
    "/repository/org.color/",
    "/repository/org.color.bright/",
]


def test_default_walk_yields_direct_children_only(repository_tree, as_relative):
    """Without bounds neither the root nor grandchildren are produced."""
    result = as_relative(repository_tree, walk(repository_tree))
    assert result == ["/repository/"]


def test_unbounded_walk_is_preorder_and_sorted(repository_tree, as_relative):
    """The full walk starts at the root and visits siblings by name."""
    result = as_relative(repository_tree, walk(repository_tree, WalkBounds()))

    assert result[:3] == ["/", "/repository/", "/repository/io.tomitribe/"]
    assert result[-1] == "/repository/org.color.bright/green/1/1.4/foo.txt"
    assert len(result) == 22
    assert len(set(result)) == 22


def test_max_depth_one_yields_root_and_children(repository_tree, as_relative):
    """max_depth=1 keeps the root (depth 0) and its direct children."""
    result = as_relative(repository_tree, walk(repository_tree, WalkBounds(max_depth=1)))
    assert result == ["/", "/repository/"]


def test_max_depth_two(repository_tree, as_relative):
    """max_depth=2 adds the grandchildren."""
    result = as_relative(repository_tree, walk(repository_tree, WalkBounds(max_depth=2)))
    assert result == ["/", "/repository/"] + LEVEL_TWO


def test_min_depth_two_excludes_shallow_entries(repository_tree, as_relative):
    """min_depth=2 drops the root and its children but keeps everything deeper."""
    result = as_relative(repository_tree, walk(repository_tree, WalkBounds(min_depth=2)))

    assert "/" not in result
    assert "/repository/" not in result
    assert len(result) == 20
    assert "/repository/junit/junit/4/4.12/bar.txt" in result


def test_exact_depth_window(repository_tree, as_relative):
    """min_depth=2, max_depth=2 yields exactly the level-2 entries in order."""
    result = as_relative(repository_tree, walk(repository_tree, WalkBounds(2, 2)))
    assert result == LEVEL_TWO


def test_missing_root_fails_eagerly(tmp_path):
    """The missing root is reported at call time, before any iteration."""
    with pytest.raises(WalkFailed) as excinfo:
        walk(tmp_path / "absent")
    assert "absent" in str(excinfo.value)


def test_file_root_yields_only_itself(tmp_path):
    """A regular file has no children; depth 0 admits the file itself."""
    target = tmp_path / "single.txt"
    target.write_text("x", encoding="utf-8")

    assert list(walk(target)) == []
    assert list(walk(target, WalkBounds())) == [target]


def test_walk_files_excludes_directories(repository_tree, as_relative):
    """walk_files keeps regular files only."""
    result = sorted(as_relative(repository_tree, walk_files(repository_tree)))
    assert result == [
        "/repository/io.tomitribe/crest/5/5.4.1.2/baz.txt",
        "/repository/junit/junit/4/4.12/bar.txt",
        "/repository/org.color.bright/green/1/1.4/foo.txt",
        "/repository/org.color/red/1/1.4/foo.txt",
    ]


def test_walk_files_respects_depth(repository_tree):
    """Files deeper than the requested depth are not reached."""
    assert list(walk_files(repository_tree, depth=3)) == []


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")
def test_symlinked_directories_are_not_descended_by_default(make_tree, as_relative):
    """Links are listed but only followed when asked to."""
    root = make_tree(["real/inner.txt"])
    os.symlink(root / "real", root / "link", target_is_directory=True)

    plain = as_relative(root, walk(root, WalkBounds()))
    followed = as_relative(root, walk(root, WalkBounds(), follow_symlinks=True))

    assert "/link/" in plain
    assert "/link/inner.txt" not in plain
    assert "/link/inner.txt" in followed
