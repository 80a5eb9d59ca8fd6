from __future__ import annotations

"""
Bounded Walk Engine.

Enumerates the descendants of a root path within a (min_depth, max_depth)
window. Traversal is delegated to the file store (depth-first, pre-order,
siblings sorted by name) so every enumeration is deterministic and visits
each matching path exactly once. Root accessibility is verified eagerly,
at call time; failures further down surface while iterating.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

from dirshape.domain.errors import WalkFailed
from dirshape.domain.operations import DIRECT_CHILDREN, WalkBounds
from dirshape.infra.fs import LOCAL_STORE, FileStore

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def walk(
        root: Path,
        bounds: Optional[WalkBounds] = None,
        *,
        store: FileStore = LOCAL_STORE,
        follow_symlinks: bool = False,
) -> Iterator[Path]:
    """
    Enumerate the paths below a root that fall inside a depth window.

    Without bounds only the direct children of the root are produced (the
    root itself is excluded). The root has depth 0 and is produced only if
    the window admits depth 0.

    Args:
        root: Enumeration root.
        bounds: Depth window, or None for direct children only.
        store: File store used for traversal.
        follow_symlinks: Descend into symlinked directories.

    Returns:
        Iterator[Path]: Lazy iterator over the matching paths.

    Raises:
        WalkFailed: If the root does not exist.
    """
    window = bounds or DIRECT_CHILDREN
    if not store.exists(root):
        raise WalkFailed(root, "no such file or directory")

    logger.debug(
        f"Walker: Enumerating '{root}' (min_depth={window.min_depth}, max_depth={window.max_depth})"
    )
    return _bounded(root, window, store, follow_symlinks)


def walk_files(
        root: Path,
        depth: int = -1,
        *,
        store: FileStore = LOCAL_STORE,
        follow_symlinks: bool = False,
) -> Iterator[Path]:
    """
    Enumerate the regular files of a subtree down to a depth.

    Args:
        root: Enumeration root.
        depth: Deepest depth visited, -1 for unbounded.
        store: File store used for traversal.
        follow_symlinks: Descend into symlinked directories.

    Returns:
        Iterator[Path]: Lazy iterator over regular files only.
    """
    candidates = walk(
        root,
        WalkBounds(min_depth=0, max_depth=depth),
        store=store,
        follow_symlinks=follow_symlinks,
    )
    return (p for p in candidates if store.is_file(p))


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _bounded(
        root: Path,
        window: WalkBounds,
        store: FileStore,
        follow_symlinks: bool,
) -> Iterator[Path]:
    """Apply the depth window over the store traversal, translating I/O errors."""
    try:
        for path, depth in store.walk_subtree(root, window.max_depth, follow_symlinks):
            if window.admits(depth):
                yield path
    except OSError as e:
        raise WalkFailed(root, str(e)) from e
