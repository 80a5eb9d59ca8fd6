from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the local file store the resolution engine is written against:
existence tests, sorted child listing, bounded subtree traversal, directory
creation and recursive deletion. Acts as the single abstraction over the
'os', 'shutil' and 'pathlib' modules so the core never touches them
directly. Raw OSError failures propagate; callers translate them into
domain errors.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, List, Protocol, Tuple

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "dirshape"
UNIX_APP_DIR_NAME = ".dirshape"

# -----------------------------------------------------------------------------
# FILE STORE CAPABILITY
# -----------------------------------------------------------------------------

class FileStore(Protocol):
    """Capability consumed by the core from the underlying filesystem."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def list_children(self, path: Path) -> List[Path]: ...

    def walk_subtree(
            self, path: Path, max_depth: int = -1, follow_symlinks: bool = False
    ) -> Iterator[Tuple[Path, int]]: ...

    def create_directory(self, path: Path) -> None: ...

    def create_directories(self, path: Path) -> None: ...

    def delete_recursive(self, path: Path) -> None: ...


class LocalFileStore:
    """
    FileStore over the local, synchronously accessible filesystem.

    Listings are sorted by entry name so every traversal is deterministic.
    """

    def exists(self, path: Path) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: Path) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: Path) -> bool:
        return os.path.isfile(path)

    def list_children(self, path: Path) -> List[Path]:
        """
        List the direct children of a directory.

        Args:
            path: Directory to list.

        Returns:
            List[Path]: Children sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
        return [Path(path) / n for n in names]

    def walk_subtree(
            self,
            path: Path,
            max_depth: int = -1,
            follow_symlinks: bool = False,
    ) -> Iterator[Tuple[Path, int]]:
        """
        Traverse a subtree depth-first in pre-order, siblings sorted by name.

        The root is yielded first at depth 0. Directories at max_depth are
        yielded but not descended. Symbolic links to directories are only
        descended when follow_symlinks is set.

        Args:
            path: Root of the traversal.
            max_depth: Deepest depth visited, -1 for unbounded.
            follow_symlinks: Descend into symlinked directories.

        Yields:
            Tuple[Path, int]: Each visited path with its depth from the root.

        Raises:
            OSError: If a visited directory cannot be listed.
        """
        root = Path(path)
        yield root, 0
        if max_depth == 0 or not self._descendable(root, follow_symlinks, is_root=True):
            return

        # Explicit stack of child iterators keeps deep trees off the call stack
        stack: List[Tuple[Iterator[Path], int]] = [(iter(self.list_children(root)), 1)]
        while stack:
            children, depth = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                continue

            yield child, depth

            if max_depth != -1 and depth >= max_depth:
                continue
            if not self._descendable(child, follow_symlinks):
                continue
            stack.append((iter(self.list_children(child)), depth + 1))

    def create_directory(self, path: Path) -> None:
        os.mkdir(path)

    def create_directories(self, path: Path) -> None:
        os.makedirs(path, exist_ok=True)

    def delete_recursive(self, path: Path) -> None:
        """
        Remove a file or a directory tree; an absent path is a no-op.

        Args:
            path: Target to remove.

        Raises:
            OSError: If any entry cannot be removed.
        """
        if not os.path.lexists(path):
            return
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
        logger.debug(f"FileStore: Deleted '{path}'")

    @staticmethod
    def _descendable(path: Path, follow_symlinks: bool, is_root: bool = False) -> bool:
        if not os.path.isdir(path):
            return False
        if is_root or follow_symlinks:
            return True
        return not os.path.islink(path)


# Default store shared by every binding; it holds no state
LOCAL_STORE = LocalFileStore()

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent tool data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/dirshape
    - Linux/Mac: ~/.dirshape

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.debug(f"FileStore: Could not create data directory '{path}': {e}")

    return os.path.abspath(path)


def normalize_path(path: str) -> Path:
    """
    Expand environment variables and user shortcuts in a raw path string.

    Args:
        path: Raw input path string.

    Returns:
        Path: Expanded path (not made absolute).
    """
    return Path(os.path.expandvars(os.path.expanduser(path.strip())))
