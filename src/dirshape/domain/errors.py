from __future__ import annotations

"""
Resolution Error Taxonomy.

Defines the typed failures raised while binding contracts and resolving
their operations. Every error carries enough context (operation signature,
target path, target type) to diagnose the failure without re-running the
call, and all of them propagate directly to the caller.
"""

from pathlib import Path
from typing import Any, Optional

# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class DirShapeError(Exception):
    """Root of every error raised by the binding and resolution engine."""


def _describe(path: Optional[Path]) -> str:
    if path is None:
        return "<none>"
    try:
        return str(Path(path).absolute())
    except OSError:
        return str(path)

# -----------------------------------------------------------------------------
# SIGNATURE AND ARGUMENT ERRORS
# -----------------------------------------------------------------------------

class UnsupportedOperationSignature(DirShapeError, TypeError):
    """
    Raised when no return-shape rule matches a declared operation.

    Attributes:
        signature: Human readable signature of the offending operation.
        reason: Optional detail about the rule that rejected it.
    """

    def __init__(self, signature: str, reason: str = "") -> None:
        self.signature = signature
        self.reason = reason
        message = f"Unsupported operation signature: {signature}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidArgument(DirShapeError, ValueError):
    """Raised on a wrong arity or type of an explicit sub-path argument."""


class MissingTarget(DirShapeError, FileNotFoundError):
    """
    Raised when an operation opted in to a must-exist contract and its target
    is absent.
    """

    def __init__(self, signature: str, path: Path) -> None:
        self.signature = signature
        self.path = path
        super().__init__(f"Target does not exist: {_describe(path)}\n operation: {signature}")

# -----------------------------------------------------------------------------
# CREATION ACTION ERRORS
# -----------------------------------------------------------------------------

class CreateIfAbsentFailed(DirShapeError):
    """Raised when a single-level directory creation (@mkdir) fails."""

    def __init__(self, signature: str, path: Path, detail: str = "") -> None:
        self.signature = signature
        self.path = path
        message = f"@mkdir failed\n operation: {signature}\n path: {_describe(path)}"
        if detail:
            message = f"{message}\n reason: {detail}"
        super().__init__(message)


class CreateRecursiveFailed(DirShapeError):
    """Raised when a recursive directory creation (@mkdirs) fails."""

    def __init__(self, signature: str, path: Path, detail: str = "") -> None:
        self.signature = signature
        self.path = path
        message = f"@mkdirs failed\n operation: {signature}\n path: {_describe(path)}"
        if detail:
            message = f"{message}\n reason: {detail}"
        super().__init__(message)


class DeleteFailed(DirShapeError):
    """Raised when a recursive delete of an anchor subtree fails."""

    def __init__(self, path: Path, detail: str = "") -> None:
        self.path = path
        message = f"Could not delete: {_describe(path)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

# -----------------------------------------------------------------------------
# VALUE WRAPPER ERRORS
# -----------------------------------------------------------------------------

class WrapperResolutionFailed(UnsupportedOperationSignature):
    """
    Raised when a target type offers neither a path constructor nor a
    path-accepting static factory.
    """

    def __init__(self, target_type: type, signature: str = "") -> None:
        self.target_type = target_type
        name = getattr(target_type, "__name__", repr(target_type))
        reason = (
            f"type '{name}' cannot be constructed from a path. "
            f"Add a constructor or factory method similar to the following:\n"
            f"    def __init__(self, path: Path) -> None: ...\n"
            f"    @staticmethod\n"
            f"    def from_path(path: Path) -> {name}: ..."
        )
        super().__init__(signature or name, reason)


class WrapperConstructionFailed(DirShapeError):
    """
    Raised when the selected constructor or factory of a value type raises.

    Attributes:
        target_type: The value type being constructed.
        member: Qualified name of the constructor or factory used.
        path: The path handed to the member.
    """

    def __init__(self, target_type: type, member: str, path: Path, kind: str = "constructor") -> None:
        self.target_type = target_type
        self.member = member
        self.path = path
        name = getattr(target_type, "__name__", repr(target_type))
        label = "construction" if kind == "constructor" else "factory method"
        super().__init__(
            f"{name} {label} failed\n {kind}: {member}\n path: {_describe(path)}"
        )

# -----------------------------------------------------------------------------
# ENUMERATION ERRORS
# -----------------------------------------------------------------------------

class FilterInstantiationFailed(DirShapeError):
    """Raised when a declared filter class cannot be instantiated."""

    def __init__(self, filter_class: Any) -> None:
        self.filter_class = filter_class
        super().__init__(f"Unable to instantiate filter {filter_class!r}")


class WalkFailed(DirShapeError):
    """Raised when the enumeration root cannot be listed."""

    def __init__(self, path: Path, detail: str = "") -> None:
        self.path = path
        message = f"Cannot enumerate: {_describe(path)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
