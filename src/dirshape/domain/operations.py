from __future__ import annotations

"""
Declarative Operation Metadata.

Provides the decorators used inside a contract to annotate its operations
(name override, parent ascension, creation action, walk bounds, filters and
the must-exist opt-in). Each decorator records its value on an immutable
OperationMeta record attached to the decorated function; the record is read
later by the operation table and never interpreted here.
"""

import enum
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple, TypeVar, Union, overload

from dirshape.domain.errors import InvalidArgument

F = TypeVar("F", bound=Callable[..., Any])

# Attribute used to attach the metadata record to an operation function
META_ATTR: str = "__dirshape_operation__"

# -----------------------------------------------------------------------------
# METADATA MODELS
# -----------------------------------------------------------------------------

class CreateAction(enum.Enum):
    """Directory creation applied to a target path before it is returned."""

    NONE = "none"
    MKDIR = "mkdir"
    MKDIRS = "mkdirs"


@dataclass(frozen=True)
class WalkBounds:
    """
    Depth window of a recursive enumeration.

    Attributes:
        min_depth: Shallowest depth yielded; the root itself is depth 0.
        max_depth: Deepest depth visited, -1 for unbounded.
    """
    min_depth: int = 0
    max_depth: int = -1

    def admits(self, depth: int) -> bool:
        if depth < self.min_depth:
            return False
        return self.max_depth == -1 or depth <= self.max_depth


# Enumeration window used when an operation declares no @walk
DIRECT_CHILDREN = WalkBounds(min_depth=1, max_depth=1)


@dataclass(frozen=True)
class OperationMeta:
    """
    Raw declarative metadata of one contract operation.

    Attributes:
        name: Child name override (None means the method name).
        parent_depth: Number of segments to ascend (None means no ascension).
        action: Creation action applied to the target.
        walk: Walk bounds, or None for direct children only.
        filters: Filter classes in declaration order.
        must_exist: Raise MissingTarget when the target is absent.
    """
    name: Optional[str] = None
    parent_depth: Optional[int] = None
    action: CreateAction = CreateAction.NONE
    walk: Optional[WalkBounds] = None
    filters: Tuple[type, ...] = ()
    must_exist: bool = False


def get_meta(func: Any) -> Optional[OperationMeta]:
    """Return the metadata record attached to a function, if any."""
    return getattr(func, META_ATTR, None)


def _update(func: F, **changes: Any) -> F:
    current = get_meta(func) or OperationMeta()
    setattr(func, META_ATTR, replace(current, **changes))
    return func

# -----------------------------------------------------------------------------
# DECORATORS
# -----------------------------------------------------------------------------

def operation(func: F) -> F:
    """
    Mark a method as a contract operation regardless of its body.

    Methods whose body is a stub are detected automatically; this marker is
    only needed when the placeholder body does something (e.g. raises).
    """
    return _update(func)


def name(value: str) -> Callable[[F], F]:
    """
    Override the child name an operation resolves to.

    Args:
        value: Relative child name, e.g. "pom.xml" or ".git".

    Returns:
        Callable[[F], F]: The decorator.
    """
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"@name expects a non-empty string, received {value!r}")

    def decorate(func: F) -> F:
        return _update(func, name=value)

    return decorate


@overload
def parent(depth: F) -> F: ...


@overload
def parent(depth: int = 1) -> Callable[[F], F]: ...


def parent(depth: Union[int, F] = 1) -> Any:
    """
    Resolve the operation against an ancestor of the anchor.

    Usable bare (``@parent``, one level up) or with an explicit depth
    (``@parent(2)``).
    """
    if callable(depth):
        return _update(depth, parent_depth=1)

    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
        raise InvalidArgument(f"@parent expects a positive depth, received {depth!r}")

    def decorate(func: F) -> F:
        return _update(func, parent_depth=depth)

    return decorate


def mkdir(func: F) -> F:
    """Create the target directory if absent; its parent must exist."""
    return _update(func, action=CreateAction.MKDIR)


def mkdirs(func: F) -> F:
    """Create the target directory and every missing ancestor."""
    return _update(func, action=CreateAction.MKDIRS)


@overload
def walk(func: F) -> F: ...


@overload
def walk(*, min_depth: int = 0, max_depth: int = -1) -> Callable[[F], F]: ...


def walk(func: Any = None, *, min_depth: int = 0, max_depth: int = -1) -> Any:
    """
    Enumerate recursively instead of listing direct children only.

    Usable bare (``@walk``, whole subtree including the root) or with
    bounds (``@walk(min_depth=2, max_depth=2)``).
    """
    if min_depth < 0:
        raise InvalidArgument(f"@walk min_depth must be >= 0, received {min_depth}")
    if max_depth < -1:
        raise InvalidArgument(f"@walk max_depth must be >= -1, received {max_depth}")

    bounds = WalkBounds(min_depth=min_depth, max_depth=max_depth)
    if func is not None:
        return _update(func, walk=bounds)

    def decorate(inner: F) -> F:
        return _update(inner, walk=bounds)

    return decorate


def filter_by(*filter_classes: type) -> Callable[[F], F]:
    """
    Restrict enumerated candidates to those accepted by every filter.

    Repeatable. Decorators apply bottom-up, so each application prepends to
    keep the chain in the order the decorators are written.

    Args:
        *filter_classes: Classes instantiated with no arguments whose
            instances expose ``test(path)`` or are callable.

    Returns:
        Callable[[F], F]: The decorator.
    """
    if not filter_classes:
        raise InvalidArgument("@filter_by expects at least one filter class")
    for cls in filter_classes:
        if not isinstance(cls, type):
            raise InvalidArgument(f"@filter_by expects classes, received {cls!r}")

    def decorate(func: F) -> F:
        current = get_meta(func) or OperationMeta()
        return _update(func, filters=tuple(filter_classes) + current.filters)

    return decorate


def must_exist(func: F) -> F:
    """Raise MissingTarget when the resolved path does not exist."""
    return _update(func, must_exist=True)
