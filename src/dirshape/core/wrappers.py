from __future__ import annotations

"""
Value Wrapper Resolver.

Finds how to adapt a raw path into an application-defined value type:
first a constructor taking a single path argument, then a public static or
class factory method taking a path and returning the type (lexically
smallest name wins). Resolutions are memoized per type for the life of
the process.
"""

import inspect
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dirshape.core.hints import accepts_path, annotation_is, parameter_annotation, type_hints
from dirshape.domain.errors import WrapperConstructionFailed, WrapperResolutionFailed

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

# -----------------------------------------------------------------------------
# WRAPPER DESCRIPTOR
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ValueWrapper:
    """
    Resolved adapter from a path to a value type.

    Attributes:
        target_type: The value type produced.
        member: Callable invoked with the path (the type or a factory).
        member_name: Qualified name of the constructor or factory.
        kind: "constructor" or "factory".
    """
    target_type: type
    member: Callable[[Path], Any]
    member_name: str
    kind: str

    def wrap(self, path: Path) -> Any:
        """
        Build a value from a path.

        Args:
            path: Path handed to the constructor or factory.

        Returns:
            Any: The constructed value.

        Raises:
            WrapperConstructionFailed: If the member raises; the original
                error is chained as the cause.
        """
        try:
            return self.member(path)
        except Exception as e:
            raise WrapperConstructionFailed(
                self.target_type, self.member_name, path, kind=self.kind
            ) from e


class WrapperResolver:
    """Memoizing, thread-safe lookup of ValueWrapper per target type."""

    def __init__(self) -> None:
        self._cache: Dict[type, Optional[ValueWrapper]] = {}
        self._lock = threading.Lock()

    def find(self, target_type: Any) -> Optional[ValueWrapper]:
        """
        Resolve the wrapper of a type.

        Args:
            target_type: Candidate value type.

        Returns:
            Optional[ValueWrapper]: The wrapper, or None if the type offers
                neither accepted shape.
        """
        if not isinstance(target_type, type):
            return None

        with self._lock:
            if target_type in self._cache:
                return self._cache[target_type]

        wrapper = _find_constructor(target_type) or _find_factory(target_type)

        with self._lock:
            self._cache.setdefault(target_type, wrapper)

        if wrapper:
            logger.debug(f"Wrappers: {target_type.__qualname__} wraps paths via {wrapper.kind} {wrapper.member_name}")
        return wrapper

    def require(self, target_type: Any, signature: str = "") -> ValueWrapper:
        """
        Resolve the wrapper of a type or fail.

        Raises:
            WrapperResolutionFailed: If the type offers no accepted shape.
        """
        wrapper = self.find(target_type)
        if wrapper is None:
            raise WrapperResolutionFailed(target_type, signature)
        return wrapper


# Process-wide resolver
WRAPPERS = WrapperResolver()

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _single_path_parameter(func: Callable[..., Any], skip: int) -> bool:
    """
    Check that a callable takes exactly one required positional path argument.

    Args:
        func: Underlying function.
        skip: Leading parameters to ignore (self / cls).
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    params = list(signature.parameters.values())[skip:]
    positional = [p for p in params if p.kind in _POSITIONAL]
    required = [p for p in params if p.default is p.empty and p.kind not in _VARIADIC]
    if not positional or required != [positional[0]]:
        return False

    hints = type_hints(func)
    return accepts_path(parameter_annotation(hints, positional[0]))


def _find_constructor(target_type: type) -> Optional[ValueWrapper]:
    init = getattr(target_type, "__init__", None)
    if init is None or init is object.__init__ or not inspect.isfunction(init):
        return None
    # typing.Protocol installs its own placeholder __init__
    if getattr(init, "__module__", None) == "typing":
        return None
    if not _single_path_parameter(init, skip=1):
        return None
    return ValueWrapper(
        target_type=target_type,
        member=target_type,
        member_name=init.__qualname__,
        kind="constructor",
    )


def _find_factory(target_type: type) -> Optional[ValueWrapper]:
    candidates: List[str] = []
    for attr in sorted(dir(target_type)):
        if attr.startswith("_"):
            continue
        raw = inspect.getattr_static(target_type, attr, None)
        if isinstance(raw, staticmethod):
            func, skip = raw.__func__, 0
        elif isinstance(raw, classmethod):
            func, skip = raw.__func__, 1
        else:
            continue
        if not _single_path_parameter(func, skip):
            continue
        if not annotation_is(type_hints(func).get("return"), target_type):
            continue
        candidates.append(attr)

    if not candidates:
        return None

    chosen = candidates[0]
    member = getattr(target_type, chosen)
    return ValueWrapper(
        target_type=target_type,
        member=member,
        member_name=f"{target_type.__qualname__}.{chosen}",
        kind="factory",
    )
