from __future__ import annotations

"""
Declaration Introspection Helpers.

Small utilities shared by the operation table and the wrapper resolver to
read static declarations: resolving (possibly postponed) type annotations,
deciding whether a parameter accepts a path, and telling stub operation
bodies apart from real default methods.
"""

import inspect
import sys
import types
import typing
from pathlib import Path, PurePath
from typing import Any, Callable, Dict, Optional

# Annotation spellings accepted as path parameters when they cannot be resolved
_PATH_ANNOTATION_NAMES = {
    "Path", "PurePath", "pathlib.Path", "pathlib.PurePath",
    "os.PathLike", "PathLike", "Any", "typing.Any", "object",
}

# -----------------------------------------------------------------------------
# STUB DETECTION
# -----------------------------------------------------------------------------

def _stub_ellipsis():
    ...


def _stub_pass():
    pass


def _stub_doc():
    """Docstring only."""


def _stub_doc_ellipsis():
    """Docstring and ellipsis."""
    ...


def _stub_doc_pass():
    """Docstring and pass."""
    pass


_STUB_CODES = frozenset(
    f.__code__.co_code
    for f in (_stub_ellipsis, _stub_pass, _stub_doc, _stub_doc_ellipsis, _stub_doc_pass)
)


def is_stub(func: Callable[..., Any]) -> bool:
    """
    Tell whether a function body is a placeholder.

    Bodies made only of a docstring, ``...`` or ``pass`` compile to the
    same bytecode as the reference stubs above. The bytecode alone does not
    tell ``return None`` from ``return 3``, so every constant of the body
    other than the docstring must also be None (or the ellipsis).

    Args:
        func: Plain function taken from a class namespace.

    Returns:
        bool: True if the function does nothing but return None.
    """
    code = getattr(func, "__code__", None)
    if code is None or code.co_code not in _STUB_CODES:
        return False
    doc = getattr(func, "__doc__", None)
    return all(_is_placeholder_const(c, doc) for c in code.co_consts)


def _is_placeholder_const(value: Any, doc: Optional[str]) -> bool:
    if value is None or value is Ellipsis:
        return True
    return isinstance(value, str) and value == doc

# -----------------------------------------------------------------------------
# ANNOTATION RESOLUTION
# -----------------------------------------------------------------------------

def _enclosing_namespace(func: Callable[..., Any]) -> Dict[str, Any]:
    """
    Collect names visible from the classes enclosing a function.

    Allows contracts declared as nested classes (e.g. inside a test class)
    to reference their siblings in annotations.
    """
    namespace: Dict[str, Any] = {}
    module = sys.modules.get(getattr(func, "__module__", "") or "")
    scope: Any = module
    parts = getattr(func, "__qualname__", "").split(".")[:-1]
    for part in parts:
        if part == "<locals>" or scope is None:
            break
        scope = getattr(scope, part, None)
        if isinstance(scope, type):
            namespace.update(vars(scope))
            namespace.setdefault(scope.__name__, scope)
    return namespace


def type_hints(func: Callable[..., Any]) -> Dict[str, Any]:
    """
    Resolve the annotations of a function, postponed ones included.

    Falls back to the raw annotation objects (possibly strings) when a
    forward reference cannot be resolved.

    Args:
        func: Function to inspect.

    Returns:
        Dict[str, Any]: Parameter and 'return' annotations.
    """
    try:
        return typing.get_type_hints(func, localns=_enclosing_namespace(func))
    except Exception:
        return dict(getattr(func, "__annotations__", {}) or {})


def annotation_is(annotation: Any, target: type) -> bool:
    """Compare an annotation against a type, tolerating unresolved strings."""
    if annotation is target:
        return True
    if isinstance(annotation, str):
        return annotation.strip("'\"") in (target.__name__, target.__qualname__)
    self_type = getattr(typing, "Self", None)
    return self_type is not None and annotation is self_type


def accepts_path(annotation: Any) -> bool:
    """
    Decide whether a parameter annotation accepts a pathlib.Path value.

    Args:
        annotation: Parameter annotation, inspect.Parameter.empty if absent.

    Returns:
        bool: True for unannotated parameters, Path super-types, Any and
              unions containing one of those.
    """
    if annotation is inspect.Parameter.empty or annotation is Any:
        return True
    if isinstance(annotation, str):
        return annotation.strip("'\"") in _PATH_ANNOTATION_NAMES
    if typing.get_origin(annotation) is typing.Union:
        return any(accepts_path(arg) for arg in typing.get_args(annotation))
    union_type = getattr(types, "UnionType", None)
    if union_type is not None and isinstance(annotation, union_type):
        return any(accepts_path(arg) for arg in typing.get_args(annotation))
    if isinstance(annotation, type):
        try:
            return issubclass(Path, annotation)
        except TypeError:
            return False
    return False


def is_path_type(annotation: Any) -> bool:
    """Tell whether an annotation denotes a bare path return value."""
    return isinstance(annotation, type) and issubclass(annotation, PurePath)


def parameter_annotation(
        hints: Dict[str, Any], parameter: inspect.Parameter
) -> Optional[Any]:
    """Return the resolved annotation of a parameter, or Parameter.empty."""
    return hints.get(parameter.name, parameter.annotation)
