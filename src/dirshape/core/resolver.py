from __future__ import annotations

"""
Binding Resolver.

Interprets one operation call on a live binding into filesystem behavior.
Capability methods run directly against the anchor. Declared operations go
through a fixed sequence: bind the sub-path argument, compute the target
path, apply the creation action, then shape the result (bare path, wrapped
value, nested binding, or a walked and filtered collection of those).

Bindings are handed in duck-typed: the resolver reads the anchor and the
options from them and asks them to create nested bindings, so it never
imports the binding factory.
"""

import functools
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from dirshape.core import walker
from dirshape.core.wrappers import WRAPPERS
from dirshape.domain.contracts import Dir
from dirshape.domain.descriptors import Container, ElementKind, OperationDescriptor, OperationKind
from dirshape.domain.errors import (
    CreateIfAbsentFailed,
    CreateRecursiveFailed,
    DeleteFailed,
    InvalidArgument,
    MissingTarget,
)
from dirshape.domain.operations import CreateAction, WalkBounds
from dirshape.infra.fs import LOCAL_STORE, FileStore

logger = logging.getLogger(__name__)

_store: FileStore = LOCAL_STORE


# ==============================================================================
# PUBLIC API
# ==============================================================================

def invoke(
        binding: Any,
        descriptor: OperationDescriptor,
        func: Callable[..., Any],
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
) -> Any:
    """
    Execute one operation call.

    Args:
        binding: The live binding the call was made on.
        descriptor: Descriptor of the invoked operation.
        func: The declared function, used to bind call arguments.
        args: Positional call arguments (self excluded).
        kwargs: Keyword call arguments.

    Returns:
        Any: Path, wrapped value, nested binding or collection of those.

    Raises:
        InvalidArgument: On wrong arity or a non-string sub-path.
        DirShapeError: Any resolution failure, propagated unchanged.
    """
    call_args = _bind_arguments(func, binding, args, kwargs, descriptor.signature)

    if descriptor.kind is OperationKind.CAPABILITY:
        return _run_capability(binding, descriptor, call_args)

    arg = None
    if descriptor.takes_argument:
        arg = next(iter(call_args.values()), None)
        if arg is not None:
            _require_str(arg, descriptor.signature)
        elif descriptor.argument_required:
            raise InvalidArgument(f"Expected str argument, found None\n operation: {descriptor.signature}")

    return _resolve(binding, descriptor, arg)


def target_path(anchor: Path, descriptor: OperationDescriptor, arg: Optional[str] = None) -> Path:
    """
    Compute the path an operation resolves to.

    Ascension wins over an explicit argument, which wins over the name
    override. Collections without any of the three enumerate the anchor.

    Args:
        anchor: Anchor of the binding.
        descriptor: Descriptor of the operation.
        arg: Explicit sub-path, if supplied.

    Returns:
        Path: The target path (no I/O performed).
    """
    if descriptor.parent_depth is not None:
        return ascend(anchor, descriptor.parent_depth)
    if arg is not None:
        return anchor / arg
    if descriptor.shape is not None and descriptor.shape.container.is_collection:
        if descriptor.target_name is None:
            return anchor
    return anchor / descriptor.child_name


def ascend(path: Path, depth: int) -> Path:
    """Remove trailing segments; the filesystem root is its own parent."""
    for _ in range(depth):
        path = path.parent
    return path


# ==============================================================================
# CAPABILITIES
# ==============================================================================

def _run_capability(binding: Any, descriptor: OperationDescriptor, call_args: Dict[str, Any]) -> Any:
    anchor: Path = binding._dirshape_anchor
    name = descriptor.name
    signature = descriptor.signature

    if name == "get":
        return anchor
    if name == "dir":
        child = call_args.get("name")
        if child is None:
            return anchor
        _require_str(child, signature)
        return binding._dirshape_bind(Dir, anchor / child)
    if name == "parent":
        return anchor.parent
    if name == "mkdir":
        return _create_if_absent(anchor, signature)
    if name == "mkdirs":
        return _create_recursive(anchor, signature)
    if name == "delete":
        _delete(anchor)
        return None
    if name == "exists":
        return _store.exists(anchor)
    if name == "file":
        child = call_args.get("name")
        _require_str(child, signature)
        return anchor / child
    if name == "walk":
        depth = _require_depth(call_args.get("depth", -1), signature)
        return walker.walk(
            anchor,
            WalkBounds(min_depth=0, max_depth=depth),
            store=_store,
            follow_symlinks=binding._dirshape_options.follow_symlinks,
        )
    if name == "files":
        depth = _require_depth(call_args.get("depth", -1), signature)
        return walker.walk_files(
            anchor,
            depth,
            store=_store,
            follow_symlinks=binding._dirshape_options.follow_symlinks,
        )

    raise InvalidArgument(f"Unknown capability {signature}")


def _delete(anchor: Path) -> None:
    try:
        _store.delete_recursive(anchor)
    except OSError as e:
        raise DeleteFailed(anchor, str(e)) from e


# ==============================================================================
# DECLARED OPERATIONS
# ==============================================================================

def _resolve(binding: Any, descriptor: OperationDescriptor, arg: Optional[str]) -> Any:
    target = target_path(binding._dirshape_anchor, descriptor, arg)
    target = _apply_action(descriptor, target)

    shape = descriptor.shape
    if shape.container is Container.NONE:
        if descriptor.must_exist and shape.element is not ElementKind.CONTRACT:
            _require_exists(descriptor, target)
        return _element_transform(binding, descriptor)(target)

    if descriptor.must_exist:
        _require_exists(descriptor, target)
    return _collect(binding, descriptor, target)


def _collect(binding: Any, descriptor: OperationDescriptor, root: Path) -> Any:
    """Walk, filter and transform the candidates below a root."""
    candidates = walker.walk(
        root,
        descriptor.walk_bounds,
        store=_store,
        follow_symlinks=binding._dirshape_options.follow_symlinks,
    )
    accepted: Iterable[Path] = descriptor.filters.apply(candidates)
    transform = _element_transform(binding, descriptor)

    container = descriptor.shape.container
    if container is Container.LIST:
        return [transform(p) for p in accepted]
    if container is Container.TUPLE:
        return tuple(transform(p) for p in accepted)
    return (transform(p) for p in accepted)


def _element_transform(binding: Any, descriptor: OperationDescriptor) -> Callable[[Path], Any]:
    shape = descriptor.shape
    if shape.element is ElementKind.PATH:
        return _identity
    if shape.element is ElementKind.VALUE:
        return WRAPPERS.require(shape.element_type, descriptor.signature).wrap
    return functools.partial(binding._dirshape_bind, shape.element_type)


def _identity(path: Path) -> Path:
    return path


def _require_exists(descriptor: OperationDescriptor, target: Path) -> None:
    if not _store.exists(target):
        raise MissingTarget(descriptor.signature, target)


# ==============================================================================
# CREATION ACTIONS
# ==============================================================================

def _apply_action(descriptor: OperationDescriptor, target: Path) -> Path:
    if descriptor.action is CreateAction.MKDIR:
        return _create_if_absent(target, descriptor.signature)
    if descriptor.action is CreateAction.MKDIRS:
        return _create_recursive(target, descriptor.signature)
    return target


def _create_if_absent(target: Path, signature: str) -> Path:
    """
    Create a single directory level, tolerating a concurrent creation.

    Raises:
        CreateIfAbsentFailed: If the parent is missing, the path exists as
            a non-directory, or the creation fails for another reason.
    """
    if _store.is_dir(target):
        return target
    if _store.exists(target):
        raise CreateIfAbsentFailed(signature, target, "exists and is not a directory")

    try:
        _store.create_directory(target)
    except FileExistsError as e:
        if not _store.is_dir(target):
            raise CreateIfAbsentFailed(signature, target, "exists and is not a directory") from e
    except OSError as e:
        raise CreateIfAbsentFailed(signature, target, e.strerror or str(e)) from e
    else:
        logger.debug(f"Resolver: Created directory '{target}'")
    return target


def _create_recursive(target: Path, signature: str) -> Path:
    """
    Create a directory and every missing ancestor.

    Raises:
        CreateRecursiveFailed: If any level cannot be created.
    """
    if _store.is_dir(target):
        return target
    try:
        _store.create_directories(target)
    except OSError as e:
        raise CreateRecursiveFailed(signature, target, e.strerror or str(e)) from e
    logger.debug(f"Resolver: Created directories up to '{target}'")
    return target


# ==============================================================================
# ARGUMENT BINDING
# ==============================================================================

@functools.lru_cache(maxsize=None)
def _signature_of(func: Callable[..., Any]) -> inspect.Signature:
    return inspect.signature(func)


def _bind_arguments(
        func: Callable[..., Any],
        binding: Any,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
        signature: str,
) -> Dict[str, Any]:
    """Bind call arguments to the declared parameters, self excluded."""
    try:
        bound = _signature_of(func).bind(binding, *args, **kwargs)
    except TypeError as e:
        raise InvalidArgument(f"{e}\n operation: {signature}") from e
    bound.apply_defaults()
    return dict(list(bound.arguments.items())[1:])


def _require_str(value: Any, signature: str) -> None:
    if value is None:
        raise InvalidArgument(f"Expected str argument, found None\n operation: {signature}")
    if not isinstance(value, str):
        raise InvalidArgument(
            f"Expected str argument, found {type(value).__name__}\n operation: {signature}"
        )


def _require_depth(value: Any, signature: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < -1:
        raise InvalidArgument(f"Expected a depth >= -1, found {value!r}\n operation: {signature}")
    return value
