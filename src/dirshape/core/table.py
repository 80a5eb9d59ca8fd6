from __future__ import annotations

"""
Operation Descriptor Table.

Acts as the central authority for contract metadata. Indexes the declared
operations of a contract type once (walking its MRO), then derives each
operation's descriptor lazily on first use: target-name override, parent
ascension, creation action, walk bounds, filter chain and return-shape
classification. Descriptors are memoized per (contract, operation) since
they depend on static declarations only.
"""

import collections.abc
import inspect
import logging
import threading
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Union

from dirshape.core.filters import EMPTY_CHAIN, FilterChain
from dirshape.core.hints import is_path_type, is_stub, type_hints
from dirshape.core.wrappers import WRAPPERS
from dirshape.domain.contracts import Dir, is_contract
from dirshape.domain.descriptors import (
    Container,
    ElementKind,
    OperationDescriptor,
    OperationKind,
    ReturnShape,
)
from dirshape.domain.errors import DirShapeError, UnsupportedOperationSignature
from dirshape.domain.operations import OperationMeta, get_meta

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# RETURN SHAPE CONSTANTS
# -----------------------------------------------------------------------------

_CONTAINERS: Dict[Any, Container] = {
    list: Container.LIST,
    collections.abc.Sequence: Container.LIST,
    collections.abc.MutableSequence: Container.LIST,
    tuple: Container.TUPLE,
    collections.abc.Iterator: Container.ITERATOR,
    collections.abc.Iterable: Container.ITERATOR,
    collections.abc.Generator: Container.ITERATOR,
}

# Sub-path parameters must accept a plain string
_STRING_ANNOTATIONS = (str, "str", inspect.Parameter.empty, typing.Optional[str], "Optional[str]")


@dataclass(frozen=True)
class OperationSpec:
    """
    Raw declaration of one operation as found on the contract.

    Attributes:
        name: Method name.
        func: The declared (stub) function.
        owner: Class in the MRO that declares it.
        meta: Declarative metadata, defaults when undecorated.
    """
    name: str
    func: Callable[..., Any]
    owner: type
    meta: OperationMeta

    @property
    def is_capability(self) -> bool:
        return self.owner is Dir

# ==============================================================================
# CONTRACT TABLE
# ==============================================================================

class ContractTable:
    """
    Dispatch table of one contract type.

    Operations are indexed eagerly (cheap, no annotation resolution);
    descriptors are built on first request so forward references declared
    later in a module resolve correctly.
    """

    def __init__(self, contract: type) -> None:
        self.contract = contract
        self.operations: Dict[str, OperationSpec] = _collect_operations(contract)
        self._descriptors: Dict[str, OperationDescriptor] = {}
        self._lock = threading.Lock()
        logger.debug(
            f"ContractTable: Indexed {len(self.operations)} operation(s) for {contract.__qualname__}"
        )

    def describe(self, name: str) -> OperationDescriptor:
        """
        Fetch the descriptor of an operation, building it on first use.

        Args:
            name: Operation name.

        Returns:
            OperationDescriptor: The memoized descriptor.

        Raises:
            UnsupportedOperationSignature: If the declaration cannot be classified.
        """
        with self._lock:
            cached = self._descriptors.get(name)
        if cached is not None:
            return cached

        spec = self.operations.get(name)
        if spec is None:
            raise UnsupportedOperationSignature(
                f"{self.contract.__qualname__}.{name}", "not an operation of this contract"
            )

        descriptor = _build_descriptor(self.contract, spec)
        with self._lock:
            self._descriptors.setdefault(name, descriptor)
        return descriptor

    def describe_all(self) -> List[Tuple[str, Union[OperationDescriptor, DirShapeError]]]:
        """
        Describe every operation, collecting classification errors.

        Returns:
            List[Tuple[str, Union[OperationDescriptor, DirShapeError]]]:
                (name, descriptor or error) pairs sorted by name.
        """
        report: List[Tuple[str, Union[OperationDescriptor, DirShapeError]]] = []
        for name in sorted(self.operations):
            try:
                report.append((name, self.describe(name)))
            except DirShapeError as e:
                report.append((name, e))
        return report


class ContractRegistry:
    """Thread-safe, process-wide memo of ContractTable per contract type."""

    def __init__(self) -> None:
        self._tables: Dict[type, ContractTable] = {}
        self._lock = threading.Lock()

    def table(self, contract: type) -> ContractTable:
        with self._lock:
            table = self._tables.get(contract)
            if table is None:
                table = ContractTable(contract)
                self._tables[contract] = table
            return table


TABLES = ContractRegistry()

# ==============================================================================
# OPERATION DISCOVERY
# ==============================================================================

def _collect_operations(contract: type) -> Dict[str, OperationSpec]:
    """
    Walk the MRO and index the nearest declaration of every public method.

    Stub bodies, decorated methods and abstract methods are operations;
    methods with a real body are default methods and are left untouched.
    """
    operations: Dict[str, OperationSpec] = {}
    seen = set()

    for klass in contract.__mro__:
        if klass is object or klass.__module__ == "typing":
            continue
        for attr, value in vars(klass).items():
            if attr in seen:
                continue
            seen.add(attr)

            if attr.startswith("_") or not inspect.isfunction(value):
                continue

            meta = get_meta(value)
            declared = (
                klass is Dir
                or meta is not None
                or is_stub(value)
                or getattr(value, "__isabstractmethod__", False)
            )
            if declared:
                operations[attr] = OperationSpec(attr, value, klass, meta or OperationMeta())

    return operations

# ==============================================================================
# DESCRIPTOR CONSTRUCTION
# ==============================================================================

def _build_descriptor(contract: type, spec: OperationSpec) -> OperationDescriptor:
    signature = _signature_text(contract, spec)

    if spec.is_capability:
        return OperationDescriptor(name=spec.name, signature=signature, kind=OperationKind.CAPABILITY)

    takes_argument, argument_required = _inspect_parameters(spec.func, signature)

    hints = type_hints(spec.func)
    if "return" not in hints:
        raise UnsupportedOperationSignature(signature, "missing return annotation")
    shape = classify_return(hints["return"], signature)

    meta = spec.meta
    filters = FilterChain(meta.filters) if meta.filters else EMPTY_CHAIN

    descriptor = OperationDescriptor(
        name=spec.name,
        signature=signature,
        kind=OperationKind.RESOLVED,
        shape=shape,
        target_name=meta.name,
        parent_depth=meta.parent_depth,
        action=meta.action,
        walk=meta.walk,
        filters=filters,
        must_exist=meta.must_exist,
        takes_argument=takes_argument,
        argument_required=argument_required,
    )
    logger.debug(f"ContractTable: {signature} resolved as {shape.describe()}")
    return descriptor


def _signature_text(contract: type, spec: OperationSpec) -> str:
    try:
        params = str(inspect.signature(spec.func))
    except (TypeError, ValueError):
        params = "(...)"
    return f"{contract.__qualname__}.{spec.name}{params}"


def _inspect_parameters(func: Callable[..., Any], signature: str) -> Tuple[bool, bool]:
    """
    Validate the parameter list of an operation.

    Returns:
        Tuple[bool, bool]: (takes a sub-path argument, argument is required).
    """
    params = list(inspect.signature(func).parameters.values())[1:]
    if not params:
        return False, False
    if len(params) > 1:
        raise UnsupportedOperationSignature(signature, "operations take at most one sub-path argument")

    param = params[0]
    if param.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
        raise UnsupportedOperationSignature(signature, "the sub-path argument must be positional")

    annotation = type_hints(func).get(param.name, param.annotation)
    if annotation not in _STRING_ANNOTATIONS:
        raise UnsupportedOperationSignature(signature, "the sub-path argument must be a str")

    return True, param.default is inspect.Parameter.empty


def classify_return(annotation: Any, signature: str) -> ReturnShape:
    """
    Classify a return annotation into a ReturnShape.

    Args:
        annotation: Resolved return annotation.
        signature: Operation signature for error messages.

    Returns:
        ReturnShape: Container and element classification.

    Raises:
        UnsupportedOperationSignature: If no return-shape rule matches.
        WrapperResolutionFailed: If the element is a class that offers no
            way to be built from a path.
    """
    if isinstance(annotation, str):
        raise UnsupportedOperationSignature(signature, f"unresolved return annotation '{annotation}'")

    origin = typing.get_origin(annotation)
    if origin is None:
        return ReturnShape(Container.NONE, _element_kind(annotation, signature), annotation)

    container = _CONTAINERS.get(origin)
    args = typing.get_args(annotation)
    if container is None or not args:
        raise UnsupportedOperationSignature(signature, f"unsupported return annotation {annotation!r}")
    if container is Container.TUPLE and (len(args) != 2 or args[1] is not Ellipsis):
        raise UnsupportedOperationSignature(signature, "tuples must be declared as Tuple[T, ...]")

    element = args[0]
    return ReturnShape(container, _element_kind(element, signature), element)


def _element_kind(element: Any, signature: str) -> ElementKind:
    if is_path_type(element):
        return ElementKind.PATH
    # A path constructor wins over contract classification
    if WRAPPERS.find(element) is not None:
        return ElementKind.VALUE
    if is_contract(element):
        return ElementKind.CONTRACT
    if isinstance(element, type):
        WRAPPERS.require(element, signature)
    raise UnsupportedOperationSignature(signature, f"unsupported return annotation {element!r}")
