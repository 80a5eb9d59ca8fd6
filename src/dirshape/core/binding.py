from __future__ import annotations

"""
Contract Factory.

Produces live bindings of a contract type to an anchor path. Each contract
gets one generated subclass (memoized) whose operation methods are
dispatchers into the resolver; default methods are inherited unchanged and
run with ``self`` bound to the live binding. Bindings are immutable value
objects compared by (contract type, anchor path).
"""

import functools
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union

from dirshape.core import resolver
from dirshape.core.table import TABLES, ContractTable
from dirshape.domain.config import DEFAULT_BIND_OPTIONS, BindOptions
from dirshape.domain.contracts import is_contract
from dirshape.domain.errors import InvalidArgument

logger = logging.getLogger(__name__)

T = TypeVar("T")

PathInput = Union[str, "os.PathLike[str]"]


# ==============================================================================
# BINDING BASE
# ==============================================================================

class Binding:
    """
    Mixin placed first in the MRO of every generated binding class.

    Attributes:
        _dirshape_contract: Contract type this class binds (class level).
        _dirshape_anchor: Anchor path of the instance.
        _dirshape_options: Options propagated to nested bindings.
    """

    _dirshape_contract: type = object

    def __init__(self, anchor: Path, options: BindOptions) -> None:
        object.__setattr__(self, "_dirshape_anchor", anchor)
        object.__setattr__(self, "_dirshape_options", options)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} bindings are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} bindings are immutable")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Binding):
            return NotImplemented
        return (
            self._dirshape_contract is other._dirshape_contract
            and self._dirshape_anchor == other._dirshape_anchor
        )

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((self._dirshape_contract, self._dirshape_anchor))

    def __str__(self) -> str:
        return str(self._dirshape_anchor.absolute())

    def __repr__(self) -> str:
        return f"<{self._dirshape_contract.__qualname__} bound to '{self._dirshape_anchor}'>"

    def __fspath__(self) -> str:
        return os.fspath(self._dirshape_anchor)

    def _dirshape_bind(self, contract: Type[T], path: Path) -> T:
        return bind(contract, path, options=self._dirshape_options)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def bind(contract: Type[T], anchor: PathInput, *, options: Optional[BindOptions] = None) -> T:
    """
    Bind a contract type to an anchor path.

    The anchor is stored as given (no absolutizing, no I/O). Operation
    declarations are classified on first call, so unsupported signatures
    surface when the operation is invoked.

    Args:
        contract: A Dir subclass, @contract class or Protocol class.
        anchor: Directory the binding resolves against.
        options: Walk behavior, inherited by nested bindings.

    Returns:
        T: A live binding implementing the contract.

    Raises:
        InvalidArgument: If the type is not a contract or the anchor is not
            a path.
    """
    if not is_contract(contract):
        raise InvalidArgument(f"Not a contract type: {contract!r}")
    if not isinstance(anchor, (str, os.PathLike)):
        raise InvalidArgument(f"Expected a path anchor, found {type(anchor).__name__}")

    cls = BINDINGS.binding_class(contract)
    return cls(Path(anchor), options or DEFAULT_BIND_OPTIONS)


def anchor_of(binding: Any) -> Path:
    """Return the anchor path of a binding."""
    if not isinstance(binding, Binding):
        raise InvalidArgument(f"Not a binding: {binding!r}")
    return binding._dirshape_anchor


def contract_of(binding: Any) -> type:
    """Return the contract type a binding implements."""
    if not isinstance(binding, Binding):
        raise InvalidArgument(f"Not a binding: {binding!r}")
    return binding._dirshape_contract


# ==============================================================================
# GENERATED CLASSES
# ==============================================================================

class BindingClassCache:
    """Thread-safe memo of the generated binding class per contract type."""

    def __init__(self) -> None:
        self._classes: Dict[type, type] = {}
        self._lock = threading.Lock()

    def binding_class(self, contract: type) -> type:
        with self._lock:
            cls = self._classes.get(contract)
            if cls is None:
                cls = _generate(contract, TABLES.table(contract))
                self._classes[contract] = cls
            return cls


BINDINGS = BindingClassCache()


def _generate(contract: type, table: ContractTable) -> type:
    namespace: Dict[str, Any] = {
        "__module__": contract.__module__,
        "__qualname__": f"{contract.__qualname__}Binding",
        "__doc__": contract.__doc__,
        "_dirshape_contract": contract,
    }
    for op_name, spec in table.operations.items():
        namespace[op_name] = _dispatcher(table, op_name, spec.func)

    metaclass = type(contract)
    cls = metaclass(f"{contract.__name__}Binding", (Binding, contract), namespace)
    logger.debug(
        f"Bindings: Generated {cls.__qualname__} with {len(table.operations)} dispatcher(s)"
    )
    return cls


def _dispatcher(table: ContractTable, op_name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def dispatch(self: Binding, *args: Any, **kwargs: Any) -> Any:
        descriptor = table.describe(op_name)
        return resolver.invoke(self, descriptor, func, args, kwargs)

    # wraps() copies the abstract flag of @abstractmethod declarations
    dispatch.__isabstractmethod__ = False
    return dispatch
