from __future__ import annotations

"""
Contract Declarations.

Defines the Dir base contract carrying the capability surface every bound
directory may use, and the helpers that decide whether a class is a
contract at all. Contracts are purely descriptive: their operations are
stubs and they are never instantiated directly.

Example:

    class Module(Dir):
        @name("pom.xml")
        def pom_xml(self) -> Path: ...

        def src(self) -> Src: ...

        def submodule(self, name: str) -> Module: ...

Annotations naming other contracts are resolved lazily, on the first call,
against the module globals and the enclosing classes of the operation.
Contracts declared inside a function body cannot see each other that way
when annotations are postponed (``from __future__ import annotations``):
declare them at module level, or nested in a module level class.
"""

from pathlib import Path
from typing import Any, Iterator, Optional, TypeVar, Union

C = TypeVar("C", bound=type)

# Attribute set by @contract on classes that do not subclass Dir
CONTRACT_ATTR: str = "__dirshape_contract__"


class Dir:
    """
    Base contract exposing capability methods resolved against the anchor.

    Subclasses declare further operations; the capability methods below are
    executed directly by the resolver and never looked up as child paths.
    """

    def get(self) -> Path:
        """Return the anchor path of this binding."""
        ...

    def dir(self, name: Optional[str] = None) -> Union[Path, Dir]:
        """
        Without arguments return the anchor path; with a name return a Dir
        bound to that child.
        """
        ...

    def parent(self) -> Path:
        """Return the direct parent of the anchor path."""
        ...

    def mkdir(self) -> Path:
        """Create the anchor directory if absent (its parent must exist)."""
        ...

    def mkdirs(self) -> Path:
        """Create the anchor directory and every missing ancestor."""
        ...

    def delete(self) -> None:
        """Remove the anchor and everything below it; absent anchors are ignored."""
        ...

    def exists(self) -> bool:
        """Test whether the anchor path exists."""
        ...

    def file(self, name: str) -> Path:
        """Resolve an explicit sub-path of the anchor."""
        ...

    def walk(self, depth: int = -1) -> Iterator[Path]:
        """
        Recursively walk downward from the anchor, the anchor included.

        Args:
            depth: Limit the recursion to this depth, -1 for unbounded.
        """
        ...

    def files(self, depth: int = -1) -> Iterator[Path]:
        """Like walk(), restricted to regular files."""
        ...


def contract(cls: C) -> C:
    """Mark a class that does not subclass Dir as a contract."""
    setattr(cls, CONTRACT_ATTR, True)
    return cls


def is_contract(candidate: Any) -> bool:
    """
    Decide whether a type can be bound as a contract.

    Args:
        candidate: Any object, typically a return annotation.

    Returns:
        bool: True for Dir subclasses, @contract classes and Protocol classes.
    """
    if not isinstance(candidate, type):
        return False
    if issubclass(candidate, Dir):
        return True
    if getattr(candidate, CONTRACT_ATTR, False):
        return True
    return bool(getattr(candidate, "_is_protocol", False))
