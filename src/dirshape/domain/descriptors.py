from __future__ import annotations

"""
Operation Descriptor Models.

Defines the precomputed, immutable description of a single contract
operation: how its target path is derived, which creation action applies,
how candidates are enumerated and filtered, and the shape of the value it
returns. Descriptors are derived once from static declarations and are
therefore valid for the whole process lifetime.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from dirshape.domain.operations import DIRECT_CHILDREN, CreateAction, WalkBounds

# -----------------------------------------------------------------------------
# SHAPE CLASSIFICATION
# -----------------------------------------------------------------------------

class OperationKind(enum.Enum):
    """How an operation call is dispatched."""

    CAPABILITY = "capability"
    RESOLVED = "resolved"


class ElementKind(enum.Enum):
    """Per-value transform applied to a resolved path."""

    PATH = "path"
    VALUE = "value"
    CONTRACT = "contract"


class Container(enum.Enum):
    """Collection wrapping around the element values."""

    NONE = "none"
    LIST = "list"
    TUPLE = "tuple"
    ITERATOR = "iterator"

    @property
    def is_collection(self) -> bool:
        return self is not Container.NONE


@dataclass(frozen=True)
class ReturnShape:
    """
    Classified return annotation of an operation.

    Attributes:
        container: Collection type, or NONE for a single value.
        element: Transform applied to every resolved path.
        element_type: The annotated element type (Path, value type or contract).
    """
    container: Container
    element: ElementKind
    element_type: Any

    def describe(self) -> str:
        name = getattr(self.element_type, "__name__", repr(self.element_type))
        if self.container is Container.NONE:
            return f"{self.element.value}[{name}]"
        return f"{self.container.value}[{self.element.value}[{name}]]"

# -----------------------------------------------------------------------------
# DESCRIPTOR
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OperationDescriptor:
    """
    Fully resolved metadata for one operation of one contract.

    Attributes:
        name: Operation (method) name.
        signature: Printable signature used in error messages.
        kind: CAPABILITY for Dir methods, RESOLVED for declared operations.
        shape: Classified return shape (None for capabilities).
        target_name: Child name override, None when the method name is used.
        parent_depth: Segments to ascend, None when no ascension is declared.
        action: Creation action applied to the target path.
        walk: Declared walk bounds, None when only direct children are listed.
        filters: Instantiated filter chain (None for single values).
        must_exist: Whether a missing target raises MissingTarget.
        takes_argument: Whether the operation declares a sub-path parameter.
        argument_required: Whether that parameter has no default.
    """
    name: str
    signature: str
    kind: OperationKind
    shape: Optional[ReturnShape] = None
    target_name: Optional[str] = None
    parent_depth: Optional[int] = None
    action: CreateAction = CreateAction.NONE
    walk: Optional[WalkBounds] = None
    filters: Any = None
    must_exist: bool = False
    takes_argument: bool = False
    argument_required: bool = False

    @property
    def child_name(self) -> str:
        return self.target_name or self.name

    @property
    def walk_bounds(self) -> WalkBounds:
        return self.walk or DIRECT_CHILDREN

    @property
    def relative_target(self) -> str:
        """Target relative to the anchor: a child name, "." or "../.."."""
        if self.parent_depth is not None:
            return "/".join([".."] * self.parent_depth)
        if self.shape is not None and self.shape.container.is_collection and self.target_name is None:
            return "."
        return self.child_name

    def summary(self) -> Dict[str, Any]:
        """
        Render the descriptor as a plain dictionary for reporting.

        Returns:
            Dict[str, Any]: JSON-serializable description.
        """
        bounds: Optional[Tuple[int, int]] = None
        if self.shape is not None and self.shape.container.is_collection:
            wb = self.walk_bounds
            bounds = (wb.min_depth, wb.max_depth)

        filter_names = []
        if self.filters is not None:
            filter_names = list(self.filters.names())

        return {
            "name": self.name,
            "signature": self.signature,
            "kind": self.kind.value,
            "shape": self.shape.describe() if self.shape else None,
            "target": self.relative_target if self.kind is OperationKind.RESOLVED else None,
            "parent_depth": self.parent_depth,
            "action": self.action.value,
            "walk": list(bounds) if bounds else None,
            "filters": filter_names,
            "must_exist": self.must_exist,
            "takes_argument": self.takes_argument,
        }
