from __future__ import annotations

"""
dirshape: typed directory contracts bound to real filesystem locations.

Declare the expected shape of a directory tree as a class of stub
operations, then bind it to a path:

    class Src(Dir):
        def main(self) -> Section: ...

    project = bind(Project, "/work/app")
    project.src().main().java()
"""

from dirshape.core.binding import anchor_of, bind, contract_of
from dirshape.core.filters import PathFilter
from dirshape.domain.config import BindOptions
from dirshape.domain.contracts import Dir, contract, is_contract
from dirshape.domain.errors import (
    CreateIfAbsentFailed,
    CreateRecursiveFailed,
    DeleteFailed,
    DirShapeError,
    FilterInstantiationFailed,
    InvalidArgument,
    MissingTarget,
    UnsupportedOperationSignature,
    WalkFailed,
    WrapperConstructionFailed,
    WrapperResolutionFailed,
)
from dirshape.domain.operations import (
    filter_by,
    mkdir,
    mkdirs,
    must_exist,
    name,
    operation,
    parent,
    walk,
)

__version__ = "1.0.0"

__all__ = [
    "BindOptions",
    "CreateIfAbsentFailed",
    "CreateRecursiveFailed",
    "DeleteFailed",
    "Dir",
    "DirShapeError",
    "FilterInstantiationFailed",
    "InvalidArgument",
    "MissingTarget",
    "PathFilter",
    "UnsupportedOperationSignature",
    "WalkFailed",
    "WrapperConstructionFailed",
    "WrapperResolutionFailed",
    "anchor_of",
    "bind",
    "contract",
    "contract_of",
    "filter_by",
    "is_contract",
    "mkdir",
    "mkdirs",
    "must_exist",
    "name",
    "operation",
    "parent",
    "walk",
]
