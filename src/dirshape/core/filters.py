from __future__ import annotations

"""
Path Filter Chain.

Implements the AND-combined predicate chain applied to enumerated
candidates. Each declared filter class is instantiated once with no
arguments; a candidate survives only when every filter accepts it, in
declaration order.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, List, Sequence, Tuple

from dirshape.domain.errors import FilterInstantiationFailed

logger = logging.getLogger(__name__)


class PathFilter:
    """
    Base class for filter predicates declared with @filter_by.

    Subclasses override test(); instances are also callable so they can be
    handed to the built-in filter().
    """

    def test(self, path: Path) -> bool:
        raise NotImplementedError

    def __call__(self, path: Path) -> bool:
        return self.test(path)


def _as_predicate(instance: Any) -> Callable[[Path], bool]:
    test = getattr(instance, "test", None)
    if callable(test):
        return test
    if callable(instance):
        return instance
    raise FilterInstantiationFailed(type(instance))


class FilterChain:
    """
    Ordered, immutable conjunction of path predicates.

    Attributes:
        classes: The filter classes in declaration order.
    """

    def __init__(self, classes: Sequence[type] = ()) -> None:
        """
        Instantiate every filter class once.

        Args:
            classes: Filter classes, instantiated with no arguments.

        Raises:
            FilterInstantiationFailed: If a class cannot be instantiated or
                its instances expose no predicate.
        """
        self.classes: Tuple[type, ...] = tuple(classes)
        predicates: List[Callable[[Path], bool]] = []
        for cls in self.classes:
            try:
                instance = cls()
            except Exception as e:
                raise FilterInstantiationFailed(cls) from e
            predicates.append(_as_predicate(instance))
        self._predicates: Tuple[Callable[[Path], bool], ...] = tuple(predicates)
        if self._predicates:
            logger.debug(f"FilterChain: Instantiated {len(self._predicates)} filter(s): {list(self.names())}")

    def __len__(self) -> int:
        return len(self._predicates)

    def __repr__(self) -> str:
        return f"FilterChain({', '.join(self.names())})"

    def names(self) -> Iterator[str]:
        for cls in self.classes:
            yield cls.__qualname__

    def accepts(self, path: Path) -> bool:
        """
        Verify that every filter accepts a candidate.

        Args:
            path: Candidate path.

        Returns:
            bool: True if all filters accept (vacuously True when empty).
        """
        return all(predicate(path) for predicate in self._predicates)

    def apply(self, candidates: Iterable[Path]) -> Iterator[Path]:
        """Lazily yield the candidates that satisfy the chain."""
        if not self._predicates:
            yield from candidates
            return
        for candidate in candidates:
            if self.accepts(candidate):
                yield candidate


# Shared chain for operations without filters
EMPTY_CHAIN = FilterChain()
