"""
Inverse level set: the complement of another level set.

    φ_inv(x) = -φ(x)

Inside and outside swap, the zero level is shared. The inverse owns a
private deep copy of its inner level set; replacing the inner level set
copies again, so callers never share mutable state with the inverse.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from brep_levelset.geometry.level_set.level_set import LevelSet
from brep_levelset.utils.brep_logging import get_logger

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import ArrayLike, NDArray

logger = get_logger(__name__)


class InverseLevelSet(LevelSet):
    """
    Complement of a level set: value and gradient are negated.

    Gradient derivatives and projections are not supplied, even when the
    inner level set has them.

    Replacing the inner level set is guarded by a lock; each evaluation reads
    the inner level set once under the same lock, so a concurrent replacement
    is seen either entirely before or entirely after a single evaluation.
    Multi-step queries (bisection, classification) should not race with
    ``set_level_set``.

    Example:
        >>> hole = InverseLevelSet(CircularLevelSet(0.0, 0.0, 1.0))
        >>> hole.get_value([0.0, 0.0, 0.0])
        1.0
        >>> hole.is_inside([2.0, 0.0, 0.0])
        True
    """

    def __init__(self, level_set: LevelSet, tolerance: float | None = None):
        """
        Args:
            level_set: Level set to invert; copied, not referenced
            tolerance: Geometric tolerance; defaults to ``BRepConfig.tolerance``

        Raises:
            TypeError: If level_set is not a LevelSet
        """
        super().__init__(tolerance)
        self._lock = threading.Lock()
        self._level_set = self._own_copy(level_set)

    @staticmethod
    def _own_copy(level_set: LevelSet) -> LevelSet:
        if not isinstance(level_set, LevelSet):
            raise TypeError(f"InverseLevelSet wraps a LevelSet, got {type(level_set).__name__}")
        return level_set.clone()

    def _inner(self) -> LevelSet:
        with self._lock:
            return self._level_set

    @property
    def level_set(self) -> LevelSet:
        """The owned inner level set."""
        return self._inner()

    def set_level_set(self, level_set: LevelSet) -> None:
        """Replace the inner level set with a copy of ``level_set``."""
        replacement = self._own_copy(level_set)
        with self._lock:
            previous = self._level_set
            self._level_set = replacement
        logger.debug(f"Inner level set replaced: {previous.info()} -> {replacement.info()}")

    def clone(self) -> InverseLevelSet:
        return InverseLevelSet(self._inner(), tolerance=self.tolerance)

    def working_space_dimension(self) -> int:
        return self._inner().working_space_dimension()

    def get_value(self, point: ArrayLike) -> float | NDArray[np.float64]:
        return -self._inner().get_value(point)

    def get_gradient(self, point: ArrayLike) -> NDArray[np.float64]:
        return -self._inner().get_gradient(point)

    def info(self) -> str:
        return f"Inverse Level Set of ({self._inner().info()})"

    def __str__(self) -> str:
        return f"{self.info()}\n{self._inner()}"

    def __repr__(self) -> str:
        return f"InverseLevelSet({self._inner()!r}, tolerance={self.tolerance:.3e})"
