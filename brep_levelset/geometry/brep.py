"""
Boundary Representation (BRep) Interface

A BRep answers one question for the cut-cell assembly pipeline: where is a
point, or a whole element, with respect to an embedded boundary?

    IN   every sample strictly inside the bounded domain
    OUT  every sample strictly outside
    CUT  samples on both sides

The generic algorithm here is exact: each sample is either inside or
outside according to ``is_inside``, with no tolerance band. LevelSet
refines it with a three-way banded algorithm. The two differ on points in
the band: inside here, "on boundary" there.

Required capabilities (``is_inside``, ``is_on_boundary``, ``clone``) are
abstract, so a subclass that omits one cannot be instantiated. Optional
capabilities (bisection, normals, projection) raise
UnimplementedCapabilityError unless a subclass supplies them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from brep_levelset.config.core import get_default_config
from brep_levelset.geometry.protocol import CutStatus
from brep_levelset.geometry.sampling import partition_sizes, resolve_points, sampling_points
from brep_levelset.utils.brep_logging import get_logger, log_classification_failure
from brep_levelset.utils.exceptions import (
    DegenerateClassificationError,
    UnimplementedCapabilityError,
    validate_tolerance,
)

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import ArrayLike, NDArray

logger = get_logger(__name__)


class BRep(ABC):
    """
    Abstract boundary representation.

    The geometric tolerance is the only state that may change after
    construction; every query is otherwise a pure function of the instance
    parameters and its arguments, so concurrent read-only queries are safe.

    Subclasses must implement:
    - is_inside(P)
    - is_on_boundary(P, tol)
    - clone()

    Example:
        >>> circle = CircularLevelSet(0.0, 0.0, 5.0)
        >>> circle.cut_status([[0, 0, 0], [10, 0, 0]])
        <CutStatus.CUT: -1>
    """

    def __init__(self, tolerance: float | None = None):
        if tolerance is None:
            tolerance = get_default_config().tolerance
        self._tolerance = validate_tolerance(tolerance, component=type(self).__name__)

    # ------------------------------------------------------------------
    # Tolerance
    # ------------------------------------------------------------------

    @property
    def tolerance(self) -> float:
        """Geometric tolerance (>= 0) used by boundary tests."""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        self._tolerance = validate_tolerance(value, component=type(self).__name__)

    def set_tolerance(self, tolerance: float) -> None:
        self.tolerance = tolerance

    def get_tolerance(self) -> float:
        return self._tolerance

    # ------------------------------------------------------------------
    # Required capabilities
    # ------------------------------------------------------------------

    @abstractmethod
    def clone(self) -> BRep:
        """Independent copy sharing no mutable state with this instance."""

    @abstractmethod
    def is_inside(self, point: ArrayLike) -> bool:
        """Whether a point lies strictly inside the bounded domain."""

    @abstractmethod
    def is_on_boundary(self, point: ArrayLike, tol: float) -> bool:
        """Whether a point lies on the boundary within ``tol``."""

    # ------------------------------------------------------------------
    # Optional capabilities
    # ------------------------------------------------------------------

    def working_space_dimension(self) -> int:
        """Dimension of the space the boundary lives in."""
        raise self._unimplemented("working_space_dimension")

    def local_space_dimension(self) -> int:
        """Dimension of the boundary itself."""
        raise self._unimplemented("local_space_dimension")

    def bisect(
        self,
        p1: ArrayLike,
        p2: ArrayLike,
        tol: float,
        max_iterations: int | None = None,
    ) -> NDArray[np.float64]:
        """Intersection of the boundary with the segment [p1, p2]."""
        raise self._unimplemented("bisect")

    def get_normal(self, point: ArrayLike) -> NDArray[np.float64]:
        """Normal vector of the boundary at a point."""
        raise self._unimplemented("get_normal")

    def get_normal_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Derivatives of the normal w.r.t. the global point, organized as
        D[i, j] = d N[i] / d P[j].
        """
        raise self._unimplemented("get_normal_derivatives")

    def project_on_surface(self, point: ArrayLike) -> NDArray[np.float64]:
        """Projection of a point onto the boundary."""
        raise self._unimplemented("project_on_surface")

    def projection_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Derivatives of the projected point w.r.t. the original point,
        organized as D[i, j] = d Proj[i] / d P[j].
        """
        raise self._unimplemented("projection_derivatives")

    def _unimplemented(self, capability: str) -> UnimplementedCapabilityError:
        return UnimplementedCapabilityError(capability, component=type(self).__name__)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def cut_status(self, target: Any, configuration: int = 0) -> CutStatus:
        """
        Classify a geometry, an element or a raw point set.

        Args:
            target: Element geometry, element-like object with a ``geometry``
                attribute, or point set of shape (N, 2|3)
            configuration: 0 reads reference positions, 1 reads current
                positions; ignored for raw point sets

        Returns:
            CutStatus.IN, CutStatus.OUT or CutStatus.CUT

        Raises:
            InvalidConfigurationError: If configuration is not 0 or 1
            DegenerateClassificationError: If the samples decide nothing
        """
        points = resolve_points(target, configuration)
        return self.cut_status_of_points(points)

    def cut_status_by_sampling(self, geometry: Any, nsampling: int | None = None, configuration: int = 0) -> CutStatus:
        """
        Classify a geometry from its corners plus an interior sampling lattice.

        Args:
            geometry: Element geometry (or element-like object with ``geometry``)
            nsampling: Interior samples per local direction; defaults to
                ``BRepConfig.sampling.nsampling``
            configuration: 0 = reference positions, 1 = current positions

        Returns:
            Classification of corners ∪ samples, by this BRep's ``cut_status``
        """
        if nsampling is None:
            nsampling = get_default_config().sampling.nsampling
        points = sampling_points(geometry, nsampling, configuration)
        logger.debug(f"Sampling classification with {len(points)} points (nsampling={nsampling})")
        return self.cut_status(points)

    def cut_status_of_points(self, points: ArrayLike) -> CutStatus:
        """
        Exact classification: each point is inside or outside, nothing in between.

        Raises:
            DegenerateClassificationError: If neither partition has a point
        """
        points = resolve_points(points)

        in_list = []
        out_list = []
        for v, point in enumerate(points):
            if self.is_inside(point):
                in_list.append(v)
            else:
                out_list.append(v)

        if not in_list and not out_list:
            sizes = partition_sizes(inside=in_list, outside=out_list)
            log_classification_failure(logger, points, sizes, self.tolerance)
            raise DegenerateClassificationError(points, sizes, self.tolerance, component=type(self).__name__)

        if not in_list:
            return CutStatus.OUT

        if not out_list:
            return CutStatus.IN

        return CutStatus.CUT

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def info(self) -> str:
        """Short human-readable name."""
        return "BRep"

    def __str__(self) -> str:
        return self.info()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tolerance={self._tolerance:.3e})"
