"""
Level Set Boundary Representation

A level set is a scalar field φ: ℝ³ → ℝ that partitions space into three
regions:
    φ(x) < 0  ⟺  x inside Ω
    φ(x) = 0  ⟺  x on Γ
    φ(x) > 0  ⟺  x outside Ω

LevelSet is a BRep that is also an ImplicitFunction: every boundary query
is derived from ``get_value``/``get_gradient`` unless a concrete shape
supplies a closed form (projection and its Jacobian).

Classification uses a tolerance band around Γ:
    in   φ < -tol
    out  φ >  tol
    on   otherwise
A sample set is CUT iff it has both in and out points. On-band points never
decide between IN and OUT by themselves: a set with only on-band points is
degenerate and raises.

References:
- Massing et al. (2014): CutFEM: Discretizing geometry and partial differential equations
- Osher & Fedkiw (2003): Level Set Methods and Dynamic Implicit Surfaces
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

from brep_levelset.config.core import get_default_config
from brep_levelset.geometry.brep import BRep
from brep_levelset.geometry.protocol import CutStatus, as_point, as_points
from brep_levelset.geometry.sampling import partition_sizes, resolve_points
from brep_levelset.utils.brep_logging import get_logger, log_bisection_failure, log_classification_failure
from brep_levelset.utils.exceptions import (
    DegenerateClassificationError,
    InvalidConfigurationError,
    NonConvergenceError,
    PreconditionViolationError,
    validate_tolerance,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = get_logger(__name__)


class LevelSet(BRep):
    """
    Abstract implicit-function-backed boundary.

    Subclasses must implement:
    - get_value(x): φ at a point (3,) as a scalar
    - get_gradient(x): ∇φ at a point (3,)
    - working_space_dimension()
    - clone()

    Optional:
    - get_gradient_derivatives(x): 3×3 Jacobian of ∇φ
    - project_on_surface(x), projection_derivatives(x)
    """

    # ------------------------------------------------------------------
    # Implicit function
    # ------------------------------------------------------------------

    @abstractmethod
    def get_value(self, point: ArrayLike) -> float | NDArray[np.float64]:
        """
        Evaluate φ.

        Args:
            point: Point(s) - shape (3,) or (N, 3); 2-coordinate input is padded

        Returns:
            Scalar for a single point, shape (N,) for a batch

        Only single points are required; the algorithms of this class never
        pass a batch.
        """

    @abstractmethod
    def get_gradient(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Evaluate ∇φ.

        Returns:
            Shape (3,) for a single point, (N, 3) for a batch
        """

    @abstractmethod
    def working_space_dimension(self) -> int:
        """Dimension of the space the level set lives in."""

    def get_gradient_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Jacobian of the gradient, D[i, j] = d(∇φ)_i / dP_j, shape (3, 3).

        Raises:
            UnimplementedCapabilityError: Unless the shape supplies it
        """
        raise self._unimplemented("get_gradient_derivatives")

    def value_at(self, x: float, y: float, z: float = 0.0) -> float:
        """φ at coordinates (x, y, z)."""
        return float(self.get_value(np.array([x, y, z], dtype=float)))

    def gradient_at(self, x: float, y: float, z: float = 0.0) -> NDArray[np.float64]:
        """∇φ at coordinates (x, y, z)."""
        return self.get_gradient(np.array([x, y, z], dtype=float))

    def __call__(self, point: ArrayLike) -> float | NDArray[np.float64]:
        return self.get_value(point)

    @staticmethod
    def _as_batch(point: ArrayLike) -> tuple[NDArray[np.float64], bool]:
        """Points as an (N, 3) array, plus whether the input was a single point."""
        x = np.asarray(point, dtype=float)
        is_single = x.ndim == 1
        return as_points(x), is_single

    # ------------------------------------------------------------------
    # BRep capabilities
    # ------------------------------------------------------------------

    def is_inside(self, point: ArrayLike) -> bool:
        return bool(self.get_value(as_point(point)) < 0.0)

    def is_on_boundary(self, point: ArrayLike, tol: float) -> bool:
        """
        Whether |φ(P)| < tol.

        A point with φ(P) == 0 exactly is on the boundary for every tol >= 0,
        including tol == 0.
        """
        tol = validate_tolerance(tol, parameter_name="tol", component=type(self).__name__)
        phi = float(self.get_value(as_point(point)))
        return abs(phi) < tol or phi == 0.0

    def cut_status(self, target: Any, configuration: int = 0) -> CutStatus:
        """
        Classify a geometry, an element or a raw point set with the tolerance band.

        Args:
            target: Element geometry, element-like object with a ``geometry``
                attribute, or point set of shape (N, 2|3)
            configuration: 0 reads reference positions, 1 reads current
                positions (moving-boundary analyses); ignored for raw point sets

        Raises:
            InvalidConfigurationError: If configuration is not 0 or 1
            DegenerateClassificationError: If no point is strictly in or strictly out
        """
        points = resolve_points(target, configuration)
        return self.banded_cut_status_of_points(points, self.tolerance)

    def banded_cut_status_of_points(self, points: ArrayLike, tolerance: float | None = None) -> CutStatus:
        """
        Three-way classification with a tolerance band around φ = 0.

        Args:
            points: Point set, shape (N, 2|3)
            tolerance: Band half-width; defaults to this level set's tolerance

        Returns:
            CUT iff in and out are both non-empty, IN iff out is empty,
            OUT iff in is empty

        Raises:
            DegenerateClassificationError: If in and out are both empty,
                whether or not any point is on the band
        """
        points = resolve_points(points)
        if tolerance is None:
            tolerance = self.tolerance
        tolerance = validate_tolerance(tolerance, component=type(self).__name__)

        # One point at a time: batch evaluation is optional for subclasses
        phi = np.array([float(self.get_value(point)) for point in points], dtype=float)

        in_mask = phi < -tolerance
        out_mask = phi > tolerance
        in_list = np.flatnonzero(in_mask)
        out_list = np.flatnonzero(out_mask)
        on_list = np.flatnonzero(~(in_mask | out_mask))

        if in_list.size == 0 and out_list.size == 0:
            sizes = partition_sizes(inside=in_list, outside=out_list, on=on_list)
            log_classification_failure(logger, points, sizes, tolerance)
            raise DegenerateClassificationError(points, sizes, tolerance, component=type(self).__name__)

        if in_list.size == 0:
            return CutStatus.OUT

        if out_list.size == 0:
            return CutStatus.IN

        return CutStatus.CUT

    def bisect(
        self,
        p1: ArrayLike,
        p2: ArrayLike,
        tol: float,
        max_iterations: int | None = None,
    ) -> NDArray[np.float64]:
        """
        Intersect the zero level with the segment P(t) = P1 + t (P2 - P1), t ∈ [0, 1].

        Each iteration evaluates φ once at the bracket midpoint and keeps the
        half whose end point has the opposite sign. Stops when |φ(mid)| < tol
        or the bracket is narrower than tol.

        Args:
            p1, p2: Segment end points with strictly opposite signs of φ
            tol: Stopping tolerance on |φ| and on the bracket width in t
            max_iterations: Iteration cap; defaults to
                ``BRepConfig.bisection.max_iterations``

        Returns:
            Point on the segment, shape (3,)

        Raises:
            PreconditionViolationError: If φ(P1) φ(P2) is not strictly negative
            NonConvergenceError: If the cap is reached first
        """
        p1 = as_point(p1)
        p2 = as_point(p2)
        tol = validate_tolerance(tol, parameter_name="tol", component=type(self).__name__)

        if max_iterations is None:
            max_iterations = get_default_config().bisection.max_iterations
        elif isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)) or max_iterations < 1:
            raise InvalidConfigurationError(
                parameter_name="max_iterations",
                provided_value=max_iterations,
                valid_range=(1, float("inf")),
                component=type(self).__name__,
            )

        f1 = float(self.get_value(p1))
        f2 = float(self.get_value(p2))
        if not f1 * f2 < 0.0:
            raise PreconditionViolationError(
                operation="bisect",
                reason="the end points must lie strictly on opposite sides of the level set",
                component=type(self).__name__,
                diagnostic_data={"phi(P1)": f1, "phi(P2)": f2},
            )

        direction = p2 - p1
        left = 0.0
        right = 1.0
        history = []

        for iteration in range(1, max_iterations + 1):
            mid = (left + right) / 2
            point = p1 + mid * direction
            fm = float(self.get_value(point))
            history.append(abs(fm))

            if abs(fm) < tol or fm == 0.0:
                logger.debug(f"Bisection converged on |phi| after {iteration} iterations (t={mid:.6g})")
                return point

            if fm * f1 < 0.0:
                right = mid
                f2 = fm
            else:
                left = mid
                f1 = fm

            if right - left < tol:
                logger.debug(f"Bisection converged on bracket width after {iteration} iterations (t={mid:.6g})")
                return point

        log_bisection_failure(logger, max_iterations, history[-1], (left, right), tol)
        raise NonConvergenceError(
            iterations_used=max_iterations,
            max_iterations=max_iterations,
            final_residual=history[-1],
            tolerance=tol,
            component=type(self).__name__,
            residual_history=history,
        )

    def get_normal(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Normal at a point: the gradient ∇φ as a 3-vector.

        Not normalized; callers needing a unit normal divide by its norm.
        """
        gradient = np.asarray(self.get_gradient(as_point(point)), dtype=float)
        normal = np.zeros(3)
        normal[: gradient.size] = gradient
        return normal

    def get_normal_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """Jacobian of the (unnormalized) normal, i.e. of ∇φ."""
        return self.get_gradient_derivatives(point)

    def info(self) -> str:
        return "Level Set"
