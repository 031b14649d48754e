"""
Circular level set in the x-y plane.

    φ(x, y, z) = (x - cx)² + (y - cy)² - R²

The z coordinate never enters: in 3D the shape is an infinite cylinder along
z, and every derivative along z is zero.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from brep_levelset.geometry.level_set.level_set import LevelSet
from brep_levelset.geometry.protocol import as_point
from brep_levelset.utils.exceptions import InvalidConfigurationError, PreconditionViolationError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class ArcPoints(Sequence):
    """
    Lazily evaluated points on a circular arc.

    Point j sits at angle θ_j = start + j (end - start) / n, j = 0..n-1, so the
    end angle itself is excluded. The sequence can be iterated any number of
    times and indexed directly.

    Example:
        >>> arc = ArcPoints(center=(0.0, 0.0), radius=1.0, start_angle=0.0, end_angle=np.pi, nsampling=2)
        >>> len(arc)
        2
        >>> arc[1]
        array([6.123234e-17, 1.000000e+00, 0.000000e+00])
    """

    def __init__(self, center: ArrayLike, radius: float, start_angle: float, end_angle: float, nsampling: int):
        self._cx, self._cy = (float(c) for c in center)
        self._radius = float(radius)
        self._start = float(start_angle)
        self._end = float(end_angle)
        self._n = int(nsampling)

    def angle(self, j: int) -> float:
        return self._start + j * (self._end - self._start) / self._n

    def __len__(self) -> int:
        return self._n

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[j] for j in range(*index.indices(self._n))]
        index = operator.index(index)
        if index < 0:
            index += self._n
        if not 0 <= index < self._n:
            raise IndexError(f"Arc point index {index} out of range for {self._n} points")
        theta = self.angle(index)
        return np.array([self._cx + self._radius * math.cos(theta), self._cy + self._radius * math.sin(theta), 0.0])

    def to_array(self) -> NDArray[np.float64]:
        """All points at once, shape (n, 3)."""
        if self._n == 0:
            return np.zeros((0, 3))
        return np.array(list(self))

    def __repr__(self) -> str:
        return f"ArcPoints(n={self._n}, start={self._start:.6g}, end={self._end:.6g})"


class CircularLevelSet(LevelSet):
    """
    Circle of center (cx, cy) and radius R.

    Supplies the closed-form gradient, its Jacobian, the projection onto the
    circle and the projection Jacobian.

    Attributes:
        center: Center (cx, cy) - read-only array of shape (2,)
        radius: Radius (positive scalar)

    Example:
        >>> circle = CircularLevelSet(0.0, 0.0, 5.0)
        >>> circle.get_value([3.0, 4.0, 0.0])
        0.0
        >>> circle.project_on_surface([10.0, 0.0, 0.0])
        array([5., 0., 0.])
    """

    def __init__(self, cx: float, cy: float, radius: float, tolerance: float | None = None):
        """
        Initialize circular level set.

        Args:
            cx, cy: Center coordinates
            radius: Radius (must be positive and finite)
            tolerance: Geometric tolerance; defaults to ``BRepConfig.tolerance``

        Raises:
            InvalidConfigurationError: If radius <= 0
        """
        super().__init__(tolerance)

        radius = float(radius)
        if not (radius > 0.0 and math.isfinite(radius)):
            raise InvalidConfigurationError(
                parameter_name="radius",
                provided_value=radius,
                valid_range=(0.0, float("inf")),
                component=type(self).__name__,
            )

        self._center = np.array([float(cx), float(cy)])
        self._center.setflags(write=False)
        self._radius = radius

    @property
    def center(self) -> NDArray[np.float64]:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def clone(self) -> CircularLevelSet:
        return CircularLevelSet(self._center[0], self._center[1], self._radius, tolerance=self.tolerance)

    def working_space_dimension(self) -> int:
        return 2

    def local_space_dimension(self) -> int:
        return 1

    def get_value(self, point: ArrayLike) -> float | NDArray[np.float64]:
        points, is_single = self._as_batch(point)
        d = points[:, :2] - self._center
        values = (d[:, 0] ** 2 + d[:, 1] ** 2) - self._radius**2
        return float(values[0]) if is_single else values

    def get_gradient(self, point: ArrayLike) -> NDArray[np.float64]:
        """∇φ = (2(x - cx), 2(y - cy), 0)."""
        points, is_single = self._as_batch(point)
        gradients = np.zeros_like(points)
        gradients[:, :2] = 2.0 * (points[:, :2] - self._center)
        return gradients[0] if is_single else gradients

    def get_gradient_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """Constant Jacobian diag(2, 2, 0)."""
        as_point(point)
        return np.diag([2.0, 2.0, 0.0])

    def generate_points(
        self,
        nsampling: int,
        start_angle: float = 0.0,
        end_angle: float = 2.0 * math.pi,
    ) -> ArcPoints:
        """
        Points on the circle at angles start + j (end - start) / nsampling.

        Args:
            nsampling: Number of points (>= 0)
            start_angle: First angle, radians
            end_angle: Excluded end angle, radians

        Returns:
            ArcPoints sequence of (3,) points with z = 0
        """
        if isinstance(nsampling, bool) or not isinstance(nsampling, (int, np.integer)) or nsampling < 0:
            raise InvalidConfigurationError(
                parameter_name="nsampling",
                provided_value=nsampling,
                valid_range=(0, float("inf")),
                component=type(self).__name__,
            )
        return ArcPoints(self._center, self._radius, start_angle, end_angle, nsampling)

    def _offset_from_center(self, point: ArrayLike, operation: str) -> tuple[NDArray[np.float64], float]:
        p = as_point(point)
        d = p[:2] - self._center
        length = math.sqrt(d[0] ** 2 + d[1] ** 2)
        if length == 0.0:
            raise PreconditionViolationError(
                operation=operation,
                reason="the point coincides with the circle center, where the projection is undefined",
                component=type(self).__name__,
                diagnostic_data={"point": p.tolist(), "center": self._center.tolist()},
            )
        return d, length

    def project_on_surface(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Radial projection onto the circle; z of the result is 0.

        Raises:
            PreconditionViolationError: If the point is the circle center
        """
        d, length = self._offset_from_center(point, "project_on_surface")
        projection = np.zeros(3)
        projection[0] = d[0] * self._radius / length + self._center[0]
        projection[1] = d[1] * self._radius / length + self._center[1]
        return projection

    def projection_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Jacobian of the projection, D[i, j] = d Proj_i / d P_j, i, j ∈ {0, 1}.

        With d = P - c, L = |d| and dL_j = 2 d_j:
            D[i, j] = δ_ij R / L - d_i R dL_j / L²
        The z row and column are zero.

        Raises:
            PreconditionViolationError: If the point is the circle center
        """
        d, length = self._offset_from_center(point, "projection_derivatives")
        radius = self._radius
        d_length = 2.0 * d

        derivatives = np.zeros((3, 3))
        for i in range(2):
            for j in range(2):
                delta = radius / length if i == j else 0.0
                derivatives[i, j] = delta - d[i] * radius * d_length[j] / length**2
        return derivatives

    def info(self) -> str:
        return "Circular Level Set"

    def __str__(self) -> str:
        return f"{self.info()}\ncX: {self._center[0]}, cY: {self._center[1]}, R: {self._radius}"

    def __repr__(self) -> str:
        return (
            f"CircularLevelSet(cx={self._center[0]}, cy={self._center[1]}, "
            f"radius={self._radius}, tolerance={self.tolerance:.3e})"
        )
