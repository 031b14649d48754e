"""
Spherical level set.

    φ(x, y, z) = (x - cx)² + (y - cy)² + (z - cz)² - R²
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from brep_levelset.geometry.level_set.level_set import LevelSet
from brep_levelset.geometry.protocol import as_point
from brep_levelset.utils.exceptions import InvalidConfigurationError, PreconditionViolationError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class SphericalLevelSet(LevelSet):
    """
    Sphere of center (cx, cy, cz) and radius R.

    Projection onto the sphere is supplied; its Jacobian is not.

    Attributes:
        center: Center (cx, cy, cz) - read-only array of shape (3,)
        radius: Radius (positive scalar)

    Example:
        >>> sphere = SphericalLevelSet(0.0, 0.0, 0.0, 1.0)
        >>> sphere.get_value([0.0, 0.0, 0.0])
        -1.0
        >>> sphere.get_gradient([1.0, 2.0, 3.0])
        array([2., 4., 6.])
    """

    def __init__(self, cx: float, cy: float, cz: float, radius: float, tolerance: float | None = None):
        super().__init__(tolerance)

        radius = float(radius)
        if not (radius > 0.0 and math.isfinite(radius)):
            raise InvalidConfigurationError(
                parameter_name="radius",
                provided_value=radius,
                valid_range=(0.0, float("inf")),
                component=type(self).__name__,
            )

        self._center = np.array([float(cx), float(cy), float(cz)])
        self._center.setflags(write=False)
        self._radius = radius

    @property
    def center(self) -> NDArray[np.float64]:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def clone(self) -> SphericalLevelSet:
        cx, cy, cz = self._center
        return SphericalLevelSet(cx, cy, cz, self._radius, tolerance=self.tolerance)

    def working_space_dimension(self) -> int:
        return 3

    def local_space_dimension(self) -> int:
        return 2

    def get_value(self, point: ArrayLike) -> float | NDArray[np.float64]:
        points, is_single = self._as_batch(point)
        d = points - self._center
        values = (d[:, 0] ** 2 + d[:, 1] ** 2 + d[:, 2] ** 2) - self._radius**2
        return float(values[0]) if is_single else values

    def get_gradient(self, point: ArrayLike) -> NDArray[np.float64]:
        """∇φ = 2 (P - c)."""
        points, is_single = self._as_batch(point)
        gradients = 2.0 * (points - self._center)
        return gradients[0] if is_single else gradients

    def get_gradient_derivatives(self, point: ArrayLike) -> NDArray[np.float64]:
        """Constant Jacobian 2 I."""
        as_point(point)
        return 2.0 * np.eye(3)

    def project_on_surface(self, point: ArrayLike) -> NDArray[np.float64]:
        """
        Radial projection onto the sphere.

        Raises:
            PreconditionViolationError: If the point is the sphere center
        """
        p = as_point(point)
        d = p - self._center
        length = math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2)
        if length == 0.0:
            raise PreconditionViolationError(
                operation="project_on_surface",
                reason="the point coincides with the sphere center, where the projection is undefined",
                component=type(self).__name__,
                diagnostic_data={"point": p.tolist(), "center": self._center.tolist()},
            )
        return d * self._radius / length + self._center

    def info(self) -> str:
        return "Spherical Level Set"

    def __str__(self) -> str:
        cx, cy, cz = self._center
        return f"{self.info()}\ncX: {cx}, cY: {cy}, cZ: {cz}, R: {self._radius}"

    def __repr__(self) -> str:
        cx, cy, cz = self._center
        return f"SphericalLevelSet(cx={cx}, cy={cy}, cz={cz}, radius={self._radius}, tolerance={self.tolerance:.3e})"
