"""
Linear element geometries with reference and current positions.

The mesh layer that owns real elements is outside this package; ElementGeometry
is a small concrete implementation of ElementGeometryProtocol so that
classification can be driven without a full finite-element framework.

Supported families and node orderings (local coordinates):
- line:           (-1), (1)
- triangle:       (0,0), (1,0), (0,1)
- quadrilateral:  (-1,-1), (1,-1), (1,1), (-1,1)
- tetrahedron:    (0,0,0), (1,0,0), (0,1,0), (0,0,1)
- hexahedron:     bottom face (-1,-1,-1), (1,-1,-1), (1,1,-1), (-1,1,-1), then the top face at +1
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from brep_levelset.geometry.protocol import as_points
from brep_levelset.geometry.sampling import local_dimension, select_positions
from brep_levelset.utils.exceptions import InvalidConfigurationError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

NODES_PER_FAMILY = {
    "line": 2,
    "triangle": 3,
    "quadrilateral": 4,
    "tetrahedron": 4,
    "hexahedron": 8,
}

_QUAD_SIGNS = np.array([[-1, -1], [1, -1], [1, 1], [-1, 1]], dtype=float)
_HEX_SIGNS = np.array(
    [[-1, -1, -1], [1, -1, -1], [1, 1, -1], [-1, 1, -1], [-1, -1, 1], [1, -1, 1], [1, 1, 1], [-1, 1, 1]],
    dtype=float,
)


def shape_functions(family: str, local_points: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Evaluate linear shape functions at local points.

    Args:
        family: Element family name
        local_points: Local coordinates, shape (M, d)

    Returns:
        Shape function values, shape (M, n_nodes); each row sums to 1
    """
    xi = np.atleast_2d(np.asarray(local_points, dtype=float))
    dim = local_dimension(family)
    if xi.shape[1] != dim:
        raise ValueError(f"{family} has local dimension {dim}, got local points of shape {xi.shape}")

    if family == "line":
        return np.column_stack([0.5 * (1.0 - xi[:, 0]), 0.5 * (1.0 + xi[:, 0])])

    if family == "triangle":
        return np.column_stack([1.0 - xi[:, 0] - xi[:, 1], xi[:, 0], xi[:, 1]])

    if family == "tetrahedron":
        return np.column_stack([1.0 - xi.sum(axis=1), xi[:, 0], xi[:, 1], xi[:, 2]])

    if family == "quadrilateral":
        # N_a = (1 + ξ ξ_a)(1 + η η_a) / 4
        return 0.25 * np.prod(1.0 + xi[:, None, :] * _QUAD_SIGNS[None, :, :], axis=2)

    # hexahedron: N_a = (1 + ξ ξ_a)(1 + η η_a)(1 + ζ ζ_a) / 8
    return 0.125 * np.prod(1.0 + xi[:, None, :] * _HEX_SIGNS[None, :, :], axis=2)


class ElementGeometry:
    """
    Linear element with reference and current nodal positions.

    Attributes:
        family: Element family name
        reference_positions: Initial positions, shape (N, 3)
        current_positions: Deformed positions, shape (N, 3)

    Example:
        >>> tri = ElementGeometry("triangle", [[0, 0], [1, 0], [0, 1]])
        >>> tri.move([[0.1, 0, 0]] * 3)  # rigid translation
        >>> tri.current_positions[0]
        array([0.1, 0. , 0. ])
    """

    def __init__(self, family: str, reference_positions: ArrayLike, current_positions: ArrayLike | None = None):
        if family not in NODES_PER_FAMILY:
            raise InvalidConfigurationError(
                parameter_name="family",
                provided_value=family,
                valid_values=tuple(NODES_PER_FAMILY),
                component=type(self).__name__,
            )
        self._family = family

        reference = as_points(reference_positions).copy()
        if reference.shape[0] != NODES_PER_FAMILY[family]:
            raise ValueError(
                f"{family} needs {NODES_PER_FAMILY[family]} nodes, got {reference.shape[0]}"
            )
        self._reference = reference
        self._reference.setflags(write=False)

        if current_positions is None:
            self._current = reference.copy()
        else:
            current = as_points(current_positions).copy()
            if current.shape != reference.shape:
                raise ValueError(f"Current positions shape {current.shape} != reference shape {reference.shape}")
            self._current = current

    @property
    def family(self) -> str:
        return self._family

    @property
    def reference_positions(self) -> NDArray[np.float64]:
        return self._reference

    @property
    def current_positions(self) -> NDArray[np.float64]:
        return self._current.copy()

    def __len__(self) -> int:
        return self._reference.shape[0]

    def __getitem__(self, index: int) -> NDArray[np.float64]:
        return self._current[index].copy()

    def move(self, displacements: ArrayLike) -> None:
        """Set current positions to reference positions plus nodal displacements."""
        displacements = as_points(displacements)
        if displacements.shape != self._reference.shape:
            raise ValueError(f"Displacements shape {displacements.shape} != {self._reference.shape}")
        self._current = self._reference + displacements

    def global_coordinates(self, local_points: NDArray[np.float64], configuration: int = 0) -> NDArray[np.float64]:
        """
        Map local coordinates to global points in the chosen configuration.

        Returns:
            Global points, shape (M, 3)
        """
        positions = select_positions(self, configuration)
        return shape_functions(self._family, local_points) @ positions

    def __repr__(self) -> str:
        return f"ElementGeometry(family='{self._family}', nodes={len(self)})"
