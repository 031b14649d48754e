"""
Sampling helpers shared by the classification algorithms.

Corner-only classification misses a cut when the boundary passes through
the interior of an element without separating any two corners (a surface
bulging through a convex element). Sampling adds a lattice of interior
points in local coordinates, mapped to global space through the element's
shape functions, and classifies corners ∪ interior samples together.

Local lattices, for ``n`` samples per local direction:
- Tensor-product families (line, quadrilateral, hexahedron), reference cell
  [-1, 1]^d: coordinates -1 + 2(i+1)/(n+1), i = 0..n-1, giving n^d points.
- Simplex families (triangle, tetrahedron), reference cell
  {ξ_j ≥ 0, Σξ_j ≤ 1}: points m/(n+d) with all m_j ≥ 1 and Σm_j ≤ n+d-1,
  giving strictly interior points only (n=1 yields the centroid).
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

import numpy as np

from brep_levelset.geometry.protocol import ElementGeometryProtocol, as_points
from brep_levelset.utils.exceptions import InvalidConfigurationError, validate_configuration_selector

if TYPE_CHECKING:
    from numpy.typing import NDArray

TENSOR_FAMILIES = {"line": 1, "quadrilateral": 2, "hexahedron": 3}
SIMPLEX_FAMILIES = {"triangle": 2, "tetrahedron": 3}


def local_dimension(family: str) -> int:
    """Local (reference cell) dimension of an element family."""
    if family in TENSOR_FAMILIES:
        return TENSOR_FAMILIES[family]
    if family in SIMPLEX_FAMILIES:
        return SIMPLEX_FAMILIES[family]
    raise InvalidConfigurationError(
        parameter_name="family",
        provided_value=family,
        valid_values=tuple(sorted({**TENSOR_FAMILIES, **SIMPLEX_FAMILIES})),
    )


def local_sampling_points(family: str, nsampling: int) -> NDArray[np.float64]:
    """
    Interior sampling lattice of a reference element.

    Args:
        family: Element family name
        nsampling: Samples per local direction (>= 1)

    Returns:
        Local coordinates, shape (M, d) with d the local dimension

    Example:
        >>> local_sampling_points("quadrilateral", 2)
        array([[-0.33333333, -0.33333333],
               [-0.33333333,  0.33333333],
               [ 0.33333333, -0.33333333],
               [ 0.33333333,  0.33333333]])
    """
    if isinstance(nsampling, bool) or not isinstance(nsampling, (int, np.integer)) or nsampling < 1:
        raise InvalidConfigurationError(
            parameter_name="nsampling",
            provided_value=nsampling,
            valid_range=(1, float("inf")),
        )

    dim = local_dimension(family)

    if family in TENSOR_FAMILIES:
        axis = -1.0 + 2.0 * (np.arange(nsampling) + 1.0) / (nsampling + 1.0)
        return np.array(list(itertools.product(axis, repeat=dim)), dtype=float)

    # Simplex: strictly interior barycentric lattice
    k = nsampling + dim
    lattice = [m for m in itertools.product(range(1, k), repeat=dim) if sum(m) <= k - 1]
    return np.array(lattice, dtype=float) / k


def select_positions(geometry: ElementGeometryProtocol, configuration: int) -> NDArray[np.float64]:
    """
    Positions of a geometry in the requested configuration.

    Args:
        geometry: Element geometry
        configuration: 0 = reference/initial positions, 1 = current/deformed positions

    Raises:
        InvalidConfigurationError: For any other selector value
    """
    configuration = validate_configuration_selector(configuration)
    if configuration == 0:
        return as_points(geometry.reference_positions)
    return as_points(geometry.current_positions)


def resolve_points(target: Any, configuration: int = 0) -> NDArray[np.float64]:
    """
    Turn a classification target into a point set of shape (N, 3).

    Accepts an element geometry, an element-like object exposing a
    ``geometry`` attribute, or anything array-like of points. The
    configuration selector is validated for every target but only selects
    positions for geometries.

    Raises:
        InvalidConfigurationError: If configuration is not 0 or 1
    """
    configuration = validate_configuration_selector(configuration)
    geometry = getattr(target, "geometry", None)
    if isinstance(geometry, ElementGeometryProtocol):
        target = geometry

    if isinstance(target, ElementGeometryProtocol):
        return select_positions(target, configuration)

    return as_points(target)


def sampling_points(geometry: Any, nsampling: int, configuration: int = 0) -> NDArray[np.float64]:
    """
    Corners of the geometry followed by its interior sampling lattice.

    Both the corners and the mapped samples are taken in the same
    configuration, so sampling a deformed element samples the deformed shape.

    Returns:
        Points, shape (N + M, 3)
    """
    element_geometry = getattr(geometry, "geometry", None)
    if isinstance(element_geometry, ElementGeometryProtocol):
        geometry = element_geometry

    if not isinstance(geometry, ElementGeometryProtocol):
        raise TypeError(f"Sampling requires an element geometry, got {type(geometry).__name__}")

    corners = select_positions(geometry, configuration)
    local = local_sampling_points(geometry.family, nsampling)
    interior = as_points(geometry.global_coordinates(local, configuration))
    return np.vstack([corners, interior])


def partition_sizes(**partitions: Any) -> dict[str, int]:
    """Sizes of named index partitions, in the given order."""
    return {name: len(members) for name, members in partitions.items()}
