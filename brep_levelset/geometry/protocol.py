#!/usr/bin/env python3
"""
Protocols and value types shared by all boundary representations.

This module defines:
- CutStatus: Result of classifying a geometry against a boundary
- ImplicitFunction: Scalar field capability (value + gradient)
- ElementGeometryProtocol: What the classifier needs from a mesh element

Points are plain numpy arrays of three coordinates. Two-coordinate input is
accepted everywhere and padded with z = 0, so 2D meshes can be classified
against 2D shapes without reshaping.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class CutStatus(IntEnum):
    """
    Classification of a geometry against the zero level of a boundary.

    Attributes:
        IN: Every sample strictly inside the bounded domain
        OUT: Every sample strictly outside
        CUT: Samples on both sides - the element is crossed by the boundary
    """

    CUT = -1
    IN = 0
    OUT = 1


@runtime_checkable
class ImplicitFunction(Protocol):
    """
    Scalar field capability φ: ℝ³ → ℝ.

    Convention:
        φ(x) < 0  ⟺  x inside
        φ(x) > 0  ⟺  x outside
        |φ(x)| below tolerance  ⟺  x on the boundary
    """

    def get_value(self, point: ArrayLike) -> float | NDArray[np.float64]:
        """Evaluate φ at a point (3,) or a batch (N, 3)."""
        ...

    def get_gradient(self, point: ArrayLike) -> NDArray[np.float64]:
        """Evaluate ∇φ at a point (3,) or a batch (N, 3)."""
        ...


@runtime_checkable
class ElementGeometryProtocol(Protocol):
    """
    Ordered, fixed-size point collection owned by the mesh layer.

    Each point has a reference (initial) position and a current (deformed)
    position; classification chooses between them with a configuration
    selector (0 = reference, 1 = current).
    """

    @property
    def family(self) -> str:
        """Element family name (e.g. "triangle", "hexahedron")."""
        ...

    @property
    def reference_positions(self) -> NDArray[np.float64]:
        """Reference positions, shape (N, 3)."""
        ...

    @property
    def current_positions(self) -> NDArray[np.float64]:
        """Current positions, shape (N, 3)."""
        ...

    def __len__(self) -> int: ...

    def global_coordinates(self, local_points: NDArray[np.float64], configuration: int = 0) -> NDArray[np.float64]:
        """Map local (isoparametric) coordinates to global points, shape (M, 3)."""
        ...


def as_point(point: ArrayLike) -> NDArray[np.float64]:
    """
    Normalize a single point to a float array of shape (3,).

    Raises:
        ValueError: If the input does not have 2 or 3 coordinates
    """
    p = np.asarray(point, dtype=float)
    if p.ndim != 1 or p.shape[0] not in (2, 3):
        raise ValueError(f"A point must have 2 or 3 coordinates, got shape {p.shape}")
    if p.shape[0] == 2:
        p = np.append(p, 0.0)
    return p


def as_points(points: ArrayLike) -> NDArray[np.float64]:
    """
    Normalize a point set to a float array of shape (N, 3).

    A single point is promoted to a set of one.
    """
    p = np.asarray(points, dtype=float)
    if p.ndim == 1:
        if p.shape[0] == 0:
            return np.zeros((0, 3))
        p = p.reshape(1, -1)
    if p.ndim != 2 or p.shape[1] not in (2, 3):
        raise ValueError(f"Points must have shape (N, 2) or (N, 3), got {p.shape}")
    if p.shape[1] == 2:
        p = np.hstack([p, np.zeros((p.shape[0], 1))])
    return p
