"""
Geometry package for brep_levelset: boundary representations and element classification.

Key Components:
- BRep: Abstract boundary representation with exact in/out classification
- LevelSet and concrete shapes (circular, spherical, inverse)
- CutStatus: IN / OUT / CUT result of classifying an element
- ElementGeometry: Minimal linear element with reference and current positions
- Sampling helpers: interior lattices for sampling-based classification
"""

from __future__ import annotations

from .brep import BRep
from .element import NODES_PER_FAMILY, ElementGeometry, shape_functions
from .level_set import ArcPoints, CircularLevelSet, InverseLevelSet, LevelSet, SphericalLevelSet
from .protocol import CutStatus, ElementGeometryProtocol, ImplicitFunction, as_point, as_points
from .sampling import local_sampling_points, sampling_points

__all__ = [
    "NODES_PER_FAMILY",
    "ArcPoints",
    "BRep",
    "CircularLevelSet",
    "CutStatus",
    "ElementGeometry",
    "ElementGeometryProtocol",
    "ImplicitFunction",
    "InverseLevelSet",
    "LevelSet",
    "SphericalLevelSet",
    "as_point",
    "as_points",
    "local_sampling_points",
    "sampling_points",
    "shape_functions",
]
