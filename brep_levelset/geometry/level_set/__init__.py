"""
Level set boundaries.

A level set φ: ℝ³ → ℝ describes a bounded domain implicitly:
    x ∈ Ω   ⟺  φ(x) < 0   (interior)
    x ∈ Γ   ⟺  φ(x) = 0   (boundary)
    x ∉ Ω   ⟺  φ(x) > 0   (exterior)

Components:
- LevelSet: Abstract base, banded classification, bisection and normals
- CircularLevelSet: Circle in the x-y plane with closed-form projection
- SphericalLevelSet: Sphere
- InverseLevelSet: Complement of another level set

Example - Element crossing a hole:
    >>> from brep_levelset.geometry.level_set import CircularLevelSet, InverseLevelSet
    >>> hole = InverseLevelSet(CircularLevelSet(0.0, 0.0, 1.0))
    >>> hole.cut_status([[0.0, 0.0], [2.0, 0.0]])
    <CutStatus.CUT: -1>
"""

from .circular import ArcPoints, CircularLevelSet
from .inverse import InverseLevelSet
from .level_set import LevelSet
from .spherical import SphericalLevelSet

__all__ = [
    "ArcPoints",
    "CircularLevelSet",
    "InverseLevelSet",
    "LevelSet",
    "SphericalLevelSet",
]
