"""
brep_levelset: boundary representations for cut-cell finite elements.

Classifies mesh elements as inside, outside or cut by an embedded boundary
described by a level set, and provides the boundary queries cut-cell
assembly needs (bisection, normals, projection).

    >>> from brep_levelset import CircularLevelSet, CutStatus, ElementGeometry
    >>> circle = CircularLevelSet(0.0, 0.0, 1.0)
    >>> quad = ElementGeometry("quadrilateral", [[0, 0], [2, 0], [2, 2], [0, 2]])
    >>> circle.cut_status(quad) is CutStatus.CUT
    True
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("brep-levelset")
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .config import BRepConfig, get_default_config, load_brep_config, reset_default_config, set_default_config
from .geometry import (
    ArcPoints,
    BRep,
    CircularLevelSet,
    CutStatus,
    ElementGeometry,
    ElementGeometryProtocol,
    ImplicitFunction,
    InverseLevelSet,
    LevelSet,
    SphericalLevelSet,
)
from .utils import (
    BRepError,
    DegenerateClassificationError,
    InvalidConfigurationError,
    NonConvergenceError,
    PreconditionViolationError,
    UnimplementedCapabilityError,
)
from .utils.brep_logging import configure_logging, get_logger

__all__ = [
    "ArcPoints",
    "BRep",
    "BRepConfig",
    "BRepError",
    "CircularLevelSet",
    "CutStatus",
    "DegenerateClassificationError",
    "ElementGeometry",
    "ElementGeometryProtocol",
    "ImplicitFunction",
    "InvalidConfigurationError",
    "InverseLevelSet",
    "LevelSet",
    "NonConvergenceError",
    "PreconditionViolationError",
    "SphericalLevelSet",
    "UnimplementedCapabilityError",
    "__version__",
    "configure_logging",
    "get_default_config",
    "get_logger",
    "load_brep_config",
    "reset_default_config",
    "set_default_config",
]
