"""Shared utilities: exceptions and logging."""

from brep_levelset.utils.exceptions import (
    BRepError,
    DegenerateClassificationError,
    InvalidConfigurationError,
    NonConvergenceError,
    PreconditionViolationError,
    UnimplementedCapabilityError,
)

__all__ = [
    "BRepError",
    "DegenerateClassificationError",
    "InvalidConfigurationError",
    "NonConvergenceError",
    "PreconditionViolationError",
    "UnimplementedCapabilityError",
]
