"""
Logging utilities for brep_levelset.

Usage:
    >>> from brep_levelset.utils.brep_logging import get_logger, configure_logging
    >>> logger = get_logger(__name__)
    >>> configure_logging(level="DEBUG")
    >>> logger.debug("Classifying element...")
"""

from __future__ import annotations

from .logger import (
    BRepFormatter,
    BRepLogger,
    configure_development_logging,
    configure_logging,
    configure_logging_from_config,
    get_logger,
    log_bisection_failure,
    log_classification_failure,
)

__all__ = [
    "BRepFormatter",
    "BRepLogger",
    "configure_development_logging",
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
    "log_bisection_failure",
    "log_classification_failure",
]
