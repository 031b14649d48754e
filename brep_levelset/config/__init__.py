"""
Configuration system for brep_levelset.

Pydantic models with validation, a process-wide default and YAML I/O:

    >>> from brep_levelset.config import BRepConfig, load_brep_config, set_default_config
    >>> set_default_config(BRepConfig(tolerance=1e-8))
"""

from .core import (
    BisectionConfig,
    BRepConfig,
    LoggingConfig,
    SamplingConfig,
    get_default_config,
    reset_default_config,
    set_default_config,
)
from .io import load_brep_config, save_brep_config, validate_yaml_config

__all__ = [
    "BRepConfig",
    "BisectionConfig",
    "LoggingConfig",
    "SamplingConfig",
    "get_default_config",
    "load_brep_config",
    "reset_default_config",
    "save_brep_config",
    "set_default_config",
    "validate_yaml_config",
]
