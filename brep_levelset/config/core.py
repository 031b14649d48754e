"""
Configuration for boundary classification.

Configurations specify HOW queries run (tolerances, iteration caps, sampling
density, logging), never WHAT geometry is classified - shapes are plain
Python objects constructed with their own parameters.

A process-wide default (``get_default_config``) supplies values for
arguments a caller leaves out: the initial tolerance of every new BRep, the
bisection iteration cap and the sampling density.
"""

from __future__ import annotations

import threading
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BisectionConfig(BaseModel):
    """
    Configuration for the bisection root finder.

    Attributes
    ----------
    max_iterations : int
        Upper bound on bisection steps before NonConvergenceError (default: 100).
        Each step halves the bracket, so 100 steps resolve any segment far
        below double precision.
    """

    max_iterations: int = Field(100, ge=1, le=10_000, description="Maximum number of bisection iterations")

    model_config = ConfigDict(validate_assignment=True)


class SamplingConfig(BaseModel):
    """
    Configuration for sampling-based classification.

    Attributes
    ----------
    nsampling : int
        Interior samples per local direction of an element (default: 3)
    """

    nsampling: int = Field(3, ge=1, le=1000, description="Interior samples per local direction")

    model_config = ConfigDict(validate_assignment=True)


class LoggingConfig(BaseModel):
    """
    Configuration for logging.

    Attributes
    ----------
    level : Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        Logging level (default: WARNING)
    use_colors : bool
        Colored console output when colorlog is available (default: True)
    include_location : bool
        Append file:line to each record (default: False)
    log_to_file : bool
        Also write records to a file (default: False)
    log_file_path : str | None
        Log file; a timestamped file under ./logs is used when omitted
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    use_colors: bool = True
    include_location: bool = False
    log_to_file: bool = False
    log_file_path: str | None = None

    @model_validator(mode="after")
    def validate_log_file(self) -> LoggingConfig:
        """A log file path only makes sense when file logging is enabled."""
        if self.log_file_path is not None and not self.log_to_file:
            raise ValueError("log_file_path given but log_to_file is False")
        return self

    model_config = ConfigDict(validate_assignment=True)


class BRepConfig(BaseModel):
    """
    Top-level configuration for brep_levelset.

    Attributes
    ----------
    tolerance : float
        Initial geometric tolerance of new BRep instances (default: 1e-10)
    bisection : BisectionConfig
        Bisection settings
    sampling : SamplingConfig
        Sampling-classification settings
    logging : LoggingConfig
        Logging settings; applied by ``set_default_config(config, apply_logging=True)``
        or ``configure_logging_from_config(config.logging)``, never implicitly

    Examples
    --------
    >>> config = BRepConfig(tolerance=1e-8, bisection={"max_iterations": 60})
    >>> set_default_config(config)
    """

    tolerance: float = Field(1e-10, ge=0.0, allow_inf_nan=False, description="Default geometric tolerance")
    bisection: BisectionConfig = Field(default_factory=BisectionConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def to_yaml(self, path) -> None:
        """Save this configuration to a YAML file."""
        from .io import save_brep_config

        save_brep_config(self, path)

    @classmethod
    def from_yaml(cls, path) -> BRepConfig:
        """Load a configuration from a YAML file."""
        from .io import load_brep_config

        return load_brep_config(path)


_default_lock = threading.Lock()
_default_config = BRepConfig()


def get_default_config() -> BRepConfig:
    """Return the process-wide default configuration."""
    return _default_config


def set_default_config(config: BRepConfig, apply_logging: bool = False) -> None:
    """
    Replace the process-wide default configuration.

    Only affects instances created and calls made afterwards; existing BRep
    instances keep their tolerance.

    Args:
        config: New default configuration
        apply_logging: Also reconfigure every package logger from
            ``config.logging``. Off by default, so the logging section of a
            configuration has no effect unless applied here or through
            ``configure_logging_from_config``.
    """
    global _default_config
    if not isinstance(config, BRepConfig):
        raise TypeError(f"Expected BRepConfig, got {type(config).__name__}")
    with _default_lock:
        _default_config = config

    if apply_logging:
        from brep_levelset.utils.brep_logging import configure_logging_from_config

        configure_logging_from_config(config.logging)


def reset_default_config() -> None:
    """Restore the built-in defaults."""
    set_default_config(BRepConfig())
