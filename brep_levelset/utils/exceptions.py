"""
Exception classes for brep_levelset with structured diagnostics.

Every failure in the boundary-classification core is a hard stop: no status,
point or matrix is ever guessed. The classes below carry enough context
(component, error code, diagnostic data, suggested action) for the
surrounding assembly pipeline to report the failure to its own caller.
"""

from __future__ import annotations

import numbers
from typing import Any


class BRepError(Exception):
    """
    Base exception for boundary-representation errors.

    Provides structured error information including:
    - Clear error description
    - Component (class) that raised it
    - Suggested actions for resolution
    - Optional diagnostic data
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        suggested_action: str | None = None,
        error_code: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.component = component or "BRep"
        self.suggested_action = suggested_action
        self.error_code = error_code
        self.diagnostic_data = diagnostic_data or {}

        full_message = f"[{self.component}] {message}"

        if self.suggested_action:
            full_message += f"\nSuggestion: {self.suggested_action}"

        if self.error_code:
            full_message += f"\nError Code: {self.error_code}"

        if self.diagnostic_data:
            full_message += "\nDiagnostic Information:"
            for key, value in self.diagnostic_data.items():
                full_message += f"\n   - {key}: {value}"

        super().__init__(full_message)


class UnimplementedCapabilityError(BRepError, NotImplementedError):
    """Raised when an optional capability is invoked on a type that does not supply it."""

    def __init__(self, capability: str, component: str | None = None):
        self.capability = capability

        super().__init__(
            message=f"Capability '{capability}' is not implemented",
            component=component,
            suggested_action=f"Use a shape that provides '{capability}' or override it in {component or 'the subclass'}",
            error_code="UNIMPLEMENTED_CAPABILITY",
            diagnostic_data={"capability": capability},
        )


class DegenerateClassificationError(BRepError):
    """
    Raised when a sample set has neither a strictly inside nor a strictly outside point.

    Boundary-only samples never decide between IN and OUT, so no status is produced.
    """

    def __init__(
        self,
        points: Any,
        partition_sizes: dict[str, int],
        tolerance: float,
        component: str | None = None,
    ):
        self.points = points
        self.partition_sizes = dict(partition_sizes)
        self.tolerance = tolerance

        diagnostic_data: dict[str, Any] = {f"{name}_count": size for name, size in partition_sizes.items()}
        diagnostic_data["tolerance"] = f"{tolerance:.3e}"
        diagnostic_data["points"] = _format_points(points)

        super().__init__(
            message="The geometry is degenerate: no sample point is strictly inside or strictly outside",
            component=component,
            suggested_action=_generate_degenerate_suggestions(partition_sizes, tolerance),
            error_code="DEGENERATE_CLASSIFICATION",
            diagnostic_data=diagnostic_data,
        )


class PreconditionViolationError(BRepError, ValueError):
    """Raised immediately when a call violates its documented precondition."""

    def __init__(
        self,
        operation: str,
        reason: str,
        component: str | None = None,
        diagnostic_data: dict[str, Any] | None = None,
    ):
        self.operation = operation
        self.reason = reason

        super().__init__(
            message=f"Precondition of '{operation}' violated: {reason}",
            component=component,
            error_code="PRECONDITION_VIOLATION",
            diagnostic_data=diagnostic_data,
        )


class InvalidConfigurationError(BRepError, ValueError):
    """Raised when a parameter (configuration selector, tolerance, shape size) is out of range."""

    def __init__(
        self,
        parameter_name: str,
        provided_value: Any,
        valid_values: tuple | None = None,
        valid_range: tuple | None = None,
        component: str | None = None,
    ):
        self.parameter_name = parameter_name
        self.provided_value = provided_value

        diagnostic_data = {
            "parameter": parameter_name,
            "provided_value": str(provided_value),
            "provided_type": type(provided_value).__name__,
        }

        if valid_values:
            diagnostic_data["valid_values"] = ", ".join(str(v) for v in valid_values)

        if valid_range:
            diagnostic_data["valid_range"] = f"[{valid_range[0]}, {valid_range[1]}]"

        suggested_action = _generate_configuration_suggestions(parameter_name, provided_value, valid_values, valid_range)

        super().__init__(
            message=f"Invalid value for parameter '{parameter_name}'",
            component=component,
            suggested_action=suggested_action,
            error_code="INVALID_CONFIGURATION",
            diagnostic_data=diagnostic_data,
        )


class NonConvergenceError(BRepError):
    """Raised when an iterative root search exhausts its iteration budget."""

    def __init__(
        self,
        iterations_used: int,
        max_iterations: int,
        final_residual: float,
        tolerance: float,
        component: str | None = None,
        residual_history: list[float] | None = None,
    ):
        self.iterations_used = iterations_used
        self.max_iterations = max_iterations
        self.final_residual = final_residual
        self.tolerance = tolerance

        diagnostic_data = {
            "iterations_used": iterations_used,
            "max_iterations": max_iterations,
            "final_residual": f"{final_residual:.2e}",
            "required_tolerance": f"{tolerance:.2e}",
        }

        if residual_history:
            diagnostic_data["residual_trend"] = _analyze_convergence_trend(residual_history)

        if tolerance <= 0:
            suggested_action = "A zero tolerance can never be met; use a positive tolerance"
        else:
            suggested_action = "Increase max_iterations or relax the tolerance"

        super().__init__(
            message=f"Failed to converge after {iterations_used} iterations",
            component=component,
            suggested_action=suggested_action,
            error_code="NON_CONVERGENCE",
            diagnostic_data=diagnostic_data,
        )


# Helper functions for generating specific suggestions


def _format_points(points: Any) -> str:
    try:
        rows = [", ".join(f"{c:.6g}" for c in point) for point in points]
    except TypeError:
        return str(points)
    if not rows:
        return "[]"
    return "[" + "; ".join(f"({row})" for row in rows) + "]"


def _analyze_convergence_trend(history: list[float]) -> str:
    """Analyze residual history to determine trend."""
    if len(history) < 3:
        return "insufficient_data"

    recent = history[-3:]

    if recent[-1] < recent[-2] < recent[-3]:
        return "converging_slowly"
    elif recent[-1] > recent[-2] * 1.1:
        return "diverging"
    elif max(recent) <= 1.1 * min(recent):
        return "stagnating"
    else:
        return "oscillating"


def _generate_degenerate_suggestions(partition_sizes: dict[str, int], tolerance: float) -> str:
    if sum(partition_sizes.values()) == 0:
        return "The sample set is empty; pass at least one point"
    if partition_sizes.get("on", 0) > 0:
        return f"All samples lie within the boundary band (tolerance={tolerance:.3e}); refine sampling or reduce tolerance"
    return "Check the geometry passed for classification"


def _generate_configuration_suggestions(
    parameter_name: str,
    provided_value: Any,
    valid_values: tuple | None,
    valid_range: tuple | None,
) -> str:
    """Generate specific suggestions for configuration errors."""

    suggestions = []

    if valid_values:
        suggestions.append(f"Use one of: {', '.join(str(v) for v in valid_values)}")

    if valid_range and isinstance(provided_value, (int, float)):
        if provided_value < valid_range[0]:
            suggestions.append(f"Increase {parameter_name} to at least {valid_range[0]}")
        elif provided_value > valid_range[1]:
            suggestions.append(f"Decrease {parameter_name} to at most {valid_range[1]}")

    if "tolerance" in parameter_name.lower() and isinstance(provided_value, (int, float)) and provided_value < 0:
        suggestions.append("Tolerance must be non-negative")

    return " | ".join(suggestions) if suggestions else f"Check {parameter_name} value and try again"


def validate_configuration_selector(configuration: Any, component: str | None = None) -> int:
    """Validate a CutStatus configuration selector (0 = reference, 1 = current)."""
    if (
        isinstance(configuration, bool)
        or not isinstance(configuration, numbers.Integral)
        or configuration not in (0, 1)
    ):
        raise InvalidConfigurationError(
            parameter_name="configuration",
            provided_value=configuration,
            valid_values=(0, 1),
            component=component,
        )
    return int(configuration)


def validate_tolerance(tolerance: Any, parameter_name: str = "tolerance", component: str | None = None) -> float:
    """Validate that a tolerance is a finite non-negative number."""
    try:
        value = float(tolerance)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            parameter_name=parameter_name,
            provided_value=tolerance,
            valid_range=(0, float("inf")),
            component=component,
        ) from None

    if not value >= 0 or value == float("inf"):
        raise InvalidConfigurationError(
            parameter_name=parameter_name,
            provided_value=tolerance,
            valid_range=(0, float("inf")),
            component=component,
        )
    return value
