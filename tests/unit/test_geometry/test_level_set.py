"""
Unit tests for the LevelSet base: banded classification, bisection and normals.

Tests include:
- Three-way classification with a tolerance band
- Degenerate sample sets (empty, boundary-only)
- Bisection correctness, precondition and iteration cap
- Generic normal and boundary queries for every shape
"""

from __future__ import annotations

import pytest

import numpy as np

from brep_levelset.config import BRepConfig, set_default_config
from brep_levelset.geometry import (
    CircularLevelSet,
    CutStatus,
    ImplicitFunction,
    InverseLevelSet,
    LevelSet,
    SphericalLevelSet,
)
from brep_levelset.utils.exceptions import (
    DegenerateClassificationError,
    InvalidConfigurationError,
    NonConvergenceError,
    PreconditionViolationError,
    UnimplementedCapabilityError,
)


class PlaneLevelSet(LevelSet):
    """φ = x - offset; supplies only what LevelSet requires."""

    def __init__(self, offset=0.0, tolerance=None):
        super().__init__(tolerance)
        self.offset = offset

    def clone(self):
        return PlaneLevelSet(self.offset, self.tolerance)

    def working_space_dimension(self):
        return 3

    def get_value(self, point):
        points, is_single = self._as_batch(point)
        values = points[:, 0] - self.offset
        return float(values[0]) if is_single else values

    def get_gradient(self, point):
        points, is_single = self._as_batch(point)
        gradients = np.zeros_like(points)
        gradients[:, 0] = 1.0
        return gradients[0] if is_single else gradients


def all_shapes():
    return [
        CircularLevelSet(0.0, 0.0, 5.0),
        CircularLevelSet(1.5, -2.0, 0.75),
        SphericalLevelSet(0.0, 0.0, 0.0, 2.0),
        SphericalLevelSet(-1.0, 0.5, 2.0, 1.25),
        InverseLevelSet(CircularLevelSet(0.0, 0.0, 1.0)),
        InverseLevelSet(SphericalLevelSet(1.0, 1.0, 1.0, 0.5)),
        PlaneLevelSet(0.25),
    ]


def anchor(shape):
    """Center of the shape and its length scale."""
    inner = shape.level_set if isinstance(shape, InverseLevelSet) else shape
    if isinstance(inner, PlaneLevelSet):
        return np.array([inner.offset, 0.0, 0.0]), 1.0
    center = np.zeros(3)
    center[: len(inner.center)] = inner.center
    return center, inner.radius


class TestImplicitFunction:
    """Value/gradient evaluation conventions."""

    @pytest.mark.parametrize("shape", all_shapes(), ids=lambda s: s.info())
    def test_level_sets_are_implicit_functions(self, shape):
        assert isinstance(shape, ImplicitFunction)

    def test_single_and_batch_evaluation_agree(self, sample_grid):
        for shape in all_shapes():
            batch = shape.get_value(sample_grid)
            single = np.array([shape.get_value(p) for p in sample_grid])
            assert batch.shape == (len(sample_grid),)
            np.testing.assert_array_equal(batch, single)

            gradients = shape.get_gradient(sample_grid)
            assert gradients.shape == (len(sample_grid), 3)
            np.testing.assert_array_equal(gradients[3], shape.get_gradient(sample_grid[3]))

    def test_value_at_and_call(self, circle5):
        assert circle5.value_at(3.0, 4.0) == 0.0
        assert circle5([1.0, 0.0, 0.0]) == -24.0
        np.testing.assert_array_equal(circle5.gradient_at(1.0, 2.0, 3.0), [2.0, 4.0, 0.0])

    def test_two_coordinate_points_padded(self, sphere2):
        assert sphere2.get_value([1.0, 1.0]) == sphere2.get_value([1.0, 1.0, 0.0])

    def test_malformed_point_rejected(self, circle5):
        with pytest.raises(ValueError):
            circle5.is_inside([1.0, 2.0, 3.0, 4.0])

    def test_gradient_derivatives_default_unimplemented(self):
        with pytest.raises(UnimplementedCapabilityError):
            PlaneLevelSet().get_gradient_derivatives([0.0, 0.0, 0.0])
        with pytest.raises(UnimplementedCapabilityError):
            PlaneLevelSet().get_normal_derivatives([0.0, 0.0, 0.0])


class TestBoundaryQueries:
    """is_inside / is_on_boundary derived from φ."""

    def test_is_inside(self, circle5):
        assert circle5.is_inside([0.0, 0.0, 0.0])
        assert not circle5.is_inside([5.0, 0.0, 0.0])
        assert not circle5.is_inside([6.0, 0.0, 0.0])

    def test_is_on_boundary_band(self, circle5):
        # φ(5.001, 0) ≈ 0.010001
        assert circle5.is_on_boundary([5.001, 0.0, 0.0], 0.1)
        assert not circle5.is_on_boundary([5.001, 0.0, 0.0], 1e-3)

    @pytest.mark.parametrize("tol", [0.0, 1e-300, 1e-10, 1.0, 1e6])
    def test_exact_zero_is_on_boundary_for_every_tolerance(self, tol):
        points = {
            "circle": (CircularLevelSet(0.0, 0.0, 5.0), [5.0, 0.0, 0.0]),
            "circle_345": (CircularLevelSet(0.0, 0.0, 5.0), [3.0, 4.0, 7.0]),
            "sphere": (SphericalLevelSet(0.0, 0.0, 0.0, 2.0), [0.0, 0.0, 2.0]),
            "inverse": (InverseLevelSet(CircularLevelSet(1.0, 1.0, 1.0)), [2.0, 1.0, 0.0]),
            "plane": (PlaneLevelSet(0.5), [0.5, 3.0, -1.0]),
        }
        for shape, point in points.values():
            assert shape.get_value(point) == 0.0
            assert shape.is_on_boundary(point, tol)

    def test_negative_tolerance_rejected(self, circle5):
        with pytest.raises(InvalidConfigurationError):
            circle5.is_on_boundary([5.0, 0.0, 0.0], -1.0)

    def test_normal_is_unnormalized_gradient(self, circle5, sphere2):
        np.testing.assert_array_equal(circle5.get_normal([3.0, 4.0, 1.0]), [6.0, 8.0, 0.0])
        np.testing.assert_array_equal(sphere2.get_normal([0.0, 0.0, 2.0]), [0.0, 0.0, 4.0])
        np.testing.assert_array_equal(PlaneLevelSet().get_normal([7.0, 1.0, 1.0]), [1.0, 0.0, 0.0])

    def test_normal_derivatives_are_gradient_derivatives(self, circle5):
        np.testing.assert_array_equal(
            circle5.get_normal_derivatives([1.0, 1.0, 0.0]),
            circle5.get_gradient_derivatives([1.0, 1.0, 0.0]),
        )


class TestBandedClassification:
    """In/out/on buckets and the degenerate case."""

    def test_circle_all_inside(self, circle5):
        assert circle5.cut_status([[0, 0, 0], [1, 0, 0], [0, 1, 0]]) is CutStatus.IN

    def test_circle_all_outside(self, circle5):
        assert circle5.cut_status([[10, 0, 0], [20, 0, 0], [0, 30, 0]]) is CutStatus.OUT

    def test_circle_mixed_is_cut(self, circle5):
        assert circle5.cut_status([[0, 0, 0], [10, 0, 0]]) is CutStatus.CUT

    def test_on_band_points_do_not_decide(self, circle5):
        assert circle5.cut_status([[0, 0, 0], [5, 0, 0]]) is CutStatus.IN
        assert circle5.cut_status([[10, 0, 0], [5, 0, 0]]) is CutStatus.OUT

    def test_explicit_band_width(self, circle5):
        # φ = -0.99 and +1.01: both inside the band of half-width 2
        points = [[np.sqrt(24.01), 0, 0], [np.sqrt(26.01), 0, 0], [0, 0, 0]]
        assert circle5.banded_cut_status_of_points(points, tolerance=2.0) is CutStatus.IN
        assert circle5.banded_cut_status_of_points(points, tolerance=0.5) is CutStatus.CUT

    def test_cut_status_uses_instance_tolerance(self, circle5):
        points = [[0, 0, 0], [5.01, 0, 0]]  # φ ≈ 0.1001
        assert circle5.cut_status(points) is CutStatus.CUT
        circle5.set_tolerance(0.2)
        assert circle5.cut_status(points) is CutStatus.IN

    def test_boundary_only_samples_are_degenerate(self, circle5, record_logger):
        handler = record_logger("brep_levelset.geometry.level_set.level_set")
        points = [[5, 0, 0], [0, 5, 0], [3, 4, 0]]

        with pytest.raises(DegenerateClassificationError) as exc_info:
            circle5.cut_status(points)

        error = exc_info.value
        assert error.partition_sizes == {"inside": 0, "outside": 0, "on": 3}
        assert error.error_code == "DEGENERATE_CLASSIFICATION"
        assert error.tolerance == circle5.tolerance
        assert "within the boundary band" in error.suggested_action
        assert any("on_count = 3" in message for message in handler.messages)
        assert sum("point[" in message for message in handler.messages) == 3

    def test_empty_point_set_is_degenerate(self, circle5):
        with pytest.raises(DegenerateClassificationError) as exc_info:
            circle5.cut_status([])
        assert exc_info.value.partition_sizes == {"inside": 0, "outside": 0, "on": 0}

    def test_nan_values_fall_in_the_band(self):
        class NanLevelSet(PlaneLevelSet):
            def get_value(self, point):
                points, is_single = self._as_batch(point)
                values = np.full(len(points), np.nan)
                return float(values[0]) if is_single else values

        with pytest.raises(DegenerateClassificationError):
            NanLevelSet().cut_status([[0, 0, 0], [1, 0, 0]])

    def test_single_point_level_set_agrees_with_exact(self):
        class ScalarPlane(PlaneLevelSet):
            def get_value(self, point):
                x, y, z = point
                return x - self.offset

        plane = ScalarPlane(0.3)
        points = [[0, 0, 0], [1, 0, 0], [2, 0, 0]]

        assert plane.cut_status_of_points(points) is CutStatus.CUT
        assert plane.cut_status(points) is CutStatus.CUT
        assert plane.banded_cut_status_of_points([[1, 0, 0], [2, 0, 0], [3, 0, 0]]) is CutStatus.OUT


class TestBisection:
    """Root finding along a segment."""

    def test_bisection_finds_circle_crossing(self):
        circle = CircularLevelSet(0.0, 0.0, 0.1)
        p1 = np.array([0.0, 0.0, 0.0])
        p2 = np.array([1.0, 0.0, 0.0])

        root = circle.bisect(p1, p2, 1e-6)

        assert abs(circle.get_value(root)) < 1e-6
        assert root[0] == pytest.approx(0.1, abs=1e-5)
        np.testing.assert_array_equal(root[1:], [0.0, 0.0])

    @pytest.mark.parametrize("shape", all_shapes(), ids=lambda s: s.info())
    def test_bisection_result_on_segment(self, shape):
        """For any sign-changing segment the result is a root on the segment."""
        rng = np.random.default_rng(7)
        center, scale = anchor(shape)
        tol = 1e-8
        found = 0
        for _ in range(40):
            p1 = center + scale * rng.uniform(-0.5, 0.5, size=3)
            r, theta, z = rng.uniform(1.5, 3.0), rng.uniform(0.0, 2.0 * np.pi), rng.uniform(-1.0, 1.0)
            p2 = center + scale * np.array([r * np.cos(theta), r * np.sin(theta), z])
            if not shape.get_value(p1) * shape.get_value(p2) < 0.0:
                continue
            root = shape.bisect(p1, p2, tol)
            found += 1

            direction = p2 - p1
            t = np.dot(root - p1, direction) / np.dot(direction, direction)
            assert -1e-12 <= t <= 1.0 + 1e-12
            np.testing.assert_allclose(root, p1 + t * direction, atol=1e-9)

            # The bracket stop bounds the error in t, so |φ| scales with dφ/dt
            slope = abs(np.dot(shape.get_gradient(root), direction))
            assert abs(shape.get_value(root)) < tol * max(1.0, 2.0 * slope)
        assert found > 0

    def test_endpoint_order_does_not_matter(self, unit_circle):
        a = unit_circle.bisect([0, 0, 0], [3, 0, 0], 1e-9)
        b = unit_circle.bisect([3, 0, 0], [0, 0, 0], 1e-9)
        assert a[0] == pytest.approx(1.0, abs=1e-8)
        assert b[0] == pytest.approx(1.0, abs=1e-8)

    @pytest.mark.parametrize(
        ("p1", "p2"),
        [
            ([0, 0, 0], [0.5, 0, 0]),  # both inside
            ([2, 0, 0], [3, 0, 0]),  # both outside
            ([1, 0, 0], [3, 0, 0]),  # end point exactly on the boundary
        ],
    )
    def test_same_sign_end_points_fail_fast(self, unit_circle, p1, p2):
        with pytest.raises(PreconditionViolationError) as exc_info:
            unit_circle.bisect(p1, p2, 1e-6)

        assert exc_info.value.operation == "bisect"
        assert exc_info.value.error_code == "PRECONDITION_VIOLATION"
        assert "phi(P1)" in exc_info.value.diagnostic_data

    def test_iteration_cap_reports_non_convergence(self, unit_circle, record_logger):
        handler = record_logger("brep_levelset.geometry.level_set.level_set")

        with pytest.raises(NonConvergenceError) as exc_info:
            unit_circle.bisect([0, 0, 0], [3, 0, 0], 1e-12, max_iterations=5)

        error = exc_info.value
        assert error.iterations_used == 5
        assert error.max_iterations == 5
        assert error.final_residual > 1e-12
        assert error.error_code == "NON_CONVERGENCE"
        assert any("did not converge" in message for message in handler.messages)

    def test_iteration_cap_from_config(self, unit_circle):
        set_default_config(BRepConfig(bisection={"max_iterations": 3}))
        with pytest.raises(NonConvergenceError) as exc_info:
            unit_circle.bisect([0, 0, 0], [3, 0, 0], 1e-12)
        assert exc_info.value.max_iterations == 3

    def test_zero_tolerance_terminates(self, unit_circle):
        """A tolerance that can never be met still ends, by root hit or by the cap."""
        try:
            root = unit_circle.bisect([0, 0, 0], [3, 0, 0], 0.0)
        except NonConvergenceError as error:
            assert error.max_iterations == BRepConfig().bisection.max_iterations
        else:
            assert unit_circle.get_value(root) == 0.0

    @pytest.mark.parametrize("bad", [0, -3, 2.5, True])
    def test_invalid_iteration_cap(self, unit_circle, bad):
        with pytest.raises(InvalidConfigurationError):
            unit_circle.bisect([0, 0, 0], [3, 0, 0], 1e-6, max_iterations=bad)

    def test_invalid_tolerance(self, unit_circle):
        with pytest.raises(InvalidConfigurationError):
            unit_circle.bisect([0, 0, 0], [3, 0, 0], -1e-6)

    def test_generic_level_set_bisection(self):
        plane = PlaneLevelSet(0.3)
        root = plane.bisect([0, 1, 2], [1, 1, 2], 1e-10)
        assert root[0] == pytest.approx(0.3, abs=1e-9)
        np.testing.assert_array_equal(root[1:], [1.0, 2.0])
