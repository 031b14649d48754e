"""
Pytest configuration and shared fixtures for the brep_levelset test suite.

This module provides common fixtures, test configuration, and utilities
used across the entire test suite.
"""

import logging

import pytest

import numpy as np

from brep_levelset import CircularLevelSet, ElementGeometry, SphericalLevelSet
from brep_levelset.config import reset_default_config

# =============================================================================
# Test Configuration
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, cross-component)")
    config.addinivalue_line("markers", "mathematical: Mathematical property validation tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test paths."""
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the built-in default configuration."""
    reset_default_config()
    yield
    reset_default_config()


class RecordingHandler(logging.Handler):
    """Collects formatted records in memory."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record):
        self.messages.append(record.getMessage())


@pytest.fixture
def record_logger():
    """Attach a RecordingHandler to a named logger for the duration of a test."""
    attached = []

    def attach(name: str) -> RecordingHandler:
        handler = RecordingHandler()
        logging.getLogger(name).addHandler(handler)
        attached.append((name, handler))
        return handler

    yield attach

    for name, handler in attached:
        logging.getLogger(name).removeHandler(handler)


# =============================================================================
# Shape Fixtures
# =============================================================================


@pytest.fixture
def circle5():
    """Circle centered at the origin with radius 5."""
    return CircularLevelSet(0.0, 0.0, 5.0)


@pytest.fixture
def unit_circle():
    return CircularLevelSet(0.0, 0.0, 1.0)


@pytest.fixture
def sphere2():
    """Sphere centered at the origin with radius 2."""
    return SphericalLevelSet(0.0, 0.0, 0.0, 2.0)


@pytest.fixture
def sample_grid():
    """Grid of 3D points covering [-3, 3]^2 x [-1, 1], avoiding the origin."""
    xs = np.linspace(-3.0, 3.0, 7) + 0.05
    zs = np.linspace(-1.0, 1.0, 3) + 0.05
    return np.array([[x, y, z] for x in xs for y in xs for z in zs])


# =============================================================================
# Element Fixtures
# =============================================================================


@pytest.fixture
def unit_quad():
    """Quadrilateral [0, 1]^2."""
    return ElementGeometry("quadrilateral", [[0, 0], [1, 0], [1, 1], [0, 1]])


@pytest.fixture
def unit_tet():
    return ElementGeometry("tetrahedron", [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]])
