"""
Pytest configuration and shared fixtures for ndmat tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import ndmat
from ndmat import Matrix


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def restore_config():
    """Every test starts and ends with the default global configuration."""
    previous = ndmat.set_config(ndmat.Config())
    yield
    ndmat.set_config(previous)


@pytest.fixture
def rng():
    """Deterministic numpy generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def small_matrix():
    """2x3 double matrix.

    Matrix:
    [[1, 3, 5],
     [2, 4, 6]]
    """
    return Matrix([2, 3], [1, 2, 3, 4, 5, 6])


@pytest.fixture
def cube():
    """2x3x4 double matrix holding 0..23 in column-major order."""
    return Matrix([2, 3, 4], np.arange(24.0))


@pytest.fixture
def complex_matrix():
    """2x2 complex matrix [[1+5i, 3+7i], [2+6i, 4+8i]]."""
    return Matrix([2, 2], [1, 2, 3, 4, 5, 6, 7, 8], is_complex=True)


@pytest.fixture
def random_image(rng):
    """12x10x3 double image with values in [0, 1)."""
    return Matrix.from_array(rng.random((12, 10, 3)))


@pytest.fixture
def gray_image(rng):
    """16x11 double image with values in [0, 1)."""
    return Matrix.from_array(rng.random((16, 11)))

