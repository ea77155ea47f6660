"""
Tests for the Newton system solve.
"""

import numpy as np
import pytest

from nypc_perf.core import solve_newton_system
from nypc_perf.core.linalg import MIN_CURVATURE
from nypc_perf.exceptions import IdentifiabilityError


def test_positive_definite():
    """Test a diagonal positive definite system."""
    step = solve_newton_system(np.diag([2.0, 4.0]), np.array([2.0, 4.0]))
    assert np.allclose(step, [1.0, 1.0])


def test_dense_positive_definite():
    """Test a dense system against numpy's solver."""
    info = np.array([[4.0, -1.0, -1.0], [-1.0, 3.0, -1.0], [-1.0, -1.0, 2.5]])
    gradient = np.array([1.0, -2.0, 0.5])
    step = solve_newton_system(info, gradient)
    assert np.allclose(info @ step, gradient)


def test_zero_row_is_excluded():
    """Test that unconstrained rows get a zero step."""
    info = np.array([[0.0, 0.0], [0.0, 2.0]])
    step = solve_newton_system(info, np.array([0.0, 1.0]))
    assert step[0] == 0.0
    assert step[1] == pytest.approx(0.5)


def test_all_rows_excluded():
    """Test a system where no row is constrained."""
    step = solve_newton_system(np.zeros((2, 2)), np.zeros(2))
    assert step.tolist() == [0.0, 0.0]


def test_empty_system():
    """Test a system with no unknowns."""
    step = solve_newton_system(np.zeros((0, 0)), np.zeros(0))
    assert step.shape == (0,)


def test_indefinite_falls_back():
    """Test that a non-singular indefinite matrix is still solved."""
    info = np.array([[1.0, 2.0], [2.0, 1.0]])
    step = solve_newton_system(info, np.array([3.0, 3.0]))
    assert np.allclose(step, [1.0, 1.0])


def test_singular_raises():
    """Test that a singular system is reported."""
    info = np.array([[1.0, 1.0], [1.0, 1.0]])
    with pytest.raises(IdentifiabilityError):
        solve_newton_system(info, np.array([1.0, 1.0]))


def test_masked_row_with_zero_curvature():
    """Test that a constrained row with zero curvature still gets a step."""
    step = solve_newton_system(np.zeros((1, 1)), np.array([-5.0]), mask=np.array([True]))
    assert step[0] == pytest.approx(-5.0 / MIN_CURVATURE)


def test_mask_excludes_rows():
    """Test that rows outside the mask get a zero step."""
    info = np.diag([2.0, 4.0])
    step = solve_newton_system(info, np.array([2.0, 4.0]), mask=np.array([False, True]))
    assert step[0] == 0.0
    assert step[1] == pytest.approx(1.0)
