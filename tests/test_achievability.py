"""
Tests for the achievability (precision floor) criterion.
"""

import numpy as np
import pytest

from stopcriteria import AchievabilityCriterion, ConfigurationError, InvocationError, IterationStatus
from helpers import dense


def test_residual_on_floor_with_unreachable_target_is_indeterminate():
    criterion = AchievabilityCriterion(tolerance=1e-17)
    x, b = dense(3, 1.0), dense(3, 1.0)

    # floor = 10 * eps * 2 * sqrt(3) ~ 7.7e-15, target ~ 1.7e-17
    assert criterion.determine_status(0, x, dense(3, 1e-3), b) is IterationStatus.CONTINUE
    assert criterion.determine_status(1, x, dense(3, 1e-15), b) is IterationStatus.INDETERMINATE


def test_reachable_target_never_indeterminate():
    criterion = AchievabilityCriterion(tolerance=1e-10)
    x, b = dense(3, 1.0), dense(3, 1.0)
    assert criterion.determine_status(0, x, dense(3, 1e-15), b) is IterationStatus.CONTINUE


def test_target_met_is_left_to_residual_criterion():
    criterion = AchievabilityCriterion(tolerance=1e-17)
    x, b = dense(3, 1.0), dense(3, 1.0)
    assert criterion.determine_status(0, x, np.zeros(3), b) is IterationStatus.CONTINUE


def test_floor_depends_on_precision():
    criterion = AchievabilityCriterion(tolerance=1e-8)
    x32, b32 = dense(3, 1.0, np.float32), dense(3, 1.0, np.float32)
    x64, b64 = dense(3, 1.0, np.float64), dense(3, 1.0, np.float64)

    # float32: floor ~ 4.1e-6 above the target ~ 1.7e-8
    status32 = criterion.clone().determine_status(0, x32, dense(3, 1e-6, np.float32), b32)
    # float64: floor ~ 7.7e-15, target reachable
    status64 = criterion.clone().determine_status(0, x64, dense(3, 1e-6, np.float64), b64)

    assert status32 is IterationStatus.INDETERMINATE
    assert status64 is IterationStatus.CONTINUE


def test_half_precision_uses_half_epsilon():
    criterion = AchievabilityCriterion(tolerance=1e-6)
    x = dense(3, 1.0, np.float16)

    # floor = 10 * 9.8e-4 * 2 * sqrt(3) ~ 3.4e-2
    assert criterion.precision_floor(x, x) > 1e-2
    assert criterion.determine_status(0, x, dense(3, 1e-3, np.float16), x) is IterationStatus.INDETERMINATE


def test_complex_single_uses_single_epsilon():
    criterion = AchievabilityCriterion(tolerance=1e-8)
    x = dense(3, 1.0 + 0j, np.complex64)
    status = criterion.determine_status(0, x, dense(3, 1e-6j, np.complex64), x)
    assert status is IterationStatus.INDETERMINATE


def test_precision_floor_value():
    criterion = AchievabilityCriterion(safety_factor=4.0, operator_norm=2.0)
    x, b = np.array([3.0, 4.0]), np.array([0.0, 1.0])

    expected = 4.0 * np.finfo(np.float64).eps * (1.0 + 2.0 * 5.0)

    assert criterion.precision_floor(x, b) == pytest.approx(expected)


def test_zero_problem_is_never_indeterminate():
    criterion = AchievabilityCriterion(tolerance=1e-17)
    zero = np.zeros(3)
    assert criterion.determine_status(0, zero, zero, zero) is IterationStatus.CONTINUE
    assert criterion.target(zero) == 1e-17


def test_non_finite_input_continues():
    criterion = AchievabilityCriterion(tolerance=1e-17)
    x = np.array([np.inf, 1.0, 1.0])
    assert criterion.determine_status(0, x, dense(3, 1e-20), dense(3, 1.0)) is IterationStatus.CONTINUE


@pytest.mark.parametrize("kwargs", [
    {'tolerance': 0.0},
    {'safety_factor': 0.5},
    {'operator_norm': 0.0},
    {'operator_norm': -2.0},
    {'norm_order': -1},
])
def test_invalid_configuration_raises(kwargs):
    with pytest.raises(ConfigurationError):
        AchievabilityCriterion(**kwargs)


def test_reset_and_clone():
    criterion = AchievabilityCriterion(tolerance=1e-17, safety_factor=20.0, operator_norm=3.0)
    x, b = dense(3, 1.0), dense(3, 1.0)
    criterion.determine_status(0, x, dense(3, 1e-15), b)
    assert criterion.status is IterationStatus.INDETERMINATE

    clone = criterion.clone()
    assert clone.status is IterationStatus.CONTINUE
    assert (clone.tolerance, clone.safety_factor, clone.operator_norm) == (1e-17, 20.0, 3.0)

    criterion.reset()
    assert criterion.status is IterationStatus.CONTINUE
    assert criterion.safety_factor == 20.0


@pytest.mark.parametrize("bad", [None, ["a", "b"]])
def test_floor_and_target_reject_non_numeric_input(bad):
    criterion = AchievabilityCriterion()
    with pytest.raises(InvocationError):
        criterion.precision_floor(bad, np.ones(2))
    with pytest.raises(InvocationError):
        criterion.precision_floor(np.ones(2), bad)
    with pytest.raises(InvocationError):
        criterion.target(bad)
