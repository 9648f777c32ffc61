"""
End-to-end tests: stop criteria driving real iterative solvers.

Reference solutions come from scipy's direct solver (LAPACK).
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from scipy.linalg import solve as direct_solve

from stopcriteria import (
    AchievabilityCriterion,
    CompositeEvaluator,
    DivergenceCriterion,
    FailureCriterion,
    IterationCountCriterion,
    IterationStatus,
    ResidualNormCriterion,
    build_evaluator,
)
from helpers import conjugate_gradient, richardson, spd_matrix


def _standard_evaluator(tolerance=1e-10, max_iterations=200, **kwargs):
    return CompositeEvaluator([
        IterationCountCriterion(max_iterations),
        ResidualNormCriterion(tolerance=tolerance),
        DivergenceCriterion(),
        FailureCriterion(),
    ], **kwargs)


@pytest.mark.parametrize("complex_valued", [False, True])
def test_cg_converges_to_reference_solution(complex_valued):
    n = 20
    A = spd_matrix(n, seed=1, complex_valued=complex_valued)
    rng = np.random.default_rng(2)
    b = rng.standard_normal(n) + (1j * rng.standard_normal(n) if complex_valued else 0)

    evaluator = _standard_evaluator(record_history=True)
    x, iterations, status = conjugate_gradient(A, b, evaluator)

    assert status is IterationStatus.CONVERGED
    assert isinstance(evaluator.deciding_criterion, ResidualNormCriterion)
    assert iterations < 200
    x_ref = direct_solve(A, b, assume_a='pos' if not complex_valued else 'her')
    assert np.allclose(x, x_ref, rtol=1e-7, atol=1e-9)
    assert np.linalg.norm(b - A @ x) <= 1e-9 * np.linalg.norm(b)

    df = evaluator.history.to_dataframe()
    assert len(df) == iterations + 1
    assert df['status'].iloc[-1] == 'converged'


def test_cg_stops_at_iteration_limit():
    A = spd_matrix(30, seed=3)
    b = np.ones(30)

    x, iterations, status = conjugate_gradient(A, b, _standard_evaluator(max_iterations=2))

    assert status is IterationStatus.STOPPED_WITHOUT_CONVERGENCE
    assert iterations == 2


def test_richardson_with_large_step_diverges():
    A = 3.0 * np.eye(5)
    b = np.ones(5)
    evaluator = CompositeEvaluator([
        IterationCountCriterion(100),
        ResidualNormCriterion(tolerance=1e-10),
        DivergenceCriterion(window_length=3),
    ])

    # r_{k+1} = (1 - 3ω) r_k = -2 r_k
    _, iterations, status = richardson(A, b, evaluator, omega=1.0)

    assert status is IterationStatus.DIVERGED
    assert iterations == 3
    assert isinstance(evaluator.deciding_criterion, DivergenceCriterion)


def test_unreachable_tolerance_ends_indeterminate():
    A = spd_matrix(10, seed=4)
    b = np.ones(10)
    evaluator = CompositeEvaluator([
        IterationCountCriterion(500),
        ResidualNormCriterion(tolerance=1e-20),
        AchievabilityCriterion(tolerance=1e-20, safety_factor=100.0,
                               operator_norm=float(np.linalg.norm(A, 2))),
        FailureCriterion(),
    ])

    _, iterations, status = conjugate_gradient(A, b, evaluator)

    assert status is IterationStatus.INDETERMINATE
    assert iterations < 500


def test_reused_evaluator_after_reset_gives_same_result():
    A = spd_matrix(15, seed=5)
    b = np.arange(1.0, 16.0)
    evaluator = _standard_evaluator()

    x1, it1, status1 = conjugate_gradient(A, b, evaluator)
    evaluator.reset()
    x2, it2, status2 = conjugate_gradient(A, b, evaluator)

    assert status1 is status2 is IterationStatus.CONVERGED
    assert it1 == it2
    assert np.array_equal(x1, x2)


def test_clones_run_independently_in_parallel():
    A = spd_matrix(25, seed=6)
    rng = np.random.default_rng(7)
    rhs = [rng.standard_normal(25) for _ in range(4)]
    template = build_evaluator({
        'iteration_count': {'maximum_number_of_iterations': 300},
        'residual_norm': {'tolerance': 1e-10},
        'divergence': {},
        'failure': {},
    })

    def solve(b):
        return conjugate_gradient(A, b, template.clone())

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(solve, rhs))

    for b, (x, _, status) in zip(rhs, results):
        assert status is IterationStatus.CONVERGED
        assert np.allclose(x, direct_solve(A, b, assume_a='pos'), rtol=1e-7, atol=1e-9)
    assert template.status is IterationStatus.CONTINUE
    assert all(c.status is IterationStatus.CONTINUE for c in template.criteria)
