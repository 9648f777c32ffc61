"""
Small solver drivers used to exercise stop criteria end to end.
"""

from typing import Optional, Tuple

import numpy as np

from stopcriteria import IterationStatus, StopCriterion


def dense(n: int, value, dtype=np.float64) -> np.ndarray:
    return np.full(n, value, dtype=dtype)


def spd_matrix(n: int, seed: int = 0, complex_valued: bool = False) -> np.ndarray:
    """Well conditioned symmetric (Hermitian) positive definite matrix."""
    rng = np.random.default_rng(seed)
    M = rng.standard_normal((n, n))
    if complex_valued:
        M = M + 1j * rng.standard_normal((n, n))
    return M @ M.conj().T + n * np.eye(n)


def conjugate_gradient(A: np.ndarray,
                       b: np.ndarray,
                       criterion: StopCriterion,
                       x0: Optional[np.ndarray] = None) -> Tuple[np.ndarray, int, IterationStatus]:
    """
    Conjugate Gradient driven by a stop criterion.

    1. r = b - A @ x, d = r
    2. α = (r^H r) / (d^H A d)
    3. x = x + α d, r = r - α A d
    4. β = (r_new^H r_new) / (r^H r), d = r_new + β d
    """
    x = np.zeros_like(b) if x0 is None else x0.copy()
    r = b - A @ x
    d = r.copy()
    rTr = np.vdot(r, r)

    iteration = 0
    status = criterion.determine_status(iteration, x, r, b)
    while status is IterationStatus.CONTINUE:
        Ad = A @ d
        alpha = rTr / np.vdot(d, Ad)
        x = x + alpha * d
        r = r - alpha * Ad
        rTr_new = np.vdot(r, r)
        d = r + (rTr_new / rTr) * d
        rTr = rTr_new
        iteration += 1
        status = criterion.determine_status(iteration, x, r, b)
    return x, iteration, status


def richardson(A: np.ndarray,
               b: np.ndarray,
               criterion: StopCriterion,
               omega: float) -> Tuple[np.ndarray, int, IterationStatus]:
    """Richardson iteration x = x + ω r; diverges when ω is too large."""
    x = np.zeros_like(b)
    r = b - A @ x
    iteration = 0
    status = criterion.determine_status(iteration, x, r, b)
    while status is IterationStatus.CONTINUE:
        x = x + omega * r
        r = b - A @ x
        iteration += 1
        status = criterion.determine_status(iteration, x, r, b)
    return x, iteration, status
