"""
Residual Norm Criterion
=======================

Declares convergence once the residual is small enough:

    ||r_k|| <= max(tol * d, atol)

where d is ||b|| (default), ||r_0|| or 1, depending on the normalization.
When d is zero the relative tolerance is applied as an absolute one.
"""

import warnings
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .base import StopCriterion
from .config import (
    DEFAULT_CONSECUTIVE_ITERATIONS,
    DEFAULT_NORM_ORDER,
    DEFAULT_NORMALIZATION,
    DEFAULT_RESIDUAL_TOLERANCE,
    NORMALIZATIONS,
    check_choice,
    check_int_at_least,
    check_norm_order,
    check_optional_positive_float,
)
from .errors import ConfigurationError
from .scalars import field_of
from .status import IterationStatus


class _ResidualState(NamedTuple):
    initial_norm: Optional[float] = None
    consecutive: int = 0
    warned: bool = False


class ResidualNormCriterion(StopCriterion):
    """
    Convergence test on the (optionally normalized) residual norm.

    A non-finite residual norm is reported as DIVERGED.
    """

    name = "Residual Norm"

    def __init__(self,
                 tolerance: Optional[float] = DEFAULT_RESIDUAL_TOLERANCE,
                 absolute_tolerance: Optional[float] = None,
                 normalization: str = DEFAULT_NORMALIZATION,
                 consecutive_iterations: int = DEFAULT_CONSECUTIVE_ITERATIONS,
                 norm_order=DEFAULT_NORM_ORDER):
        """
        Parameters
        ----------
        tolerance : float or None
            Relative tolerance (> 0). None disables the relative test.
        absolute_tolerance : float or None
            Absolute tolerance on ||r|| (> 0). None disables the absolute test.
        normalization : str
            Denominator of the relative test: 'rhs', 'initial_residual', 'none'
        consecutive_iterations : int
            Number of evaluations in a row that must meet the tolerance (>= 1)
        norm_order : {1, 2, numpy.inf}
            Vector norm used for residual and rhs
        """
        super().__init__()
        tolerance = check_optional_positive_float('tolerance', tolerance)
        absolute_tolerance = check_optional_positive_float('absolute_tolerance', absolute_tolerance)
        self._check_any_tolerance(tolerance, absolute_tolerance)
        self._tolerance = tolerance
        self._absolute_tolerance = absolute_tolerance
        self._normalization = check_choice('normalization', normalization, NORMALIZATIONS)
        self._consecutive_iterations = check_int_at_least(
            'consecutive_iterations', consecutive_iterations, 1)
        self._norm_order = check_norm_order(norm_order)

    @staticmethod
    def _check_any_tolerance(tolerance, absolute_tolerance):
        if tolerance is None and absolute_tolerance is None:
            raise ConfigurationError("At least one of tolerance and absolute_tolerance is required")

    @property
    def tolerance(self) -> Optional[float]:
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: Optional[float]):
        value = check_optional_positive_float('tolerance', value)
        self._check_any_tolerance(value, self._absolute_tolerance)
        self._tolerance = value

    @property
    def absolute_tolerance(self) -> Optional[float]:
        return self._absolute_tolerance

    @absolute_tolerance.setter
    def absolute_tolerance(self, value: Optional[float]):
        value = check_optional_positive_float('absolute_tolerance', value)
        self._check_any_tolerance(self._tolerance, value)
        self._absolute_tolerance = value

    @property
    def normalization(self) -> str:
        return self._normalization

    @normalization.setter
    def normalization(self, value: str):
        self._normalization = check_choice('normalization', value, NORMALIZATIONS)

    @property
    def consecutive_iterations(self) -> int:
        return self._consecutive_iterations

    @consecutive_iterations.setter
    def consecutive_iterations(self, value: int):
        self._consecutive_iterations = check_int_at_least('consecutive_iterations', value, 1)

    @property
    def norm_order(self):
        return self._norm_order

    @norm_order.setter
    def norm_order(self, value):
        self._norm_order = check_norm_order(value)

    def _initial_state(self) -> _ResidualState:
        return _ResidualState()

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: _ResidualState) -> Tuple[IterationStatus, _ResidualState]:
        field = field_of(residual, rhs)
        residual_norm = field.norm(residual, self._norm_order)

        if not np.isfinite(residual_norm):
            return IterationStatus.DIVERGED, state._replace(consecutive=0)

        initial_norm = residual_norm if state.initial_norm is None else state.initial_norm

        if self._normalization == 'rhs':
            denominator = field.norm(rhs, self._norm_order)
        elif self._normalization == 'initial_residual':
            denominator = initial_norm
        else:
            denominator = 1.0

        if not np.isfinite(denominator):
            return IterationStatus.CONTINUE, _ResidualState(initial_norm, 0, state.warned)

        # Once per reset cycle, also across repeats and restarts
        warned = state.warned or self._state.warned
        threshold = 0.0
        if self._tolerance is not None:
            if denominator > 0:
                threshold = self._tolerance * denominator
            else:
                # Zero ||b|| or ||r_0||: relative test degenerates to absolute
                threshold = self._tolerance
                if not warned:
                    warnings.warn(
                        f"{self.name}: normalization '{self._normalization}' is zero, "
                        f"applying tolerance {self._tolerance:.2e} as an absolute tolerance",
                        RuntimeWarning, stacklevel=3)
                    warned = True
        if self._absolute_tolerance is not None:
            threshold = max(threshold, self._absolute_tolerance)

        consecutive = state.consecutive + 1 if residual_norm <= threshold else 0
        if consecutive >= self._consecutive_iterations:
            status = IterationStatus.CONVERGED
        else:
            status = IterationStatus.CONTINUE
        return status, _ResidualState(initial_norm, consecutive, warned)

    def clone(self) -> "ResidualNormCriterion":
        return ResidualNormCriterion(
            tolerance=self._tolerance,
            absolute_tolerance=self._absolute_tolerance,
            normalization=self._normalization,
            consecutive_iterations=self._consecutive_iterations,
            norm_order=self._norm_order,
        )

    def _config_repr(self) -> str:
        return (f"tolerance={self._tolerance}, absolute_tolerance={self._absolute_tolerance}, "
                f"normalization={self._normalization!r}, "
                f"consecutive_iterations={self._consecutive_iterations}, "
                f"norm_order={self._norm_order}")
