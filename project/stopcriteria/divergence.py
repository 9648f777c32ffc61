"""
Divergence Criterion
====================

Watches a window of residual norms from consecutive iterations and reports
divergence when every step in the window grew by more than the allowed
relative increase:

    ||r_{k+1}|| / ||r_k|| > 1 + max_increase    for window_length steps

With a stagnation tolerance configured, a residual that barely moves is
reported as STOPPED_WITHOUT_CONVERGENCE:

    | ||r_{k+1}|| - ||r_k|| | <= stagnation_tol * ||r_k||    for window_length steps
"""

from typing import Optional, Tuple

import numpy as np

from .base import StopCriterion
from .config import (
    DEFAULT_DIVERGENCE_WINDOW,
    DEFAULT_MAXIMUM_RELATIVE_INCREASE,
    DEFAULT_NORM_ORDER,
    DEFAULT_STAGNATION_TOLERANCE,
    MINIMUM_DIVERGENCE_WINDOW,
    check_int_at_least,
    check_norm_order,
    check_optional_positive_float,
    check_positive_float,
)
from .scalars import field_of
from .status import IterationStatus


# (last iteration index, residual norms of consecutive iterations)
_History = Tuple[int, Tuple[float, ...]]


class DivergenceCriterion(StopCriterion):
    """
    Report DIVERGED when the residual keeps growing.

    A gap in the iteration index starts a new window. A non-finite residual
    norm is reported as DIVERGED straight away. Stagnation is only tested
    when stagnation_tolerance is set, and never on a window holding a zero
    norm.
    """

    name = "Divergence"

    def __init__(self,
                 maximum_relative_increase: float = DEFAULT_MAXIMUM_RELATIVE_INCREASE,
                 window_length: int = DEFAULT_DIVERGENCE_WINDOW,
                 norm_order=DEFAULT_NORM_ORDER,
                 stagnation_tolerance: Optional[float] = DEFAULT_STAGNATION_TOLERANCE):
        """
        Parameters
        ----------
        maximum_relative_increase : float
            Largest tolerated growth per iteration, e.g. 0.08 for 8% (> 0)
        window_length : int
            Number of consecutive steps that signal divergence or
            stagnation (>= 3)
        norm_order : {1, 2, numpy.inf}
            Vector norm of the residual
        stagnation_tolerance : float or None
            Largest relative change per iteration still counted as
            stagnation (> 0). None disables the stagnation test.
        """
        super().__init__()
        self._maximum_relative_increase = check_positive_float(
            'maximum_relative_increase', maximum_relative_increase)
        self._window_length = check_int_at_least(
            'window_length', window_length, MINIMUM_DIVERGENCE_WINDOW)
        self._norm_order = check_norm_order(norm_order)
        self._stagnation_tolerance = check_optional_positive_float(
            'stagnation_tolerance', stagnation_tolerance)

    @property
    def maximum_relative_increase(self) -> float:
        return self._maximum_relative_increase

    @maximum_relative_increase.setter
    def maximum_relative_increase(self, value: float):
        self._maximum_relative_increase = check_positive_float('maximum_relative_increase', value)

    @property
    def window_length(self) -> int:
        return self._window_length

    @window_length.setter
    def window_length(self, value: int):
        self._window_length = check_int_at_least('window_length', value, MINIMUM_DIVERGENCE_WINDOW)

    @property
    def norm_order(self):
        return self._norm_order

    @norm_order.setter
    def norm_order(self, value):
        self._norm_order = check_norm_order(value)

    @property
    def stagnation_tolerance(self) -> Optional[float]:
        return self._stagnation_tolerance

    @stagnation_tolerance.setter
    def stagnation_tolerance(self, value: Optional[float]):
        self._stagnation_tolerance = check_optional_positive_float('stagnation_tolerance', value)

    @property
    def residual_history(self) -> Tuple[float, ...]:
        """Residual norms currently in the window, oldest first."""
        return self._state[1]

    def _initial_state(self) -> _History:
        return (-1, ())

    def _grew(self, previous: float, current: float) -> bool:
        if previous == 0.0:
            return current > 0.0
        return current / previous > 1.0 + self._maximum_relative_increase

    def _stalled(self, previous: float, current: float) -> bool:
        if previous == 0.0:
            return False
        return abs(current - previous) <= self._stagnation_tolerance * previous

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: _History) -> Tuple[IterationStatus, _History]:
        residual_norm = field_of(residual).norm(residual, self._norm_order)

        if not np.isfinite(residual_norm):
            return IterationStatus.DIVERGED, (iteration, ())

        last_iteration, norms = state
        if iteration != last_iteration + 1:
            norms = ()
        norms = (norms + (residual_norm,))[-(self._window_length + 1):]

        if len(norms) <= self._window_length:
            return IterationStatus.CONTINUE, (iteration, norms)

        steps = list(zip(norms[:-1], norms[1:]))
        if all(self._grew(a, b) for a, b in steps):
            return IterationStatus.DIVERGED, (iteration, norms)
        if (self._stagnation_tolerance is not None
                and all(self._stalled(a, b) for a, b in steps)):
            return IterationStatus.STOPPED_WITHOUT_CONVERGENCE, (iteration, norms)
        return IterationStatus.CONTINUE, (iteration, norms)

    def clone(self) -> "DivergenceCriterion":
        return DivergenceCriterion(
            maximum_relative_increase=self._maximum_relative_increase,
            window_length=self._window_length,
            norm_order=self._norm_order,
            stagnation_tolerance=self._stagnation_tolerance,
        )

    def _config_repr(self) -> str:
        return (f"maximum_relative_increase={self._maximum_relative_increase}, "
                f"window_length={self._window_length}, norm_order={self._norm_order}, "
                f"stagnation_tolerance={self._stagnation_tolerance}")
