"""
Achievability Criterion
=======================

Detects targets that floating-point arithmetic cannot reach. Rounding in
A x and b - A x limits the attainable residual to roughly

    floor = c * eps * (||b|| + ||A|| ||x||)

with eps the machine epsilon of the scalar field and c a safety factor.
When the requested target tol * ||b|| lies below that floor and the
residual has already reached the floor, further iterations cannot help
and the criterion reports INDETERMINATE.
"""

from typing import Tuple

import numpy as np

from .base import StopCriterion
from .config import (
    DEFAULT_NORM_ORDER,
    DEFAULT_OPERATOR_NORM,
    DEFAULT_RESIDUAL_TOLERANCE,
    DEFAULT_SAFETY_FACTOR,
    check_float_at_least,
    check_norm_order,
    check_positive_float,
)
from .scalars import as_vector, field_of
from .status import IterationStatus


class AchievabilityCriterion(StopCriterion):
    """
    Report INDETERMINATE when the residual sits on the precision floor
    while the target is still below it.

    Non-finite inputs are left to the divergence and failure criteria and
    give CONTINUE here.
    """

    name = "Achievability"

    def __init__(self,
                 tolerance: float = DEFAULT_RESIDUAL_TOLERANCE,
                 safety_factor: float = DEFAULT_SAFETY_FACTOR,
                 operator_norm: float = DEFAULT_OPERATOR_NORM,
                 norm_order=DEFAULT_NORM_ORDER):
        """
        Parameters
        ----------
        tolerance : float
            Relative residual target the solver is aiming for (> 0)
        safety_factor : float
            Multiple of machine epsilon treated as the floor (>= 1)
        operator_norm : float
            Estimate of ||A|| (> 0)
        norm_order : {1, 2, numpy.inf}
            Vector norm used throughout
        """
        super().__init__()
        self._tolerance = check_positive_float('tolerance', tolerance)
        self._safety_factor = check_float_at_least('safety_factor', safety_factor, 1.0)
        self._operator_norm = check_positive_float('operator_norm', operator_norm)
        self._norm_order = check_norm_order(norm_order)

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float):
        self._tolerance = check_positive_float('tolerance', value)

    @property
    def safety_factor(self) -> float:
        return self._safety_factor

    @safety_factor.setter
    def safety_factor(self, value: float):
        self._safety_factor = check_float_at_least('safety_factor', value, 1.0)

    @property
    def operator_norm(self) -> float:
        return self._operator_norm

    @operator_norm.setter
    def operator_norm(self, value: float):
        self._operator_norm = check_positive_float('operator_norm', value)

    @property
    def norm_order(self):
        return self._norm_order

    @norm_order.setter
    def norm_order(self, value):
        self._norm_order = check_norm_order(value)

    def precision_floor(self, solution, rhs) -> float:
        """Smallest residual norm the arithmetic can be expected to deliver."""
        solution = as_vector(solution, 'solution')
        rhs = as_vector(rhs, 'rhs')
        field = field_of(solution, rhs)
        scale = (field.norm(rhs, self._norm_order)
                 + self._operator_norm * field.norm(solution, self._norm_order))
        return self._safety_factor * field.epsilon * scale

    def target(self, rhs) -> float:
        """Absolute residual target; tol itself when ||b|| is zero."""
        rhs = as_vector(rhs, 'rhs')
        rhs_norm = field_of(rhs).norm(rhs, self._norm_order)
        return self._tolerance * rhs_norm if rhs_norm > 0 else self._tolerance

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: None) -> Tuple[IterationStatus, None]:
        field = field_of(solution, residual, rhs)
        residual_norm = field.norm(residual, self._norm_order)
        floor = self.precision_floor(solution, rhs)
        target = self.target(rhs)

        if not (np.isfinite(residual_norm) and np.isfinite(floor)):
            return IterationStatus.CONTINUE, None
        if target >= floor or residual_norm <= target:
            return IterationStatus.CONTINUE, None
        if residual_norm <= floor:
            return IterationStatus.INDETERMINATE, None
        return IterationStatus.CONTINUE, None

    def clone(self) -> "AchievabilityCriterion":
        return AchievabilityCriterion(
            tolerance=self._tolerance,
            safety_factor=self._safety_factor,
            operator_norm=self._operator_norm,
            norm_order=self._norm_order,
        )

    def _config_repr(self) -> str:
        return (f"tolerance={self._tolerance}, safety_factor={self._safety_factor}, "
                f"operator_norm={self._operator_norm}, norm_order={self._norm_order}")
