"""
Failure criterion: stops on NaN or infinite entries in the iterate or the
residual. Such values never recover, so the run is reported as DIVERGED.
"""

from typing import Tuple

import numpy as np

from .base import StopCriterion
from .scalars import field_of
from .status import IterationStatus


class FailureCriterion(StopCriterion):
    """Report DIVERGED as soon as x_k or r_k holds a non-finite value."""

    name = "Failure"

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: None) -> Tuple[IterationStatus, None]:
        field = field_of(solution, residual)
        if field.is_finite(solution) and field.is_finite(residual):
            return IterationStatus.CONTINUE, None
        return IterationStatus.DIVERGED, None

    def clone(self) -> "FailureCriterion":
        return FailureCriterion()
