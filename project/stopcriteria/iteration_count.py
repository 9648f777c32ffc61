"""
Iteration Count Criterion
=========================

Stops the solver once a fixed number of iterations has been performed,
regardless of the residual.
"""

from typing import Tuple

import numpy as np

from .base import StopCriterion
from .config import DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS, check_non_negative_int
from .status import IterationStatus


class IterationCountCriterion(StopCriterion):
    """
    Report STOPPED_WITHOUT_CONVERGENCE when iteration >= maximum.

    The criterion has no rolling state of its own; it still honours
    reset/clone/status like every other criterion. reset() clears the
    evaluation state only, reset_maximum_number_of_iterations_to_default()
    changes the configuration only.
    """

    name = "Iteration Count"
    DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS = DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS

    def __init__(self, maximum_number_of_iterations: int = DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS):
        """
        Parameters
        ----------
        maximum_number_of_iterations : int
            Iteration index at which to stop (>= 0)
        """
        super().__init__()
        self._maximum = check_non_negative_int('maximum_number_of_iterations',
                                               maximum_number_of_iterations)

    @property
    def maximum_number_of_iterations(self) -> int:
        return self._maximum

    @maximum_number_of_iterations.setter
    def maximum_number_of_iterations(self, value: int):
        self._maximum = check_non_negative_int('maximum_number_of_iterations', value)

    def reset_maximum_number_of_iterations_to_default(self):
        self._maximum = self.DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: None) -> Tuple[IterationStatus, None]:
        if iteration >= self._maximum:
            return IterationStatus.STOPPED_WITHOUT_CONVERGENCE, None
        return IterationStatus.CONTINUE, None

    def clone(self) -> "IterationCountCriterion":
        return IterationCountCriterion(self._maximum)

    def _config_repr(self) -> str:
        return f"maximum_number_of_iterations={self._maximum}"
