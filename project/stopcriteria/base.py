"""
Base class for stop criteria.
"""

from abc import ABC, abstractmethod
from numbers import Integral
from typing import Any, Optional, Tuple

import numpy as np

from .errors import InvocationError
from .scalars import as_vector
from .status import IterationStatus


def check_iteration(iteration) -> int:
    """Validate an iteration index; raises InvocationError when unusable."""
    if isinstance(iteration, bool) or not isinstance(iteration, Integral):
        raise InvocationError(f"iteration must be an integer, got {iteration!r}")
    if iteration < 0:
        raise InvocationError(f"iteration must be >= 0, got {iteration}")
    return int(iteration)


class StopCriterion(ABC):
    """
    Abstract base class for stop criteria of iterative linear solvers.

    After every iteration the solver calls

        status = criterion.determine_status(k, x_k, r_k, b)

    and stops as soon as the status is terminal.

    Rolling state is kept as an immutable value. The base class remembers
    the state that preceded the last update, so evaluating the same
    iteration index twice gives the same answer, and an index lower than the
    previous one (a restart without reset) starts from fresh state. State is
    committed only after _evaluate returns; a failing call leaves the
    criterion untouched.
    """

    name = "StopCriterion"

    def __init__(self):
        self._status = IterationStatus.CONTINUE
        self._last_iteration: Optional[int] = None
        self._state = self._initial_state()
        self._state_before_last = self._state

    @property
    def status(self) -> IterationStatus:
        """Status computed by the last call, CONTINUE if there was none."""
        return self._status

    def determine_status(self,
                         iteration: int,
                         solution: np.ndarray,
                         residual: np.ndarray,
                         rhs: np.ndarray) -> IterationStatus:
        """
        Decide whether the solver should keep iterating.

        Parameters
        ----------
        iteration : int
            Index of the iteration just completed (>= 0)
        solution : array_like
            Current solution estimate x_k
        residual : array_like
            Current residual r_k = b - A x_k
        rhs : array_like
            Right-hand side b

        Returns
        -------
        IterationStatus
            CONTINUE or one of the terminal statuses

        Raises
        ------
        InvocationError
            If iteration is negative or not an integer, or a vector is not
            numeric. The criterion's state is unchanged in that case.
        """
        iteration = check_iteration(iteration)
        solution = as_vector(solution, 'solution')
        residual = as_vector(residual, 'residual')
        rhs = as_vector(rhs, 'rhs')

        if self._last_iteration is None or iteration > self._last_iteration:
            previous = self._state
        elif iteration == self._last_iteration:
            previous = self._state_before_last
        else:
            previous = self._initial_state()

        status, state = self._evaluate(iteration, solution, residual, rhs, previous)

        self._state_before_last = previous
        self._state = state
        self._last_iteration = iteration
        self._status = status
        return status

    @abstractmethod
    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state: Any) -> Tuple[IterationStatus, Any]:
        """
        Compute the status for one iteration.

        Must not commit its own state, the base class does that; returns
        (status, new rolling state).
        """
        pass

    def _initial_state(self) -> Any:
        """Rolling state right after construction or reset."""
        return None

    def reset(self):
        """Forget all evaluations. Configuration is kept."""
        self._status = IterationStatus.CONTINUE
        self._last_iteration = None
        self._state = self._initial_state()
        self._state_before_last = self._state

    @abstractmethod
    def clone(self) -> "StopCriterion":
        """New criterion with the same configuration and fresh state."""
        pass

    def _config_repr(self) -> str:
        return ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config_repr()})"
