"""
Composite Evaluator
===================

Combines several stop criteria into one decision per iteration. Every
member is evaluated on every call; the combined status is the most
definitive one reported:

    DIVERGED > STOPPED_WITHOUT_CONVERGENCE > CONVERGED > INDETERMINATE > CONTINUE

On a tie the criterion registered first decides.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .base import StopCriterion
from .diagnostics import EvaluationHistory, EvaluationRecord
from .errors import ConfigurationError
from .scalars import field_of
from .status import IterationStatus, resolve_statuses


class CompositeEvaluator(StopCriterion):
    """
    Ordered set of stop criteria evaluated jointly.

    The evaluator is a StopCriterion itself, so evaluators can be nested.

    Typical driver loop:

        evaluator = CompositeEvaluator([IterationCountCriterion(500),
                                        ResidualNormCriterion(1e-10)])
        k = 0
        while evaluator.determine_status(k, x, r, b) is IterationStatus.CONTINUE:
            ...  # one solver step
            k += 1
    """

    name = "Composite"

    def __init__(self,
                 criteria: Iterable[StopCriterion] = (),
                 verbose: bool = False,
                 record_history: bool = False):
        """
        Parameters
        ----------
        criteria : iterable of StopCriterion
            Initial members, in registration order
        verbose : bool
            Print the combined status of every iteration
        record_history : bool
            Keep an EvaluationRecord per iteration (see history)
        """
        self._criteria: List[StopCriterion] = []
        self.verbose = verbose
        self.record_history = record_history
        super().__init__()
        self._history = EvaluationHistory(())
        for criterion in criteria:
            self.add(criterion)

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    @property
    def criteria(self) -> Tuple[StopCriterion, ...]:
        return tuple(self._criteria)

    def __len__(self) -> int:
        return len(self._criteria)

    def __iter__(self) -> Iterator[StopCriterion]:
        return iter(tuple(self._criteria))

    def __contains__(self, criterion) -> bool:
        return any(member is criterion for member in self._criteria)

    def _reaches(self, target: "CompositeEvaluator") -> bool:
        """True if target is self or nested anywhere below self."""
        if self is target:
            return True
        return any(isinstance(member, CompositeEvaluator) and member._reaches(target)
                   for member in self._criteria)

    def add(self, criterion: StopCriterion):
        """
        Register a criterion after all existing ones.

        Raises
        ------
        ConfigurationError
            If criterion is not a StopCriterion, is already registered, or
            would make the evaluator contain itself.
        """
        if not isinstance(criterion, StopCriterion):
            raise ConfigurationError(f"Not a stop criterion: {criterion!r}")
        if criterion in self:
            raise ConfigurationError(f"{criterion!r} is already registered")
        if isinstance(criterion, CompositeEvaluator) and criterion._reaches(self):
            raise ConfigurationError("An evaluator cannot contain itself")
        self._criteria.append(criterion)
        self._membership_changed()

    def remove(self, criterion: StopCriterion):
        """Unregister a criterion; raises ConfigurationError if absent."""
        for index, member in enumerate(self._criteria):
            if member is criterion:
                del self._criteria[index]
                self._membership_changed()
                return
        raise ConfigurationError(f"{criterion!r} is not registered")

    def _membership_changed(self):
        # Combined status and history refer to the old member list
        StopCriterion.reset(self)
        self._history = EvaluationHistory(self._labels())

    def _labels(self) -> Tuple[str, ...]:
        labels = []
        for criterion in self._criteria:
            label = criterion.name
            suffix = 2
            while label in labels:
                label = f"{criterion.name} #{suffix}"
                suffix += 1
            labels.append(label)
        return tuple(labels)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def _initial_state(self):
        # (member statuses, index of deciding member, residual norm)
        return ((), None, float('nan'))

    def _evaluate(self,
                  iteration: int,
                  solution: np.ndarray,
                  residual: np.ndarray,
                  rhs: np.ndarray,
                  state) -> Tuple[IterationStatus, tuple]:
        statuses = tuple(criterion.determine_status(iteration, solution, residual, rhs)
                         for criterion in self._criteria)
        status, index = resolve_statuses(statuses)
        residual_norm = field_of(residual).norm(residual)
        return status, (statuses, index, residual_norm)

    def determine_status(self,
                         iteration: int,
                         solution: np.ndarray,
                         residual: np.ndarray,
                         rhs: np.ndarray) -> IterationStatus:
        status = super().determine_status(iteration, solution, residual, rhs)
        statuses, index, residual_norm = self._state
        deciding = self.deciding_criterion

        if self.record_history:
            self._history.append(EvaluationRecord(
                iteration=self._last_iteration,
                status=status,
                residual_norm=residual_norm,
                criterion_statuses=statuses,
                deciding_criterion=self._history.criterion_labels[index] if index is not None else None,
            ))
        self._log(self._last_iteration, residual_norm, status, deciding)
        return status

    @property
    def statuses(self) -> List[Tuple[StopCriterion, IterationStatus]]:
        """(criterion, its last status) pairs in registration order."""
        return [(criterion, criterion.status) for criterion in self._criteria]

    @property
    def deciding_criterion(self) -> Optional[StopCriterion]:
        """Member that produced the combined status; None while continuing."""
        index = self._state[1]
        return self._criteria[index] if index is not None else None

    @property
    def history(self) -> EvaluationHistory:
        return self._history

    def reset(self):
        """Reset every member and drop the recorded history."""
        super().reset()
        for criterion in self._criteria:
            criterion.reset()
        self._history.clear()

    def clone(self) -> "CompositeEvaluator":
        return CompositeEvaluator(
            [criterion.clone() for criterion in self._criteria],
            verbose=self.verbose,
            record_history=self.record_history,
        )

    def _log(self,
             iteration: int,
             residual_norm: float,
             status: IterationStatus,
             deciding: Optional[StopCriterion]):
        """Log iteration progress."""
        if self.verbose:
            line = f"  {self.name} iter {iteration:4d}: ||r|| = {residual_norm:.6e} -> {status}"
            if deciding is not None:
                line += f" ({deciding.name})"
            print(line)

    def _config_repr(self) -> str:
        return "[" + ", ".join(repr(criterion) for criterion in self._criteria) + "]"
