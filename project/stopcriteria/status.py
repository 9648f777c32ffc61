"""
Iteration status values and their precedence.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple


class IterationStatus(Enum):
    """Verdict returned by a stop criterion after one iteration."""
    CONTINUE = "continue"
    CONVERGED = "converged"
    DIVERGED = "diverged"
    STOPPED_WITHOUT_CONVERGENCE = "stopped_without_convergence"
    INDETERMINATE = "indeterminate"

    @property
    def is_terminal(self) -> bool:
        """True for every status that ends the iteration."""
        return self is not IterationStatus.CONTINUE

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    def __str__(self) -> str:
        return self.value


# Higher rank wins when several criteria report at once
_PRECEDENCE = {
    IterationStatus.CONTINUE: 0,
    IterationStatus.INDETERMINATE: 1,
    IterationStatus.CONVERGED: 2,
    IterationStatus.STOPPED_WITHOUT_CONVERGENCE: 3,
    IterationStatus.DIVERGED: 4,
}


def resolve_statuses(statuses: Iterable[IterationStatus]) -> Tuple[IterationStatus, Optional[int]]:
    """
    Fold per-criterion statuses into one.

    Parameters
    ----------
    statuses : iterable of IterationStatus
        Statuses in registration order.

    Returns
    -------
    tuple
        (winning status, index of the criterion that produced it). The index
        is None when every status is CONTINUE. Ties go to the lowest index.
    """
    best = IterationStatus.CONTINUE
    best_index = None
    for index, status in enumerate(statuses):
        if status.precedence > best.precedence:
            best = status
            best_index = index
    return best, best_index
