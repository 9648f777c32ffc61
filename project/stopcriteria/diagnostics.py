"""
Evaluation Diagnostics
======================

Per-iteration record of what a CompositeEvaluator decided and which of its
criteria reported what. Records are kept only when the evaluator was built
with record_history=True.

Metrics available per iteration:
    1. Combined status and the criterion that decided it
    2. Residual norm ||r_k|| (2-norm, in the scalar field of r_k)
    3. Status reported by every registered criterion
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .status import IterationStatus


@dataclass(frozen=True)
class EvaluationRecord:
    """Outcome of one evaluator call."""
    iteration: int
    status: IterationStatus
    residual_norm: float
    criterion_statuses: Tuple[IterationStatus, ...]
    deciding_criterion: Optional[str] = None


@dataclass
class EvaluationHistory:
    """Records of one solver run, oldest first."""
    criterion_labels: Tuple[str, ...]
    records: List[EvaluationRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def append(self, record: EvaluationRecord):
        """Add a record; a repeated iteration index replaces the last record."""
        if self.records and self.records[-1].iteration == record.iteration:
            self.records[-1] = record
        else:
            self.records.append(record)

    def clear(self):
        self.records.clear()

    def first_terminal(self) -> Optional[EvaluationRecord]:
        """First record whose combined status ends the iteration."""
        for record in self.records:
            if record.status.is_terminal:
                return record
        return None

    def residual_norms(self) -> List[float]:
        return [record.residual_norm for record in self.records]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per iteration, one status column per criterion."""
        rows = []
        for record in self.records:
            row = {
                'iteration': record.iteration,
                'status': record.status.value,
                'residual_norm': record.residual_norm,
                'deciding_criterion': record.deciding_criterion,
            }
            for label, status in zip(self.criterion_labels, record.criterion_statuses):
                row[label] = status.value
            rows.append(row)
        columns = ['iteration', 'status', 'residual_norm', 'deciding_criterion',
                   *self.criterion_labels]
        return pd.DataFrame(rows, columns=columns)

    def summary(self) -> Dict[str, float]:
        """Distribution statistics of the residual norm over the run."""
        values = pd.Series(self.residual_norms(), dtype=float).dropna()
        if values.empty:
            return {}
        return {
            'iterations': int(len(self.records)),
            'initial': values.iloc[0],
            'final': values.iloc[-1],
            'min': values.min(),
            'max': values.max(),
            'median': values.median(),
            'reduction': values.iloc[-1] / values.iloc[0] if values.iloc[0] > 0 else float('nan'),
        }
