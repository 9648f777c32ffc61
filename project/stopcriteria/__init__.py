"""
Stop Criteria for Iterative Linear Solvers
==========================================

This package decides, after every iteration of an iterative solver for

    A x = b

whether to continue, declare convergence, declare divergence, or give up.

Criteria:
- Iteration Count (StoppedWithoutConvergence at a fixed iteration)
- Residual Norm (Converged once ||r|| is small enough)
- Divergence (Diverged when ||r|| keeps growing)
- Achievability (Indeterminate when the target is below rounding level)
- Failure (Diverged on NaN/Inf)

A CompositeEvaluator combines several criteria into one status.
"""

from .status import IterationStatus, resolve_statuses
from .errors import ConfigurationError, InvocationError, StopCriterionError
from .scalars import (
    COMPLEX_DOUBLE,
    COMPLEX_SINGLE,
    REAL_DOUBLE,
    REAL_HALF,
    REAL_SINGLE,
    ScalarField,
    field_of,
)
from .base import StopCriterion
from .iteration_count import IterationCountCriterion
from .residual_norm import ResidualNormCriterion
from .divergence import DivergenceCriterion
from .achievability import AchievabilityCriterion
from .failure import FailureCriterion
from .evaluator import CompositeEvaluator
from .diagnostics import EvaluationHistory, EvaluationRecord
from .registry import CRITERIA, build_criterion, build_evaluator

__all__ = [
    'IterationStatus',
    'resolve_statuses',
    'StopCriterionError',
    'ConfigurationError',
    'InvocationError',
    'ScalarField',
    'REAL_HALF',
    'REAL_SINGLE',
    'REAL_DOUBLE',
    'COMPLEX_SINGLE',
    'COMPLEX_DOUBLE',
    'field_of',
    'StopCriterion',
    'IterationCountCriterion',
    'ResidualNormCriterion',
    'DivergenceCriterion',
    'AchievabilityCriterion',
    'FailureCriterion',
    'CompositeEvaluator',
    'EvaluationHistory',
    'EvaluationRecord',
    'CRITERIA',
    'build_criterion',
    'build_evaluator',
]
