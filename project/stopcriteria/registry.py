"""
Named stop criteria and builders for configuring them from plain settings.

    evaluator = build_evaluator({
        'iteration_count': {'maximum_number_of_iterations': 500},
        'residual_norm': {'tolerance': 1e-10},
        'divergence': {},
    })
"""

from typing import Any, Mapping, Sequence, Tuple, Union

from .achievability import AchievabilityCriterion
from .base import StopCriterion
from .divergence import DivergenceCriterion
from .errors import ConfigurationError
from .evaluator import CompositeEvaluator
from .failure import FailureCriterion
from .iteration_count import IterationCountCriterion
from .residual_norm import ResidualNormCriterion


# Criterion registry
CRITERIA = {
    'iteration_count': IterationCountCriterion,
    'residual_norm': ResidualNormCriterion,
    'divergence': DivergenceCriterion,
    'achievability': AchievabilityCriterion,
    'failure': FailureCriterion,
}

Settings = Union[Mapping[str, Mapping[str, Any]], Sequence[Tuple[str, Mapping[str, Any]]]]


def build_criterion(name: str, **params) -> StopCriterion:
    """
    Instantiate a registered criterion.

    Raises
    ------
    ConfigurationError
        For an unknown name or parameters the criterion does not accept.
    """
    if name not in CRITERIA:
        raise ConfigurationError(f"Unknown stop criterion: {name}. "
                                 f"Available: {list(CRITERIA.keys())}")
    try:
        return CRITERIA[name](**params)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid parameters for {name}: {exc}") from exc


def build_evaluator(settings: Settings, **evaluator_params) -> CompositeEvaluator:
    """
    Build a CompositeEvaluator from settings.

    Parameters
    ----------
    settings : mapping or sequence of pairs
        Criterion name -> keyword parameters, in registration order. Use a
        sequence of (name, params) pairs to register a name twice.
    **evaluator_params
        Passed to CompositeEvaluator (verbose, record_history)
    """
    items = settings.items() if isinstance(settings, Mapping) else settings
    criteria = []
    for entry in items:
        try:
            name, params = entry
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Expected a (name, params) pair, got {entry!r}") from exc
        criteria.append(build_criterion(name, **dict(params or {})))
    return CompositeEvaluator(criteria, **evaluator_params)

