"""
Library Defaults and Configuration Validators
=============================================

Every criterion falls back to the constants below when a parameter is not
given. The validators raise ConfigurationError at construction or in a
setter; values are never clamped.
"""

from numbers import Integral, Real
from typing import Optional

import numpy as np

from .errors import ConfigurationError


# =============================================================================
# CONFIGURATION
# =============================================================================

# Iteration count
DEFAULT_MAXIMUM_NUMBER_OF_ITERATIONS = 1000

# Residual norm (relative to ||b|| unless configured otherwise)
DEFAULT_RESIDUAL_TOLERANCE = 1e-12
DEFAULT_CONSECUTIVE_ITERATIONS = 1
NORMALIZATIONS = ('rhs', 'initial_residual', 'none')
DEFAULT_NORMALIZATION = 'rhs'

# Divergence: 8% growth per iteration over 10 consecutive iterations
DEFAULT_MAXIMUM_RELATIVE_INCREASE = 0.08
DEFAULT_DIVERGENCE_WINDOW = 10
MINIMUM_DIVERGENCE_WINDOW = 3
# Stagnation test is off unless a tolerance is given
DEFAULT_STAGNATION_TOLERANCE = None

# Achievability: floor = safety_factor * eps * (||b|| + ||A|| ||x||)
DEFAULT_SAFETY_FACTOR = 10.0
DEFAULT_OPERATOR_NORM = 1.0

# Vector norms
NORM_ORDERS = (1, 2, np.inf)
DEFAULT_NORM_ORDER = 2


# =============================================================================
# VALIDATORS
# =============================================================================

def _is_integer(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def check_non_negative_int(name: str, value) -> int:
    if not _is_integer(value):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value}")
    return int(value)


def check_int_at_least(name: str, value, minimum: int) -> int:
    if not _is_integer(value):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def check_positive_float(name: str, value) -> float:
    if not _is_real(value) or not np.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite real number, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")
    return float(value)


def check_optional_positive_float(name: str, value) -> Optional[float]:
    if value is None:
        return None
    return check_positive_float(name, value)


def check_float_at_least(name: str, value, minimum: float) -> float:
    if not _is_real(value) or not np.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite real number, got {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return float(value)


def check_norm_order(value):
    """Accept 1, 2 or numpy.inf."""
    if not _is_real(value) or value not in NORM_ORDERS:
        raise ConfigurationError(
            f"Unsupported norm order: {value!r}. Available: {list(NORM_ORDERS)}")
    return np.inf if np.isinf(value) else int(value)


def check_choice(name: str, value, choices) -> str:
    if value not in choices:
        raise ConfigurationError(f"Unknown {name}: {value!r}. Available: {list(choices)}")
    return value
