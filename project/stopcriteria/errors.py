"""
Exceptions raised by stop criteria.

Both concrete errors derive from ValueError so callers that only know the
builtin still catch them.
"""


class StopCriterionError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(StopCriterionError, ValueError):
    """A configuration value is out of range or of the wrong type."""


class InvocationError(StopCriterionError, ValueError):
    """determine_status was called with an unusable argument."""
