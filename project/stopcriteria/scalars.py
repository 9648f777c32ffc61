"""
Numeric Scalar Abstraction
==========================

Criteria are written once against ScalarField and work unchanged for real
and complex vectors in single or double precision. Comparisons always use
magnitudes, never raw (possibly complex) values.

    ||v||_2 = sqrt(sum |v_i|^2)     (default)
    ||v||_1 = sum |v_i|
    ||v||_inf = max |v_i|
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import DEFAULT_NORM_ORDER
from .errors import InvocationError


@dataclass(frozen=True)
class ScalarField:
    """Real or complex scalar field of a given precision."""
    name: str
    dtype: np.dtype
    real_dtype: np.dtype
    is_complex: bool

    @property
    def epsilon(self) -> float:
        """Machine epsilon of the underlying real type."""
        return float(np.finfo(self.real_dtype).eps)

    def magnitude(self, value) -> float:
        """Absolute value (modulus for complex scalars) as a Python float."""
        return float(np.abs(value))

    def norm(self, vector: np.ndarray, order=DEFAULT_NORM_ORDER) -> float:
        """
        Vector norm computed in the field's precision.

        An empty vector has norm 0. The result is always a non-negative
        float (or inf/nan when the vector holds non-finite entries). The
        2-norm is scaled by max |v_i| first so tiny vectors do not underflow
        to zero and large ones do not overflow.
        """
        v = np.asarray(vector).ravel()
        if v.size == 0:
            return 0.0
        v = v.astype(self.dtype, copy=False)
        if order != 2:
            return float(np.linalg.norm(v, ord=order))
        scale = np.max(np.abs(v))
        if scale == 0 or not np.isfinite(scale):
            return float(scale)
        return float(scale * np.linalg.norm(v / scale))

    def is_finite(self, vector: np.ndarray) -> bool:
        return bool(np.all(np.isfinite(vector)))

    def almost_equal(self,
                     a,
                     b,
                     relative: Optional[float] = None,
                     absolute: float = 0.0) -> bool:
        """
        Compare two scalars by the magnitude of their difference.

        The default relative tolerance is a few ulps of this field.
        """
        if relative is None:
            relative = 10 * self.epsilon
        diff = self.magnitude(np.asarray(a) - np.asarray(b))
        scale = max(self.magnitude(a), self.magnitude(b))
        return diff <= max(relative * scale, absolute)


REAL_HALF = ScalarField('float16', np.dtype(np.float16), np.dtype(np.float16), False)
REAL_SINGLE = ScalarField('float32', np.dtype(np.float32), np.dtype(np.float32), False)
REAL_DOUBLE = ScalarField('float64', np.dtype(np.float64), np.dtype(np.float64), False)
COMPLEX_SINGLE = ScalarField('complex64', np.dtype(np.complex64), np.dtype(np.float32), True)
COMPLEX_DOUBLE = ScalarField('complex128', np.dtype(np.complex128), np.dtype(np.float64), True)

_FIELDS = {
    np.dtype(np.float16): REAL_HALF,
    np.dtype(np.float32): REAL_SINGLE,
    np.dtype(np.float64): REAL_DOUBLE,
    np.dtype(np.complex64): COMPLEX_SINGLE,
    np.dtype(np.complex128): COMPLEX_DOUBLE,
}


def as_vector(value, name: str = 'vector') -> np.ndarray:
    """
    View an array-like as a flat numeric vector without copying.

    Raises
    ------
    InvocationError
        If the value is None or does not hold numbers.
    """
    if value is None:
        raise InvocationError(f"{name} must not be None")
    try:
        v = np.asarray(value)
    except (TypeError, ValueError) as exc:
        raise InvocationError(f"{name} is not array-like: {exc}") from exc
    if v.dtype.kind not in 'biufc':
        raise InvocationError(f"{name} must hold numbers, got dtype {v.dtype}")
    return v.ravel()


def field_of(*vectors: np.ndarray) -> ScalarField:
    """
    Scalar field all vectors promote to.

    Integer and boolean vectors are treated as double precision reals;
    half precision keeps its own field; extended precision types fall back
    to the double precision field of the same kind.
    """
    dtype = np.result_type(*vectors) if vectors else np.dtype(np.float64)
    if dtype in _FIELDS:
        return _FIELDS[dtype]
    if dtype.kind == 'c':
        return COMPLEX_DOUBLE
    return REAL_DOUBLE
