"""
Pytest configuration for stop criteria tests.

Adds project/ to sys.path so tests can import stopcriteria without an
install.
"""

import os
import sys

import numpy as np
import pytest

repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
project_path = os.path.join(repo_root, 'project')

if project_path not in sys.path:
    sys.path.insert(0, project_path)


DTYPES = [np.float32, np.float64, np.complex64, np.complex128]


@pytest.fixture(params=DTYPES, ids=lambda t: np.dtype(t).name)
def dtype(request):
    """Every scalar field the criteria must handle identically."""
    return request.param


@pytest.fixture
def vectors(dtype):
    """(solution, residual, rhs) filled with 1, 2 and 3."""
    return (np.full(3, 1, dtype=dtype),
            np.full(3, 2, dtype=dtype),
            np.full(3, 3, dtype=dtype))
