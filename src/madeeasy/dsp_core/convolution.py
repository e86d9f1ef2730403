"""
Circular and linear convolution by direct summation (Numba JIT).
"""

from typing import List, Optional

import numpy as np
from numba import jit

from .sequence import ResultRecord, as_sequence, resize, resolve_size, to_records


@jit(nopython=True, cache=True)
def _circular_kernel(x: np.ndarray, h: np.ndarray) -> np.ndarray:
    """y[n] = sum_k x[k] h[(n - k) mod N], both inputs of length N."""
    N = len(x)
    y = np.zeros(N, dtype=np.complex128)
    for n in range(N):
        acc = 0j
        for k in range(N):
            acc += x[k] * h[(n - k + N) % N]
        y[n] = acc
    return y


@jit(nopython=True, cache=True)
def _linear_kernel(x: np.ndarray, h: np.ndarray) -> np.ndarray:
    """Full linear convolution, summing only the overlapping terms."""
    L = len(x)
    M = len(h)
    y = np.zeros(L + M - 1, dtype=np.complex128)
    for n in range(L + M - 1):
        acc = 0j
        for k in range(max(0, n - M + 1), min(n + 1, L)):
            acc += x[k] * h[n - k]
        y[n] = acc
    return y


def circular_convolution_array(x: np.ndarray, h: np.ndarray, N: int) -> np.ndarray:
    return _circular_kernel(resize(x, N), resize(h, N))


def linear_convolution_array(x: np.ndarray, h: np.ndarray) -> np.ndarray:
    return _linear_kernel(x, h)


def circular_convolution(x, h, N: Optional[int] = None) -> List[ResultRecord]:
    """
    N-point circular convolution of ``x`` and ``h``.

    Parameters
    ----------
    x, h : array-like
        Input sequences.
    N : int, optional
        Period. Defaults to ``max(len(x), len(h))``; both inputs are
        zero-padded or truncated to N.

    Returns
    -------
    list of ResultRecord
        N output samples.
    """
    x = as_sequence(x, 'first sequence')
    h = as_sequence(h, 'second sequence')
    N = resolve_size(N, max(len(x), len(h)))
    return to_records(circular_convolution_array(x, h, N))


def linear_convolution(x, h) -> List[ResultRecord]:
    """Linear convolution, ``len(x) + len(h) - 1`` output samples."""
    x = as_sequence(x, 'first sequence')
    h = as_sequence(h, 'second sequence')
    return to_records(linear_convolution_array(x, h))
