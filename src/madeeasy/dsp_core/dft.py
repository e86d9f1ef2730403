"""
Direct DFT / IDFT by summation (Numba JIT).

This is the O(N^2) reference transform. Cosine and sine values for the
whole N x N product space are tabulated before summing, which costs O(N^2)
memory and is fine for the short sequences this module targets.

    X[k] = sum_n x[n] * exp(-j 2 pi k n / N)
    x[n] = (1/N) sum_k X[k] * exp(+j 2 pi k n / N)
"""

from typing import List, Optional

import numpy as np
from numba import jit

from .sequence import ResultRecord, as_sequence, resize, resolve_size, to_records


@jit(nopython=True, cache=True)
def _twiddle_tables(N: int, sign: float):
    """cos/sin of sign * 2 pi k n / N for every (k, n)."""
    cos_table = np.empty((N, N), dtype=np.float64)
    sin_table = np.empty((N, N), dtype=np.float64)
    step = sign * 2.0 * np.pi / N
    for k in range(N):
        for n in range(N):
            # k*n reduced mod N keeps the angle small for large indices
            angle = step * ((k * n) % N)
            cos_table[k, n] = np.cos(angle)
            sin_table[k, n] = np.sin(angle)
    return cos_table, sin_table


@jit(nopython=True, cache=True)
def _dft_kernel(x: np.ndarray, inverse: bool) -> np.ndarray:
    N = len(x)
    sign = 1.0 if inverse else -1.0
    cos_table, sin_table = _twiddle_tables(N, sign)

    X = np.empty(N, dtype=np.complex128)
    for k in range(N):
        sum_re = 0.0
        sum_im = 0.0
        for n in range(N):
            xr = x[n].real
            xi = x[n].imag
            c = cos_table[k, n]
            s = sin_table[k, n]
            sum_re += xr * c - xi * s
            sum_im += xr * s + xi * c
        if inverse:
            # scale before any rounding happens downstream
            X[k] = complex(sum_re / N, sum_im / N)
        else:
            X[k] = complex(sum_re, sum_im)
    return X


def dft_array(x: np.ndarray, N: int, inverse: bool = False) -> np.ndarray:
    """Unrounded N-point (I)DFT of an already validated sequence."""
    return _dft_kernel(resize(x, N), inverse)


def dft(x, N: Optional[int] = None) -> List[ResultRecord]:
    """
    Discrete Fourier Transform.

    Parameters
    ----------
    x : array-like
        Input samples (see :func:`as_sequence` for accepted forms).
    N : int, optional
        Transform size. Defaults to ``len(x)``. A larger N zero-pads the
        input, a smaller one truncates it.

    Returns
    -------
    list of ResultRecord
        N frequency bins, rounded to 3 decimals.

    Examples
    --------
    >>> X = dft([1, -1j, 2 + 3j, 0], 4)
    >>> X[0].re, X[0].im, X[0].magnitude, X[0].phase
    (3.0, 2.0, 3.606, 33.69)
    """
    x = as_sequence(x)
    N = resolve_size(N, len(x))
    return to_records(dft_array(x, N))


def idft(X, N: Optional[int] = None) -> List[ResultRecord]:
    """
    Inverse Discrete Fourier Transform.

    Same sizing rules as :func:`dft`. The 1/N scaling is applied before
    rounding to keep precision.
    """
    X = as_sequence(X)
    N = resolve_size(N, len(X))
    return to_records(dft_array(X, N, inverse=True))
