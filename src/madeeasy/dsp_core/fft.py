"""
Fast Fourier Transform using Numba JIT

This module implements the iterative Cooley-Tukey radix-2 FFT:
1. Bit-reversal permutation of the input
2. log2(size) stages of butterflies, stage length 2, 4, ..., size
3. Cached JIT-compiled kernels

Sizes that are not a power of two are handled with Bluestein's chirp-z
algorithm, which rewrites the N-point DFT as a convolution evaluated with
power-of-two transforms on the same radix-2 kernel. ``fft(x, N)`` therefore
matches ``dft(x, N)`` for every N. :func:`fft_padded` keeps the plain
"pad to the next power of two and keep N bins" behaviour for comparison.
"""

from typing import List, Optional

import numpy as np
from numba import jit

from .sequence import ResultRecord, as_sequence, resize, resolve_size, to_records


def next_pow2(n: int) -> int:
    """Smallest power of two >= n."""
    return 1 if n <= 1 else 1 << (n - 1).bit_length()


def is_pow2(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


@jit(nopython=True, cache=True)
def _bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the bits of x with n_bits."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


@jit(nopython=True, cache=True)
def _fft_radix2_iter(x: np.ndarray) -> np.ndarray:
    """
    Iterative Cooley-Tukey radix-2 DIT FFT (Numba JIT).

    ``len(x)`` must be a power of two. The input is left untouched.
    """
    N = len(x)
    n_bits = 0
    while (1 << n_bits) < N:
        n_bits += 1

    # Bit-reversal permutation
    X = np.empty(N, dtype=np.complex128)
    for i in range(N):
        X[_bit_reverse(i, n_bits)] = x[i]

    # Process stages: size 2, 4, 8, ..., N
    stage_size = 2
    while stage_size <= N:
        half_size = stage_size // 2
        step = -2.0 * np.pi / stage_size

        for k in range(0, N, stage_size):
            for j in range(half_size):
                w = complex(np.cos(step * j), np.sin(step * j))
                even_idx = k + j
                odd_idx = k + j + half_size

                # butterfly
                even = X[even_idx]
                t = w * X[odd_idx]

                X[even_idx] = even + t
                X[odd_idx] = even - t

        stage_size *= 2

    return X


def _ifft_radix2(X: np.ndarray) -> np.ndarray:
    """Inverse radix-2 FFT via IFFT(X) = conj(FFT(conj(X))) / N."""
    return np.conj(_fft_radix2_iter(np.conj(X))) / len(X)


def _bluestein(x: np.ndarray) -> np.ndarray:
    """N-point DFT for arbitrary N via Bluestein's chirp-z transform."""
    N = len(x)
    m = next_pow2(2 * N - 1)

    n = np.arange(N)
    # n^2 reduced mod 2N keeps the chirp phase small
    chirp = np.exp(-1j * np.pi * ((n * n) % (2 * N)) / N)
    chirp_conj = np.conj(chirp)

    a = np.zeros(m, dtype=np.complex128)
    a[:N] = x * chirp

    b = np.zeros(m, dtype=np.complex128)
    b[:N] = chirp_conj
    if N > 1:
        b[m - N + 1:] = chirp_conj[1:N][::-1]

    c = _ifft_radix2(_fft_radix2_iter(a) * _fft_radix2_iter(b))
    return c[:N] * chirp


def fft_array(x: np.ndarray, N: int) -> np.ndarray:
    """Unrounded N-point FFT of an already validated sequence."""
    buf = resize(x, N)
    if is_pow2(N):
        return _fft_radix2_iter(buf)
    return _bluestein(buf)


def ifft_array(X: np.ndarray, N: int) -> np.ndarray:
    """Unrounded N-point inverse FFT of an already validated spectrum."""
    return np.conj(fft_array(np.conj(resize(X, N)), N)) / N


def fft(x, N: Optional[int] = None) -> List[ResultRecord]:
    """
    Compute the N-point discrete Fourier Transform with the FFT.

    Parameters
    ----------
    x : array-like
        Input samples.
    N : int, optional
        Transform size. Defaults to ``len(x)``; the input is zero-padded or
        truncated to N.

    Returns
    -------
    list of ResultRecord
        N frequency bins rounded to 3 decimals.

    Examples
    --------
    >>> [r.re for r in fft([1, 1, 1, 1])]
    [4.0, 0.0, 0.0, 0.0]
    """
    x = as_sequence(x)
    N = resolve_size(N, len(x))
    return to_records(fft_array(x, N))


def ifft(X, N: Optional[int] = None) -> List[ResultRecord]:
    """Inverse FFT; same sizing rules as :func:`fft`."""
    X = as_sequence(X)
    N = resolve_size(N, len(X))
    return to_records(ifft_array(X, N))


def fft_padded(x, N: Optional[int] = None) -> List[ResultRecord]:
    """
    Radix-2 FFT of ``x`` zero-padded to the next power of two >= N,
    keeping only the first N bins.

    For N a power of two this equals :func:`fft`. Otherwise the bins are
    samples of a ``next_pow2(N)``-point spectrum, not an N-point DFT.
    """
    x = as_sequence(x)
    N = resolve_size(N, len(x))
    size = next_pow2(N)
    X = _fft_radix2_iter(resize(resize(x, N), size))
    return to_records(X[:N])

