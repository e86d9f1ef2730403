"""
Block convolution: overlap-save and overlap-add.

Both methods filter a long input ``x`` with a short impulse response ``h``
(length M) using N-point circular convolutions, N >= M. Each block is
transformed with the FFT, multiplied by H = FFT(h padded to N), and brought
back with the inverse DFT. Every block yields V = N - M + 1 new output
samples.

Spectra stay in full precision between the steps; rounding only happens
when the final records are built.
"""

from typing import List, Tuple

import numpy as np

from .dft import dft_array
from .errors import InvalidSizeError
from .fft import fft_array
from .sequence import ResultRecord, as_sequence, check_size, resize, to_records


def _prepare(x, h, N) -> Tuple[np.ndarray, np.ndarray, int, np.ndarray]:
    x = as_sequence(x, 'input signal')
    h = as_sequence(h, 'impulse response')
    N = check_size(N, 'Block size N')
    M = len(h)
    if N < M:
        raise InvalidSizeError(
            f"Block size N ({N}) must be >= impulse response length M ({M})", N
        )
    H = fft_array(h, N)
    return x, h, N, H


def _filter_block(block: np.ndarray, H: np.ndarray, N: int) -> np.ndarray:
    """Circular convolution of one N-sample block with h, via H."""
    Y = fft_array(block, N) * H
    return dft_array(Y, N, inverse=True)


def overlap_save_array(x: np.ndarray, h: np.ndarray, N: int, H: np.ndarray) -> np.ndarray:
    M = len(h)
    valid = N - M + 1

    # M-1 leading zeros act as the history of the first block
    padded = np.concatenate([np.zeros(M - 1, dtype=np.complex128), x])
    n_blocks = -(-len(padded) // valid)

    out = np.empty(n_blocks * valid, dtype=np.complex128)
    for b in range(n_blocks):
        start = b * valid
        y = _filter_block(resize(padded[start:start + N], N), H, N)
        # first M-1 samples are corrupted by circular wraparound
        out[start:start + valid] = y[M - 1:]
    return out


def overlap_add_array(x: np.ndarray, h: np.ndarray, N: int, H: np.ndarray) -> np.ndarray:
    M = len(h)
    valid = N - M + 1
    n_blocks = -(-len(x) // valid)

    acc = np.zeros((n_blocks - 1) * valid + N, dtype=np.complex128)
    for b in range(n_blocks):
        start = b * valid
        block = resize(x[start:start + valid], N)
        y = _filter_block(block, H, N)
        end = start + N
        if end > len(acc):
            raise IndexError(f"overlap-add block {b} ends at {end}, accumulator holds {len(acc)}")
        # tails of neighbouring blocks overlap and must be summed
        acc[start:end] += y
    return acc


def overlap_save(x, h, N) -> List[ResultRecord]:
    """
    Overlap-save block convolution.

    The input is prefixed with M-1 zeros and read in windows of N samples
    advancing by V = N-M+1. The first M-1 samples of each filtered window
    are discarded, the remaining V are appended to the output.

    Parameters
    ----------
    x : array-like
        Input signal, length L.
    h : array-like
        Impulse response, length M.
    N : int
        Block size, N >= M.

    Returns
    -------
    list of ResultRecord
        ``ceil((L + M - 1) / V) * V`` samples; the first L+M-1 equal the
        linear convolution, the rest are zero.

    Raises
    ------
    InvalidSizeError
        If N is not a positive integer or N < M.
    """
    x, h, N, H = _prepare(x, h, N)
    return to_records(overlap_save_array(x, h, N, H))


def overlap_add(x, h, N) -> List[ResultRecord]:
    """
    Overlap-add block convolution.

    ``x`` is cut into blocks of V = N-M+1 samples (last one zero-padded),
    each zero-padded to N and filtered. Filtered blocks are summed into the
    output at offset ``block_index * V``.

    Returns
    -------
    list of ResultRecord
        ``(blocks - 1) * V + N`` samples; the first L+M-1 equal the linear
        convolution.
    """
    x, h, N, H = _prepare(x, h, N)
    return to_records(overlap_add_array(x, h, N, H))
