"""
DSP Core Module - Hand-written transform and convolution engines

Pure, synchronous implementations of the textbook formulas for short
complex sequences. Every engine validates its input, never mutates it, and
returns a fresh list of ResultRecord values rounded to 3 decimals.

Modules:
    - parsing: text to complex sequence
    - twiddle: twiddle factor W_N^{kn}
    - dft: direct DFT / IDFT (O(N^2))
    - fft: radix-2 Cooley-Tukey FFT with Bluestein for other sizes
    - convolution: circular and linear convolution
    - block_conv: overlap-save and overlap-add
"""

from .errors import DSPError, ValidationError, ParseError, InvalidSizeError
from .sequence import (
    ResultRecord,
    TwiddleResult,
    as_sequence,
    resize,
    round_to,
    format_complex,
    records_to_array,
)
from .parsing import parse_sequence
from .twiddle import twiddle
from .dft import dft, idft
from .fft import fft, ifft, fft_padded
from .convolution import circular_convolution, linear_convolution
from .block_conv import overlap_save, overlap_add

__all__ = [
    # Errors
    'DSPError',
    'ValidationError',
    'ParseError',
    'InvalidSizeError',
    # Sequence model
    'ResultRecord',
    'TwiddleResult',
    'as_sequence',
    'resize',
    'round_to',
    'format_complex',
    'records_to_array',
    # Engines
    'parse_sequence',
    'twiddle',
    'dft',
    'idft',
    'fft',
    'ifft',
    'fft_padded',
    'circular_convolution',
    'linear_convolution',
    'overlap_save',
    'overlap_add',
]
