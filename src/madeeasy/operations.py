"""
Operation registry.

Maps an operation id to its engine function and to the inputs it needs,
so front ends (CLI, task runner) can dispatch by name.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from .dsp_core import (
    InvalidSizeError,
    ResultRecord,
    TwiddleResult,
    ValidationError,
    circular_convolution,
    dft,
    fft,
    idft,
    linear_convolution,
    overlap_add,
    overlap_save,
    parse_sequence,
    twiddle,
)


class UnknownOperationError(KeyError):
    """Raised for an operation id that is not registered."""


@dataclass(frozen=True)
class Operation:
    """Registry entry describing one engine operation."""
    id: str
    name: str
    full_name: str
    description: str
    func: Callable
    needs_sequence: bool = True
    needs_second_sequence: bool = False
    needs_n: bool = True        # accepts a size N
    requires_n: bool = False    # N has no default
    output: str = 'sequence'    # 'frequency', 'sequence' or 'complex'


OPERATIONS: Dict[str, Operation] = {
    'dft': Operation(
        id='dft',
        name='DFT',
        full_name='Discrete Fourier Transform',
        description='Transform time-domain signal to frequency domain',
        func=dft,
        output='frequency',
    ),
    'idft': Operation(
        id='idft',
        name='IDFT',
        full_name='Inverse Discrete Fourier Transform',
        description='Transform frequency spectrum back to time domain',
        func=idft,
    ),
    'fft': Operation(
        id='fft',
        name='FFT',
        full_name='Fast Fourier Transform',
        description='Fast O(N log N) frequency transform',
        func=fft,
        output='frequency',
    ),
    'twiddle': Operation(
        id='twiddle',
        name='Twiddle Factor',
        full_name='Twiddle Factor (W_N^kn)',
        description='Calculate the twiddle factor for specific k, n values',
        func=twiddle,
        needs_sequence=False,
        requires_n=True,
        output='complex',
    ),
    'circular_conv': Operation(
        id='circular_conv',
        name='Circular Conv',
        full_name='Circular Convolution',
        description='Convolution of two periodic sequences',
        func=circular_convolution,
        needs_second_sequence=True,
    ),
    'linear_conv': Operation(
        id='linear_conv',
        name='Linear Conv',
        full_name='Linear Convolution',
        description='Convolution of two finite sequences, length L+M-1',
        func=linear_convolution,
        needs_second_sequence=True,
        needs_n=False,
    ),
    'overlap_save': Operation(
        id='overlap_save',
        name='Overlap-Save',
        full_name='Overlap-Save Block Convolution',
        description='FFT block filtering, discarding wrapped samples',
        func=overlap_save,
        needs_second_sequence=True,
        requires_n=True,
    ),
    'overlap_add': Operation(
        id='overlap_add',
        name='Overlap-Add',
        full_name='Overlap-Add Block Convolution',
        description='FFT block filtering, summing overlapping tails',
        func=overlap_add,
        needs_second_sequence=True,
        requires_n=True,
    ),
}


def get_operation(op_id: str) -> Operation:
    try:
        return OPERATIONS[op_id]
    except KeyError:
        known = ', '.join(sorted(OPERATIONS))
        raise UnknownOperationError(f"Unknown operation '{op_id}' (known: {known})") from None


def _sequence(value, name: str):
    if value is None:
        raise ValidationError(f"Operation needs a {name}")
    if isinstance(value, str):
        value = parse_sequence(value)
    return value


def run_operation(
    op_id: str,
    x=None,
    h=None,
    N: Optional[int] = None,
    k=None,
    n=None,
    inverse: bool = False,
) -> Union[List[ResultRecord], TwiddleResult]:
    """
    Run a registered operation synchronously.

    ``x`` and ``h`` may be array-likes or text in the sequence grammar.
    Engine errors propagate unchanged.
    """
    op = get_operation(op_id)

    if not op.needs_sequence:
        if k is None or n is None:
            raise ValidationError(f"{op.name} needs k and n")
        return op.func(k, n, N, inverse=inverse)

    if op.requires_n and N is None:
        raise InvalidSizeError(f"{op.name} needs a size N", N)

    args = [_sequence(x, 'sequence')]
    if op.needs_second_sequence:
        args.append(_sequence(h, 'second sequence'))
    if op.needs_n:
        args.append(N)
    return op.func(*args)
