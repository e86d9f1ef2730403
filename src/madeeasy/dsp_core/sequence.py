"""
Sequence model shared by every engine in the DSP core.

A sequence is a 1-D ``complex128`` numpy array. Engines never mutate
their inputs: :func:`as_sequence` always returns a fresh contiguous copy
and :func:`resize` allocates a new buffer.

Results leave the core as :class:`ResultRecord` values rounded to a fixed
number of decimals, so tables and test comparisons are stable.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .errors import InvalidSizeError, ValidationError

DECIMALS = 3


@dataclass(frozen=True)
class ResultRecord:
    """One output sample of a transform or convolution."""
    index: int
    re: float
    im: float
    magnitude: float
    phase: float  # degrees, (-180, 180]

    @property
    def value(self) -> complex:
        return complex(self.re, self.im)


@dataclass(frozen=True)
class TwiddleResult:
    """Twiddle factor W_N^{kn} (or its inverse-transform conjugate)."""
    k: float
    n: float
    N: int
    angle: float  # radians, unrounded
    re: float
    im: float
    magnitude: float
    phase: float  # degrees
    inverse: bool = False

    @property
    def value(self) -> complex:
        return complex(self.re, self.im)


def round_to(value: float, decimals: int = DECIMALS) -> float:
    """
    Round half up to ``decimals`` places.

    ``floor(v * 10**d + 0.5)`` never yields ``-0.0``, which keeps the phase
    of a value that rounds to zero at 0 instead of flipping to 180 degrees.
    """
    factor = 10 ** decimals
    # beyond 2**52 a double has no fractional digits left
    if not math.isfinite(value) or abs(value) * factor >= 2 ** 52:
        return value
    return math.floor(value * factor + 0.5) / factor


def compute_magnitude(re: float, im: float) -> float:
    return math.hypot(re, im)


def compute_phase_degrees(re: float, im: float) -> float:
    return math.degrees(math.atan2(im, re))


def format_complex(re: float, im: float, decimals: int = DECIMALS) -> str:
    """Format as ``"1.234 + j0.567"``."""
    sign = '+' if im >= 0 else '-'
    return f"{re:.{decimals}f} {sign} j{abs(im):.{decimals}f}"


def make_record(index: int, value: complex, decimals: int = DECIMALS) -> ResultRecord:
    """Build a rounded record; magnitude and phase use the rounded parts."""
    re = round_to(value.real, decimals)
    im = round_to(value.imag, decimals)
    phase = round_to(compute_phase_degrees(re, im), decimals)
    if phase == -180.0:
        phase = 180.0
    return ResultRecord(
        index=index,
        re=re,
        im=im,
        magnitude=round_to(compute_magnitude(re, im), decimals),
        phase=phase,
    )


def to_records(values: Iterable[complex], decimals: int = DECIMALS) -> List[ResultRecord]:
    values = np.asarray(list(values), dtype=np.complex128)
    if not np.all(np.isfinite(values)):
        raise ValidationError("Result overflow: input values are too large for double precision")
    return [make_record(i, complex(v), decimals) for i, v in enumerate(values)]


def records_to_array(records: Iterable[ResultRecord]) -> np.ndarray:
    """Turn result records back into a sequence so results can be chained."""
    return np.array([complex(r.re, r.im) for r in records], dtype=np.complex128)


def as_sequence(x, name: str = 'sequence') -> np.ndarray:
    """
    Validate ``x`` and return it as a new contiguous complex128 array.

    Parameters
    ----------
    x : array-like
        1-D numbers (real or complex), a list of ``(re, im)`` pairs with
        shape (L, 2), or a list of :class:`ResultRecord`.
    name : str
        Used in error messages.

    Raises
    ------
    ValidationError
        Empty input, wrong shape, non-numeric or non-finite samples.
    """
    if isinstance(x, (str, bytes)):
        raise ValidationError(f"Invalid {name}: expected numbers, got text (use parse_sequence)")

    if isinstance(x, (list, tuple)) and x and isinstance(x[0], ResultRecord):
        return _check_finite(records_to_array(x), name)

    try:
        arr = np.array(x, copy=True)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {name}: {exc}") from exc

    if arr.size == 0:
        raise ValidationError(f"Invalid {name}: must contain at least one sample")

    if arr.ndim == 2 and arr.shape[1] == 2 and not np.iscomplexobj(arr):
        try:
            pairs = arr.astype(np.float64)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid {name}: {exc}") from exc
        arr = pairs[:, 0] + 1j * pairs[:, 1]
    elif arr.ndim != 1:
        raise ValidationError(f"Invalid {name}: expected a 1-D sequence, got shape {arr.shape}")

    try:
        arr = np.ascontiguousarray(arr, dtype=np.complex128)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {name}: samples must be numeric") from exc

    return _check_finite(arr, name)


def _check_finite(arr: np.ndarray, name: str) -> np.ndarray:
    if arr.size == 0:
        raise ValidationError(f"Invalid {name}: must contain at least one sample")
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise ValidationError(f"Invalid {name}: element {int(bad[0])} is not finite")
    return arr


def check_size(N, name: str = 'N') -> int:
    """Return ``N`` as an int if it is a positive integer, else raise."""
    if isinstance(N, bool):
        raise InvalidSizeError(f"{name} must be a positive integer, got {N!r}", N)
    if isinstance(N, numbers.Integral):
        value = int(N)
    elif isinstance(N, numbers.Real) and math.isfinite(N) and float(N).is_integer():
        value = int(N)
    else:
        raise InvalidSizeError(f"{name} must be a positive integer, got {N!r}", N)
    if value <= 0:
        raise InvalidSizeError(f"{name} must be a positive integer, got {N!r}", N)
    return value


def resolve_size(N: Optional[int], default: int) -> int:
    """``None`` means "use the default length"; anything else is checked."""
    if N is None:
        return default
    return check_size(N)


def resize(x: np.ndarray, N: int) -> np.ndarray:
    """Zero-pad or truncate ``x`` to exactly ``N`` samples (new array)."""
    out = np.zeros(N, dtype=np.complex128)
    m = min(N, len(x))
    out[:m] = x[:m]
    return out
