import math

from .sequence import TwiddleResult, check_size, round_to


def twiddle(k, n, N, inverse: bool = False) -> TwiddleResult:
    """
    Evaluate the twiddle factor W_N^{kn} = e^{-j 2 pi k n / N}.

    With ``inverse=True`` the sign of the exponent is positive, as used by
    the inverse transform. Magnitude is always 1.

    Raises
    ------
    InvalidSizeError
        If ``N`` is not a positive integer.
    """
    N = check_size(N)
    sign = 1.0 if inverse else -1.0
    angle = sign * 2.0 * math.pi * k * n / N

    return TwiddleResult(
        k=k,
        n=n,
        N=N,
        angle=angle,
        re=round_to(math.cos(angle)),
        im=round_to(math.sin(angle)),
        magnitude=1,
        phase=round_to(math.degrees(angle)),
        inverse=inverse,
    )
