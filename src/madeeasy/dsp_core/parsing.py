"""
Text parser for complex sequences.

Accepted grammar (whitespace is ignored everywhere)::

    sequence := token ("," token)*
    token    := number | "(" number "," number ")"

Examples
--------
>>> parse_sequence("1, 2, 3")
array([1.+0.j, 2.+0.j, 3.+0.j])
>>> parse_sequence("(1,2), (3,-4)")
array([1.+2.j, 3.-4.j])
"""

import math
import re
from typing import List, Optional

import numpy as np

from .errors import ParseError

_WHITESPACE = re.compile(r'\s+')


def split_tokens(text: str) -> List[str]:
    """Split on commas that are not nested inside parentheses."""
    tokens = []
    buffer = []
    depth = 0
    for ch in text:
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        if ch == ',' and depth == 0:
            if buffer:
                tokens.append(''.join(buffer))
                buffer = []
        else:
            buffer.append(ch)
    if buffer:
        tokens.append(''.join(buffer))
    return tokens


def _to_number(literal: str, token: str) -> float:
    try:
        value = float(literal)
    except ValueError:
        raise ParseError(f'Invalid numbers in "{token}".', token) from None
    if not math.isfinite(value):
        raise ParseError(f'Non-finite value in "{token}".', token)
    return value


def parse_token(token: str) -> complex:
    """Parse one whitespace-free token into a complex sample."""
    if token.startswith('(') and token.endswith(')'):
        parts = token[1:-1].split(',')
        if len(parts) != 2:
            raise ParseError(f'Invalid complex pair "{token}". Use format (a,b).', token)
        return complex(_to_number(parts[0], token), _to_number(parts[1], token))

    try:
        value = float(token)
    except ValueError:
        raise ParseError(f'Invalid real value "{token}".', token) from None
    if not math.isfinite(value):
        raise ParseError(f'Non-finite value in "{token}".', token)
    return complex(value, 0.0)


def parse_sequence(text: Optional[str]) -> np.ndarray:
    """
    Parse a comma separated list of real numbers and ``(re,im)`` pairs.

    Parsing is all-or-nothing: the first malformed token raises
    :class:`ParseError` and nothing is returned. Empty text gives an empty
    array; callers decide whether that is acceptable.
    """
    if not text:
        return np.zeros(0, dtype=np.complex128)

    cleaned = _WHITESPACE.sub('', text)
    samples = [parse_token(token) for token in split_tokens(cleaned)]
    return np.array(samples, dtype=np.complex128)
