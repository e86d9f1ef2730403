"""
Exception types raised by the DSP core.

All errors derive from ``ValueError`` so callers that only care about
"bad input" can keep catching that.
"""

from typing import Optional


class DSPError(Exception):
    """Base class for every error raised by madeeasy."""


class ValidationError(DSPError, ValueError):
    """Input sequence is empty, malformed or holds non-finite samples."""


class ParseError(DSPError, ValueError):
    """A token of a textual sequence could not be parsed."""

    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.token = token

    def __reduce__(self):
        # Keep ``token`` when the error crosses a process boundary
        return (type(self), (str(self), self.token))


class InvalidSizeError(DSPError, ValueError):
    """Transform or block size is not usable."""

    def __init__(self, message: str, size=None):
        super().__init__(message)
        self.size = size

    def __reduce__(self):
        return (type(self), (str(self), self.size))
