"""Package-specific exception types."""

from __future__ import annotations


class GemtextError(Exception):
    """Base class for errors raised by the gemtext package."""


class ReadError(GemtextError):
    """Raised when the input stream cannot be read or decoded.

    Content never causes this error: every gemtext line is classifiable.
    Lines read before the failure remain available on the parser.

    Args:
        line_number: Number of lines successfully read before the failure.
        reason: Description of the underlying failure.
    """

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Failed to read input after line {self.line_number}: {self.reason}"
