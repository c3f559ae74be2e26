"""Parse and validation errors raised by the domain layer.

Both carry the offending line so callers can name it in a diagnostic.
Errors are fatal: nothing in the domain layer catches or retries them.
"""

from __future__ import annotations


class AlmanacError(Exception):
    """Base class for every almanac input error.

    Attributes:
        reason: Short description of what went wrong.
        line_number: 1-based input line, or None when not tied to a line.
        line: The offending line text, if any.
        expected: The shape the input should have had.
    """

    code = "ALMANAC_ERROR"

    def __init__(
        self,
        reason: str,
        *,
        line_number: int | None = None,
        line: str | None = None,
        expected: str | None = None,
    ) -> None:
        self.reason = reason
        self.line_number = line_number
        self.line = line
        self.expected = expected
        super().__init__(self._render())

    def _render(self) -> str:
        parts: list[str] = []
        if self.line_number is not None:
            parts.append(f"line {self.line_number}: ")
        parts.append(self.reason)
        if self.expected:
            parts.append(f" (expected {self.expected})")
        if self.line is not None:
            parts.append(f": {self.line!r}")
        return "".join(parts)

    def to_detail(self) -> dict[str, object]:
        """Structured view used for ``ServiceError.detail``."""
        detail: dict[str, object] = {}
        if self.line_number is not None:
            detail["line_number"] = self.line_number
        if self.line is not None:
            detail["line"] = self.line
        if self.expected is not None:
            detail["expected"] = self.expected
        return detail


class FormatError(AlmanacError):
    """Malformed header, wrong token count, or non-integer token."""

    code = "FORMAT_ERROR"


class ValidationError(AlmanacError):
    """Well-formed input whose values break a model invariant."""

    code = "VALIDATION_ERROR"
