"""Error taxonomy for DOF parsing.

Errors fall in two groups:
- Line-scoped errors (encoding, field, too-short, direction) drop a single record line and are
  reported through the optional error callback; the parse pass keeps going.
- Fatal errors (header format, missing currency date, stream failures) abort the whole pass and
  no container is produced.
"""

from __future__ import annotations

from typing import Optional


class DofError(Exception):
    """Base class for every error raised while reading a Digital Obstacle File."""

    failure_reason: str = "DOF data could not be read."
    recovery_suggestion: Optional[str] = None

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.failure_reason)


class InvalidEncodingError(DofError):
    failure_reason = "The line contains bytes that are not valid text in the configured encoding."
    recovery_suggestion = "Verify the file is a valid FAA Digital Obstacle File."

    def __init__(self, field: str, line: int) -> None:
        self.field = field
        self.line = line
        super().__init__(f"Field {field} at line {line} could not be decoded as text.")


class DofFormatError(DofError):
    failure_reason = "DOF data format was invalid."
    recovery_suggestion = "Verify the file is a valid FAA Digital Obstacle File."


class MissingCurrencyDateError(DofFormatError):
    failure_reason = "The DOF header does not contain a currency date."


class CurrencyDateHeaderNotFoundError(DofFormatError):
    failure_reason = "The 'CURRENCY DATE = ' pattern was not found in the header."


class InvalidCurrencyDateFormatError(DofFormatError):
    failure_reason = "The currency date is not in MM/DD/YY format."


class InvalidCurrencyDateComponentsError(DofFormatError):
    failure_reason = "The currency date contains non-numeric components."


class InvalidDirectionError(DofFormatError):
    """A latitude/longitude seconds field ends in a letter that is not valid for its axis."""

    _EXPECTED = {"latitude": "N or S", "longitude": "E or W"}

    def __init__(self, axis: str, character: str, line: int = 0) -> None:
        self.axis = axis
        self.character = character
        self.line = line
        expected = self._EXPECTED.get(axis, "a compass direction")
        self.failure_reason = (
            f"{axis.capitalize()} direction {character!r} is invalid. Expected {expected}."
        )
        super().__init__(f"{self.failure_reason} (line {line})")


class FieldParseError(DofError):
    recovery_suggestion = None

    def __init__(self, field: str, value: str, line: int) -> None:
        self.field = field
        self.value = value
        self.line = line
        self.failure_reason = f"Failed to parse {field} {value!r} at line {line}."
        super().__init__(self.failure_reason)


class LineTooShortError(DofError):
    recovery_suggestion = None

    def __init__(self, expected: int, actual: int, line: int) -> None:
        self.expected = expected
        self.actual = actual
        self.line = line
        self.failure_reason = f"Line {line} has {actual} characters but {expected} are required."
        super().__init__(self.failure_reason)


class DofStreamError(DofError):
    """Raised when the underlying byte source fails; always fatal to the parse pass."""

    recovery_suggestion = None

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        self.failure_reason = f"An error occurred while reading: {cause}"
        super().__init__(self.failure_reason)


class InvalidJulianDateError(DofError):
    """A (year, day-of-year) pair does not resolve to a calendar date."""

    recovery_suggestion = None

    def __init__(self, year: int, day_of_year: int) -> None:
        self.year = year
        self.day_of_year = day_of_year
        self.failure_reason = f"Day {day_of_year} does not exist in year {year}."
        super().__init__(self.failure_reason)


# Errors that only invalidate one record line.
LINE_ERRORS: tuple[type[DofError], ...] = (
    InvalidEncodingError,
    InvalidDirectionError,
    FieldParseError,
    LineTooShortError,
)
