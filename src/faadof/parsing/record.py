"""Fixed-width DOF record parsing.

Each record line is sliced at the published FAA column positions (never split on whitespace:
city and type names contain spaces) and every field is decoded straight from the raw bytes.
"""

from __future__ import annotations

from typing import Optional

from faadof.cycle import Cycle
from faadof.models import (
    AccuracyCategory,
    ActionCode,
    ByteCodedEnum,
    JulianDate,
    LightingType,
    MarkingType,
    Obstacle,
    VerificationStatus,
)
from faadof.parsing.errors import (
    CurrencyDateHeaderNotFoundError,
    FieldParseError,
    InvalidCurrencyDateComponentsError,
    InvalidCurrencyDateFormatError,
    InvalidDirectionError,
    InvalidEncodingError,
    LineTooShortError,
)
from faadof.parsing.scan import SLASH, SPACE, scan_decimal, scan_int, scan_uint

MINIMUM_LINE_LENGTH = 127
DEFAULT_TEXT_ENCODING = "utf-8"
CURRENCY_DATE_MARKER = b"CURRENCY DATE = "

# Column positions, 0-indexed, end exclusive.
RECORD_FIELDS: dict[str, slice] = {
    "oas_number": slice(0, 9),
    "verification": slice(10, 11),
    "country": slice(12, 14),
    "state": slice(15, 17),
    "city": slice(18, 35),
    "lat_degrees": slice(35, 37),
    "lat_minutes": slice(38, 40),
    "lat_seconds": slice(41, 47),  # includes direction (N/S)
    "lon_degrees": slice(48, 51),
    "lon_minutes": slice(52, 54),
    "lon_seconds": slice(55, 61),  # includes direction (E/W)
    "obstacle_type": slice(62, 81),
    "quantity": slice(81, 82),
    "height_agl": slice(83, 88),
    "height_msl": slice(89, 94),
    "lighting": slice(95, 96),
    "accuracy": slice(97, 98),
    "marking": slice(99, 100),
    "study_number": slice(103, 117),
    "action": slice(118, 119),
    "last_updated": slice(120, 127),
}

_DIRECTIONS = {
    "latitude": {ord("N"): 1.0, ord("S"): -1.0},
    "longitude": {ord("E"): 1.0, ord("W"): -1.0},
}

_ACCURACY_UNKNOWN = ord("9")
_MARKING_NONE = ord("A")
_MARKING_ALIASES = frozenset((ord("N"), SPACE))


def parse_line(
    line: bytes, line_number: int = 0, *, encoding: str = DEFAULT_TEXT_ENCODING
) -> Obstacle:
    """Parse one DOF record line into an `Obstacle`.

    Raises a line-scoped `DofError` subclass (`LineTooShortError`, `FieldParseError`,
    `InvalidEncodingError`, `InvalidDirectionError`) when the line cannot be decoded.
    """

    if len(line) < MINIMUM_LINE_LENGTH:
        raise LineTooShortError(expected=MINIMUM_LINE_LENGTH, actual=len(line), line=line_number)

    def text(field: str) -> str:
        return _decode(line[RECORD_FIELDS[field]], field, line_number, encoding)

    state = text("state") or None

    accuracy_byte = _byte(line, "accuracy")
    if accuracy_byte == SPACE:
        accuracy_byte = _ACCURACY_UNKNOWN
    marking_byte = _byte(line, "marking")
    if marking_byte in _MARKING_ALIASES:
        marking_byte = _MARKING_NONE

    return Obstacle(
        oas_number=text("oas_number"),
        verification_status=_enum(VerificationStatus, line, "verification", line_number),
        country=text("country"),
        state=state,
        city=text("city"),
        latitude_deg=_coordinate(line, "lat", "latitude", line_number),
        longitude_deg=_coordinate(line, "lon", "longitude", line_number),
        obstacle_type=text("obstacle_type"),
        quantity=_number(scan_uint, line, "quantity", line_number),
        height_ft_agl=_number(scan_int, line, "height_agl", line_number),
        height_ft_msl=_number(scan_int, line, "height_msl", line_number),
        lighting=_enum(LightingType, line, "lighting", line_number),
        horizontal_accuracy=_lookup(AccuracyCategory, accuracy_byte, line, "accuracy", line_number),
        marking=_lookup(MarkingType, marking_byte, line, "marking", line_number),
        study_number=text("study_number"),
        action=_enum(ActionCode, line, "action", line_number),
        last_updated=_julian_date(line[RECORD_FIELDS["last_updated"]], line_number),
    )


def parse_currency_date(line: bytes) -> Cycle:
    """Parse the header line `... CURRENCY DATE = MM/DD/YY` into the file's cycle."""

    marker = line.find(CURRENCY_DATE_MARKER)
    if marker < 0:
        raise CurrencyDateHeaderNotFoundError()
    start = marker + len(CURRENCY_DATE_MARKER)

    first_slash = line.find(bytes((SLASH,)), start)
    second_slash = line.find(bytes((SLASH,)), first_slash + 1) if first_slash >= 0 else -1
    if second_slash < 0:
        raise InvalidCurrencyDateFormatError()

    month = scan_uint(line[start:first_slash])
    day = scan_uint(line[first_slash + 1 : second_slash])
    year = scan_uint(line[second_slash + 1 :])
    if month is None or day is None or year is None:
        raise InvalidCurrencyDateComponentsError()
    if year < 100:
        year += 2000

    # Bounds only; an impossible day such as 02/30 still yields a (non-calendar) cycle.
    try:
        return Cycle(year, month, day)
    except ValueError as exc:
        raise InvalidCurrencyDateComponentsError(
            f"The currency date {month:02d}/{day:02d}/{year} is out of range."
        ) from exc


def _decode(raw: bytes, field: str, line_number: int, encoding: str) -> str:
    try:
        return raw.decode(encoding).strip()
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(field=field, line=line_number) from exc


def _printable(raw: bytes) -> str:
    # FieldParseError.value is the field's bytes without column padding.
    return raw.decode("latin-1").strip()


def _byte(line: bytes, field: str) -> int:
    return line[RECORD_FIELDS[field].start]


def _enum(enum_cls: type[ByteCodedEnum], line: bytes, field: str, line_number: int):
    return _lookup(enum_cls, _byte(line, field), line, field, line_number)


def _lookup(
    enum_cls: type[ByteCodedEnum], byte: int, line: bytes, field: str, line_number: int
):
    member = enum_cls.from_byte(byte)
    if member is None:
        # Report the byte as it appeared in the file, before any normalization.
        raise FieldParseError(field=field, value=_printable(line[RECORD_FIELDS[field]]), line=line_number)
    return member


def _number(scanner, line: bytes, field: str, line_number: int) -> int:
    value = scanner(line[RECORD_FIELDS[field]])
    if value is None:
        raise FieldParseError(field=field, value=_printable(line[RECORD_FIELDS[field]]), line=line_number)
    return value


def _coordinate(line: bytes, prefix: str, axis: str, line_number: int) -> float:
    parts: list[float] = []
    for unit in ("degrees", "minutes"):
        field = f"{prefix}_{unit}"
        value = scan_decimal(line[RECORD_FIELDS[field]])
        if value is None:
            raise FieldParseError(field=field, value=_printable(line[RECORD_FIELDS[field]]), line=line_number)
        parts.append(value)

    field = f"{prefix}_seconds"
    raw_seconds = line[RECORD_FIELDS[field]]
    # The last byte is the hemisphere letter, not part of the number.
    seconds = scan_decimal(raw_seconds[:-1])
    if seconds is None:
        raise FieldParseError(field=field, value=_printable(raw_seconds), line=line_number)

    direction = raw_seconds[-1]
    sign = _DIRECTIONS[axis].get(direction)
    if sign is None:
        raise InvalidDirectionError(axis=axis, character=chr(direction), line=line_number)

    degrees, minutes = parts
    return sign * (degrees + minutes / 60.0 + seconds / 3600.0)


def _julian_date(raw: bytes, line_number: int) -> JulianDate:
    # YYYYDDD, e.g. 2014138 is day 138 of 2014.
    year: Optional[int] = scan_uint(raw[:4])
    if year is None:
        raise FieldParseError(field="last_updated_year", value=_printable(raw[:4]), line=line_number)
    day_of_year = scan_uint(raw[4:])
    if day_of_year is None:
        raise FieldParseError(field="last_updated_day", value=_printable(raw[4:]), line=line_number)
    return JulianDate(year=year, day_of_year=day_of_year)
