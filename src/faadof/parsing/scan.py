"""Numeric scanners that read ASCII digits straight out of a byte slice.

The DOF layout right-aligns and zero-pads numbers inside fixed columns, so every scanner skips
leading spaces and stops at the first trailing space or non-digit. None means "no digits".
"""

from __future__ import annotations

from typing import Optional

SPACE = 0x20
MINUS = 0x2D
DOT = 0x2E
SLASH = 0x2F
ZERO = 0x30
NINE = 0x39


def scan_uint(data: bytes) -> Optional[int]:
    result = 0
    started = False
    for byte in data:
        if byte == SPACE:
            if started:
                break
            continue
        if not ZERO <= byte <= NINE:
            if started:
                break
            return None
        started = True
        result = result * 10 + (byte - ZERO)
    return result if started else None


def scan_int(data: bytes) -> Optional[int]:
    """Like `scan_uint`, but a single leading minus sign negates the result."""

    result = 0
    started = False
    negative = False
    has_digits = False
    for byte in data:
        if byte == SPACE:
            if started:
                break
            continue
        if byte == MINUS and not started:
            negative = True
            started = True
            continue
        if not ZERO <= byte <= NINE:
            if started:
                break
            return None
        started = True
        has_digits = True
        result = result * 10 + (byte - ZERO)
    if not has_digits:
        return None
    return -result if negative else result


def scan_decimal(data: bytes) -> Optional[float]:
    """Scan digits with an optional decimal point and optional leading minus (e.g. b"45.00")."""

    whole = 0
    fraction = 0
    divisor = 1
    in_fraction = False
    started = False
    negative = False
    has_digits = False
    for byte in data:
        if byte == SPACE:
            if started:
                break
            continue
        if byte == MINUS and not started:
            negative = True
            started = True
            continue
        if byte == DOT and not in_fraction:
            in_fraction = True
            started = True
            continue
        if not ZERO <= byte <= NINE:
            if started:
                break
            return None
        started = True
        has_digits = True
        if in_fraction:
            fraction = fraction * 10 + (byte - ZERO)
            divisor *= 10
        else:
            whole = whole * 10 + (byte - ZERO)
    if not has_digits:
        return None
    value = whole + fraction / divisor
    return -value if negative else value
