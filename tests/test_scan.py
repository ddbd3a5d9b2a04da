from __future__ import annotations

import pytest

from faadof.parsing.scan import scan_decimal, scan_int, scan_uint


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"00236", 236),
        (b"  12 ", 12),
        (b"1", 1),
        (b"12 34", 12),
        (b"1x", 1),
        (b"", None),
        (b"   ", None),
        (b"x1", None),
        (b"-5", None),
    ],
)
def test_scan_uint(data: bytes, expected) -> None:
    assert scan_uint(data) == expected


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"00067", 67),
        (b"-0010", -10),
        (b" -12 ", -12),
        (b"-", None),
        (b" - ", None),
        (b"--1", None),
        (b"", None),
    ],
)
def test_scan_int(data: bytes, expected) -> None:
    assert scan_int(data) == expected


def test_scan_decimal_reads_seconds_fields() -> None:
    assert scan_decimal(b"45.00") == pytest.approx(45.0)
    assert scan_decimal(b"43.32") == pytest.approx(43.32)
    assert scan_decimal(b" 7.5") == pytest.approx(7.5)
    assert scan_decimal(b"088") == pytest.approx(88.0)
    assert scan_decimal(b"-1.25") == pytest.approx(-1.25)
    assert scan_decimal(b".5") == pytest.approx(0.5)


def test_scan_decimal_without_digits_is_none() -> None:
    assert scan_decimal(b"") is None
    assert scan_decimal(b".") is None
    assert scan_decimal(b"-") is None
    assert scan_decimal(b"N") is None


def test_scan_decimal_stops_at_second_dot() -> None:
    assert scan_decimal(b"1.2.3") == pytest.approx(1.2)
