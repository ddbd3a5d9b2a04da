from __future__ import annotations

import io
import zipfile

HEADER = b"  CURRENCY DATE = 12/21/25"
COLUMNS_1 = (
    b"                                   LATITUDE     LONGITUDE     OBSTACLE             AGL   AMSL "
    b"LT ACC MAR FAA          ACTION"
)
COLUMNS_2 = (
    b"OAS#      V CO ST CITY             DEG MIN SEC  DEG MIN SEC   TYPE                 HT    HT     "
    b"H V IND STUDY           JDATE"
)
SEPARATOR = b"-" * 127

RIG_1307 = (
    b"01-001307 O US AL DAUPHIN ISLAND   30 10 45.00N 088 04 39.00W RIG                1 00236 00236 "
    b"R 5 D M 1990ASO01578OE C 2014138 "
)
RIG_1459 = (
    b"01-001459 O US AL DAUPHIN ISLAND   30 11 20.00N 088 07 15.00W RIG                1 00240 00241 "
    b"R 5 D M 1992ASO02229OE C 2014138 "
)
STACK_1472 = (
    b"01-001472 O US AL FORT MORGAN      30 11 20.00N 087 57 10.00W STACK              1 00193 00193 "
    b"R 5 D M 1992ASO02230OE C 2014138 "
)
BLDG_61332 = (
    b"01-061332 U US AL GULF SHORES      30 14 43.32N 087 42 12.20W BLDG               1 00059 00067 "
    b"N 4 D N 2018ASO25793OE A 2020230 "
)


def splice(line: bytes, start: int, value: bytes) -> bytes:
    """Overwrite `line[start:start + len(value)]` with `value`."""

    return line[:start] + value + line[start + len(value) :]


def build_dof(*records: bytes, header: bytes = HEADER, newline: bytes = b"\n") -> bytes:
    lines = [header, COLUMNS_1, COLUMNS_2, SEPARATOR, *records]
    return newline.join(lines) + newline


SAMPLE_DOF = build_dof(RIG_1307, RIG_1459, STACK_1472)


def zip_bytes(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()
