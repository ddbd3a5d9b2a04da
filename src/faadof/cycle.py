"""DOF publication cycles.

The FAA republishes the Digital Obstacle File every 56 days. Cycle boundaries are counted from a
fixed datum (2025-09-01); a cycle is identified by its effective start date and written as
`YYYYMMDD`.

A `Cycle` only requires month 1..12 and day 1..31. Whether the triple is a calendar date
(`first_date`) and whether that date is a publication boundary (`is_valid`) are derived, so a
header carrying an off-cycle or impossible currency date still produces a usable container.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from faadof.utils.time import to_utc_date, utc_today

CYCLE_DATUM = date(2025, 9, 1)
CYCLE_PERIOD_DAYS = 56


@dataclass(frozen=True, order=True)
class Cycle:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # Day is not checked against the month's length: 2025-04-31 is accepted and has no
        # first_date.
        if not (1 <= self.month <= 12 and 1 <= self.day <= 31):
            raise ValueError(f"cycle month/day out of range: {self.month}/{self.day}")

    @classmethod
    def from_date(cls, value: date) -> "Cycle":
        return cls(value.year, value.month, value.day)

    @classmethod
    def covering(cls, value: date | datetime) -> "Cycle":
        """Return the latest cycle that started on or before `value`."""

        day = to_utc_date(value)
        offset = (day - CYCLE_DATUM).days
        # Floor division: one day before the datum belongs to the cycle 56 days earlier.
        index = offset // CYCLE_PERIOD_DAYS
        return cls.from_date(CYCLE_DATUM + timedelta(days=index * CYCLE_PERIOD_DAYS))

    @classmethod
    def current(cls) -> "Cycle":
        return cls.covering(utc_today())

    @classmethod
    def parse(cls, identifier: str) -> Optional["Cycle"]:
        """Parse a `YYYYMMDD` identifier.

        Only the numeric bounds month 1..12 and day 1..31 are checked; the day is not compared to
        the month's length, so "20250431" parses (its `first_date` is None and it is not valid).
        """

        if len(identifier) != 8 or not (identifier.isascii() and identifier.isdigit()):
            return None
        year = int(identifier[:4])
        month = int(identifier[4:6])
        day = int(identifier[6:])
        if not (1 <= month <= 12 and 1 <= day <= 31):
            return None
        return cls(year, month, day)

    @property
    def id(self) -> str:
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    def __str__(self) -> str:
        return self.id

    @property
    def first_date(self) -> Optional[date]:
        """Effective start date, or None when the triple is not a calendar date."""

        try:
            return date(self.year, self.month, self.day)
        except ValueError:
            return None

    @property
    def last_date(self) -> Optional[date]:
        """Last day of data coverage; FAA archive filenames use this date, not the start date."""

        first = self.first_date
        if first is None or first == date.min:
            return None
        return first - timedelta(days=1)

    @property
    def expiration_date(self) -> Optional[date]:
        following = self.next
        return following.first_date if following is not None else None

    @property
    def date_range(self) -> Optional[tuple[date, date]]:
        first = self.first_date
        end = self.expiration_date
        if first is None or end is None:
            return None
        return first, end

    @property
    def is_valid(self) -> bool:
        return is_cycle_boundary(self)

    @property
    def is_current(self) -> bool:
        return self == Cycle.current()

    @property
    def previous(self) -> Optional["Cycle"]:
        return self._shifted(-CYCLE_PERIOD_DAYS)

    @property
    def next(self) -> Optional["Cycle"]:
        return self._shifted(CYCLE_PERIOD_DAYS)

    def contains(self, value: date | datetime) -> bool:
        """Return True when `value` falls in [first_date, expiration_date)."""

        first = self.first_date
        if first is None:
            return False
        day = to_utc_date(value)
        end = self.expiration_date
        if day < first:
            return False
        return end is None or day < end

    def _shifted(self, days: int) -> Optional["Cycle"]:
        first = self.first_date
        if first is None:
            return None
        try:
            return Cycle.from_date(first + timedelta(days=days))
        except OverflowError:
            return None


def is_cycle_boundary(cycle: Cycle) -> bool:
    first = cycle.first_date
    if first is None:
        return False
    return (first - CYCLE_DATUM).days % CYCLE_PERIOD_DAYS == 0
