from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from faadof.parsing.errors import InvalidJulianDateError

NAUTICAL_MILE_FT = 6076.12


class ByteCodedEnum(str, Enum):
    """A closed set of one-character DOF codes."""

    @classmethod
    def from_byte(cls, byte: int):
        """Look up the member for one raw ASCII byte; None when the byte is not in the table."""

        return BYTE_TABLES[cls].get(byte)


class VerificationStatus(ByteCodedEnum):
    OPERATIONAL = "O"
    UNDER_REVIEW = "U"


class LightingType(ByteCodedEnum):
    RED = "R"
    HIGH_INTENSITY_WHITE = "H"
    MEDIUM_INTENSITY_WHITE = "M"
    DUAL = "D"
    LOW_INTENSITY = "L"
    STROBE = "S"
    WHITE = "W"
    FLASHING = "F"
    CATENARY = "C"
    TEMPORARY = "T"
    NONE = "N"
    UNKNOWN = "U"


class AccuracyCategory(ByteCodedEnum):
    SURVEY = "A"
    CATEGORY_1 = "1"
    CATEGORY_2 = "2"
    CATEGORY_3 = "3"
    CATEGORY_4 = "4"
    CATEGORY_5 = "5"
    CATEGORY_6 = "6"
    CATEGORY_7 = "7"
    CATEGORY_8 = "8"
    # Accuracy unknown; blank source bytes decode here too.
    CATEGORY_9 = "9"

    @property
    def accuracy_ft(self) -> Optional[float]:
        """Approximate horizontal accuracy in feet, or None when the category is unknown."""

        return _ACCURACY_FT[self]


_ACCURACY_FT: dict[AccuracyCategory, Optional[float]] = {
    AccuracyCategory.SURVEY: 3.0,
    AccuracyCategory.CATEGORY_1: 20.0,
    AccuracyCategory.CATEGORY_2: 50.0,
    AccuracyCategory.CATEGORY_3: 100.0,
    AccuracyCategory.CATEGORY_4: 250.0,
    AccuracyCategory.CATEGORY_5: 500.0,
    AccuracyCategory.CATEGORY_6: 1000.0,
    AccuracyCategory.CATEGORY_7: 0.5 * NAUTICAL_MILE_FT,
    AccuracyCategory.CATEGORY_8: NAUTICAL_MILE_FT,
    AccuracyCategory.CATEGORY_9: None,
}


class MarkingType(ByteCodedEnum):
    # Raw "N" and blank bytes are normalized to "A" before lookup.
    NONE = "A"
    ORANGE_WHITE_PAINT = "B"
    FLAG_MARKERS = "C"
    PAINT_AND_FLAGS = "D"
    LIGHTING_ONLY = "E"
    PAINT_AND_LIGHTING = "F"
    FLAGS_AND_LIGHTING = "G"
    PAINT_FLAGS_AND_LIGHTING = "H"
    SPHERICAL_MARKERS = "I"


class ActionCode(ByteCodedEnum):
    ACTIVE = "A"
    CHANGED = "C"


BYTE_TABLES: dict[type, dict[int, ByteCodedEnum]] = {
    enum_cls: {ord(member.value): member for member in enum_cls}
    for enum_cls in (VerificationStatus, LightingType, AccuracyCategory, MarkingType, ActionCode)
}


class JulianDate(BaseModel):
    """Last-updated stamp as published (YYYYDDD); resolving it to a calendar date may fail."""

    model_config = ConfigDict(frozen=True)

    year: int
    day_of_year: int

    def to_date(self) -> date:
        if self.day_of_year < 1:
            raise InvalidJulianDateError(self.year, self.day_of_year)
        try:
            resolved = date(self.year, 1, 1) + timedelta(days=self.day_of_year - 1)
        except (ValueError, OverflowError) as exc:
            raise InvalidJulianDateError(self.year, self.day_of_year) from exc
        if resolved.year != self.year:
            raise InvalidJulianDateError(self.year, self.day_of_year)
        return resolved


class Obstacle(BaseModel):
    """One DOF record. Identity is the OAS number alone."""

    model_config = ConfigDict(frozen=True)

    oas_number: str
    verification_status: VerificationStatus
    country: str
    state: Optional[str] = None
    city: str
    latitude_deg: float
    longitude_deg: float
    obstacle_type: str
    quantity: int = Field(ge=0, le=255)
    height_ft_agl: int
    height_ft_msl: int
    lighting: LightingType
    horizontal_accuracy: AccuracyCategory
    marking: MarkingType
    study_number: str
    action: ActionCode
    last_updated: JulianDate

    @property
    def id(self) -> str:
        return self.oas_number

    @property
    def last_updated_date(self) -> Optional[date]:
        try:
            return self.last_updated.to_date()
        except InvalidJulianDateError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Obstacle):
            return NotImplemented
        return self.oas_number == other.oas_number

    def __hash__(self) -> int:
        return hash(self.oas_number)
