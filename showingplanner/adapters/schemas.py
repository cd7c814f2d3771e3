"""
Validation of business-hours data received from the agency API or a file.

The planner assumes a clean table; everything it is handed passes through
``parse_business_hours`` first.
"""

import re
from typing import Any, Iterable, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..domain.exceptions import BusinessHoursError
from ..domain.models import BusinessHoursRule, parse_clock

_CLOCK_PATTERN = re.compile(r"^\d{2}:\d{2}$")


class BusinessHoursRecord(BaseModel):
    """One row of ``GET /api/business-hours``."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)
    is_open: bool = Field(alias="isOpen")
    open_time: str | None = Field(default=None, alias="openTime")
    close_time: str | None = Field(default=None, alias="closeTime")

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_clock(cls, value: str | None) -> str | None:
        """Accept "HH:MM" (a trailing ":SS" from the database is cut off)."""
        if value is None:
            return None
        value = value.strip()
        if len(value) == 8 and value.count(":") == 2:
            value = value[:5]
        if not _CLOCK_PATTERN.match(value):
            raise ValueError(f"Invalid time {value!r}, expected HH:MM")
        parse_clock(value)
        return value

    @model_validator(mode="after")
    def validate_open_window(self) -> "BusinessHoursRecord":
        """Open days need both times and must open before they close."""
        if not self.is_open:
            return self
        if self.open_time is None or self.close_time is None:
            raise ValueError(f"Day {self.day_of_week} is open but has no openTime/closeTime")
        if parse_clock(self.open_time) >= parse_clock(self.close_time):
            raise ValueError(
                f"Day {self.day_of_week}: openTime {self.open_time} must be before "
                f"closeTime {self.close_time}"
            )
        return self

    def to_rule(self) -> BusinessHoursRule:
        """Convert to the domain model."""
        if self.open_time is None or self.close_time is None:
            return BusinessHoursRule(day_of_week=self.day_of_week, is_open=self.is_open)
        return BusinessHoursRule(
            day_of_week=self.day_of_week,
            is_open=self.is_open,
            open_time=self.open_time,
            close_time=self.close_time,
        )


def parse_business_hours(rows: Iterable[Any]) -> List[BusinessHoursRule]:
    """
    Validate raw rows and return the table sorted by weekday.

    Raises:
        BusinessHoursError: If a row is invalid or a weekday appears twice
    """
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        raise BusinessHoursError("Business hours must be a list of records.")

    rules: List[BusinessHoursRule] = []
    seen_days: set[int] = set()

    for index, row in enumerate(rows):
        try:
            record = BusinessHoursRecord.model_validate(row)
        except ValidationError as exc:
            raise BusinessHoursError(f"Invalid business hours record #{index}: {exc}") from exc

        if record.day_of_week in seen_days:
            raise BusinessHoursError(
                f"Duplicate business hours record for weekday {record.day_of_week}"
            )
        seen_days.add(record.day_of_week)
        rules.append(record.to_rule())

    return sorted(rules, key=lambda rule: rule.day_of_week)
