"""
Domain models for business hours, bookable slots and property tours.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


def parse_clock(value: str) -> int:
    """
    Convert a wall-clock "HH:MM" string into minutes since midnight.

    Raises:
        ValueError: If the value is not a valid HH:MM time
    """
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid time '{value}', expected HH:MM") from exc

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    return hours * 60 + minutes


def format_clock(minute_of_day: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    hours, minutes = divmod(minute_of_day, 60)
    return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True)
class BusinessHoursRule:
    """
    Opening hours of the agency for one weekday.

    Weekdays are numbered 0=Sunday .. 6=Saturday. The times are only
    meaningful when ``is_open`` is true.
    """
    day_of_week: int
    is_open: bool
    open_time: str = "09:00"
    close_time: str = "18:00"

    def open_minute(self) -> int:
        return parse_clock(self.open_time)

    def close_minute(self) -> int:
        return parse_clock(self.close_time)


@dataclass(frozen=True)
class TimeSlot:
    """
    A bookable window on the selected date, stored as minutes of day.
    """
    start_minute: int
    end_minute: int

    def __post_init__(self):
        if self.start_minute >= self.end_minute:
            raise ValueError(
                f"Slot start {format_clock(self.start_minute)} must be before "
                f"end {format_clock(self.end_minute)}"
            )

    @property
    def start(self) -> str:
        return format_clock(self.start_minute)

    @property
    def end(self) -> str:
        return format_clock(self.end_minute)

    @property
    def label(self) -> str:
        """Display form used by the selection control: "HH:MM - HH:MM"."""
        return f"{self.start} - {self.end}"

    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @classmethod
    def parse(cls, label: str) -> "TimeSlot":
        """
        Read a slot back from its "HH:MM - HH:MM" label.

        Raises:
            ValueError: If the label is malformed or the window is empty
        """
        parts = label.split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid slot '{label}', expected 'HH:MM - HH:MM'")
        return cls(start_minute=parse_clock(parts[0]), end_minute=parse_clock(parts[1]))

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class TourStop:
    """One property visit inside a tour."""
    property_id: str
    offset_minutes: int
    start_minute: int
    tour_group_id: str

    @property
    def start_time(self) -> str:
        return format_clock(self.start_minute)


@dataclass(frozen=True)
class TourPlan:
    """
    Outcome of fitting a tour into a slot.

    An invalid plan carries a user-facing ``reason`` and no stops; it is a
    validation result, not an error.
    """
    valid: bool
    required_minutes: int
    available_minutes: int
    stops: Tuple[TourStop, ...] = ()
    reason: str | None = None
    tour_group_id: str | None = None


@dataclass(frozen=True)
class AppointmentRequest:
    """
    A single appointment ready to be handed to the appointments API.
    """
    property_id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    appointment_mode: str = "individual"
    appointment_type: str = "in-person"
    presentation_card_id: str | None = None
    notes: str = ""
    tour_group_id: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        """Build the camelCase JSON body expected by ``POST /api/appointments``."""
        payload: Dict[str, Any] = {
            "propertyId": self.property_id,
            "date": self.date,
            "time": self.time,
            "appointmentMode": self.appointment_mode,
            "appointmentType": self.appointment_type,
            "presentationCardId": self.presentation_card_id,
            "notes": self.notes,
        }
        if self.tour_group_id is not None:
            payload["tourGroupId"] = self.tour_group_id
        return payload
