"""
Core business logic for bookable showing slots and property tours.

Pure domain logic: no API calls, no clock reads, no I/O. The business-hours
table is always passed in explicitly by the caller.
"""

import uuid
from typing import Callable, Iterable, List, Sequence, Set

from pendulum import Date, DateTime

from .models import BusinessHoursRule, TimeSlot, TourPlan, TourStop

DEFAULT_SLOT_MINUTES = 60
DEFAULT_STOP_MINUTES = 30


def weekday_index(day: Date) -> int:
    """Weekday of ``day`` numbered 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def _as_date(day: Date | DateTime) -> Date:
    if isinstance(day, DateTime):
        return day.date()
    return day


class SlotPlanner:
    """
    Computes bookable windows for a date and sequences tour stops inside them.

    Algorithm for slots:
    1. Find the business-hours rule for the date's weekday
    2. Closed or missing rule -> no slots
    3. Walk from opening time in fixed steps, emitting a window per step
    4. Stop before any window that would end after closing time
    """

    def __init__(
        self,
        slot_minutes: int = DEFAULT_SLOT_MINUTES,
        stop_minutes: int = DEFAULT_STOP_MINUTES,
        id_factory: Callable[[], str] | None = None,
    ):
        if slot_minutes <= 0 or stop_minutes <= 0:
            raise ValueError("slot_minutes and stop_minutes must be greater than zero")
        self.slot_minutes = slot_minutes
        self.stop_minutes = stop_minutes
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def generate_slots(
        self,
        day: Date,
        business_hours: Iterable[BusinessHoursRule],
    ) -> List[TimeSlot]:
        """
        Generate the ordered bookable windows for ``day``.

        Args:
            day: Calendar date (pendulum Date or DateTime)
            business_hours: Weekly table, at most one rule per weekday

        Returns:
            Ascending list of TimeSlot objects; empty when the day is closed
        """
        rule = self.find_rule(day, business_hours)
        if rule is None or not rule.is_open:
            return []

        close_minute = rule.close_minute()
        cursor = rule.open_minute()
        slots: List[TimeSlot] = []

        # A trailing partial window is dropped, never shortened
        while cursor + self.slot_minutes <= close_minute:
            slots.append(TimeSlot(start_minute=cursor, end_minute=cursor + self.slot_minutes))
            cursor += self.slot_minutes

        return slots

    def format_slots(
        self,
        day: Date,
        business_hours: Iterable[BusinessHoursRule],
    ) -> List[str]:
        """Same as ``generate_slots`` but rendered as "HH:MM - HH:MM" labels."""
        return [slot.label for slot in self.generate_slots(day, business_hours)]

    def plan_tour(self, slot: TimeSlot, property_ids: Sequence[str]) -> TourPlan:
        """
        Fit a multi-property tour into ``slot``.

        Every property gets ``stop_minutes``; stop ``i`` starts at
        ``slot.start + i * stop_minutes``. When the tour does not fit, an
        invalid plan stating the shortfall is returned instead of stops.

        Raises:
            ValueError: If no property ids are given
        """
        if not property_ids:
            raise ValueError("A tour needs at least one property.")

        required = len(property_ids) * self.stop_minutes
        available = slot.duration_minutes()

        if required > available:
            return TourPlan(
                valid=False,
                required_minutes=required,
                available_minutes=available,
                reason=(
                    f"The tour requires {required} minutes but the slot only has "
                    f"{available} minutes available. Please choose an earlier or longer slot."
                ),
            )

        tour_group_id = self._id_factory()
        stops = tuple(
            TourStop(
                property_id=property_id,
                offset_minutes=index * self.stop_minutes,
                start_minute=slot.start_minute + index * self.stop_minutes,
                tour_group_id=tour_group_id,
            )
            for index, property_id in enumerate(property_ids)
        )

        return TourPlan(
            valid=True,
            required_minutes=required,
            available_minutes=available,
            stops=stops,
            tour_group_id=tour_group_id,
        )

    @staticmethod
    def find_rule(
        day: Date,
        business_hours: Iterable[BusinessHoursRule],
    ) -> BusinessHoursRule | None:
        """Return the rule governing ``day`` or None if the table has none."""
        weekday = weekday_index(day)
        for rule in business_hours:
            if rule.day_of_week == weekday:
                return rule
        return None

    @staticmethod
    def closed_weekdays(business_hours: Iterable[BusinessHoursRule]) -> Set[int]:
        """Weekdays explicitly marked closed in the table."""
        return {rule.day_of_week for rule in business_hours if not rule.is_open}

    def is_bookable_date(
        self,
        day: Date,
        business_hours: Iterable[BusinessHoursRule],
        today: Date,
    ) -> bool:
        """
        Whether ``day`` can be picked at all: not in the past and not on a
        weekday marked closed.
        """
        if _as_date(day) < _as_date(today):
            return False
        return weekday_index(day) not in self.closed_weekdays(business_hours)
