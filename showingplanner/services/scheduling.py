"""
Application service for booking property showings.

The service fetches the business-hours table through an injected source,
delegates slot and tour computation to the domain ``SlotPlanner`` and hands
the resulting appointments to an injected sink. Both collaborators are
described by protocols so the REST adapter, the mock adapter or a test stub
can be plugged in.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from pendulum import Date, DateTime

from ..domain.exceptions import SlotUnavailableError, TourSubmissionError
from ..domain.models import AppointmentRequest, BusinessHoursRule, TimeSlot, TourPlan
from ..domain.slot_planner import SlotPlanner

logger = logging.getLogger(__name__)

INDIVIDUAL = "individual"
TOUR = "tour"


class BusinessHoursSourceProtocol(Protocol):
    """Anything that can provide the weekly business-hours table."""

    async def get_business_hours(self) -> List[BusinessHoursRule]:
        """Return the current table."""


class AppointmentSinkProtocol(Protocol):
    """Anything that can persist a single appointment."""

    async def create_appointment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create one appointment and return the stored record."""


@dataclass
class BookingResult:
    """What happened to a booking request."""
    mode: str
    requests: List[AppointmentRequest] = field(default_factory=list)
    appointments: List[Dict[str, Any]] = field(default_factory=list)
    plan: TourPlan | None = None

    @property
    def submitted(self) -> bool:
        return self.plan is None or self.plan.valid


class SchedulingService:
    """
    Orchestrates business-hours retrieval, slot planning and submission.
    """

    def __init__(
        self,
        hours_source: BusinessHoursSourceProtocol,
        appointment_sink: AppointmentSinkProtocol,
        planner: SlotPlanner,
    ) -> None:
        self._hours_source = hours_source
        self._appointment_sink = appointment_sink
        self._planner = planner

    @property
    def planner(self) -> SlotPlanner:
        return self._planner

    async def business_hours(self) -> List[BusinessHoursRule]:
        """Fetch the business-hours table once."""
        return await self._hours_source.get_business_hours()

    async def available_slots(self, day: Date) -> List[TimeSlot]:
        """Bookable windows for ``day``."""
        table = await self.business_hours()
        return self._planner.generate_slots(day, table)

    async def plan_tour(
        self,
        *,
        property_ids: Sequence[str],
        day: Date,
        slot_label: str,
    ) -> TourPlan:
        """Dry-run a tour for ``day`` without submitting anything."""
        slot = await self._resolve_slot(day, slot_label)
        return self._planner.plan_tour(slot, self._unique(property_ids))

    async def book(
        self,
        *,
        property_ids: Sequence[str],
        day: Date,
        slot_label: str,
        mode: str = INDIVIDUAL,
        presentation_card_id: str | None = None,
        notes: str = "",
    ) -> BookingResult:
        """
        Book an individual showing or a tour.

        A tour with more than one property is planned first; if it does not
        fit the slot, the invalid plan is returned and nothing is submitted.
        Otherwise one appointment is created per stop.

        Raises:
            ValueError: If the property list or the mode is not valid
            SlotUnavailableError: If the slot is not offered on ``day``
            TourSubmissionError: If only part of a tour could be created
        """
        if mode not in (INDIVIDUAL, TOUR):
            raise ValueError(f"Unknown appointment mode: {mode!r}")

        properties = self._unique(property_ids)
        if not properties:
            raise ValueError("At least one property is required.")
        if mode == INDIVIDUAL and len(properties) > 1:
            raise ValueError("Individual mode books one property; use tour mode for several.")

        slot = await self._resolve_slot(day, slot_label)
        date_str = _date_string(day)

        if mode == TOUR and len(properties) > 1:
            plan = self._planner.plan_tour(slot, properties)
            if not plan.valid:
                logger.info("Tour rejected: %s", plan.reason)
                return BookingResult(mode=TOUR, plan=plan)

            requests = [
                AppointmentRequest(
                    property_id=stop.property_id,
                    date=date_str,
                    time=stop.start_time,
                    appointment_mode=TOUR,
                    presentation_card_id=presentation_card_id,
                    notes=notes,
                    tour_group_id=stop.tour_group_id,
                )
                for stop in plan.stops
            ]
            appointments = await self._submit_tour(requests)
            return BookingResult(mode=TOUR, requests=requests, appointments=appointments, plan=plan)

        request = AppointmentRequest(
            property_id=properties[0],
            date=date_str,
            time=slot.start,
            appointment_mode=mode,
            presentation_card_id=presentation_card_id,
            notes=notes,
        )
        appointment = await self._appointment_sink.create_appointment(request.to_payload())
        logger.info("Appointment created for property %s at %s %s", request.property_id, date_str, request.time)
        return BookingResult(mode=mode, requests=[request], appointments=[appointment])

    async def _submit_tour(self, requests: List[AppointmentRequest]) -> List[Dict[str, Any]]:
        """
        Create all tour stops concurrently.

        Every call is attempted; there is no rollback of stops that were
        created when another one fails.
        """
        results = await asyncio.gather(
            *(self._appointment_sink.create_appointment(r.to_payload()) for r in requests),
            return_exceptions=True,
        )

        created: List[Dict[str, Any]] = []
        failures = []
        for request, result in zip(requests, results):
            if isinstance(result, Exception):
                failures.append((request.property_id, result))
            elif isinstance(result, BaseException):
                raise result
            else:
                created.append(result)

        if failures:
            logger.warning(
                "Tour %s partially submitted: %d created, %d failed",
                requests[0].tour_group_id, len(created), len(failures),
            )
            raise TourSubmissionError(created=created, failures=failures)

        logger.info("Tour %s created with %d stops", requests[0].tour_group_id, len(created))
        return created

    async def _resolve_slot(self, day: Date, slot_label: str) -> TimeSlot:
        """Parse ``slot_label`` and make sure it is offered on ``day``."""
        slot = TimeSlot.parse(slot_label)
        offered = await self.available_slots(day)
        if slot not in offered:
            raise SlotUnavailableError(
                f"Slot {slot.label} is not available on {_date_string(day)}."
            )
        return slot

    @staticmethod
    def _unique(property_ids: Sequence[str]) -> List[str]:
        """Drop duplicate property ids, keeping the first occurrence."""
        seen: set[str] = set()
        unique: List[str] = []
        for property_id in property_ids:
            if property_id not in seen:
                unique.append(property_id)
                seen.add(property_id)
        return unique


def _date_string(day: Date) -> str:
    if isinstance(day, DateTime):
        day = day.date()
    return day.isoformat()
