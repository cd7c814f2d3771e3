"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .scheduling import (
    AppointmentSinkProtocol,
    BookingResult,
    BusinessHoursSourceProtocol,
    SchedulingService,
)

__all__ = [
    "AppointmentSinkProtocol",
    "BookingResult",
    "BusinessHoursSourceProtocol",
    "SchedulingService",
]
