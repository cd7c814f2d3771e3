"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import AppointmentRequest, BusinessHoursRule, TimeSlot, TourPlan, TourStop
from .slot_planner import SlotPlanner

__all__ = [
    "AppointmentRequest",
    "BusinessHoursRule",
    "TimeSlot",
    "TourPlan",
    "TourStop",
    "SlotPlanner",
]
