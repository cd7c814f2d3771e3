"""
Domain-specific exception hierarchy for the showing planner.
"""

from typing import Any, Dict, List, Tuple


class ShowingPlannerError(Exception):
    """Base class for all application-level errors."""


class BusinessHoursError(ShowingPlannerError):
    """Raised when the business-hours table cannot be fetched or is invalid."""


class AppointmentAPIError(ShowingPlannerError):
    """Raised when the appointments API rejects or fails a request."""


class SlotUnavailableError(ShowingPlannerError):
    """Raised when a requested slot is not offered on the requested date."""


class TourSubmissionError(ShowingPlannerError):
    """
    Raised when some stops of a tour could not be created.

    Stops that were created stay created; ``created`` lists their records and
    ``failures`` pairs each failed property id with its error.
    """

    def __init__(
        self,
        created: List[Dict[str, Any]],
        failures: List[Tuple[str, BaseException]],
    ):
        self.created = created
        self.failures = failures
        failed_ids = ", ".join(property_id for property_id, _ in failures)
        super().__init__(
            f"{len(failures)} tour stop(s) failed ({failed_ids}); "
            f"{len(created)} stop(s) were created and remain booked."
        )
