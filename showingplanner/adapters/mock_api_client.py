"""
Mock agency API client for running the scheduler without a server.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..domain.exceptions import AppointmentAPIError, BusinessHoursError
from ..domain.models import BusinessHoursRule
from .schemas import parse_business_hours

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_business_hours.json"


class MockShowingApiClient:
    """
    Mock client that simulates the agency API.

    Business hours come from a JSON file (the packaged table by default) and
    created appointments are kept in memory in ``appointments``.
    """

    def __init__(
        self,
        business_hours_file: Path | None = None,
        failing_property_ids: Iterable[str] = (),
    ):
        """
        Initialize the mock client.

        Args:
            business_hours_file: Optional JSON file with business-hours records
            failing_property_ids: Property ids whose appointment creation fails
        """
        self.business_hours_file = business_hours_file or DEFAULT_DATA_FILE
        self.failing_property_ids = set(failing_property_ids)
        self.appointments: List[Dict[str, Any]] = []

    async def get_business_hours(self) -> List[BusinessHoursRule]:
        """Load business hours from the JSON file."""
        try:
            with open(self.business_hours_file, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BusinessHoursError(
                f"Could not read business hours from {self.business_hours_file}: {exc}"
            ) from exc

        return parse_business_hours(rows)

    async def create_appointment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Store the appointment in memory and return it with an id."""
        property_id = payload.get("propertyId")
        if property_id in self.failing_property_ids:
            raise AppointmentAPIError(f"POST /api/appointments failed for property {property_id}")

        record = {"id": str(uuid.uuid4()), "status": "pending", **payload}
        self.appointments.append(record)
        logger.debug("Mock appointment %s created for property %s", record["id"], property_id)
        return record
