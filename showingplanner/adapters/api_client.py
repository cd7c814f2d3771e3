"""
Agency REST API client for business hours and appointment creation.
"""

import asyncio
import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import AppointmentAPIError, BusinessHoursError
from ..domain.models import BusinessHoursRule
from .schemas import parse_business_hours

logger = logging.getLogger(__name__)


class ShowingApiClient:
    """
    Client for the agency API endpoints the scheduler depends on.

    Uses ``GET /api/business-hours`` for the weekly table and
    ``POST /api/appointments`` to create one appointment per call. The
    blocking HTTP calls run in a worker thread so several appointments can
    be in flight at once.
    """

    BUSINESS_HOURS_PATH = "/api/business-hours"
    APPOINTMENTS_PATH = "/api/appointments"

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 30):
        """
        Initialize the API client.

        Args:
            base_url: Root URL of the agency API, without trailing slash
            token: Optional bearer token
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def get_business_hours(self) -> List[BusinessHoursRule]:
        """
        Fetch and validate the weekly business-hours table.

        Raises:
            BusinessHoursError: If the table cannot be fetched or is invalid
        """
        try:
            data = await asyncio.to_thread(self._request, "GET", self.BUSINESS_HOURS_PATH)
        except AppointmentAPIError as exc:
            raise BusinessHoursError(f"Failed to fetch business hours: {exc}") from exc

        return parse_business_hours(data)

    async def create_appointment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a single appointment.

        Returns:
            The created appointment record as returned by the API

        Raises:
            AppointmentAPIError: If the API call fails
        """
        data = await asyncio.to_thread(
            self._request, "POST", self.APPOINTMENTS_PATH, payload
        )
        if not isinstance(data, dict):
            raise AppointmentAPIError(
                f"Unexpected response when creating appointment for {payload.get('propertyId')}"
            )
        return data

    def _request(self, method: str, path: str, payload: Dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise AppointmentAPIError(f"{method} {path} failed: {exc}") from exc

        except ValueError as exc:
            raise AppointmentAPIError(f"{method} {path} returned invalid JSON") from exc
