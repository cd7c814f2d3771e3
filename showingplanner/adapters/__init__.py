"""
Adapters for external services (agency REST API, mock data).
"""

from .api_client import ShowingApiClient
from .mock_api_client import MockShowingApiClient

__all__ = ["ShowingApiClient", "MockShowingApiClient"]
