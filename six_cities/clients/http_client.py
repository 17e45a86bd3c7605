from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from ..config import settings
from ..errors import MockDataError
from ..models import MockDataset
from .base import BaseMockDataClient
from .local_client import LocalMockDataClient

logger = logging.getLogger(__name__)


class HttpMockDataClient(BaseMockDataClient):
    """Mock data server client (json-server style: one GET per collection)."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str) -> None:
        self.http = http_client
        self.base_url = base_url.rstrip("/")

    def _resource_url(self, name: str) -> str:
        return f"{self.base_url}/{name}"

    async def fetch_resource(self, name: str) -> Any:
        url = self._resource_url(name)
        try:
            resp = await self.http.get(url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise MockDataError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise MockDataError(f"Response from {url} is not valid JSON: {e}") from e


async def fetch_mock_dataset(source: str, timeout: Optional[float] = None) -> MockDataset:
    """Load the mock dataset from a local JSON file or a mock server base URL."""
    if Path(source).is_file():
        logger.info(f"Reading mock data from file {source}")
        return await LocalMockDataClient(source).fetch_dataset()

    logger.info(f"Fetching mock data from {source}")
    timeout = settings.http_timeout_seconds if timeout is None else timeout
    async with httpx.AsyncClient(timeout=timeout) as http_client:
        return await HttpMockDataClient(http_client, source).fetch_dataset()
