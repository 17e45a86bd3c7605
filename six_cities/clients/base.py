from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, List

from pydantic import ValidationError

from ..errors import MockDataError
from ..models import MockDataset

logger = logging.getLogger(__name__)

# Resource collections served by the mock data server, keyed as in MockDataset
MOCK_RESOURCES: List[str] = [
    "titles",
    "descriptions",
    "cities",
    "previewImages",
    "propertyTypes",
    "features",
    "users",
    "coordinates",
]


class BaseMockDataClient(ABC):
    """Abstract client defining the interface for mock data sources."""

    @abstractmethod
    async def fetch_resource(self, name: str) -> Any:
        """Return the decoded JSON body of one resource collection."""
        raise NotImplementedError

    async def fetch_dataset(self) -> MockDataset:
        """Fetch every resource concurrently and validate the assembled dataset.

        Fails with ``MockDataError`` as soon as one resource fails; no partial
        dataset is returned.
        """
        tasks = [asyncio.ensure_future(self.fetch_resource(name)) for name in MOCK_RESOURCES]
        try:
            results = await asyncio.gather(*tasks)
        except Exception as e:  # noqa: BLE001
            # Cancel and reap the remaining requests before reporting the failure
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if isinstance(e, MockDataError):
                raise
            raise MockDataError(f"Failed to fetch mock data: {e}") from e

        raw = dict(zip(MOCK_RESOURCES, results))
        try:
            dataset = MockDataset.model_validate(raw)
        except ValidationError as e:
            raise MockDataError(f"Invalid mock data: {e}") from e

        logger.debug(
            f"Mock dataset loaded: {len(dataset.cities)} cities, "
            f"{len(dataset.users)} users, {len(dataset.titles)} titles"
        )
        return dataset
