from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import MockDataError
from .base import BaseMockDataClient


class LocalMockDataClient(BaseMockDataClient):
    """Reads collections from a json-server database file instead of a server."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._data: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._data is None:
            try:
                with self.path.open(encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise MockDataError(f"Cannot read mock data file {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise MockDataError(f"Mock data file {self.path} must contain a JSON object")
            self._data = data
        return self._data

    async def fetch_resource(self, name: str) -> Any:
        data = self._load()
        if name not in data:
            raise MockDataError(f"Mock data file {self.path} has no '{name}' collection")
        return data[name]
