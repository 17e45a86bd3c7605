from .base import MOCK_RESOURCES, BaseMockDataClient
from .http_client import HttpMockDataClient, fetch_mock_dataset
from .local_client import LocalMockDataClient

__all__ = [
    "MOCK_RESOURCES",
    "BaseMockDataClient",
    "HttpMockDataClient",
    "LocalMockDataClient",
    "fetch_mock_dataset",
]
