from .base_client import (
    APIHTTPError,
    APIRequestError,
    AsyncHTTPClient,
    BaseAPIClientError,
)

__all__ = [
    "APIHTTPError",
    "APIRequestError",
    "AsyncHTTPClient",
    "BaseAPIClientError",
]
