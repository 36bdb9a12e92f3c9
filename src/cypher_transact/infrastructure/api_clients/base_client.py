from typing import Any, Dict, Optional, Tuple

import httpx
from loguru import logger


class BaseAPIClientError(Exception):
    """Base exception for API client errors."""
    pass


class APIRequestError(BaseAPIClientError):
    """Indicates an error during the API request (network, timeout, etc.)."""
    pass


class APIHTTPError(BaseAPIClientError):
    """Indicates an HTTP error response from the API (4xx, 5xx)."""
    def __init__(self, status_code: int, response_content: Any, message: Optional[str] = None):
        """
        Initializes an APIHTTPError with the HTTP status code, response content, and an optional message.

        Args:
            status_code: The HTTP status code returned by the API.
            response_content: The content of the HTTP response.
            message: An optional custom error message. If not provided, a default message is generated.
        """
        self.status_code = status_code
        self.response_content = response_content
        self.message = message or f"API returned HTTP {status_code}"
        super().__init__(self.message)


class AsyncHTTPClient:
    """
    A base asynchronous HTTP client using httpx.
    Manages an httpx.AsyncClient instance for making requests.
    """
    def __init__(
        self,
        base_url: str,
        auth: Optional[Tuple[str, str]] = None,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: float = 20.0,
        connect_timeout: float = 10.0,
    ):
        """
        Initializes the asynchronous HTTP client with a base URL, optional basic auth, and default headers.

        Args:
            base_url: The base URL for all HTTP requests made by this client.
            auth: Optional ``(user, password)`` pair sent as HTTP basic auth.
            default_headers: Additional headers to include with every request.
            timeout: Overall request timeout in seconds.
            connect_timeout: Connection timeout in seconds.
        """
        if not isinstance(base_url, str):
            raise TypeError(f"base_url must be a string, got {type(base_url).__name__}")
        self.base_url = base_url.rstrip('/')

        headers = {
            "User-Agent": "cypher-transact/0.1",
            "Accept": "application/json; charset=UTF-8",
            "Content-Type": "application/json",
        }
        if default_headers:
            headers.update(default_headers)

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            auth=auth,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            follow_redirects=True,
        )
        logger.debug(f"AsyncHTTPClient initialized for base URL: {self.base_url}")

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        endpoint = endpoint.lstrip('/')
        logger.debug(f"{method} request to {self.base_url}/{endpoint}")
        try:
            response = await self.client.request(method, url=f"/{endpoint}", **kwargs)
            response.raise_for_status()
            logger.debug(f"{method} request to {self.base_url}/{endpoint} successful with status: {response.status_code}")
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} for {e.request.url}: {e.response.text[:200]}")
            raise APIHTTPError(status_code=e.response.status_code, response_content=e.response.text, message=str(e)) from e
        except httpx.RequestError as e:
            logger.error(f"Request error for {e.request.url}: {str(e)}")
            raise APIRequestError(f"Request error for {e.request.url}: {str(e)}") from e

    async def post(
        self, endpoint: str, json_data: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """
        Sends an asynchronous HTTP POST request to the specified API endpoint.

        Args:
        	endpoint: The relative path of the API endpoint to send the request to.
        	json_data: Optional dictionary to send as JSON in the request body.
        	headers: Optional dictionary of additional headers to include in the request.

        Returns:
        	The HTTP response object if the request is successful.

        Raises:
        	APIHTTPError: If the API responds with an HTTP error status (4xx or 5xx).
        	APIRequestError: If a network or request-related error occurs.
        """
        return await self._request("POST", endpoint, json=json_data, headers=headers)

    async def delete(self, endpoint: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """
        Sends an asynchronous HTTP DELETE request to the specified API endpoint.

        Raises:
        	APIHTTPError: If the API responds with an HTTP error status (4xx or 5xx).
        	APIRequestError: If a network or request-related error occurs.
        """
        return await self._request("DELETE", endpoint, headers=headers)

    async def close(self):
        """
        Closes the underlying asynchronous HTTP client.

        This method should be called to release network resources when the client is no longer needed.
        """
        logger.debug(f"Closing AsyncHTTPClient for base URL: {self.base_url}")
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
