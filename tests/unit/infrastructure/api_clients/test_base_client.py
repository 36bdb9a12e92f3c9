import asyncio
import json

import httpx
import pytest

from cypher_transact.infrastructure.api_clients.base_client import (
    APIHTTPError,
    APIRequestError,
    AsyncHTTPClient,
)


def _client_with_handler(handler) -> AsyncHTTPClient:
    client = AsyncHTTPClient("http://example.com")
    client.client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://example.com"
    )  # Replace internal client
    return client


class TestAsyncHTTPClientRequests:
    @pytest.mark.asyncio
    async def test_post_sends_json(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"results": [], "errors": []})

        client = _client_with_handler(handler)
        response = await client.post("/db/data/transaction/commit", json_data={"statements": []})

        assert response.json() == {"results": [], "errors": []}
        assert seen == {
            "method": "POST",
            "path": "/db/data/transaction/commit",
            "body": {"statements": []},
        }
        await client.close()

    @pytest.mark.asyncio
    async def test_delete(self):
        def handler(request: httpx.Request):
            assert request.method == "DELETE"
            assert request.url.path == "/db/data/transaction/4"
            return httpx.Response(200, json={"results": [], "errors": []})

        client = _client_with_handler(handler)
        response = await client.delete("db/data/transaction/4")

        assert response.status_code == 200
        await client.close()

    @pytest.mark.asyncio
    async def test_http_error_raises_api_http_error(self):
        def handler(request: httpx.Request):
            return httpx.Response(404, text='{"errors": [{"code": "x"}]}')

        client = _client_with_handler(handler)
        with pytest.raises(APIHTTPError) as exc_info:
            await client.post("/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.response_content == '{"errors": [{"code": "x"}]}'
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_raises_api_request_error(self):
        def handler(request: httpx.Request):
            raise httpx.TimeoutException("timeout", request=request)

        client = _client_with_handler(handler)
        with pytest.raises(APIRequestError):
            await client.delete("/slow")
        await client.close()


class TestAsyncHTTPClientInitialization:
    def test_default_headers(self):
        client = AsyncHTTPClient("http://example.com/", default_headers={"X-Custom": "value"})

        assert client.base_url == "http://example.com"
        assert client.client.headers.get("X-Custom") == "value"
        assert client.client.headers.get("Content-Type") == "application/json"
        assert "User-Agent" in client.client.headers
        assert "Accept" in client.client.headers
        asyncio.run(client.close())

    def test_basic_auth(self):
        client = AsyncHTTPClient("http://example.com", auth=("neo4j", "secret"))

        assert isinstance(client.client.auth, httpx.BasicAuth)
        asyncio.run(client.close())

    def test_invalid_base_url_type_raises_type_error(self):
        with pytest.raises(TypeError):
            AsyncHTTPClient(base_url=12345)

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_client(self):
        async with AsyncHTTPClient("http://example.com") as client:
            assert not client.client.is_closed
        assert client.client.is_closed
