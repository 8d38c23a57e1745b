"""
Test suite for the httpx transport and the server/database targets.
"""

import httpx
import pytest

from arango_batch.core.coordinator import BatchCoordinator
from arango_batch.transport.httpx_transport import HttpxTransport
from arango_batch.transport.interface import TransportError
from arango_batch.transport.target import Database, Server
from conftest import make_response, make_response_part


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url="http://arangodb.test:8529",
        transport=httpx.MockTransport(handler),
    )


# ============================================================================
# Test HttpxTransport
# ============================================================================

class TestHttpxTransport:
    """Tests for the httpx-backed transport."""

    @pytest.mark.asyncio
    async def test_post_returns_text(self, test_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content.decode()
            return httpx.Response(200, text="ok")

        transport = HttpxTransport(test_config, client=make_client(handler))

        text = await transport.post(
            "/_api/batch", "payload", {"Content-Type": "multipart/form-data; boundary=B"}
        )

        assert text == "ok"
        assert seen == {
            "method": "POST",
            "path": "/_api/batch",
            "content_type": "multipart/form-data; boundary=B",
            "body": "payload",
        }

    @pytest.mark.asyncio
    async def test_non_success_status(self, test_config):
        transport = HttpxTransport(
            test_config,
            client=make_client(lambda request: httpx.Response(401, text="unauthorized")),
        )

        with pytest.raises(TransportError) as exc_info:
            await transport.post("/_api/batch", "payload")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_request_error(self, test_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(test_config, client=make_client(handler))

        with pytest.raises(TransportError) as exc_info:
            await transport.post("/_api/batch", "payload")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_context_manager_creates_client(self, test_config):
        async with HttpxTransport(test_config) as transport:
            assert transport._client is not None
            assert transport._client.timeout.read == 5.0
        assert transport._client is None

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, test_config):
        client = make_client(lambda request: httpx.Response(200))
        transport = HttpxTransport(test_config, client=client)

        await transport.disconnect()

        assert client.is_closed is False
        await client.aclose()

    def test_auth(self, test_config):
        assert isinstance(HttpxTransport(test_config).auth, httpx.BasicAuth)
        test_config.password = None
        assert HttpxTransport(test_config).auth is None


# ============================================================================
# Test Targets
# ============================================================================

class TestTargets:
    """Tests for server and database routing."""

    def test_configured_database(self, server):
        assert server.database().name == "test_db"

    def test_database_name_required(self, mock_transport, test_config):
        test_config.database = None
        with pytest.raises(ValueError):
            Server(mock_transport, test_config).database()

    def test_database_prefix_quoted(self, server):
        assert Database("my db", server).prefix == "/_db/my%20db"

    def test_from_config(self, test_config):
        server = Server.from_config(test_config)
        assert isinstance(server.transport, HttpxTransport)
        assert server.transport.base_url == "http://arangodb.test:8529"

    @pytest.mark.asyncio
    async def test_end_to_end(self, test_config):
        """One coordinator execution over a real httpx client and a mocked server."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text=make_response([
                make_response_part("1", payload={"result": [{"name": "users"}]}),
                make_response_part("2", payload={"version": "3.11.0", "server": "arango"}),
            ]))

        server = Server(HttpxTransport(test_config, client=make_client(handler)), test_config)
        batch = BatchCoordinator(database=server.database("_system"))
        batch.add_operation("GET", "/_api/collection", query={"excludeSystem": True})
        batch.add_operation("GET", "/_api/version", post_process=lambda result: result.get("version"))

        assert await batch.execute() == "3.11.0"
        assert len(requests) == 1
        assert requests[0].url.path == "/_db/_system/_api/batch"
        assert "GET /_api/collection?excludeSystem=true HTTP/1.1" in requests[0].content.decode()
