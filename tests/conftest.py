"""
Pytest configuration and shared fixtures for the test suite.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from arango_batch.config import BatchConfig
from arango_batch.core.multipart import DEFAULT_BOUNDARY
from arango_batch.transport.interface import Transport
from arango_batch.transport.target import Database, Server


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> BatchConfig:
    """Create a test configuration."""
    return BatchConfig(
        endpoint="http://arangodb.test:8529",
        database="test_db",
        username="root",
        password="secret",
        timeout_seconds=5.0,
        log_level="DEBUG",
    )


# ============================================================================
# Test Data Generators
# ============================================================================

def make_response_part(
    content_id: str,
    status: int = 200,
    payload: Any = None,
    json_content: bool = True,
    boundary: str = DEFAULT_BOUNDARY,
) -> str:
    """Build one part of a batch response the way the server lays it out."""
    lines = [
        f"--{boundary}",
        "Content-Type: application/x-arango-batchpart",
        f"Content-Id: {content_id}",
        "",
        f"HTTP/1.1 {status} OK",
        "Server: ArangoDB",
        "Connection: Keep-Alive",
    ]
    if json_content:
        lines.append("Content-Type: application/json; charset=utf-8")
    else:
        lines.append("Content-Type: text/plain; charset=utf-8")
    lines.append("")
    if payload is not None:
        lines.append(payload if isinstance(payload, str) else json.dumps(payload))
    return "\r\n".join(lines) + "\r\n"


def make_response(parts: List[str], boundary: str = DEFAULT_BOUNDARY) -> str:
    """Join response parts and append the closing boundary."""
    return "".join(parts) + f"--{boundary}--"


# ============================================================================
# Mock Transport
# ============================================================================

class MockTransport(Transport):
    """Transport that records posts and replies with a prepared body."""
    
    def __init__(self, response: str = ""):
        self.response = response
        self.posts: List[Tuple[str, str, Optional[Dict[str, str]]]] = []
        self._connected = False
    
    async def connect(self) -> None:
        self._connected = True
    
    async def disconnect(self) -> None:
        self._connected = False
    
    async def post(self, path: str, body: str, headers: Optional[Dict[str, str]] = None) -> str:
        self.posts.append((path, body, headers))
        return self.response


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a mock transport."""
    return MockTransport()


@pytest.fixture
def server(mock_transport, test_config) -> Server:
    """Server target on the mock transport."""
    return Server(mock_transport, test_config)


@pytest.fixture
def database(server) -> Database:
    """Database target on the mock transport."""
    return server.database("test_db")
