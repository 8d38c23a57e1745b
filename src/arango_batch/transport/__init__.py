"""
Transport Layer.

Provides the single physical HTTP call a batch needs, and the server and
database targets that route it.
"""

from arango_batch.transport.interface import Transport, TransportError
from arango_batch.transport.httpx_transport import HttpxTransport
from arango_batch.transport.target import Database, Server

__all__ = [
    "Transport",
    "TransportError",
    "HttpxTransport",
    "Database",
    "Server",
]
