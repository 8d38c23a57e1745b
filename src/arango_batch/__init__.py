"""
ArangoDB Batch Client

Packs any number of independent HTTP operations into a single request to the
ArangoDB batch endpoint and routes each part of the combined response back
to the operation that produced it.
"""

__version__ = "0.1.0"

from arango_batch.core.coordinator import BatchCoordinator
from arango_batch.core.errors import (
    BatchError,
    BatchResponseError,
    ConfigurationError,
    EmptyBatchError,
    InvalidOperationError,
    SubOperationError,
)
from arango_batch.core.operation import HttpMethod, Operation
from arango_batch.core.result import ResultShape, ResultView, resolve_key
from arango_batch.transport.interface import Transport, TransportError
from arango_batch.transport.target import Database, Server

__all__ = [
    "BatchCoordinator",
    "BatchError",
    "BatchResponseError",
    "ConfigurationError",
    "EmptyBatchError",
    "InvalidOperationError",
    "SubOperationError",
    "HttpMethod",
    "Operation",
    "ResultShape",
    "ResultView",
    "resolve_key",
    "Transport",
    "TransportError",
    "Database",
    "Server",
]
