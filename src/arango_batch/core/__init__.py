"""
Core batch components.

This module contains the operation model, the result view, the multipart
codec and the coordinator that ties them together.
"""

from arango_batch.core.result import ResultShape, ResultView, resolve_key
from arango_batch.core.operation import HttpMethod, Operation
from arango_batch.core.coordinator import BatchCoordinator

__all__ = [
    "ResultShape",
    "ResultView",
    "resolve_key",
    "HttpMethod",
    "Operation",
    "BatchCoordinator",
]
