"""
Errors raised by the batch layer.

Transport failures are raised by the transport itself
(see arango_batch.transport.interface.TransportError) and pass through
the coordinator unmodified.
"""

from typing import Any, Optional


class BatchError(Exception):
    """Base class for batch errors."""
    pass


class ConfigurationError(BatchError):
    """Raised when a coordinator is built without exactly one target."""
    pass


class EmptyBatchError(BatchError):
    """Raised by execute() when no operations are queued."""

    def __init__(self, message: str = "empty batch request"):
        super().__init__(message)


class InvalidOperationError(BatchError):
    """Raised when an operation does not select exactly one HTTP method."""
    pass


class BatchResponseError(BatchError):
    """Raised when the multipart response cannot be decoded."""
    pass


class SubOperationError(BatchError):
    """
    Raised when one part of an otherwise successful batch reports an error.

    Attributes:
        operation_id: Correlation id of the failing operation
        message: Error message reported by the server
        code: The ``code`` field of the part payload
        status_code: HTTP status of the inner response
        error_num: Server error number
        data: Decoded payload of the failing part
    """

    def __init__(
        self,
        operation_id: str,
        message: Optional[str] = None,
        code: Optional[int] = None,
        status_code: int = 0,
        error_num: Optional[int] = None,
        data: Optional[Any] = None,
    ):
        self.operation_id = operation_id
        self.message = message or f"batch operation {operation_id} failed"
        self.code = code
        self.status_code = status_code
        self.error_num = error_num
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        details = [f"operation={self.operation_id}"]
        if self.code is not None:
            details.append(f"code={self.code}")
        if self.error_num is not None:
            details.append(f"errorNum={self.error_num}")
        return f"{self.message} ({', '.join(details)})"
