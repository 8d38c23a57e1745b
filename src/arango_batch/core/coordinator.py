"""
Batch coordinator.

Queues operations for one target, sends them as a single multipart request
to the batch endpoint and routes every decoded part back to its operation.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from arango_batch.config import BatchConfig, get_config
from arango_batch.core.errors import ConfigurationError, EmptyBatchError, SubOperationError
from arango_batch.core.multipart import content_type, decode_batch, encode_batch
from arango_batch.core.operation import HttpMethod, Operation, operation_fields
from arango_batch.core.result import ResultView
from arango_batch.transport.target import Database, Server

logger = structlog.get_logger(__name__)

BATCH_PATH = "_api/batch"

OperationSpecs = Union[Mapping[str, Any], Iterable[Mapping[str, Any]], None]


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def resolve_continuation(continuation: Any, value: Any) -> Any:
    """
    Resolve a continuation with a value and return what the resolution yields.

    asyncio futures get the value via set_result and are returned themselves;
    any other object must provide resolve(value), whose result (awaited if
    needed) is returned.
    """
    if isinstance(continuation, asyncio.Future):
        if not continuation.done():
            continuation.set_result(value)
        return continuation
    return await _settle(continuation.resolve(value))


class BatchCoordinator:
    """
    Collects operations and executes them as one batch request.

    Operation ids are assigned sequentially ("1", "2", ...) and are never
    reused for the lifetime of the coordinator. Not safe for concurrent
    mutation; use one coordinator per concurrent batch.

    Usage:
        ```python
        batch = BatchCoordinator(database=db)
        batch.add_operation("GET", "/_api/collection")
        batch.add_operation("DELETE", "/_api/collection/foo", post_process=lambda r: None)
        result = await batch.execute()
        ```
    """

    def __init__(
        self,
        server: Optional[Server] = None,
        database: Optional[Database] = None,
        operations: OperationSpecs = None,
        config: Optional[BatchConfig] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            server: Server to run the batch on
            database: Database to run the batch in
            operations: Initial operation mapping(s), see operation_fields()
            config: Batch configuration

        Raises:
            ConfigurationError: Unless exactly one of server or database is given
        """
        if server is None and database is None:
            raise ConfigurationError("server or database must be given")
        if server is not None and database is not None:
            raise ConfigurationError("only one of server or database may be given")

        self.config = config or get_config()
        self.server = server
        self.database = database
        self.boundary = self.config.batch_boundary

        self._next_id = 1
        self._operations: Dict[str, Operation] = {}

        if operations is not None:
            self.add_operations(operations)

    @property
    def target(self) -> Union[Server, Database]:
        return self.database if self.database is not None else self.server

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": content_type(self.boundary)}

    @property
    def operations(self) -> Dict[str, Operation]:
        """Queued operations by id, in insertion order."""
        return dict(self._operations)

    def get_operation(self, operation_id: str) -> Optional[Operation]:
        return self._operations.get(str(operation_id))

    def __len__(self) -> int:
        return len(self._operations)

    # ------------------------------------------------------------------
    # Queue management
    # ------------------------------------------------------------------

    def add_operation(
        self,
        method: Union[HttpMethod, str],
        path: str,
        body: Optional[Any] = None,
        query: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        post_process: Optional[Callable[[ResultView], Any]] = None,
        continuation: Optional[Any] = None,
    ) -> Operation:
        """
        Queue an operation under the next sequential id.

        Raises:
            InvalidOperationError: If the method or path is invalid
        """
        operation_id = str(self._next_id)
        self._next_id += 1

        operation = Operation(
            id=operation_id,
            method=method,
            path=path,
            body=body,
            query=query,
            headers=headers,
            post_process=post_process,
            continuation=continuation,
        )
        self._operations[operation_id] = operation
        logger.debug("operation_added", **operation.to_dict())
        return operation

    def add_operations(self, specs: OperationSpecs) -> List[Operation]:
        """
        Queue operations given as request mappings.

        Args:
            specs: A single mapping or a sequence of mappings

        Returns:
            The queued operations
        """
        if specs is None:
            return []
        if isinstance(specs, Mapping):
            specs = [specs]
        return [self.add_operation(**operation_fields(spec)) for spec in specs]

    def set_operations(self, specs: OperationSpecs) -> Dict[str, Operation]:
        """Replace every queued operation. Ids keep counting from where they were."""
        self._operations = {}
        self.add_operations(specs)
        return self.operations

    def modify_operation(
        self,
        operation_id: str,
        method: Union[HttpMethod, str],
        path: str,
        body: Optional[Any] = None,
        query: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        post_process: Optional[Callable[[ResultView], Any]] = None,
        continuation: Optional[Any] = None,
    ) -> Union[Operation, Dict[str, Operation]]:
        """
        Replace the operation stored under an id, keeping its position.

        Returns:
            The new operation, or the unchanged queued operations if the id is unknown
        """
        operation_id = str(operation_id)
        if operation_id not in self._operations:
            logger.debug("operation_not_found", operation_id=operation_id)
            return self.operations

        operation = Operation(
            id=operation_id,
            method=method,
            path=path,
            body=body,
            query=query,
            headers=headers,
            post_process=post_process,
            continuation=continuation,
        )
        self._operations[operation_id] = operation
        logger.debug("operation_modified", **operation.to_dict())
        return operation

    def delete_operation(self, operation_id: str) -> Dict[str, Operation]:
        """Remove an operation if present and return the remaining ones."""
        if self._operations.pop(str(operation_id), None) is not None:
            logger.debug("operation_deleted", operation_id=str(operation_id))
        return self.operations

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def encode(self) -> str:
        """Encode the queued operations as a multipart body."""
        return encode_batch(self._operations.values(), self.boundary)

    async def execute(self) -> Any:
        """
        Execute the batch.

        Every decoded part is routed to its operation in response order.
        Parts of operations without post_process are passed through as
        ResultViews; the others are replaced by the post_process output or,
        with a continuation, by what resolving the continuation returns.

        Returns:
            The routed value of the last part in the response

        Raises:
            EmptyBatchError: If no operations are queued (nothing is sent)
            TransportError: If the physical request fails
            BatchResponseError: If the response cannot be decoded
            SubOperationError: If any part reports an error (nothing is routed)
        """
        final_result = None
        for _, routed in await self._execute_and_route():
            final_result = routed
        return final_result

    async def execute_all(self) -> Dict[str, Any]:
        """
        Execute the batch and return every routed value keyed by operation id.

        Same pipeline and errors as execute().
        """
        return dict(await self._execute_and_route())

    async def _execute_and_route(self) -> List[tuple]:
        results = await self._dispatch()
        check_for_errors(results)

        routed = []
        for operation_id, result in results.items():
            operation = self._operations.get(operation_id)
            if operation is None:
                logger.warning("unknown_operation_in_response", operation_id=operation_id)
                continue
            routed.append((operation_id, await self._route(operation, result)))
        return routed

    async def _dispatch(self) -> Dict[str, ResultView]:
        if not self._operations:
            raise EmptyBatchError()

        body = self.encode()
        logger.info(
            "batch_dispatched",
            target=repr(self.target),
            operations=len(self._operations),
            size=len(body),
        )
        raw = await self.target.post(BATCH_PATH, body, self.headers)

        results = decode_batch(raw, self.boundary)
        logger.info("batch_received", parts=len(results))
        return results

    async def _route(self, operation: Operation, result: ResultView) -> Any:
        if operation.post_process is None:
            return result

        value = await _settle(operation.post_process(result))
        if operation.continuation is not None:
            return await resolve_continuation(operation.continuation, value)
        return value

    def __repr__(self) -> str:
        return f"BatchCoordinator(target={self.target!r}, operations={len(self._operations)})"


def check_for_errors(results: Dict[str, ResultView]) -> Dict[str, ResultView]:
    """
    Raise for the first part, in response order, that reports an error.

    Raises:
        SubOperationError: Carrying the failing part's id, message and codes
    """
    for operation_id, result in results.items():
        if result.has_error():
            logger.error(
                "sub_operation_failed",
                operation_id=operation_id,
                status=result.status_code,
                error_num=result.error_num,
                error=result.error_message,
            )
            raise SubOperationError(
                operation_id,
                message=result.error_message,
                code=result.code,
                status_code=result.status_code,
                error_num=result.error_num,
                data=result.raw,
            )
    return results
