"""
Batch Operation model.

Represents a single HTTP request queued into a batch.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from arango_batch.core.errors import InvalidOperationError


class HttpMethod(str, Enum):
    """HTTP methods accepted inside a batch."""
    GET = "GET"
    HEAD = "HEAD"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: Any) -> "HttpMethod":
        """Parse a method name (any casing) into an HttpMethod."""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise InvalidOperationError(f"unsupported HTTP method: {method!r}")


def _query_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


@dataclass
class Operation:
    """
    One request queued into a batch.

    Attributes:
        id: Correlation id, unique within the coordinator that created it
        method: HTTP method
        path: Server-relative request target
        body: JSON body; top-level None entries are dropped on serialization
        query: Query parameters appended to the path
        headers: Extra headers written inside the batch part
        post_process: Called with the decoded ResultView after execution
        continuation: Resolved with the post_process output, if given
    """

    id: str
    method: HttpMethod
    path: str
    body: Optional[Any] = None
    query: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, str]] = None
    post_process: Optional[Callable[[Any], Any]] = None
    continuation: Optional[Any] = None

    def __post_init__(self):
        """Validate and normalize after initialization."""
        self.method = HttpMethod.parse(self.method)
        if not isinstance(self.path, str) or not self.path:
            raise InvalidOperationError(f"operation {self.id} has no path")

    @property
    def target(self) -> str:
        """Request target for the inner request line: path plus query string."""
        target = "/" + self.path.lstrip("/")
        if self.query:
            params = [(k, _query_value(v)) for k, v in self.query.items() if v is not None]
            target += "?" + urlencode(params, doseq=True)
        return target

    def serialized_body(self) -> Optional[str]:
        """Compact JSON body, or None if the operation has no body."""
        if self.body is None:
            return None
        body = self.body
        if isinstance(body, Mapping):
            body = {k: v for k, v in body.items() if v is not None}
        return json.dumps(body, separators=(",", ":"))

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "id": self.id,
            "method": self.method.value,
            "target": self.target,
            "has_body": self.body is not None,
            "headers": dict(self.headers or {}),
            "post_process": self.post_process is not None,
            "continuation": self.continuation is not None,
        }


_METHOD_KEYS = tuple(method.value.lower() for method in HttpMethod)

_ALIASES = {
    "block": "post_process",
    "promise": "continuation",
}

_FIELDS = ("body", "query", "headers", "post_process", "continuation")


def operation_fields(spec: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Turn an upstream request mapping into add_operation() keyword arguments.

    The mapping selects its method either with ``method`` and ``path`` keys
    or with exactly one method-named key whose value is the path, e.g.
    ``{"get": "/_api/collection", "query": {"excludeSystem": True}}``.

    Args:
        spec: Request mapping

    Returns:
        Keyword arguments for BatchCoordinator.add_operation

    Raises:
        InvalidOperationError: If not exactly one method is selected
    """
    spec = {_ALIASES.get(key, key): value for key, value in spec.items()}
    selected = [key for key in _METHOD_KEYS if spec.get(key) is not None]

    if "method" in spec or "path" in spec:
        if selected:
            raise InvalidOperationError(
                f"operation selects more than one method: method={spec.get('method')!r}, {selected}"
            )
        method, path = spec.get("method"), spec.get("path")
        if method is None or path is None:
            raise InvalidOperationError("operation needs both 'method' and 'path'")
    elif len(selected) == 1:
        method, path = selected[0], spec[selected[0]]
    elif not selected:
        raise InvalidOperationError(
            f"operation must select one of {', '.join(_METHOD_KEYS)}"
        )
    else:
        raise InvalidOperationError(f"operation selects more than one method: {selected}")

    unknown = set(spec) - set(_FIELDS) - set(_METHOD_KEYS) - {"method", "path", "id"}
    if unknown:
        raise InvalidOperationError(f"unknown operation fields: {sorted(unknown)}")

    fields = {"method": HttpMethod.parse(method), "path": path}
    for name in _FIELDS:
        if spec.get(name) is not None:
            fields[name] = spec[name]
    return fields
