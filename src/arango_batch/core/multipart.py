"""
Multipart codec for the batch endpoint.

Each queued operation becomes one part holding a raw HTTP/1.1 request;
the server answers with one part per operation holding a raw HTTP response.
Parts are correlated through their Content-Id header.
"""

import json
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import structlog

from arango_batch.core.errors import BatchResponseError
from arango_batch.core.operation import Operation
from arango_batch.core.result import ResultView

logger = structlog.get_logger(__name__)

DEFAULT_BOUNDARY = "ArangoDriverRequestPart"
BATCH_PART_CONTENT_TYPE = "application/x-arango-batchpart"
CRLF = "\r\n"


def content_type(boundary: str = DEFAULT_BOUNDARY) -> str:
    """Content-Type header value of the outer batch request."""
    return f"multipart/form-data; boundary={boundary}"


def encode_part(operation: Operation, boundary: str = DEFAULT_BOUNDARY) -> str:
    """Encode one operation as a multipart part."""
    lines = [
        f"--{boundary}",
        f"Content-Type: {BATCH_PART_CONTENT_TYPE}",
        f"Content-Id: {operation.id}",
        "",
        f"{operation.method.value} {operation.target} HTTP/1.1",
    ]
    for header, value in (operation.headers or {}).items():
        lines.append(f"{header}: {value}")
    lines.append("")

    part = CRLF.join(lines) + CRLF
    body = operation.serialized_body()
    if body is not None:
        part += body + CRLF
    return part


def encode_batch(operations: Iterable[Operation], boundary: str = DEFAULT_BOUNDARY) -> str:
    """
    Encode operations into one multipart body, in iteration order.

    Returns:
        The multipart body, or "" if there are no operations
    """
    parts = [encode_part(operation, boundary) for operation in operations]
    if not parts:
        return ""
    return "".join(parts) + f"--{boundary}--{CRLF}{CRLF}"


@dataclass
class DecodedPart:
    """Fields extracted from one response part."""
    content_id: Optional[str] = None
    status_code: int = 0
    is_json: bool = False
    payload: Optional[str] = None


def _header(line: str, name: str) -> Optional[str]:
    prefix, sep, value = line.partition(":")
    if sep and prefix.strip().lower() == name:
        return value.strip()
    return None


def parse_part(text: str) -> DecodedPart:
    """
    Extract correlation id, inner status, JSON flag and payload from a part.

    The part is laid out as outer headers, a blank line, the inner status
    line and headers, a blank line, then the payload.
    """
    decoded = DecodedPart()
    seen_status = False
    in_body = False
    body_lines: List[str] = []

    # only CR/LF delimit lines; JSON strings may carry U+0085, U+2028 or U+2029
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if in_body:
            body_lines.append(line)
            continue

        if not seen_status:
            content_id = _header(line, "content-id")
            if content_id is not None:
                decoded.content_id = content_id
            elif line.startswith("HTTP/"):
                seen_status = True
                fields = line.split()
                if len(fields) > 1 and fields[1].isdigit():
                    decoded.status_code = int(fields[1])
            continue

        if not line:
            in_body = True
            continue
        inner_type = _header(line, "content-type")
        if inner_type is not None and inner_type.lower().startswith("application/json"):
            decoded.is_json = True

    payload = "\n".join(body_lines).strip("\r\n")
    decoded.payload = payload or None
    return decoded


def _to_view(part: DecodedPart) -> ResultView:
    if part.payload is None:
        return ResultView({}, status_code=part.status_code)
    if not part.is_json:
        return ResultView({"body": part.payload}, status_code=part.status_code)
    try:
        value = json.loads(part.payload)
    except json.JSONDecodeError as e:
        raise BatchResponseError(
            f"batch part {part.content_id} declares JSON but cannot be decoded: {e}"
        )
    if not isinstance(value, (dict, list)):
        value = {"body": value}
    return ResultView(value, status_code=part.status_code)


def split_parts(raw: str, boundary: str = DEFAULT_BOUNDARY) -> List[str]:
    """Split a multipart body into its non-empty parts."""
    parts = []
    for fragment in raw.split(f"--{boundary}"):
        stripped = fragment.strip()
        if stripped and stripped != "--":
            parts.append(fragment)
    return parts


def decode_batch(raw: str, boundary: str = DEFAULT_BOUNDARY) -> Dict[str, ResultView]:
    """
    Decode a multipart batch response.

    Args:
        raw: Response body of the batch request
        boundary: Boundary token used by the request

    Returns:
        ResultViews keyed by correlation id, in response order

    Raises:
        BatchResponseError: If a part has no correlation id or invalid JSON
    """
    results: Dict[str, ResultView] = {}
    for text in split_parts(raw, boundary):
        part = parse_part(text)
        if part.content_id is None:
            raise BatchResponseError("batch response part has no Content-Id header")
        if part.content_id in results:
            logger.warning("duplicate_content_id", content_id=part.content_id)
        results[part.content_id] = _to_view(part)

    logger.debug("batch_decoded", parts=len(results))
    return results
