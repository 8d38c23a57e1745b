"""
Result view over one decoded response payload.

The server mixes snake_case, lowerCamelCase and UpperCamelCase keys, so
object lookups try the requested name as given, then its lower camel case
form, then its upper camel case form.
"""

import re
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Union


_UNDERSCORE_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")
_UNDERSCORE_WORD = re.compile(r"([a-z\d])([A-Z])")


def camelize(name: str, upper: bool = False) -> str:
    """
    Convert a field name to camel case.

    ``error_num`` becomes ``errorNum`` (or ``ErrorNum`` with upper=True).
    """
    words = [word for word in name.split("_") if word]
    camel = "".join(word[:1].upper() + word[1:] for word in words)
    if upper:
        return camel
    return camel[:1].lower() + camel[1:]


def underscore(name: str) -> str:
    """Convert a camel case field name to snake_case."""
    name = _UNDERSCORE_ACRONYM.sub(r"\1_\2", name)
    name = _UNDERSCORE_WORD.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def key_candidates(name: Hashable) -> List[Hashable]:
    """Spellings tried for a field name, in priority order."""
    if not isinstance(name, str):
        return [name]
    candidates = [name]
    for spelling in (camelize(name), camelize(name, upper=True)):
        if spelling not in candidates:
            candidates.append(spelling)
    return candidates


def resolve_key(requested: Hashable, available_keys: Iterable[Hashable]) -> Optional[Hashable]:
    """
    Find the existing key that a requested field name refers to.

    Args:
        requested: Field name as written by the caller
        available_keys: Keys present in the payload

    Returns:
        The first matching spelling (exact, lower camel, upper camel),
        or None if no spelling is present
    """
    keys = available_keys if isinstance(available_keys, (dict, set, frozenset)) else set(available_keys)
    for candidate in key_candidates(requested):
        if candidate in keys:
            return candidate
    return None


class ResultShape(str, Enum):
    """Shape of a decoded payload."""
    OBJECT = "object"
    ARRAY = "array"


_MISSING = object()


class ResultView:
    """
    Normalized accessor over a decoded JSON object or array.

    Attributes:
        shape: OBJECT or ARRAY, fixed at construction
        status_code: HTTP status of the response this payload came from (0 if unknown)
    """

    def __init__(self, payload: Union[Dict[str, Any], List[Any], None] = None, status_code: int = 0):
        if payload is None:
            payload = {}
        if isinstance(payload, dict):
            self._shape = ResultShape.OBJECT
        elif isinstance(payload, list):
            self._shape = ResultShape.ARRAY
        else:
            raise TypeError(
                f"ResultView payload must be a dict or a list, got {type(payload).__name__}"
            )
        self._payload = payload
        self.status_code = status_code

    @property
    def shape(self) -> ResultShape:
        return self._shape

    @property
    def raw(self) -> Union[Dict[str, Any], List[Any]]:
        """The underlying payload, untouched."""
        return self._payload

    def is_array(self) -> bool:
        return self._shape == ResultShape.ARRAY

    # standard fields

    @property
    def code(self) -> Optional[int]:
        return self.get("code")

    @property
    def error(self) -> Optional[bool]:
        return self.get("error")

    @property
    def error_message(self) -> Optional[str]:
        return self.get("error_message")

    @property
    def error_num(self) -> Optional[int]:
        return self.get("error_num")

    def has_error(self) -> bool:
        """Check whether this payload reports a server-side error."""
        return not self.is_array() and bool(self.error)

    # access to all other fields

    def _resolve(self, field: Hashable) -> Any:
        if self.is_array():
            return field
        key = resolve_key(field, self._payload)
        return _MISSING if key is None else key

    def get(self, field: Union[str, int], default: Any = None) -> Any:
        """
        Read a field (object) or an index (array).

        Returns:
            The value, or default if no spelling of the field exists
        """
        if self.is_array():
            if not isinstance(field, int):
                return default
            try:
                return self._payload[field]
            except IndexError:
                return default
        key = self._resolve(field)
        if key is _MISSING:
            return default
        return self._payload[key]

    def set(self, field: Union[str, int], value: Any) -> bool:
        """
        Overwrite an existing field (object) or index (array).

        Returns:
            True if a value was written, False if no spelling of the field exists
        """
        if self.is_array():
            if not isinstance(field, int):
                return False
            try:
                self._payload[field] = value
            except IndexError:
                return False
            return True
        key = self._resolve(field)
        if key is _MISSING:
            return False
        self._payload[key] = value
        return True

    def has(self, field: Hashable) -> bool:
        """Check if any spelling of the field exists. Always False for arrays."""
        if self.is_array():
            return False
        return self._resolve(field) is not _MISSING

    def __getitem__(self, field: Union[str, int]) -> Any:
        key = self._resolve(field)
        if key is _MISSING:
            # fall back to the container's own lookup (raises KeyError)
            return self._payload[field]
        return self._payload[key]

    def __setitem__(self, field: Union[str, int], value: Any) -> None:
        key = self._resolve(field)
        self._payload[field if key is _MISSING else key] = value

    def __contains__(self, field: Hashable) -> bool:
        if self.is_array():
            return field in self._payload
        return self.has(field)

    def __len__(self) -> int:
        return len(self._payload)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._payload)

    # conversions

    def to_dict(self) -> Dict[Any, Any]:
        """Object payloads as-is, array payloads of pairs via dict()."""
        if self.is_array():
            return dict(self._payload)
        return self._payload

    def to_list(self) -> List[Any]:
        """Array payloads as-is, object payloads as a list of (key, value) items."""
        if self.is_array():
            return self._payload
        return list(self._payload.items())

    def to_snake_case_dict(self) -> Dict[Any, Any]:
        """Copy of to_dict() with every string key rewritten to snake_case."""
        return {
            underscore(key) if isinstance(key, str) else key: value
            for key, value in self.to_dict().items()
        }

    def __repr__(self) -> str:
        return f"ResultView(shape={self._shape.value}, status_code={self.status_code}, payload={self._payload!r})"
