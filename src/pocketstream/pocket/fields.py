"""
Typed field readers for decoded JSON objects.

Each reader returns the declared default when the key is absent or ``null``
and raises :class:`MalformedMessageError` when the value has the wrong JSON
type. A key matches its field case-insensitively and, as in the peer's JSON
library, the last matching key in the object wins.

The ``check_*`` functions are the encode-side counterparts: they accept
exactly the values the readers produce and raise :class:`SerializationError`
for anything else, so nothing goes on the wire that the peer would reject.
"""

from typing import Any, Dict, Mapping, Optional

from pocketstream.pocket.errors import MalformedMessageError, SerializationError

_MISSING = object()

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def lookup(payload: Mapping[str, Any], key: str) -> Any:
    """Find the last key matching ``key`` in ``payload``, or ``_MISSING``."""
    folded = key.casefold()
    found = _MISSING
    for name, value in payload.items():
        if name.casefold() == folded:
            found = value
    return found


def _read(payload: Mapping[str, Any], key: str) -> Any:
    value = lookup(payload, key)
    return None if value is _MISSING else value


def read_str(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    value = _read(payload, key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise MalformedMessageError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def read_int(payload: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = _read(payload, key)
    if value is None:
        return default
    # bool is an int subclass; 1.0 and 1e5 are not integers on the wire.
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedMessageError(f"Field {key!r} must be an integer, got {value!r}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise MalformedMessageError(f"Field {key!r} is out of range: {value}")
    return value


def read_float(payload: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    value = _read(payload, key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedMessageError(f"Field {key!r} must be a number, got {value!r}")
    return float(value)


def read_bool(payload: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = _read(payload, key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise MalformedMessageError(f"Field {key!r} must be a boolean, got {value!r}")
    return value


def read_object(
    payload: Mapping[str, Any], key: str, default: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    value = _read(payload, key)
    if value is None:
        return {} if default is None else default
    if not isinstance(value, dict):
        raise MalformedMessageError(f"Field {key!r} must be an object, got {type(value).__name__}")
    return value


def check_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise SerializationError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def check_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(f"Field {key!r} must be an integer, got {value!r}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise SerializationError(f"Field {key!r} is out of range: {value}")
    return value


def check_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise SerializationError(f"Field {key!r} must be a boolean, got {value!r}")
    return value


def check_complex(value: Any, key: str) -> complex:
    if isinstance(value, bool) or not isinstance(value, (int, float, complex)):
        raise SerializationError(f"Field {key!r} must be a complex number, got {value!r}")
    return complex(value)


def check_payload(value: Any, kind: type, key: str) -> Dict[str, Any]:
    """Lay out a nested value, which must be an instance of ``kind``."""
    if not isinstance(value, kind):
        raise SerializationError(
            f"Field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value.to_payload()
