"""
Translation between command values and wire payloads.

Encoding produces the exact bytes the peer produces for the same value:
compact separators, fields in declaration order, numbers in the peer's
notation and HTML-sensitive characters escaped. Decoding happens in two
passes, first the envelope to find the ``cmd`` tag and then the full
payload with the decoder the registry selects for that tag.
"""

import json
import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from pocketstream.pocket.errors import MalformedMessageError, SerializationError
from pocketstream.pocket.fields import read_str
from pocketstream.pocket.registry import CommandRegistry, get_command_registry
from pocketstream.pocket.types import Command

# Characters the peer escapes inside JSON strings.
_STRING_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def format_float(value: float) -> str:
    """Render a float the way the peer does.

    Shortest round-trip digits, fixed notation for magnitudes in
    ``[1e-6, 1e21)`` and exponent notation otherwise, with no ``.0`` on
    integral values and no zero padding in the exponent.

    Raises:
        SerializationError: For NaN and infinities, which JSON cannot carry.
    """
    if not math.isfinite(value):
        raise SerializationError(f"Unsupported float value: {value!r}")
    text = repr(value)
    magnitude = abs(value)
    if magnitude == 0 or 1e-6 <= magnitude < 1e21:
        if "e" in text:
            text = format(Decimal(text), "f")
        if text.endswith(".0"):
            text = text[:-2]
        return text
    mantissa, exponent = text.split("e")
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    sign = exponent[0] if exponent[0] in "+-" else "+"
    digits = exponent.lstrip("+-").lstrip("0") or "0"
    return f"{mantissa}e{sign}{digits}"


def _format_string(value: str) -> str:
    text = json.dumps(value, ensure_ascii=False)
    for char, escape in _STRING_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def dumps(value: Any) -> str:
    """Serialize a payload built from dicts, strings, numbers and booleans.

    Raises:
        SerializationError: If the payload holds anything else.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return _format_string(value)
    if isinstance(value, dict):
        items = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(f"Object keys must be strings, got {key!r}")
            items.append(f"{_format_string(key)}:{dumps(item)}")
        return "{" + ",".join(items) + "}"
    raise SerializationError(f"Cannot serialize value of type {type(value).__name__}")


def encode_command(value: Any, registry: Optional[CommandRegistry] = None) -> bytes:
    """Encode a command value to its wire payload.

    Args:
        value: The command value.
        registry: The registry to resolve the value's tag against.

    Returns:
        The UTF-8 encoded JSON payload.

    Raises:
        UnknownTagError: If the value's tag is not registered.
        SerializationError: If the value is not the variant its tag selects,
            or holds a field that cannot be encoded.
    """
    if registry is None:
        registry = get_command_registry()
    entry = registry.entry_for(value)
    if not isinstance(value, entry.variant):
        raise SerializationError(
            f"Tag {entry.tag!r} selects {entry.variant.__name__}, got {type(value).__name__}"
        )
    try:
        payload = value.to_payload()
    except (AttributeError, TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode {type(value).__name__}: {e}") from e
    return dumps(payload).encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _object_from_pairs(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    # A repeated key takes the position of its last occurrence.
    document: Dict[str, Any] = {}
    for key, value in pairs:
        document.pop(key, None)
        document[key] = value
    return document


def sniff(data: bytes) -> Dict[str, Any]:
    """First decode pass: parse the payload and check its envelope.

    Args:
        data: The raw payload.

    Returns:
        The parsed JSON object, guaranteed to carry a non-empty string ``cmd``.

    Raises:
        MalformedMessageError: If the payload is not UTF-8 JSON, not an
            object, or has no usable ``cmd``.
    """
    try:
        document = json.loads(
            data.decode("utf-8"),
            parse_constant=_reject_constant,
            object_pairs_hook=_object_from_pairs,
        )
    except ValueError as e:
        raise MalformedMessageError(f"Payload is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise MalformedMessageError(f"Payload must be a JSON object, got {type(document).__name__}")
    if not read_str(document, "cmd"):
        raise MalformedMessageError("Payload has no cmd field")
    return document


def decode_command(data: bytes, registry: Optional[CommandRegistry] = None) -> Command:
    """Decode a wire payload to the command value its tag selects.

    Args:
        data: The raw payload.
        registry: The registry to resolve the tag against.

    Returns:
        The decoded value, with absent fields at their defaults.

    Raises:
        MalformedMessageError: If the payload is malformed or does not fit
            the selected variant.
        UnknownTagError: If the tag is not registered.
    """
    if registry is None:
        registry = get_command_registry()
    document = sniff(data)
    entry = registry.resolve(read_str(document, "cmd"))
    return entry.decode(document)
