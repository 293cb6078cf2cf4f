"""Class-hint codec for values JSON cannot represent natively.

JSON-RPC has no formalised type system, so Trac tags such values with a
class hint:

    {"__jsonclass__": ["datetime", "YYYY-MM-DDTHH:MM:SS"]}  -> datetime (UTC)
    {"__jsonclass__": ["binary", "<base64>"]}               -> bytes

Every datetime and binary field of every record passes through here.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from trac_rpc.domain.exceptions import DecodeError
from trac_rpc.domain.value_objects import CLASS_HINT_KEY, ClassHint

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# strptime alone tolerates single-digit fields
_TIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}")


# ── Encoding ────────────────────────────────────────────────────────────────


def encode_datetime(value: datetime) -> dict[str, list[str]]:
    """Encode a datetime as a ``datetime`` class hint.

    Naive values are taken to be UTC; aware values are converted to UTC.
    Sub-second precision is dropped, never rounded.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000 on every platform
    formatted = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    return ClassHint(ClassHint.KIND_DATETIME, formatted).to_wire()


def encode_binary(value: bytes) -> dict[str, list[str]]:
    """Encode raw bytes as a ``binary`` class hint (standard base64)."""
    encoded = base64.b64encode(bytes(value)).decode("ascii")
    return ClassHint(ClassHint.KIND_BINARY, encoded).to_wire()


def encode_param(value: Any) -> Any:
    """Convert one call parameter to its JSON wire form, recursively.

    Records that expose ``attributes()`` are sent as their attribute
    mapping.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, datetime):
        return encode_datetime(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return encode_binary(bytes(value))
    if isinstance(value, ClassHint):
        return value.to_wire()
    if isinstance(value, Mapping):
        return {str(k): encode_param(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_param(v) for v in value]
    attributes = getattr(value, "attributes", None)
    if callable(attributes):
        return encode_param(attributes())
    raise TypeError(f"Cannot encode parameter of type {type(value).__name__}")


# ── Decoding ────────────────────────────────────────────────────────────────


def is_class_hint(raw: Any) -> bool:
    return isinstance(raw, Mapping) and CLASS_HINT_KEY in raw


def decode_datetime(value: str) -> datetime:
    """Parse a ``YYYY-MM-DDTHH:MM:SS`` string into an aware UTC datetime."""
    if not isinstance(value, str) or not _TIME_RE.fullmatch(value):
        raise DecodeError(f"Invalid datetime value: {value!r}")
    try:
        parsed = datetime.strptime(value, TIME_FORMAT)
    except ValueError as exc:
        raise DecodeError(f"Invalid datetime value: {value!r}") from exc
    return parsed.replace(tzinfo=timezone.utc)


def decode_binary(value: str) -> bytes:
    """Decode standard base64, tolerating the line breaks of wrapped output."""
    try:
        if isinstance(value, str):
            value = value.replace("\r", "").replace("\n", "")
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise DecodeError(f"Invalid base64 payload: {exc}") from exc


def decode_class_hint(raw: Any) -> datetime | bytes:
    """Decode a class-hint object into a datetime or bytes.

    Unknown kinds are rejected rather than skipped.
    """
    hint = ClassHint.from_wire(raw)
    if hint.kind == ClassHint.KIND_DATETIME:
        return decode_datetime(hint.value)
    if hint.kind == ClassHint.KIND_BINARY:
        return decode_binary(hint.value)
    raise DecodeError(f"Unknown class-hint kind: {hint.kind!r}")


def decode_datetime_hint(raw: Any) -> datetime:
    value = decode_class_hint(raw)
    if not isinstance(value, datetime):
        raise DecodeError("Expected a datetime class hint, got binary")
    return value


def decode_binary_hint(raw: Any) -> bytes:
    value = decode_class_hint(raw)
    if not isinstance(value, bytes):
        raise DecodeError("Expected a binary class hint, got datetime")
    return value
