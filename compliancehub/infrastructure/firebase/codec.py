"""Firestore REST value codec: plain rows <-> Document.fields.

Rows hold only JSON-like values plus datetimes (timestamps are written as
ISO strings by the mappers, but native timestampValue fields written by
other clients still decode).
"""

import base64
from datetime import UTC, datetime
from enum import Enum
from typing import Any

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _encode(value: Any) -> dict[str, Any]:
    match value:
        case None:
            return {"nullValue": None}
        case bool():
            return {"booleanValue": value}
        case Enum():
            return _encode(value.value)
        case int():
            return {"integerValue": str(value)}
        case float():
            return {"doubleValue": value}
        case str():
            return {"stringValue": value}
        case datetime():
            moment = value.astimezone(UTC) if value.tzinfo else value
            return {"timestampValue": moment.strftime(_TIMESTAMP_FORMAT)}
        case bytes():
            return {"bytesValue": base64.b64encode(value).decode("ascii")}
        case list() | tuple() | set() | frozenset():
            return {"arrayValue": {"values": [_encode(v) for v in value]}}
        case dict():
            return {"mapValue": {"fields": {str(k): _encode(v) for k, v in value.items()}}}
    raise TypeError(f"Cannot store {type(value).__name__} in Firestore")


def _parse_timestamp(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


_SCALAR_DECODERS = {
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": _parse_timestamp,
    "bytesValue": base64.b64decode,
    "referenceValue": str,
}


def _decode(wire: dict[str, Any]) -> Any:
    for key, convert in _SCALAR_DECODERS.items():
        if key in wire:
            return convert(wire[key])
    if "arrayValue" in wire:
        return [_decode(v) for v in wire["arrayValue"].get("values") or []]
    if "mapValue" in wire:
        return decode_fields(wire["mapValue"].get("fields"))
    # nullValue and types rows never use (geoPointValue)
    return None


def encode_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Wrap a row as a Firestore Document body ({"fields": {...}})."""
    return {"fields": {key: _encode(value) for key, value in row.items()}}


def decode_fields(fields: dict[str, Any] | None) -> dict[str, Any]:
    """Unwrap Document.fields into a row. Missing fields decode to {}."""
    return {key: _decode(wire) for key, wire in (fields or {}).items()}
