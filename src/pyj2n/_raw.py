"""Splitting JSON object documents into raw per-key fragments and back."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from json.decoder import scanstring

from pyj2n._errors import (
    ERR_MSG_EXPECTED_OBJECT,
    ERR_MSG_INVALID_CONSTANT,
    ERR_MSG_INVALID_TEXT,
    CodecError,
)
from pyj2n.types import RawMessage

_WHITESPACE = re.compile(r"[ \t\n\r]*")

_decoder = json.JSONDecoder()

_JSON_KINDS: dict[type, str] = {
    list: "array",
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    type(None): "null",
}


def _reject_constant(name: str) -> None:
    raise CodecError(
        ERR_MSG_INVALID_CONSTANT,
        f"non-standard JSON constant {name!r} in input",
    )


def _skip(text: str, idx: int) -> int:
    return _WHITESPACE.match(text, idx).end()


def as_text(data: bytes | bytearray | str) -> str:
    """Return JSON input as text, decoding bytes as UTF-8.

    Raises:
        UnicodeDecodeError: If ``data`` is bytes that are not UTF-8.
        CodecError: If ``data`` is a str that cannot be encoded as UTF-8.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8")
    try:
        data.encode("utf-8")
    except UnicodeEncodeError as e:
        raise CodecError(
            ERR_MSG_INVALID_TEXT,
            f"unencodable character at position {e.start} of input",
            wrapped=e,
        ) from e
    return data


def byte_length(data: bytes | bytearray | str) -> int:
    """Return the UTF-8 size of JSON input."""
    if isinstance(data, (bytes, bytearray)):
        return len(data)
    return len(data.encode("utf-8", "surrogatepass"))


def split_object(data: bytes | bytearray | str) -> dict[str, RawMessage]:
    """Split a JSON object document into its top-level raw fragments.

    Each value is kept as the exact text it occupies in ``data``; only the
    keys are unescaped. When a key repeats, the last value wins.

    Raises:
        json.JSONDecodeError: If ``data`` is not valid JSON.
        CodecError: If the top-level value is not an object, or the input
            uses NaN/Infinity.
    """
    text = as_text(data)
    value = json.loads(text, parse_constant=_reject_constant)
    if not isinstance(value, dict):
        kind = _JSON_KINDS.get(type(value), type(value).__name__)
        raise CodecError(
            ERR_MSG_EXPECTED_OBJECT,
            f"cannot decode JSON {kind} into an object",
        )

    fields: dict[str, RawMessage] = {}
    # Input is known to be a well-formed object from here on.
    idx = _skip(text, _skip(text, 0) + 1)
    if text[idx] == "}":
        return fields
    while True:
        key, idx = scanstring(text, idx + 1)
        idx = _skip(text, _skip(text, idx) + 1)
        _, end = _decoder.raw_decode(text, idx)
        fields[key] = RawMessage(text[idx:end].encode("utf-8"))
        idx = _skip(text, end)
        if text[idx] == "}":
            return fields
        idx = _skip(text, idx + 1)


def _encode_key(key: str) -> bytes:
    try:
        return json.dumps(key, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates only survive as \u escapes.
        return json.dumps(key).encode("ascii")


def join_object(fields: Mapping[str, bytes]) -> bytes:
    """Join raw fragments into a compact JSON object document.

    Values are emitted byte-for-byte, in mapping order.
    """
    parts = [_encode_key(key) + b":" + bytes(value) for key, value in fields.items()]
    return b"{" + b",".join(parts) + b"}"
