"""Overflow container types for records that preserve unknown JSON keys."""

from __future__ import annotations

import json
from typing import Any, NewType

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from pyj2n._constants import IGNORE_UNKNOWN_FIELDS

_JSON_WHITESPACE = b" \t\n\r"


class RawMessage(bytes):
    """The UTF-8 text of one JSON value, kept exactly as it was read.

    Under pydantic validation, ``bytes`` input is taken as JSON text and
    must parse; any other value is JSON-encoded into a fragment.
    """

    __slots__ = ()

    @classmethod
    def from_value(cls, value: Any) -> RawMessage:
        """Encode a Python value as a compact JSON fragment."""
        text = json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        return cls(text.encode("utf-8"))

    def loads(self) -> Any:
        """Parse the fragment into Python values."""
        return json.loads(self)

    def __repr__(self) -> str:
        return f"RawMessage({bytes(self)!r})"

    @classmethod
    def coerce(cls, value: Any) -> RawMessage:
        """Return ``value`` as a fragment, validating raw bytes as JSON text."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray)):
            text = bytes(value).strip(_JSON_WHITESPACE)
            try:
                json.loads(text)
            except ValueError as e:
                raise ValueError(f"invalid raw JSON fragment: {e}") from e
            return cls(text)
        return cls.from_value(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(json.loads),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {}


class _UnknownFieldsDict(dict[str, RawMessage]):
    """Validates as ``dict[str, RawMessage]`` unless decoding asks it not to."""

    @classmethod
    def _validate(
        cls, value: Any, handler: core_schema.ValidatorFunctionWrapHandler, info: core_schema.ValidationInfo
    ) -> dict[str, RawMessage]:
        # Standard decoding must not read the overflow field from the input.
        if info.context and info.context.get(IGNORE_UNKNOWN_FIELDS):
            return {}
        return handler(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.with_info_wrap_validator_function(
            cls._validate,
            handler.generate_schema(dict[str, RawMessage]),
        )


UnknownFields = NewType("UnknownFields", _UnknownFieldsDict)
"""Declared type of the one model field that collects unrecognized keys.

The field must also be excluded from standard dumping::

    class Cat(BaseModel):
        name: str
        rest: UnknownFields = Field(default_factory=dict, exclude=True)
"""
