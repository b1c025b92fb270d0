"""pyj2n - Decode and encode pydantic models without losing unknown JSON keys."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyj2n")
except PackageNotFoundError:  # source checkout without install metadata
    __version__ = "0.0.0.dev0"

import logging
from typing import Any, TypeVar

from pydantic import BaseModel

from pyj2n._constants import (
    DEFAULT_BY_ALIAS,
    DEFAULT_EXCLUDE_NONE,
    DEFAULT_MAX_INPUT_LENGTH,
    IGNORE_UNKNOWN_FIELDS,
)
from pyj2n._errors import (
    ERR_MSG_EXPECTED_MODEL,
    ERR_MSG_FIELD_SHADOWED,
    ERR_MSG_INPUT_TOO_LARGE,
    CodecError,
    CollisionError,
    InputTooLargeError,
    J2NError,
    OverflowFieldAmbiguousError,
    OverflowFieldMissingError,
    OverflowFieldNotExcludedError,
    OverflowFieldShadowedError,
    ShapeError,
)
from pyj2n._locator import OverflowField, locate_overflow_field
from pyj2n._raw import byte_length, join_object, split_object
from pyj2n.types import RawMessage, UnknownFields

__all__ = [
    "decode",
    "encode",
    "locate_overflow_field",
    "OverflowField",
    "OverflowModel",
    "RawMessage",
    "UnknownFields",
    "J2NError",
    "CodecError",
    "CollisionError",
    "InputTooLargeError",
    "OverflowFieldAmbiguousError",
    "OverflowFieldMissingError",
    "OverflowFieldNotExcludedError",
    "OverflowFieldShadowedError",
    "ShapeError",
]

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_EMPTY_OBJECT = RawMessage(b"{}")


def _replace_state(target: BaseModel, source: BaseModel) -> None:
    """Move a freshly validated model's state into an existing instance."""
    object.__setattr__(target, "__dict__", source.__dict__)
    object.__setattr__(target, "__pydantic_fields_set__", source.__pydantic_fields_set__)
    object.__setattr__(target, "__pydantic_extra__", source.__pydantic_extra__)
    object.__setattr__(target, "__pydantic_private__", source.__pydantic_private__)


def decode(
    data: bytes | bytearray | str,
    record: _ModelT | type[_ModelT],
    *,
    by_alias: bool = DEFAULT_BY_ALIAS,
    exclude_none: bool = DEFAULT_EXCLUDE_NONE,
    max_input_length: int | None = None,
) -> _ModelT:
    """Decode a JSON object into a model, keeping unrecognized keys.

    Behaves like ``Model.model_validate_json``, but every top-level key that
    no declared field emits on re-encoding is stored, as its raw JSON text,
    in the model's ``UnknownFields`` field.

    Args:
        data: A JSON object document.
        record: A model instance to decode into in place, or a model class
            to instantiate.
        by_alias: Discover consumed keys by alias. Must match the option
            later passed to :func:`encode`.
        exclude_none: Treat declared fields dumped as None as not emitted.
            Must match the option later passed to :func:`encode`.
        max_input_length: Maximum input size in UTF-8 bytes. Defaults to
            16 MiB.

    Returns:
        The decoded model; ``record`` itself when an instance was given.

    Raises:
        J2NError: If the model has no usable overflow field, the input is
            too large, or the input is not a JSON object.
        json.JSONDecodeError: If ``data`` is not valid JSON.
        pydantic.ValidationError: If declared fields reject the input.
    """
    overflow_field = locate_overflow_field(record)

    limit = DEFAULT_MAX_INPUT_LENGTH if max_input_length is None else max_input_length
    size = byte_length(data)
    if size > limit:
        raise InputTooLargeError(
            ERR_MSG_INPUT_TOO_LARGE,
            f"input size {size} bytes exceeds limit {limit}",
        )

    overflow = split_object(data)

    # UnknownFields fields ignore their input under this context, so every
    # key still reaches the declared fields that read it.
    payload: bytes | bytearray | str = data
    if overflow_field.info.is_required() and not any(
        key in overflow for key in overflow_field.input_keys
    ):
        claimed = overflow_field.declared_input_keys
        spare = [key for key in overflow_field.input_keys if key not in claimed]
        if not spare:
            raise OverflowFieldShadowedError(
                ERR_MSG_FIELD_SHADOWED,
                f"{overflow_field.model.__name__}.{overflow_field.name} has no default "
                f"and every key it reads is read by a declared field",
            )
        payload = join_object({**overflow, spare[0]: _EMPTY_OBJECT})
    fresh = overflow_field.model.model_validate_json(
        payload, context={IGNORE_UNKNOWN_FIELDS: True}
    )

    emitted = split_object(fresh.model_dump_json(by_alias=by_alias, exclude_none=exclude_none))
    for key in emitted:
        overflow.pop(key, None)
    overflow_field.set(fresh, overflow)

    logger.debug(
        "decoded %s: %d declared keys, %d unknown keys",
        overflow_field.model.__name__,
        len(emitted),
        len(overflow),
    )

    if isinstance(record, BaseModel):
        _replace_state(record, fresh)
        return record
    return fresh


def encode(
    record: BaseModel,
    *,
    by_alias: bool = DEFAULT_BY_ALIAS,
    exclude_none: bool = DEFAULT_EXCLUDE_NONE,
) -> bytes:
    """Encode a model to a JSON object, re-emitting its unknown keys.

    Behaves like ``model.model_dump_json``, but every entry of the model's
    ``UnknownFields`` field is added to the output verbatim.

    Returns:
        The JSON object document as UTF-8 bytes. Declared keys come first,
        followed by unknown keys in container order.

    Raises:
        CollisionError: If an unknown key is also emitted by a declared field.
        J2NError: If the model has no usable overflow field.
    """
    overflow_field = locate_overflow_field(record)
    if not isinstance(record, BaseModel):
        raise ShapeError(
            ERR_MSG_EXPECTED_MODEL,
            f"cannot encode model class {record.__name__}, expected an instance",
        )

    named = split_object(record.model_dump_json(by_alias=by_alias, exclude_none=exclude_none))

    overflow = overflow_field.get(record) or {}
    for key, value in overflow.items():
        if key in named:
            raise CollisionError(
                f"named field present in overflow: '{key}'",
                f"{type(record).__name__}.{overflow_field.name} holds key '{key}' "
                f"that a declared field also emits",
            )
        named[key] = RawMessage.coerce(value)

    logger.debug(
        "encoded %s with %d unknown keys",
        type(record).__name__,
        len(overflow),
    )
    return join_object(named)


class OverflowModel(BaseModel):
    """Base model whose JSON helpers keep unknown keys.

    Subclasses still declare their own ``UnknownFields`` field::

        class Cat(OverflowModel):
            name: str
            rest: UnknownFields = Field(default_factory=dict, exclude=True)

        cat = Cat.from_json(b'{"name": "Tom", "age": 5}')
        cat.to_json()  # b'{"name":"Tom","age":5}'
    """

    @classmethod
    def from_json(cls: type[_ModelT], data: bytes | bytearray | str, **options: Any) -> _ModelT:
        return decode(data, cls, **options)

    def to_json(self, **options: Any) -> bytes:
        return encode(self, **options)
