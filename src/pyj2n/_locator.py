"""Discovery of the overflow field on pydantic models."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, AliasPath, BaseModel
from pydantic.fields import FieldInfo

from pyj2n._errors import (
    ERR_MSG_EXPECTED_MODEL,
    ERR_MSG_FIELD_NOT_DEFINED,
    ERR_MSG_FIELD_NOT_EXCLUDED,
    ERR_MSG_MULTIPLE_UNKNOWN_FIELDS,
    OverflowFieldAmbiguousError,
    OverflowFieldMissingError,
    OverflowFieldNotExcludedError,
    ShapeError,
)
from pyj2n.types import RawMessage, UnknownFields

logger = logging.getLogger(__name__)


def _alias_root(alias: str | AliasPath) -> str | None:
    if isinstance(alias, str):
        return alias
    root = alias.path[0]
    return root if isinstance(root, str) else None


def field_input_keys(model: type[BaseModel], name: str, info: FieldInfo) -> tuple[str, ...]:
    """Top-level JSON keys pydantic reads a field from, preferred first."""
    keys: list[str] = []
    alias = info.validation_alias
    if isinstance(alias, AliasChoices):
        keys.extend(k for k in map(_alias_root, alias.choices) if k is not None)
    elif alias is not None:
        root = _alias_root(alias)
        if root is not None:
            keys.append(root)
    elif info.alias is not None:
        keys.append(info.alias)

    config = model.model_config
    by_name = config.get("populate_by_name") or config.get("validate_by_name")
    if not keys or by_name:
        keys.append(name)
    return tuple(dict.fromkeys(keys))


@dataclass(frozen=True)
class OverflowField:
    """Handle to the overflow field of a pydantic model."""

    model: type[BaseModel]
    name: str
    info: FieldInfo

    @property
    def input_keys(self) -> tuple[str, ...]:
        """Top-level JSON keys pydantic reads this field from, preferred first."""
        return field_input_keys(self.model, self.name, self.info)

    @property
    def declared_input_keys(self) -> frozenset[str]:
        """Top-level JSON keys read by every other field of the model."""
        return frozenset(
            key
            for name, info in self.model.model_fields.items()
            if name != self.name
            for key in field_input_keys(self.model, name, info)
        )

    def get(self, record: BaseModel) -> dict[str, RawMessage]:
        return getattr(record, self.name)

    def set(self, record: BaseModel, container: dict[str, RawMessage]) -> None:
        """Replace the container in place, bypassing frozen/assignment checks."""
        record.__dict__[self.name] = container
        record.__pydantic_fields_set__.add(self.name)


def locate_overflow_field(value: Any) -> OverflowField:
    """Find the single ``UnknownFields`` field of a model instance or class.

    Discovery runs on every call; nothing is cached.

    Raises:
        ShapeError: If ``value`` is not a pydantic model instance or class.
        OverflowFieldMissingError: If no field is declared as UnknownFields.
        OverflowFieldAmbiguousError: If more than one field is.
        OverflowFieldNotExcludedError: If the field is not ``exclude=True``.
    """
    model = value if isinstance(value, type) else type(value)
    if not issubclass(model, BaseModel):
        raise ShapeError(
            ERR_MSG_EXPECTED_MODEL,
            f"expected pydantic model, got {model.__name__}",
        )

    candidates = [
        name for name, info in model.model_fields.items() if info.annotation is UnknownFields
    ]
    if not candidates:
        raise OverflowFieldMissingError(
            ERR_MSG_FIELD_NOT_DEFINED,
            f"{model.__name__} has no field of type UnknownFields",
        )
    if len(candidates) > 1:
        raise OverflowFieldAmbiguousError(
            ERR_MSG_MULTIPLE_UNKNOWN_FIELDS,
            f"{model.__name__} has {len(candidates)} UnknownFields fields: {', '.join(candidates)}",
        )

    name = candidates[0]
    info = model.model_fields[name]
    if info.exclude is not True:
        raise OverflowFieldNotExcludedError(
            ERR_MSG_FIELD_NOT_EXCLUDED,
            f"{model.__name__}.{name} must be declared with Field(exclude=True)",
        )

    logger.debug("overflow field of %s is %r", model.__name__, name)
    return OverflowField(model=model, name=name, info=info)
