"""Shared test models and fixtures."""

from __future__ import annotations

from typing import Annotated

import pytest
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field

from pyj2n import OverflowModel, RawMessage, UnknownFields


class Cat(BaseModel):
    name: str
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


class Dog(BaseModel):
    name: str
    nick: str | None = Field(default=None, alias="nickName")
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


class Owner(BaseModel):
    id: int


class Pet(BaseModel):
    name: str
    owner: Owner | None = None
    tags: list[str] = Field(default_factory=list)
    extra: Annotated[UnknownFields, Field(exclude=True)] = Field(default_factory=dict)


class Shouting(BaseModel):
    name: str
    rest: UnknownFields = Field(default_factory=dict, exclude=True)

    @computed_field
    @property
    def loud(self) -> str:
        return self.name.upper()


class FrozenCat(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


class StrictCat(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


class RequiredOverflow(BaseModel):
    name: str
    rest: UnknownFields = Field(exclude=True)


class AliasedOverflow(BaseModel):
    name: str
    rest: UnknownFields = Field(default_factory=dict, exclude=True, alias="_rest")


class ChoiceOverflow(BaseModel):
    name: str
    rest: UnknownFields = Field(
        default_factory=dict,
        exclude=True,
        validation_alias=AliasChoices("unknown", "overflow"),
    )


class Clash(BaseModel):
    x: int = Field(default=0, alias="rest")
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


class RequiredClash(BaseModel):
    x: int = Field(default=0, alias="rest")
    rest: UnknownFields = Field(exclude=True)


class NoOverflow(BaseModel):
    name: str


class PlainDictOverflow(BaseModel):
    name: str
    rest: dict[str, RawMessage] = Field(default_factory=dict, exclude=True)


class OptionalOverflow(BaseModel):
    name: str
    rest: UnknownFields | None = Field(default=None, exclude=True)


class TwoOverflows(BaseModel):
    name: str
    first: UnknownFields = Field(default_factory=dict, exclude=True)
    second: UnknownFields = Field(default_factory=dict, exclude=True)


class NotExcluded(BaseModel):
    name: str
    rest: UnknownFields = Field(default_factory=dict)


class Tabby(OverflowModel):
    name: str
    stripes: int | None = None
    rest: UnknownFields = Field(default_factory=dict, exclude=True)


@pytest.fixture
def tom_json():
    return b'{"name": "Tom", "age": 5, "toys": ["ball", {"kind": "mouse"}]}'
