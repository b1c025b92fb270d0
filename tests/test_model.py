"""OverflowModel helper tests."""

import pytest

from pyj2n import CollisionError, OverflowModel
from pyj2n._errors import OverflowFieldMissingError
from tests.conftest import Tabby


class TestOverflowModel:
    def test_from_json(self):
        cat = Tabby.from_json(b'{"name": "Tom", "age": 5}')
        assert isinstance(cat, Tabby)
        assert cat.rest == {"age": b"5"}

    def test_to_json(self):
        cat = Tabby(name="Tom", rest={"age": 5})
        assert cat.to_json() == b'{"name":"Tom","stripes":null,"age":5}'

    def test_options_forwarded(self):
        cat = Tabby.from_json(b'{"name": "Tom", "stripes": null}', exclude_none=True)
        assert cat.rest == {"stripes": b"null"}
        assert cat.to_json(exclude_none=True) == b'{"name":"Tom","stripes":null}'

    def test_round_trip(self):
        document = b'{"name":"Tom","stripes":3,"age":5,"toys":["ball"]}'
        assert Tabby.from_json(document).to_json() == document

    def test_collision(self):
        with pytest.raises(CollisionError):
            Tabby(name="Tom", rest={"stripes": 1}).to_json()

    def test_base_without_overflow_field(self):
        class Plain(OverflowModel):
            name: str

        with pytest.raises(OverflowFieldMissingError):
            Plain.from_json(b'{"name": "Tom"}')
