"""Unit tests for Pydantic v2 integration with serde."""

import unittest
from typing import Optional

from pydantic import BaseModel, ValidationError

from bifrost.serde import KeyDecodingStrategy, decode, serialize_body


class SimpleModel(BaseModel):
    name: str
    value: int


class NestedModel(BaseModel):
    title: str
    item: SimpleModel


class CamelModel(BaseModel):
    userName: str
    homeCity: Optional[str] = None


class TestPydanticSerialization(unittest.TestCase):
    def test_serialize_pydantic_model(self):
        self.assertEqual(serialize_body(SimpleModel(name="test", value=42)), {"name": "test", "value": 42})

    def test_serialize_nested_pydantic_model(self):
        model = NestedModel(title="parent", item=SimpleModel(name="child", value=1))
        self.assertEqual(serialize_body(model), {"title": "parent", "item": {"name": "child", "value": 1}})

    def test_serialize_pydantic_model_in_list(self):
        data = {"items": [SimpleModel(name="a", value=1), SimpleModel(name="b", value=2)]}
        self.assertEqual(serialize_body(data), {"items": [{"name": "a", "value": 1}, {"name": "b", "value": 2}]})


class TestPydanticDecode(unittest.TestCase):
    def test_decode_to_pydantic_model(self):
        result = decode(b'{"name": "test", "value": 42}', SimpleModel)
        self.assertIsInstance(result, SimpleModel)
        self.assertEqual(result.value, 42)

    def test_decode_list_to_pydantic_models(self):
        result = decode(b'[{"name": "a", "value": 1}, {"name": "b", "value": 2}]', list[SimpleModel])
        self.assertEqual([r.name for r in result], ["a", "b"])

    def test_decode_nested_pydantic_model(self):
        result = decode(b'{"title": "parent", "item": {"name": "child", "value": 1}}', NestedModel)
        self.assertIsInstance(result.item, SimpleModel)

    def test_exact_keys_do_not_match_snake_case_body(self):
        with self.assertRaises(ValidationError):
            decode(b'{"user_name": "a"}', CamelModel)

    def test_snake_case_body_matches_camel_case_fields(self):
        result = decode(
            b'{"user_name": "a", "home_city": "b"}', CamelModel, KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE
        )
        self.assertEqual(result.userName, "a")
        self.assertEqual(result.homeCity, "b")


if __name__ == "__main__":
    unittest.main()
