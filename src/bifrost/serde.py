"""JSON encoding and decoding for request and response bodies."""

import dataclasses
import json
from collections.abc import Mapping, MutableMapping, MutableSequence
from enum import Enum
from typing import Any, Optional, Type

from bifrost.errors import FailedToEncode

_PRIMITIVES = (str, int, float, bool)


class KeyDecodingStrategy(Enum):
    """How object keys in a JSON body are matched against the target type."""

    USE_DEFAULT_KEYS = "use_default_keys"
    CONVERT_FROM_SNAKE_CASE = "convert_from_snake_case"


def _is_list_type(cls: Type) -> bool:
    """Check if cls is a list-like type (list, List, List[T], or MutableSequence subclass)."""
    try:
        return issubclass(cls.__origin__, MutableSequence)
    except (AttributeError, TypeError):
        try:
            return issubclass(cls, MutableSequence)
        except TypeError:
            return False


def _is_dict_type(cls: Type) -> bool:
    """Check if cls is a dict-like type (dict, Dict, Dict[K,V], or MutableMapping subclass)."""
    try:
        return issubclass(cls.__origin__, MutableMapping)
    except (AttributeError, TypeError):
        try:
            return issubclass(cls, MutableMapping)
        except TypeError:
            return False


def serialize_body(body: Any) -> Any:
    """Serialize a request body to JSON-compatible data.

    Supports:
    - None, dict, list, primitives (passed through)
    - Objects with model_dump(), to_json() or to_dict() (duck typing)
    - Nested objects inside containers are recursively serialized

    Raises:
        ValueError: If body is str or bytes at top level
        TypeError: If body type is not supported
    """
    if body is None:
        return None
    if isinstance(body, (str, bytes)):
        raise ValueError("str and bytes data is not supported")
    return _serialize_value(body)


def _serialize_value(value: Any) -> Any:
    if value is None or isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, bytes):
        raise ValueError("bytes data is not supported")
    if isinstance(value, Mapping):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if hasattr(value, "model_dump") and callable(value.model_dump):  # Pydantic v2
        return _serialize_value(value.model_dump())
    if hasattr(value, "to_json") and callable(value.to_json):
        return _serialize_value(value.to_json())
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return _serialize_value(value.to_dict())
    raise TypeError(
        f"Cannot serialize value of type {type(value).__name__}. Expected dict, list, primitive, or Serializable."
    )


def encode_json(mapping: Mapping[str, Any]) -> bytes:
    """Encode a string-keyed mapping as pretty-printed UTF-8 JSON.

    Raises:
        FailedToEncode: If the mapping holds values that are not representable as JSON
    """
    if not isinstance(mapping, Mapping):
        raise FailedToEncode(f"Expected a mapping, got {type(mapping).__name__}")
    if not all(isinstance(key, str) for key in mapping):
        raise FailedToEncode("Mapping keys must be strings")
    try:
        data = serialize_body(mapping)
        return json.dumps(data, indent=2, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise FailedToEncode(str(e)) from e


def convert_from_snake_case(key: str) -> str:
    """Convert a snake_case key to camelCase.

    Leading and trailing underscores are kept, and keys without an inner
    underscore are returned unchanged, e.g. ``_user_name_`` -> ``_userName_``.
    """
    stripped = key.strip("_")
    words = [word for word in stripped.split("_") if word]
    if len(words) < 2:
        return key
    leading = len(key) - len(key.lstrip("_"))
    trailing = len(key) - len(key.rstrip("_"))
    camel = words[0].lower() + "".join(word.capitalize() for word in words[1:])
    return "_" * leading + camel + "_" * trailing


def _convert_keys(data: Any) -> Any:
    if isinstance(data, dict):
        return {convert_from_snake_case(k): _convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_convert_keys(item) for item in data]
    return data


def decode(
    content: bytes,
    cls: Optional[Type] = None,
    key_strategy: KeyDecodingStrategy = KeyDecodingStrategy.USE_DEFAULT_KEYS,
) -> Any:
    """Decode a JSON body into ``cls``.

    Args:
        content: Raw response body
        cls: Target type. ``None`` returns the parsed data as-is. Basic types
            (dict, list, str, int, float, bool) are type-checked, ``List[T]``
            decodes each item as ``T``, and model classes are built via
            duck-typed constructors, see ``_deserialize_object``.
        key_strategy: Whether object keys are converted from snake_case first

    Returns:
        Decoded value

    Raises:
        ValueError: If the body is not valid JSON
        TypeError: If the data does not fit ``cls``
    """
    data = json.loads(content)
    if key_strategy is KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE:
        data = _convert_keys(data)
    return deserialize(data, cls)


def deserialize(data: Any, cls: Optional[Type] = None) -> Any:
    """Build ``cls`` from already parsed JSON data."""
    if cls is None:
        return data

    if _is_dict_type(cls):
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    if _is_list_type(cls):
        if not isinstance(data, list):
            raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
        args = getattr(cls, "__args__", ())
        if not args:
            return data
        inner_cls = args[0]
        if inner_cls is Any:
            return data
        return [deserialize(item, inner_cls) for item in data]

    if cls in _PRIMITIVES:
        # bool is an int subclass, and JSON ints are valid floats
        if cls is float and isinstance(data, int) and not isinstance(data, bool):
            return float(data)
        if not isinstance(data, cls) or (cls is int and isinstance(data, bool)):
            raise TypeError(f"Expected {cls.__name__}, got {type(data).__name__}")
        return data

    return _deserialize_object(data, cls)


def _deserialize_object(data: Any, cls: Type) -> Any:
    """Deserialize a single object using duck-typed constructors.

    Supports:
    - Pydantic v2 models (model_validate)
    - Classes with from_dict() class method
    - Classes with from_json() class method
    - Dataclasses, constructed from keyword arguments
    """
    if hasattr(cls, "model_validate") and callable(cls.model_validate):  # Pydantic v2
        return cls.model_validate(data)

    if hasattr(cls, "from_dict") and callable(cls.from_dict):
        return cls.from_dict(data)

    if hasattr(cls, "from_json") and callable(cls.from_json):
        return cls.from_json(data)

    if dataclasses.is_dataclass(cls):
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}")
        return cls(**data)

    raise TypeError(
        f"Cannot deserialize to {getattr(cls, '__name__', cls)}. "
        f"Class must have model_validate(), from_dict(), or from_json() class method, or be a dataclass."
    )
