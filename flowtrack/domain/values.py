"""JSON value type used for point expectations and assertion observations.

Values are stored and compared as plain decoded JSON: None, bool, int,
float, str, list and dict with string keys. Anything else (dataclasses,
pydantic models, datetimes, UUIDs, ...) is converted once at the boundary
by to_json_value().
"""

import json
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from flowtrack.domain.exceptions import SerializationException

type JsonValue = (
    None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]
)

KIND_NULL = "null"
KIND_BOOLEAN = "boolean"
KIND_NUMBER = "number"
KIND_STRING = "string"
KIND_ARRAY = "array"
KIND_OBJECT = "object"


def to_json_value(value: Any, field: str = "value") -> JsonValue:
    """Convert value to its decoded JSON form.

    Args:
        value: Arbitrary Python value.
        field: Name used in the error message ('expected', 'actual', ...).

    Returns:
        Decoded JSON value (tuples become lists, models become dicts).

    Raises:
        SerializationException: If value has no JSON representation.
    """
    try:
        converted = to_jsonable_python(value)
        # NaN and +/-Infinity have no JSON form
        json.dumps(converted, allow_nan=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationException(field, str(e)) from e
    return converted


def json_kind(value: Any) -> str:
    """Return the JSON kind of a decoded value.

    int and float share the 'number' kind; bool is never a number.
    """
    if value is None:
        return KIND_NULL
    if isinstance(value, bool):
        return KIND_BOOLEAN
    if isinstance(value, int | float):
        return KIND_NUMBER
    if isinstance(value, str):
        return KIND_STRING
    if isinstance(value, list | tuple):
        return KIND_ARRAY
    if isinstance(value, dict):
        return KIND_OBJECT
    return type(value).__name__
