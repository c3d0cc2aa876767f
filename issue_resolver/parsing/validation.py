"""
Schema validation for extracted model output.

Shapes are pydantic types: ``CODE_CHANGES`` (an ordered list of CodeChange)
and ``ReviewFeedback``.
"""

import json
from functools import lru_cache
from typing import Any, TypeVar, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from issue_resolver.exceptions import SchemaValidationError
from issue_resolver.models.schemas import CodeChange
from issue_resolver.parsing.extraction import extract_json

T = TypeVar("T")

CODE_CHANGES = list[CodeChange]


@lru_cache()
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def shape_name(shape: Any) -> str:
    """Readable name of a shape, e.g. ``list[CodeChange]``."""
    origin = get_origin(shape)
    if origin is not None:
        args = ", ".join(shape_name(a) for a in get_args(shape))
        return f"{origin.__name__}[{args}]"
    return getattr(shape, "__name__", repr(shape))


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def validate(value: Any, shape: type[T]) -> T:
    """
    Validate a parsed JSON value against a shape.

    Unknown keys are ignored; missing keys, wrong primitive types and values
    outside an enumeration are rejected.

    Args:
        value: Parsed JSON value.
        shape: Target type (``CODE_CHANGES`` or ``ReviewFeedback``).

    Returns:
        The typed value.

    Raises:
        SchemaValidationError: Listing every failing field path.
    """
    try:
        return _adapter(shape).validate_python(value)
    except ValidationError as e:
        errors = [
            {"loc": _format_loc(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise SchemaValidationError(shape_name(shape), errors) from e


def parse_structured(raw_text: str, shape: type[T]) -> T:
    """Extract JSON from model text and validate it against a shape."""
    return validate(extract_json(raw_text), shape)


def format_instructions(shape: Any) -> str:
    """
    Render the format instructions embedded in a user prompt.

    Args:
        shape: Target type.

    Returns:
        Instruction text containing the JSON schema of the shape.
    """
    schema = json.dumps(_adapter(shape).json_schema(by_alias=True), indent=2)
    return (
        "The output should be formatted as a JSON instance that conforms to the "
        "JSON schema below.\n\n"
        f"```json\n{schema}\n```"
    )
