"""URL-encoded form decoding and record flattening.

``FormDecoder`` turns ``application/x-www-form-urlencoded`` bodies into
pydantic models. Keys may use bracket notation (``tags[]=a&tags[]=b``,
``address[city]=Oslo``); repeated plain keys collect into lists.

``to_field_map`` goes the other way for serialization: a record becomes a
JSON-compatible mapping, and ``render_value`` turns each value into the text
placed in a form field.
"""

import re
from collections.abc import Mapping
from enum import StrEnum
from typing import Any
from urllib.parse import parse_qsl

import orjson
from pydantic import BaseModel, ValidationError

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_BRACKET_PART = re.compile(r"\[([^\[\]]*)\]")


class FormDecodingError(ValueError):
    """Raised when a form body cannot be decoded into the requested model."""

    def __init__(self, model: type[BaseModel], errors: list[dict[str, Any]]) -> None:
        self.model = model
        self.errors = errors
        super().__init__(f"Could not decode form body into {model.__name__}: {len(errors)} error(s)")


class ParsingStrategy(StrEnum):
    """How form keys are interpreted."""

    ACCUMULATE = "accumulate"
    BRACKETS = "brackets"


def _insert(target: dict[str, Any], key: str, value: str) -> None:
    if key in target:
        existing = target[key]
        target[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
    else:
        target[key] = value


def _insert_bracketed(target: dict[str, Any], name: str, path: list[str], value: str) -> None:
    node = target
    keys = [name, *path]
    for index, key in enumerate(keys):
        last = index == len(keys) - 1
        next_key = None if last else keys[index + 1]

        if last:
            _insert(node, key, value)
        elif next_key == "":
            node.setdefault(key, [])
            if not isinstance(node[key], list):
                node[key] = [node[key]]
            node[key].append(value)
            return
        else:
            child = node.setdefault(key, {})
            if not isinstance(child, dict):
                child = node[key] = {}
            node = child


def parse_form(body: bytes | str, strategy: ParsingStrategy = ParsingStrategy.BRACKETS) -> dict[str, Any]:
    """Parse a URL-encoded body into nested dicts and lists of strings."""
    text = body.decode("utf-8") if isinstance(body, bytes) else body
    result: dict[str, Any] = {}

    for key, value in parse_qsl(text, keep_blank_values=True):
        match = _BRACKET_KEY.match(key) if strategy is ParsingStrategy.BRACKETS else None
        if match:
            _insert_bracketed(result, match.group(1), _BRACKET_PART.findall(match.group(2)), value)
        else:
            _insert(result, key, value)

    return result


class FormDecoder:
    """Decodes URL-encoded form bodies into pydantic models."""

    def __init__(self, parsing_strategy: ParsingStrategy = ParsingStrategy.BRACKETS) -> None:
        self.parsing_strategy = parsing_strategy

    def decode[M: BaseModel](self, model: type[M], body: bytes | str) -> M:
        try:
            fields = parse_form(body, self.parsing_strategy)
        except UnicodeDecodeError as ex:
            raise FormDecodingError(model, [{"type": "unicode_decode", "msg": str(ex)}]) from ex

        try:
            return model.model_validate(fields)
        except ValidationError as ex:
            raise FormDecodingError(model, ex.errors(include_url=False)) from ex


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Type is not form serializable: {type(value).__name__}")


def to_field_map(record: BaseModel | Mapping[str, Any] | Any) -> dict[str, Any]:
    """Flatten a record into a JSON-compatible mapping of its top-level fields."""
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")

    fields = orjson.loads(orjson.dumps(record, default=_default))
    if not isinstance(fields, dict):
        raise TypeError(f"Expected a record with named fields, got {type(record).__name__}")
    return fields


def render_value(value: Any) -> str:
    """Text for a form field; booleans become ``"1"``/``"0"``, containers JSON."""
    match value:
        case bool():
            return "1" if value else "0"
        case str():
            return value
        case dict() | list():
            return orjson.dumps(value).decode()
        case _:
            return str(value)
