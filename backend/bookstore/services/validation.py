"""
Payload validation for the books resource.

The accepted shape is described once in BOOK_SCHEMA; `validate` turns that table into
a strict pydantic model for the requested mode and reshapes pydantic's error list into
plain "<field>: <message>" strings for the API.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Type

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, create_model
from pydantic import ValidationError as PydanticValidationError


class Mode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class FieldRule:
    type: str  # "string" | "integer"
    required: bool = True
    create_only: bool = False
    minimum: int | None = None


BOOK_SCHEMA: Dict[str, FieldRule] = {
    "isbn": FieldRule("string", create_only=True),
    "amazon_url": FieldRule("string"),
    "author": FieldRule("string"),
    "language": FieldRule("string"),
    "pages": FieldRule("integer", minimum=0),
    "publisher": FieldRule("string"),
    "title": FieldRule("string"),
    "year": FieldRule("integer"),
}


class ValidationError(Exception):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _annotation(rule: FieldRule) -> Any:
    if rule.type == "string":
        return Annotated[StrictStr, Field(min_length=1)]
    if rule.type == "integer":
        return Annotated[StrictInt, Field(ge=rule.minimum)] if rule.minimum is not None else StrictInt
    raise ValueError(f"unsupported field type {rule.type!r}")


@lru_cache(maxsize=None)
def _model_for(mode: Mode) -> Type[BaseModel]:
    fields: Dict[str, Any] = {}
    for name, rule in BOOK_SCHEMA.items():
        if rule.create_only and mode is Mode.UPDATE:
            continue
        default = ... if rule.required else None
        fields[name] = (_annotation(rule), default)
    return create_model(
        f"Book{mode.value.capitalize()}",
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )


def _message(err: Dict[str, Any]) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
    if err.get("type") == "missing":
        return f"{loc}: field is required"
    return f"{loc}: {err.get('msg', 'invalid value')}"


def validate(payload: Any, mode: Mode) -> List[str]:
    """Return one message per violated constraint; an empty list means the payload is valid."""
    if not isinstance(payload, dict):
        return ["body: expected a JSON object"]
    try:
        _model_for(mode).model_validate(payload)
    except PydanticValidationError as exc:
        return [_message(err) for err in exc.errors()]
    return []


def check(payload: Any, mode: Mode) -> None:
    errors = validate(payload, mode)
    if errors:
        raise ValidationError(errors)


def required_fields(mode: Mode) -> List[str]:
    return [
        name for name, rule in BOOK_SCHEMA.items()
        if rule.required and not (rule.create_only and mode is Mode.UPDATE)
    ]
