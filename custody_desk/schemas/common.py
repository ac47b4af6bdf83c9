# custody_desk/schemas/common.py

from typing import TypeVar

import pydantic
from pydantic import BaseModel

from custody_desk.core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_errors(exc) -> str:
    """Flatten pydantic (or FastAPI request) errors into one message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        message = error["msg"]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def validated(model: type[ModelT], **fields) -> ModelT:
    """Build a request model, reporting bad input as a ValidationError."""
    try:
        return model.model_validate(fields)
    except pydantic.ValidationError as exc:
        raise ValidationError(describe_errors(exc)) from exc
