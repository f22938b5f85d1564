# todo_api/schemas/validation.py
from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from todo_api.core.errors import ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def describe(errors: Iterable[dict]) -> str:
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "bad request"


def parse(schema: Type[SchemaType], payload: Any) -> SchemaType:
    """Validate a raw request body, raising the 400-mapped ``ValidationError``."""
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(describe(exc.errors())) from exc
