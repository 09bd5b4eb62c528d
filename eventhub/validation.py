"""Turn pydantic validation failures into structured 422 responses.

Every mutation and the listing filters are validated against a pydantic
schema before any ORM object is built. A failure is raised as an
``HTTPException`` whose ``detail`` carries a message, one message per field
and the submitted input, so the caller can re-render its form.
"""
from typing import Any, Optional, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a ValidationError to ``{field: first message}``."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "error"
        message = err["msg"]
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        errors.setdefault(field, message)
    return errors


def validation_failed(
    errors: dict[str, str],
    submitted: dict[str, Any],
    message: str = "The given data was invalid.",
) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": message, "errors": errors, "input": submitted},
    )


def validate_input(
    schema: type[SchemaT],
    submitted: dict[str, Any],
    extra_errors: Optional[dict[str, str]] = None,
) -> SchemaT:
    """Validate ``submitted`` against ``schema`` or raise a 422.

    ``extra_errors`` holds failures found outside the schema (e.g. file
    checks) so that all problems are reported together.
    """
    errors = dict(extra_errors or {})
    try:
        parsed = schema.model_validate(submitted)
    except ValidationError as exc:
        errors = {**field_errors(exc), **errors}
        raise validation_failed(errors, submitted)
    if errors:
        raise validation_failed(errors, submitted)
    return parsed
