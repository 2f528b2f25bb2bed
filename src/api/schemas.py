from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel


# --- Shared Models ---
class ErrorModel(BaseModel):
    code: str
    message: str
    field: str | None = None


class ValidationErrorResponse(BaseModel):
    """Validation error response."""

    errors: list[ErrorModel]


# --- Helpers ---
def serialize_errors(errors: list[Any]) -> list[dict[str, Any]]:
    """Serialize component validation errors."""
    return [
        {
            "code": e.code,
            "message": e.message,
            "field": e.field,
        }
        for e in errors
    ]


def raise_for_errors(errors: list[Any], status_code: int = 400) -> None:
    if errors:
        raise HTTPException(status_code=status_code, detail={"errors": serialize_errors(errors)})


def to_dict(value: Any) -> dict[str, Any]:
    """Dataclass component output as a plain dict."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    raise TypeError(f"Expected a dataclass instance, got {type(value)}")
