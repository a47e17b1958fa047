"""Helpers shared by the CRUD modules."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.exceptions import InvalidInput, InvalidPayload, NotFound, PermissionDenied

M = TypeVar("M")
S = TypeVar("S", bound=BaseModel)


def ensure_id(value: Any, label: str) -> int:
    """Validate a path/query identifier."""
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid {label} ID")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid {label} ID") from None
    if parsed < 1:
        raise InvalidInput(f"Invalid {label} ID")
    return parsed


async def get_or_404(db: AsyncSession, model: type[M], record_id: int, label: str) -> M:
    """Load a record by primary key or raise NotFound."""
    record = await db.get(model, ensure_id(record_id, label.lower()))
    if record is None:
        raise NotFound(f"{label} not found")
    return record


def ensure_owner(record: Any, actor_id: int, message: str) -> None:
    """Raise PermissionDenied unless ``actor_id`` owns ``record``."""
    if record.owner_id != actor_id:
        raise PermissionDenied(message)


def validate_payload(schema: type[S], data: Any) -> S:
    """Validate a raw request body against ``schema``.

    Already-validated instances pass through unchanged.
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise InvalidPayload([{**e, "loc": ("body", *e["loc"])} for e in errors]) from exc
