"""Domain errors raised by the core and rendered by the API layer."""

from typing import Any


class VidtubeError(Exception):
    """Base class for errors surfaced to callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> Any:
        """Body of the ``{"detail": ...}`` error response."""
        return self.message


class InvalidInput(VidtubeError):
    """Malformed identifier, missing required value or bad pagination."""

    status_code = 400


class InvalidOperation(InvalidInput):
    """Well-formed request that the domain rules refuse (e.g. self-subscription)."""


class InvalidPayload(VidtubeError):
    """Request body rejected by its schema.

    Raised for update bodies, which are only validated once the actor is
    known to own the record. ``errors`` follow FastAPI's validation error
    shape so clients see the same 422 body either way.
    """

    status_code = 422

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__("Invalid request body")
        self.errors = errors

    @property
    def detail(self) -> Any:
        return self.errors


class NotFound(VidtubeError):
    """Referenced entity does not exist."""

    status_code = 404


class PermissionDenied(VidtubeError):
    """Actor is not the owner of the record being mutated."""

    status_code = 403


class Conflict(VidtubeError):
    """State conflict the caller can resolve by re-reading (already in playlist...)."""

    status_code = 400


class PipelineError(VidtubeError):
    """A view pipeline was defined inconsistently (duplicate output field, bad join)."""
