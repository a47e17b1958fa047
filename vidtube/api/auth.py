"""Session endpoints.

Sign-in happens at the upstream identity service, which writes ``user_id``
into the signed session cookie; this service only reads and clears it.
"""

from fastapi import APIRouter, Request

from vidtube.auth import CurrentUser
from vidtube.models.schemas import UserRead

router = APIRouter()


@router.post("/logout", status_code=204)
async def logout(request: Request) -> None:
    """Log out the current user."""
    request.session.clear()


@router.get("/me", response_model=UserRead)
async def get_me(user: CurrentUser) -> UserRead:
    """Get current authenticated user."""
    return UserRead.model_validate(user)
