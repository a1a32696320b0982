"""Demo resources gated by role: public, any user, moderator, admin."""

from typing import Annotated

from fastapi import APIRouter, Depends

from bastion.api.deps import get_current_user, require_admin, require_moderator
from bastion.schemas.auth import CurrentUser, MessageResponse

router = APIRouter()


@router.get("/all", response_model=MessageResponse)
def public_content() -> MessageResponse:
    return MessageResponse(message="Public Content.")


@router.get("/user", response_model=MessageResponse)
def user_content(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    return MessageResponse(message="User Content.")


@router.get("/mod", response_model=MessageResponse)
def moderator_content(
    _user: Annotated[CurrentUser, Depends(require_moderator)],
) -> MessageResponse:
    return MessageResponse(message="Moderator Content.")


@router.get("/admin", response_model=MessageResponse)
def admin_content(
    _user: Annotated[CurrentUser, Depends(require_admin)],
) -> MessageResponse:
    return MessageResponse(message="Admin Content.")
