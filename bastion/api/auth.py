"""Signup, signin and the admin user list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bastion.api.deps import require_admin
from bastion.core.config import Settings, get_settings
from bastion.core.database import get_db
from bastion.core.security import TokenService, get_token_service
from bastion.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    UserListItem,
    UsersListResponse,
)
from bastion.services import directory
from bastion.services.signin import authenticate
from bastion.services.signup import register_user

router = APIRouter()

SIGNUP_SUCCESS_MESSAGE = "User was registered successfully!"


@router.post("/signup", response_model=MessageResponse)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Register a new user. Roles default to ['user'].
    Does not sign the user in; call /signin afterwards for a token.
    """
    register_user(db, body)
    return MessageResponse(message=SIGNUP_SUCCESS_MESSAGE)


@router.post("/signin", response_model=SigninResponse)
def signin(
    body: SigninRequest,
    db: Annotated[Session, Depends(get_db)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SigninResponse:
    """
    Authenticate with username and password; returns identity and an access token.
    Send the token on protected requests as the x-access-token header.
    """
    return authenticate(db, body, token_service, settings)


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users with their roles (admin only)."""
    users = directory.list_users(db)
    return UsersListResponse(
        users=[
            UserListItem(id=u.id, username=u.username, email=u.email, roles=u.role_names)
            for u in users
        ]
    )
