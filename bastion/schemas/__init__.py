"""Pydantic request/response schemas."""

from bastion.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    UserListItem,
    UsersListResponse,
)
from bastion.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "MessageResponse",
    "SigninRequest",
    "SigninResponse",
    "SignupRequest",
    "UserListItem",
    "UsersListResponse",
]
