"""Request/response schemas for auth endpoints.

Request models use strict strings and forbid extra fields, so objects such as
{"$ne": ""} in place of a username are rejected before any lookup runs.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictStr

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 20
EMAIL_MAX_LEN = 254
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
MAX_REQUESTED_ROLES = 3


class SignupRequest(BaseModel):
    """New account: username, email, password and optional role names."""

    model_config = ConfigDict(extra="forbid")

    username: StrictStr = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: StrictStr = Field(
        ..., max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN, description="Email address"
    )
    password: StrictStr = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    roles: Annotated[list[StrictStr], Field(max_length=MAX_REQUESTED_ROLES)] | None = Field(
        default=None,
        description="Role names from the catalog; defaults to ['user']",
    )


class SigninRequest(BaseModel):
    """Credentials for sign-in."""

    model_config = ConfigDict(extra="forbid")

    username: StrictStr = Field(..., min_length=1, max_length=255, description="Username")
    password: StrictStr = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class MessageResponse(BaseModel):
    """Plain message body used for confirmations, content and errors."""

    message: str


class SigninResponse(BaseModel):
    """Identity and access token returned after a successful sign-in."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: str
    roles: list[str] = Field(..., description="Authorities, e.g. ROLE_USER")
    access_token: str = Field(..., alias="accessToken", description="Signed access token")


class CurrentUser(BaseModel):
    """Authenticated user attached to the request by the access pipeline."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    roles: list[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles


class UserListItem(BaseModel):
    """User entry for admin list (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    roles: list[str]


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[UserListItem]
