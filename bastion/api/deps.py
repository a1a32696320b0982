"""Access pipeline for protected routes: extract, verify, resolve, authorize, admit.

Each stage raises on failure, so later stages never run for a rejected request.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from bastion.core.database import get_db
from bastion.core.errors import (
    ForbiddenError,
    InvalidTokenError,
    NoTokenError,
    TokenExpiredError,
    UserNotFoundError,
)
from bastion.core.security import (
    ExpiredTokenError,
    TokenClaims,
    TokenError,
    TokenService,
    get_token_service,
)
from bastion.schemas.auth import CurrentUser
from bastion.services import directory

ACCESS_TOKEN_HEADER = "x-access-token"

access_token_header = APIKeyHeader(name=ACCESS_TOKEN_HEADER, auto_error=False)


def get_token(token: Annotated[str | None, Depends(access_token_header)]) -> str:
    """Stage 1: the raw token from the x-access-token header. Missing or blank is 403."""
    if token is None or not token.strip():
        raise NoTokenError()
    return token.strip()


def get_token_claims(
    token: Annotated[str, Depends(get_token)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Stage 2: verified claims of an access token."""
    try:
        claims = token_service.verify(token)
    except ExpiredTokenError as e:
        raise TokenExpiredError() from e
    except TokenError as e:
        raise InvalidTokenError() from e
    # Refresh tokens are not accepted as access credentials.
    if claims.kind is not None:
        raise InvalidTokenError()
    return claims


def get_current_user(
    request: Request,
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Stage 3 and 5: load the token subject and attach it to the request."""
    user = directory.get_user_by_id(db, claims.subject_id)
    if user is None:
        raise UserNotFoundError()
    current_user = CurrentUser(
        id=user.id,
        username=user.username,
        email=user.email,
        roles=user.role_names,
    )
    request.state.current_user = current_user
    return current_user


def require_roles(*roles: str) -> Callable[[CurrentUser], CurrentUser]:
    """
    Stage 4: dependency factory admitting users holding any of the given roles.

    Usage: Depends(require_roles("admin"))
    """
    if not roles:
        raise ValueError("require_roles needs at least one role")
    message = "Require " + " or ".join(r.capitalize() for r in roles) + " Role!"

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not any(current_user.has_role(r) for r in roles):
            raise ForbiddenError(message)
        return current_user

    return dependency


require_admin = require_roles("admin")
require_moderator = require_roles("moderator")
