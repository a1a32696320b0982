"""Signin: check credentials and issue an access token."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from bastion.core.errors import InvalidCredentialsError, UserNotFoundError
from bastion.core.security import DUMMY_PASSWORD_HASH, TokenService, verify_password
from bastion.schemas.auth import SigninRequest, SigninResponse
from bastion.services import directory

if TYPE_CHECKING:
    from bastion.core.config import Settings

logger = logging.getLogger(__name__)

MERGED_LOGIN_FAILURE_MESSAGE = "Invalid username or password."


def authority(role_name: str) -> str:
    """Role name as exposed to clients, e.g. 'admin' -> 'ROLE_ADMIN'."""
    return f"ROLE_{role_name.upper()}"


def authenticate(
    session: Session,
    body: SigninRequest,
    token_service: TokenService,
    settings: "Settings",
) -> SigninResponse:
    """
    Verify username/password and return identity plus a fresh access token.

    Raises UserNotFoundError (404) or InvalidCredentialsError (401); with
    AUTH_MERGE_LOGIN_FAILURES both become one 401 so usernames cannot be probed.
    Only an access token is issued; refresh tokens are not part of sign-in.
    """
    user = directory.get_user_by_username(session, body.username)
    if user is None:
        # Same bcrypt cost as a real check so timing does not reveal the miss.
        verify_password(body.password, DUMMY_PASSWORD_HASH)
        logger.warning("Signin failed: unknown username", extra={"username": body.username})
        if settings.AUTH_MERGE_LOGIN_FAILURES:
            raise InvalidCredentialsError(MERGED_LOGIN_FAILURE_MESSAGE)
        raise UserNotFoundError()

    if not verify_password(body.password, user.password_hash):
        logger.warning("Signin failed: invalid password", extra={"user_id": user.id})
        if settings.AUTH_MERGE_LOGIN_FAILURES:
            raise InvalidCredentialsError(MERGED_LOGIN_FAILURE_MESSAGE)
        raise InvalidCredentialsError()

    token = token_service.issue_access(user.id)
    logger.info("Signin succeeded", extra={"user_id": user.id})
    return SigninResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        roles=[authority(name) for name in user.role_names],
        access_token=token,
    )
