"""Signup: validate, hash and store a new user with its roles. No token is issued here."""

import logging

from sqlalchemy.orm import Session

from bastion.core.errors import DuplicateUserError
from bastion.core.security import hash_password
from bastion.models import BASELINE_ROLE, User
from bastion.schemas.auth import SignupRequest
from bastion.services import directory

logger = logging.getLogger(__name__)


def register_user(session: Session, body: SignupRequest) -> User:
    """
    Create a user from a validated signup request.

    Roles default to the baseline role when absent or empty; unknown names raise
    InvalidRoleError. Username/email collisions raise DuplicateUserError, whether
    caught by the pre-check or by the unique index on a concurrent insert.
    """
    role_names = body.roles or [BASELINE_ROLE]
    roles = directory.resolve_roles(session, role_names)

    if directory.username_exists(session, body.username):
        logger.info("Signup rejected: duplicate username", extra={"username": body.username})
        raise DuplicateUserError("Failed! Username is already in use!")
    if directory.email_exists(session, body.email):
        logger.info("Signup rejected: duplicate email", extra={"username": body.username})
        raise DuplicateUserError("Failed! Email is already in use!")

    try:
        user = directory.add_user(
            session,
            username=body.username,
            email=body.email,
            password_hash=hash_password(body.password),
            roles=roles,
        )
    except DuplicateUserError:
        logger.info("Signup rejected: unique index violation", extra={"username": body.username})
        raise

    logger.info(
        "User registered",
        extra={"user_id": user.id, "username": user.username, "roles": user.role_names},
    )
    return user
