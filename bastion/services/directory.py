"""User directory: the narrow set of lookups and inserts the auth flows need.

Database outages and timeouts surface as DirectoryUnavailableError; uniqueness
is left to the unique indexes on users.username and users.email.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from bastion.core.errors import DirectoryUnavailableError, DuplicateUserError, InvalidRoleError
from bastion.models import ROLE_CATALOG, Role, User

logger = logging.getLogger(__name__)


@contextmanager
def directory_call(session: Session, operation: str) -> Iterator[None]:
    """Translate connectivity failures into DirectoryUnavailableError and roll back."""
    try:
        yield
    except (OperationalError, PoolTimeoutError) as e:
        session.rollback()
        logger.error(
            "User directory unavailable",
            extra={"operation": operation, "reason": str(e)[:500]},
        )
        raise DirectoryUnavailableError() from e


def get_user_by_username(session: Session, username: str) -> User | None:
    with directory_call(session, "get_user_by_username"):
        return session.scalars(select(User).where(User.username == username)).first()


def get_user_by_id(session: Session, user_id: str) -> User | None:
    with directory_call(session, "get_user_by_id"):
        return session.get(User, user_id)


def username_exists(session: Session, username: str) -> bool:
    with directory_call(session, "username_exists"):
        return session.scalar(select(User.id).where(User.username == username)) is not None


def email_exists(session: Session, email: str) -> bool:
    with directory_call(session, "email_exists"):
        return session.scalar(select(User.id).where(User.email == email)) is not None


def list_users(session: Session) -> list[User]:
    with directory_call(session, "list_users"):
        return list(session.scalars(select(User).order_by(User.created_at, User.username)))


def resolve_roles(session: Session, names: Iterable[str]) -> list[Role]:
    """
    Map role names to catalog rows, preserving request order and dropping repeats.

    Raises InvalidRoleError for the first name outside the catalog.
    """
    wanted: list[str] = []
    for name in names:
        if name not in ROLE_CATALOG:
            raise InvalidRoleError(name)
        if name not in wanted:
            wanted.append(name)
    with directory_call(session, "resolve_roles"):
        rows = {r.name: r for r in session.scalars(select(Role).where(Role.name.in_(wanted)))}
    missing = [n for n in wanted if n not in rows]
    if missing:
        # In the catalog but never seeded.
        raise InvalidRoleError(missing[0])
    return [rows[n] for n in wanted]


def add_user(
    session: Session,
    username: str,
    email: str,
    password_hash: str,
    roles: list[Role],
) -> User:
    """
    Insert a user with its role links in a single transaction.

    A unique-index violation rolls back everything and raises DuplicateUserError.
    """
    user = User(username=username, email=email, password_hash=password_hash, roles=roles)
    with directory_call(session, "add_user"):
        session.add(user)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise DuplicateUserError() from e
        session.refresh(user)
    return user


def seed_roles(session: Session) -> list[str]:
    """Insert the role catalog when the roles table is empty. Returns the names added."""
    with directory_call(session, "seed_roles"):
        count = session.scalar(select(func.count()).select_from(Role))
        if count:
            return []
        session.add_all([Role(name=name) for name in ROLE_CATALOG])
        try:
            session.commit()
        except IntegrityError:
            # Another process seeded the catalog between the count and the insert.
            session.rollback()
            logger.info("Role catalog already seeded by another process")
            return []
    for name in ROLE_CATALOG:
        logger.info("Seeded role '%s'", name)
    return list(ROLE_CATALOG)
