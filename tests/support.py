"""Shared helpers for tests that need a fresh user directory."""

from bastion.core.database import SessionLocal, engine
from bastion.models import Base
from bastion.schemas.auth import SignupRequest
from bastion.services.directory import seed_roles
from bastion.services.signup import register_user

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"
OTHER_SECRET = "another-signing-secret-fedcba9876543210xyz"


def reset_database(seed: bool = True) -> None:
    """Drop and recreate all tables; seed the role catalog unless seed is False."""
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    if seed:
        db = SessionLocal()
        try:
            seed_roles(db)
        finally:
            db.close()


def create_user(
    username: str = "alice",
    email: str = "alice@example.com",
    password: str = "secret1",
    roles: list[str] | None = None,
) -> str:
    """Register a user through the signup flow and return its id."""
    db = SessionLocal()
    try:
        user = register_user(
            db,
            SignupRequest(username=username, email=email, password=password, roles=roles),
        )
        return user.id
    finally:
        db.close()
