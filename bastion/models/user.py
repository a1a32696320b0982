"""ORM models for users, the role catalog and their many-to-many link."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, func
from sqlalchemy.orm import relationship

from bastion.models.base import Base

# Fixed catalog, seeded once. "user" is the baseline role given when none is requested.
ROLE_CATALOG = ("user", "moderator", "admin")
BASELINE_ROLE = "user"

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Role(Base):
    """Named permission tier from ROLE_CATALOG."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(32), nullable=False, unique=True, index=True)


class User(Base):
    """
    Account for token authentication and role-based access control.

    username and email are unique (enforced by unique indexes); password_hash
    is a bcrypt digest, never the plain password.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(254), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    roles = relationship(
        "Role",
        secondary=user_roles,
        lazy="selectin",
        order_by="Role.id",
    )

    @property
    def role_names(self) -> list[str]:
        return [r.name for r in self.roles]
