"""SQLAlchemy ORM models."""

from bastion.models.base import Base
from bastion.models.user import BASELINE_ROLE, ROLE_CATALOG, Role, User, user_roles

__all__ = ["BASELINE_ROLE", "ROLE_CATALOG", "Base", "Role", "User", "user_roles"]
