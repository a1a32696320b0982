"""Core app configuration, database, security and errors."""

from bastion.core.config import get_settings, settings
from bastion.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
