"""
Seed the role catalog (user, moderator, admin) if the roles table is empty:
  python -m bastion.scripts.seed_roles
"""
import logging
import sys

from bastion.core.database import SessionLocal
from bastion.core.errors import DirectoryUnavailableError
from bastion.services.directory import seed_roles

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    db = SessionLocal()
    try:
        added = seed_roles(db)
    except DirectoryUnavailableError:
        logger.exception("Role seeding failed")
        return 1
    finally:
        db.close()
    if added:
        logger.info("Seeded roles: %s", ", ".join(added))
    else:
        logger.info("Roles already present; nothing to seed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
