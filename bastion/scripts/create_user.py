"""
Create a user (e.g. the first admin). Run from project root:
  python -m bastion.scripts.create_user USERNAME EMAIL PASSWORD [ROLE ...]
Example:
  python -m bastion.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from bastion.core.database import SessionLocal
from bastion.core.errors import AuthError
from bastion.models import ROLE_CATALOG
from bastion.schemas.auth import SignupRequest
from bastion.services.directory import seed_roles
from bastion.services.signup import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Bastion user from the command line.")
    parser.add_argument("username", help="Username (3-20 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "roles",
        nargs="*",
        metavar="ROLE",
        help=f"Role names ({', '.join(ROLE_CATALOG)}); defaults to user",
    )
    args = parser.parse_args(argv)

    try:
        body = SignupRequest(
            username=args.username,
            email=args.email,
            password=args.password,
            roles=args.roles or None,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        seed_roles(db)
        user = register_user(db, body)
        print(f"Created user '{user.username}' with roles {', '.join(user.role_names)}.")
        return 0
    except AuthError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
