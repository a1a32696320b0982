"""Tests for the access pipeline (bastion.api.deps) and the role-gated /api/test routes."""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt
from fastapi.testclient import TestClient

from bastion.api.deps import get_current_user, get_token_claims, require_roles
from bastion.core.database import SessionLocal
from bastion.core.errors import (
    ForbiddenError,
    InvalidTokenError,
    NoTokenError,
    TokenExpiredError,
    UserNotFoundError,
)
from bastion.core.security import TokenService, get_token_service
from bastion.main import app
from bastion.models import User
from bastion.schemas.auth import CurrentUser
from tests.support import OTHER_SECRET, TEST_SECRET, create_user, reset_database

HEADER = "x-access-token"


class AccessTestCase(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.client = TestClient(app)
        self.tokens = TokenService(TEST_SECRET)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def get(self, path: str, token: str | None = None):
        headers = {HEADER: token} if token is not None else {}
        return self.client.get(path, headers=headers)

    def login(self, username: str, password: str = "password123") -> str:
        response = self.client.post(
            "/api/auth/signin", json={"username": username, "password": password}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["accessToken"]


class TestEndToEnd(AccessTestCase):
    """Signup, signin, then protected access."""

    def test_signup_signin_access(self) -> None:
        signup = self.client.post(
            "/api/auth/signup",
            json={"username": "alice", "email": "alice@x.com", "password": "secret1"},
        )
        self.assertEqual(signup.status_code, 200)
        token = self.login("alice", "secret1")
        self.assertTrue(token)
        response = self.get("/api/test/user", token)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "User Content."})

    def test_public_content_needs_no_token(self) -> None:
        response = self.get("/api/test/all")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Public Content."})


class TestTokenRejection(AccessTestCase):
    """Missing, malformed, forged and expired tokens never reach the handler."""

    def setUp(self) -> None:
        super().setUp()
        self.user_id = create_user("authuser", "auth@example.com", "password123")

    def test_no_token(self) -> None:
        response = self.get("/api/test/user")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"message": "No token provided!"})

    def test_empty_and_blank_token(self) -> None:
        for token in ("", "   "):
            with self.subTest(token=repr(token)):
                response = self.get("/api/test/user", token)
                self.assertEqual(response.status_code, 403)

    def test_syntactically_invalid_token(self) -> None:
        for token in (
            "token.invalide.123",
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.manipulated",
            "Bearer invalid",
        ):
            with self.subTest(token=token):
                response = self.get("/api/test/user", token)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json(), {"message": "Unauthorized!"})

    def test_wrong_secret(self) -> None:
        forged = TokenService(OTHER_SECRET).issue_access(self.user_id)
        self.assertEqual(self.get("/api/test/user", forged).status_code, 401)

    def test_expired_token(self) -> None:
        past = TokenService(TEST_SECRET, clock=lambda: datetime.now(UTC) - timedelta(days=2))
        response = self.get("/api/test/user", past.issue_access(self.user_id))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Unauthorized! Access Token was expired!"})

    def test_refresh_token_not_accepted(self) -> None:
        response = self.get("/api/test/user", self.tokens.issue_refresh(self.user_id))
        self.assertEqual(response.status_code, 401)

    def test_unknown_subject(self) -> None:
        response = self.get("/api/test/user", self.tokens.issue_access("no-such-user"))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "User Not found."})

    def test_deleted_user(self) -> None:
        token = self.tokens.issue_access(self.user_id)
        with SessionLocal() as db:
            db.delete(db.get(User, self.user_id))
            db.commit()
        self.assertEqual(self.get("/api/test/user", token).status_code, 404)

    def test_secret_rotation_invalidates_tokens(self) -> None:
        token = self.login("authuser")
        self.assertEqual(self.get("/api/test/user", token).status_code, 200)
        app.dependency_overrides[get_token_service] = lambda: TokenService(OTHER_SECRET)
        self.assertEqual(self.get("/api/test/user", token).status_code, 401)

    def test_role_claims_in_token_are_ignored(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": self.user_id,
                "iat": now,
                "exp": now + timedelta(hours=1),
                "jti": "x",
                "roles": ["admin"],
                "$where": "malicious",
            },
            TEST_SECRET,
            algorithm="HS256",
        )
        self.assertEqual(self.get("/api/test/user", token).status_code, 200)
        self.assertEqual(self.get("/api/test/admin", token).status_code, 403)


class TestRoleGates(AccessTestCase):
    """Moderator and admin routes check the roles stored in the directory."""

    def setUp(self) -> None:
        super().setUp()
        create_user("normaluser", "normal@example.com", "password123", roles=["user"])
        create_user("moduser", "mod@example.com", "password123", roles=["moderator"])
        create_user("adminuser", "admin@example.com", "password123", roles=["user", "admin"])

    def test_user_role(self) -> None:
        token = self.login("normaluser")
        self.assertEqual(self.get("/api/test/user", token).status_code, 200)
        mod = self.get("/api/test/mod", token)
        self.assertEqual(mod.status_code, 403)
        self.assertEqual(mod.json(), {"message": "Require Moderator Role!"})
        admin = self.get("/api/test/admin", token)
        self.assertEqual(admin.status_code, 403)
        self.assertEqual(admin.json(), {"message": "Require Admin Role!"})

    def test_moderator_role(self) -> None:
        token = self.login("moduser")
        response = self.get("/api/test/mod", token)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Moderator Content."})
        self.assertEqual(self.get("/api/test/admin", token).status_code, 403)

    def test_admin_role(self) -> None:
        token = self.login("adminuser")
        response = self.get("/api/test/admin", token)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Admin Content."})

    def test_admin_lists_users(self) -> None:
        token = self.login("adminuser")
        response = self.get("/api/auth/users", token)
        self.assertEqual(response.status_code, 200)
        users = {u["username"]: u for u in response.json()["users"]}
        self.assertEqual(set(users), {"normaluser", "moduser", "adminuser"})
        self.assertEqual(users["moduser"]["roles"], ["moderator"])
        self.assertNotIn("password_hash", users["adminuser"])

    def test_user_cannot_list_users(self) -> None:
        token = self.login("normaluser")
        self.assertEqual(self.get("/api/auth/users", token).status_code, 403)


class TestPipelineStages(unittest.TestCase):
    """The dependency functions raise the documented errors when called directly."""

    def setUp(self) -> None:
        reset_database()
        self.user_id = create_user("stageuser", "stage@example.com", "password123")
        self.tokens = TokenService(TEST_SECRET)

    def test_get_token_claims_errors(self) -> None:
        expired = TokenService(TEST_SECRET, clock=lambda: datetime.now(UTC) - timedelta(days=2))
        with self.assertRaises(TokenExpiredError):
            get_token_claims(expired.issue_access(self.user_id), self.tokens)
        with self.assertRaises(InvalidTokenError):
            get_token_claims("garbage", self.tokens)

    def test_current_user_attached_to_request(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace())
        claims = self.tokens.verify(self.tokens.issue_access(self.user_id))
        with SessionLocal() as db:
            user = get_current_user(request, claims, db)
        self.assertEqual(user.id, self.user_id)
        self.assertEqual(user.roles, ["user"])
        self.assertIs(request.state.current_user, user)

    def test_missing_subject(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace())
        claims = self.tokens.verify(self.tokens.issue_access("missing"))
        with SessionLocal() as db:
            with self.assertRaises(UserNotFoundError):
                get_current_user(request, claims, db)

    def test_require_roles_accepts_any_listed_role(self) -> None:
        check = require_roles("moderator", "admin")
        mod = CurrentUser(id="1", username="m", email="m@x.co", roles=["moderator"])
        plain = CurrentUser(id="2", username="u", email="u@x.co", roles=["user"])
        self.assertIs(check(mod), mod)
        with self.assertRaises(ForbiddenError) as ctx:
            check(plain)
        self.assertEqual(ctx.exception.message, "Require Moderator or Admin Role!")

    def test_require_roles_needs_a_role(self) -> None:
        with self.assertRaises(ValueError):
            require_roles()

    def test_no_token_error(self) -> None:
        from bastion.api.deps import get_token

        with self.assertRaises(NoTokenError):
            get_token(None)
        self.assertEqual(get_token(" abc "), "abc")


if __name__ == "__main__":
    unittest.main()
