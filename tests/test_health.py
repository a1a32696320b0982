"""Tests for the health endpoint and database connectivity check."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from bastion import __version__
from bastion.core.database import check_db_connected, get_db
from bastion.main import app
from tests.support import reset_database


class TestHealthEndpoint(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_connected(self) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["environment"], "dev")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["version"], __version__)

    def test_disconnected(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        app.dependency_overrides[get_db] = lambda: session
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "disconnected")


class TestDirectoryOutage(unittest.TestCase):
    """Database failures during auth answer 503 with a message, never 500."""

    def setUp(self) -> None:
        session = MagicMock()
        session.scalars.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        session.get.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        app.dependency_overrides[get_db] = lambda: session
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_signin_503(self) -> None:
        response = self.client.post(
            "/api/auth/signin", json={"username": "alice", "password": "secret1"}
        )
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {"message": "Service temporarily unavailable."})

    def test_signup_503(self) -> None:
        response = self.client.post(
            "/api/auth/signup",
            json={"username": "alice", "email": "alice@x.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 503)


class TestCheckDbConnected(unittest.TestCase):
    def test_returns_false_on_error(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        self.assertFalse(check_db_connected(session))


if __name__ == "__main__":
    unittest.main()
