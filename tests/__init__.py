"""Test configuration: in-memory SQLite directory, fixed signing secret, cheap bcrypt."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "unit-test-signing-secret-0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTH_MERGE_LOGIN_FAILURES"] = "false"
