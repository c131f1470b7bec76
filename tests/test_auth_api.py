"""Endpoint tests for POST /api/auth against an in-memory SQLite users table."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from genius.api.auth import ACTION_HANDLERS
from genius.core.config import Settings, get_settings
from genius.core.database import get_db
from genius.core.security import verify_password
from genius.main import app
from genius.models import Base, User
from genius.schemas.auth import AUTH_ACTIONS

SECRET = "auth-api-test-secret-that-is-long-enough-for-hs256"


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.settings = Settings(_env_file=None, JWT_SECRET=SecretStr(SECRET))

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def _auth(self, payload: dict, token: str | None = None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return self.client.post("/api/auth", json=payload, headers=headers)

    def _signup(self, email: str = "a@x.com", username: str = "alice", password: str = "secret1"):
        return self._auth({"action": "signup", "email": email, "username": username, "password": password})

    def _user_count(self) -> int:
        with self.Session() as db:
            return db.query(User).count()


class TestSignup(AuthApiTestCase):
    def test_signup_returns_user_and_token(self) -> None:
        resp = self._signup()
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["success"], True)
        self.assertEqual(body["user"]["email"], "a@x.com")
        self.assertEqual(body["user"]["username"], "alice")
        self.assertIsInstance(body["user"]["id"], int)
        self.assertEqual(set(body["user"]), {"id", "email", "username"})
        self.assertEqual(len(body["token"].split(".")), 3)

    def test_password_stored_as_pbkdf2_hash(self) -> None:
        self._signup()
        with self.Session() as db:
            user = db.query(User).filter(User.username == "alice").one()
            self.assertNotEqual(user.password_hash, "secret1")
            self.assertEqual(len(user.password_hash.split(":")), 2)
            self.assertTrue(verify_password("secret1", user.password_hash))
            self.assertIsNotNone(user.created_at)
            self.assertIsNone(user.last_login)

    def test_duplicate_email_or_username(self) -> None:
        self._signup()
        for email, username in [("a@x.com", "bob"), ("b@x.com", "alice")]:
            with self.subTest(email=email, username=username):
                resp = self._signup(email=email, username=username)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json(), {"success": False, "error": "User already exists"})
        self.assertEqual(self._user_count(), 1)

    def test_missing_fields(self) -> None:
        for payload in [
            {"action": "signup", "username": "alice", "password": "secret1"},
            {"action": "signup", "email": "a@x.com", "password": "secret1"},
            {"action": "signup", "email": "a@x.com", "username": "alice"},
            {"action": "signup", "email": "", "username": "alice", "password": "secret1"},
        ]:
            with self.subTest(payload=payload):
                resp = self._auth(payload)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["error"], "Email, username, and password are required")
        self.assertEqual(self._user_count(), 0)

    def test_unexpected_failure_is_500_with_message(self) -> None:
        with patch("genius.services.accounts.hash_password", side_effect=RuntimeError("hashing failed")):
            resp = self._signup()
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "hashing failed"})
        self.assertEqual(self._user_count(), 0)


class TestLogin(AuthApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self._signup()

    def test_login_scenario(self) -> None:
        resp = self._auth({"action": "login", "username": "alice", "password": "secret1"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["user"]["username"], "alice")
        self.assertEqual(len(body["token"].split(".")), 3)
        with self.Session() as db:
            user = db.query(User).filter(User.username == "alice").one()
            self.assertIsNotNone(user.last_login)

    def test_login_is_by_username_not_email(self) -> None:
        resp = self._auth({"action": "login", "username": "a@x.com", "password": "secret1"})
        self.assertEqual(resp.status_code, 401)

    def test_wrong_password_and_unknown_user_are_indistinguishable(self) -> None:
        wrong = self._auth({"action": "login", "username": "alice", "password": "nope"})
        unknown = self._auth({"action": "login", "username": "mallory", "password": "secret1"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json(), {"success": False, "error": "Invalid credentials"})

    def test_missing_fields(self) -> None:
        resp = self._auth({"action": "login", "username": "alice"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Username and password are required")

    def test_user_without_password_hash_cannot_log_in(self) -> None:
        with self.Session() as db:
            db.add(User(email="c@x.com", username="carol", password_hash=None))
            db.commit()
        resp = self._auth({"action": "login", "username": "carol", "password": "anything"})
        self.assertEqual(resp.status_code, 401)


class TestVerify(AuthApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.token = self._signup().json()["token"]

    def test_verify_scenario(self) -> None:
        resp = self._auth({"action": "verify"}, token=self.token)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["success"], True)
        self.assertEqual(body["user"]["username"], "alice")
        self.assertNotIn("token", body)

    def test_no_token(self) -> None:
        resp = self._auth({"action": "verify"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"success": False, "error": "No token provided"})

    def test_invalid_token(self) -> None:
        resp = self._auth({"action": "verify"}, token=self.token[:-4] + "AAAA")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Invalid token")

    def test_deleted_user(self) -> None:
        with self.Session() as db:
            db.query(User).delete()
            db.commit()
        resp = self._auth({"action": "verify"}, token=self.token)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "User not found")


class TestDispatch(AuthApiTestCase):
    def test_handlers_cover_all_actions(self) -> None:
        self.assertEqual(set(ACTION_HANDLERS), set(AUTH_ACTIONS))

    def test_unknown_action(self) -> None:
        resp = self._auth({"action": "logout"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Unknown action: logout"})

    def test_missing_action(self) -> None:
        resp = self._auth({})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Unknown action: None")


if __name__ == "__main__":
    unittest.main()
