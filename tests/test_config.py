"""Settings validation: defaults, bounds, DATABASE_URL handling and the prod secret guard."""

import unittest

from pydantic import SecretStr, ValidationError

from genius.core.config import DEV_JWT_SECRET, Settings


def _settings(**values: object) -> Settings:
    return Settings(_env_file=None, **values)


class TestDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        s = _settings()
        self.assertEqual(s.PORT, 3000)
        self.assertEqual(s.TOKEN_EXPIRE_SECONDS, 604800)
        self.assertEqual(s.CHAT_MODEL, "anima-qwen")
        self.assertTrue(s.DB_API_REQUIRE_AUTH)
        self.assertIsNone(s.CHAT_COMPLETIONS_URL)

    def test_database_url_from_parts(self) -> None:
        s = _settings(DB_HOST="db.internal", DB_PORT=6543, DB_NAME="genius", DB_USER="app", DB_PASS=SecretStr("pw"))
        url = s.database_url
        self.assertEqual(url.drivername, "postgresql+psycopg2")
        self.assertEqual(url.host, "db.internal")
        self.assertEqual(url.port, 6543)
        self.assertEqual(url.database, "genius")
        self.assertEqual(url.username, "app")
        self.assertEqual(url.password, "pw")


class TestDatabaseUrl(unittest.TestCase):
    def test_full_url_takes_precedence(self) -> None:
        s = _settings(DATABASE_URL="postgresql://u:p@remote:5432/app", DB_HOST="ignored")
        self.assertEqual(s.database_url.host, "remote")
        self.assertEqual(s.database_url.database, "app")

    def test_postgres_scheme_normalized(self) -> None:
        s = _settings(DATABASE_URL="  postgres://u:p@remote/app ")
        self.assertEqual(s.DATABASE_URL, "postgresql://u:p@remote/app")

    def test_blank_url_falls_back_to_parts(self) -> None:
        self.assertIsNone(_settings(DATABASE_URL="  ").DATABASE_URL)

    def test_non_postgres_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://u:p@remote/app")


class TestBounds(unittest.TestCase):
    def test_rejected_values(self) -> None:
        cases = [
            {"PORT": 0},
            {"PORT": 70000},
            {"DB_POOL_SIZE": 0},
            {"DB_HOST": "  "},
            {"JWT_SECRET": SecretStr("")},
            {"TOKEN_EXPIRE_SECONDS": 59},
            {"TOKEN_EXPIRE_SECONDS": 31 * 24 * 60 * 60},
            {"CHAT_COMPLETIONS_URL": "ftp://llm/v1/chat/completions"},
            {"CHAT_MAX_TOKENS": 0},
            {"CHAT_REQUEST_TIMEOUT_SEC": 0},
            {"CHAT_REQUEST_TIMEOUT_SEC": 301},
        ]
        for values in cases:
            with self.subTest(values=values):
                with self.assertRaises(ValidationError):
                    _settings(**values)

    def test_blank_chat_url_is_unset(self) -> None:
        self.assertIsNone(_settings(CHAT_COMPLETIONS_URL=" ").CHAT_COMPLETIONS_URL)


class TestProdSecret(unittest.TestCase):
    def test_dev_secret_refused_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=SecretStr(DEV_JWT_SECRET))

    def test_real_secret_accepted_in_prod(self) -> None:
        s = _settings(APP_ENV="prod", JWT_SECRET=SecretStr("a-real-production-secret-value"))
        self.assertEqual(s.APP_ENV, "prod")

    def test_dev_secret_allowed_in_dev(self) -> None:
        self.assertEqual(_settings(APP_ENV="dev").JWT_SECRET.get_secret_value(), DEV_JWT_SECRET)


if __name__ == "__main__":
    unittest.main()
