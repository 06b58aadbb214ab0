"""Settings validation."""

import unittest

from pydantic import ValidationError

from translation_hub.core.config import Settings

STRONG_SECRET = "x" * 40


def _settings(**values: object) -> Settings:
    return Settings(_env_file=None, **values)


class TestSettingsDefaults(unittest.TestCase):
    def test_dev_defaults_are_valid(self) -> None:
        settings = _settings(APP_ENV="dev", JWT_SECRET="change-me-in-production")
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.SESSION_TTL_SECONDS, 86400)
        self.assertIsNone(settings.OPENAI_API_KEY)

    def test_secret_is_not_exposed_in_repr(self) -> None:
        settings = _settings(JWT_SECRET=STRONG_SECRET)
        self.assertNotIn(STRONG_SECRET, repr(settings))


class TestSettingsValidation(unittest.TestCase):
    def test_database_url_scheme(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:///./hub.db ").DATABASE_URL, "sqlite:///./hub.db")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://root@localhost/hub")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="  ")

    def test_legacy_postgres_scheme_is_rewritten(self) -> None:
        settings = _settings(DATABASE_URL=" postgres://hub:pw@db:5432/hub")
        self.assertEqual(settings.DATABASE_URL, "postgresql://hub:pw@db:5432/hub")
        self.assertEqual(
            _settings(DATABASE_URL="postgresql+psycopg2://db/hub").DATABASE_URL,
            "postgresql+psycopg2://db/hub",
        )

    def test_algorithm_is_normalised_and_restricted(self) -> None:
        self.assertEqual(_settings(JWT_ALGORITHM="hs512").JWT_ALGORITHM, "HS512")
        with self.assertRaises(ValidationError):
            _settings(JWT_ALGORITHM="RS256")

    def test_numeric_ranges(self) -> None:
        for field, value in (
            ("SESSION_TTL_SECONDS", 0),
            ("BCRYPT_ROUNDS", 3),
            ("DB_TIMEOUT_SEC", 0),
            ("OPENAI_REQUEST_TIMEOUT_SEC", 301),
        ):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    _settings(**{field: value})

    def test_openai_base_url_must_be_http(self) -> None:
        self.assertEqual(
            _settings(OPENAI_BASE_URL="https://llm.example.com/v1/").OPENAI_BASE_URL,
            "https://llm.example.com/v1",
        )
        with self.assertRaises(ValidationError):
            _settings(OPENAI_BASE_URL="ftp://llm.example.com")

    def test_prod_rejects_default_or_short_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET="change-me-in-production")
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET="short-secret")
        self.assertEqual(_settings(APP_ENV="prod", JWT_SECRET=STRONG_SECRET).APP_ENV, "prod")


if __name__ == "__main__":
    unittest.main()
