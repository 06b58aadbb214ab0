"""SqlAlchemyCredentialStore against in-memory SQLite, plus error mapping with a mocked session."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from translation_hub.core.database import as_utc, build_sessionmaker, check_db_connected
from translation_hub.core.tokens import TokenCodec
from translation_hub.models import Base, User, UserSession
from translation_hub.services.session_manager import SessionManager
from translation_hub.stores import CredentialStoreUnavailableError, SqlAlchemyCredentialStore

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def _sqlite_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, build_sessionmaker(engine)


class SqliteStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, self.factory = _sqlite_factory()
        self.store = SqlAlchemyCredentialStore(self.factory)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _user(self, email: str = "ana@example.com") -> uuid.UUID:
        self.assertTrue(self.store.create_user(email, "$2b$04$hash"))
        return self.store.find_user_by_email(email).id


class TestUsers(SqliteStoreTestCase):
    def test_create_and_find_user(self) -> None:
        user_id = self._user()
        by_email = self.store.find_user_by_email("ana@example.com")
        self.assertEqual(by_email.id, user_id)
        self.assertEqual(by_email.password_hash, "$2b$04$hash")
        self.assertIsNone(by_email.default_from_lang)

    def test_duplicate_email_returns_false(self) -> None:
        self._user()
        self.assertFalse(self.store.create_user("ana@example.com", "$2b$04$other"))
        with self.factory() as session:
            self.assertEqual(session.query(User).count(), 1)

    def test_lookup_is_exact_match(self) -> None:
        self._user()
        self.assertIsNone(self.store.find_user_by_email("ANA@example.com"))
        self.assertIsNone(self.store.find_user_by_email(" ana@example.com"))

    def test_record_login_sets_last_login_at(self) -> None:
        user_id = self._user()
        self.store.record_login(user_id, T0)
        with self.factory() as session:
            row = session.get(User, user_id)
            self.assertEqual(as_utc(row.last_login_at), T0)


class TestSessions(SqliteStoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self._user()
        self.expires_at = T0 + timedelta(hours=1)
        self.store.create_session(self.user_id, uuid.uuid4(), self.expires_at, "token-a")

    def test_live_session_resolves_to_owner(self) -> None:
        user = self.store.find_user_by_valid_session("token-a", T0)
        self.assertIsNotNone(user)
        self.assertEqual(user.id, self.user_id)

    def test_session_at_or_after_expiry_is_ignored(self) -> None:
        self.assertIsNotNone(
            self.store.find_user_by_valid_session("token-a", self.expires_at - timedelta(seconds=1))
        )
        self.assertIsNone(self.store.find_user_by_valid_session("token-a", self.expires_at))

    def test_unknown_token_is_ignored(self) -> None:
        self.assertIsNone(self.store.find_user_by_valid_session("token-b", T0))

    def test_delete_session_reports_whether_row_existed(self) -> None:
        self.assertTrue(self.store.delete_session("token-a"))
        self.assertFalse(self.store.delete_session("token-a"))
        self.assertIsNone(self.store.find_user_by_valid_session("token-a", T0))

    def test_delete_user_sessions(self) -> None:
        self.store.create_session(self.user_id, uuid.uuid4(), self.expires_at, "token-b")
        other_id = self._user("bob@example.com")
        self.store.create_session(other_id, uuid.uuid4(), self.expires_at, "token-c")
        self.assertEqual(self.store.delete_user_sessions(self.user_id), 2)
        self.assertIsNotNone(self.store.find_user_by_valid_session("token-c", T0))

    def test_delete_expired_sessions(self) -> None:
        self.store.create_session(self.user_id, uuid.uuid4(), T0 + timedelta(days=2), "token-b")
        self.assertEqual(self.store.delete_expired_sessions(self.expires_at), 1)
        self.assertEqual(self.store.delete_expired_sessions(self.expires_at), 0)
        self.assertIsNotNone(self.store.find_user_by_valid_session("token-b", T0))

    def test_created_at_is_the_given_instant(self) -> None:
        session_id = uuid.uuid4()
        issued_at = T0 - timedelta(minutes=5)
        self.store.create_session(
            self.user_id, session_id, self.expires_at, "token-b", created_at=issued_at
        )
        with self.factory() as session:
            row = session.get(UserSession, session_id)
            self.assertEqual(as_utc(row.created_at), issued_at)


class TestSessionManagerOnSqlite(SqliteStoreTestCase):
    """End-to-end register/login/validate/logout over the SQL store."""

    def test_full_session_lifecycle(self) -> None:
        clock = lambda: T0  # noqa: E731
        manager = SessionManager(
            self.store,
            TokenCodec("test-secret-for-session-tokens-0123456789", 3600, clock=clock),
            bcrypt_rounds=4,
            clock=clock,
        )
        self.assertTrue(manager.register("ana@example.com", "s3cret-pass"))
        self.assertFalse(manager.register("ana@example.com", "s3cret-pass"))
        result = manager.login("ana@example.com", "s3cret-pass")
        self.assertIsNotNone(result)
        with self.factory() as session:
            row = session.query(UserSession).filter(UserSession.token == result.token).one()
            self.assertEqual(as_utc(row.created_at), T0)
        self.assertEqual(manager.validate(result.token).email, "ana@example.com")
        manager.logout(result.token)
        self.assertIsNone(manager.validate(result.token))


class TestUnavailableMapping(unittest.TestCase):
    """Driver connectivity errors surface as CredentialStoreUnavailableError."""

    def setUp(self) -> None:
        self.session = MagicMock()
        factory = MagicMock(return_value=self.session)
        self.store = SqlAlchemyCredentialStore(factory)
        self.error = OperationalError("SELECT 1", {}, Exception("connection refused"))

    def test_lookup_failure_is_unavailable(self) -> None:
        self.session.query.side_effect = self.error
        with self.assertRaises(CredentialStoreUnavailableError) as ctx:
            self.store.find_user_by_email("ana@example.com")
        self.assertIs(ctx.exception.cause, self.error)
        self.session.rollback.assert_called_once()
        self.session.close.assert_called_once()

    def test_create_user_failure_is_not_reported_as_duplicate(self) -> None:
        self.session.flush.side_effect = self.error
        with self.assertRaises(CredentialStoreUnavailableError):
            self.store.create_user("ana@example.com", "$2b$04$hash")

    def test_commit_failure_is_unavailable(self) -> None:
        self.session.commit.side_effect = self.error
        with self.assertRaises(CredentialStoreUnavailableError):
            self.store.create_session(uuid.uuid4(), uuid.uuid4(), T0, "token-a")


class TestCheckDbConnected(unittest.TestCase):
    def test_reports_sqlite_reachable(self) -> None:
        engine, factory = _sqlite_factory()
        try:
            self.assertTrue(check_db_connected(factory))
        finally:
            engine.dispose()

    def test_reports_failure_as_false(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        self.assertFalse(check_db_connected(MagicMock(return_value=session)))


if __name__ == "__main__":
    unittest.main()
