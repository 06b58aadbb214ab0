"""create_user script: argument handling and exit codes (database is mocked)."""

import unittest
from unittest.mock import MagicMock, patch

from translation_hub.scripts import create_user
from translation_hub.stores import CredentialStoreUnavailableError


@patch("translation_hub.scripts.create_user.build_engine")
@patch("translation_hub.scripts.create_user.get_settings")
@patch("translation_hub.scripts.create_user.SessionManager")
class TestCreateUserScript(unittest.TestCase):
    def test_creates_user(self, mock_manager: MagicMock, mock_settings: MagicMock, mock_engine: MagicMock) -> None:
        mock_manager.from_settings.return_value.register.return_value = True
        self.assertEqual(create_user.main(["ana@example.com", "s3cret-pass"]), 0)
        mock_manager.from_settings.return_value.register.assert_called_once_with(
            "ana@example.com", "s3cret-pass"
        )
        mock_engine.return_value.dispose.assert_called_once()

    def test_duplicate_returns_one(self, mock_manager: MagicMock, mock_settings: MagicMock, mock_engine: MagicMock) -> None:
        mock_manager.from_settings.return_value.register.return_value = False
        self.assertEqual(create_user.main(["ana@example.com", "s3cret-pass"]), 1)

    def test_blank_arguments_skip_database(self, mock_manager: MagicMock, mock_settings: MagicMock, mock_engine: MagicMock) -> None:
        self.assertEqual(create_user.main(["  ", "s3cret-pass"]), 1)
        mock_engine.assert_not_called()

    def test_database_unavailable_returns_two(self, mock_manager: MagicMock, mock_settings: MagicMock, mock_engine: MagicMock) -> None:
        mock_manager.from_settings.return_value.register.side_effect = CredentialStoreUnavailableError("down")
        self.assertEqual(create_user.main(["ana@example.com", "s3cret-pass"]), 2)
        mock_engine.return_value.dispose.assert_called_once()


if __name__ == "__main__":
    unittest.main()
