"""Unit tests for bcrypt password hashing helpers."""

import unittest

from translation_hub.core.security import hash_password, verify_password

# Low cost keeps the suite fast; production uses BCRYPT_ROUNDS.
ROUNDS = 4


class TestPasswordHashing(unittest.TestCase):
    def test_hash_verifies_against_original_password(self) -> None:
        hashed = hash_password("s3cret-pass", ROUNDS)
        self.assertTrue(verify_password("s3cret-pass", hashed))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("s3cret-pass", ROUNDS)
        self.assertFalse(verify_password("s3cret-pasS", hashed))

    def test_hash_is_salted_and_not_plaintext(self) -> None:
        first = hash_password("s3cret-pass", ROUNDS)
        second = hash_password("s3cret-pass", ROUNDS)
        self.assertNotEqual(first, second)
        self.assertNotIn("s3cret-pass", first)
        self.assertTrue(first.startswith("$2b$04$"))

    def test_malformed_hash_never_matches(self) -> None:
        self.assertFalse(verify_password("s3cret-pass", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("s3cret-pass", ""))

    def test_non_ascii_password(self) -> None:
        hashed = hash_password("пароль-密码", ROUNDS)
        self.assertTrue(verify_password("пароль-密码", hashed))
        self.assertFalse(verify_password("пароль", hashed))


if __name__ == "__main__":
    unittest.main()
