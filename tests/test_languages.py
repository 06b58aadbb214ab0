"""Language catalogue search."""

import unittest

from translation_hub.services.languages import SUPPORTED_LANGUAGES, search_languages


class TestSearchLanguages(unittest.TestCase):
    def test_blank_or_wildcard_returns_full_catalogue_in_order(self) -> None:
        for query in (None, "", "   ", "*"):
            with self.subTest(query=query):
                codes = [entry.code for entry in search_languages(query)]
                self.assertEqual(codes, [code for code, _ in SUPPORTED_LANGUAGES])

    def test_matches_name_case_insensitively(self) -> None:
        names = [entry.name for entry in search_languages("HEB")]
        self.assertEqual(names, ["Hebrew"])

    def test_matches_code(self) -> None:
        self.assertIn("Ukrainian", [entry.name for entry in search_languages("uk")])

    def test_no_match_returns_empty_list(self) -> None:
        self.assertEqual(search_languages("klingon"), [])

    def test_codes_are_unique(self) -> None:
        codes = [code for code, _ in SUPPORTED_LANGUAGES]
        self.assertEqual(len(codes), len(set(codes)))


if __name__ == "__main__":
    unittest.main()
