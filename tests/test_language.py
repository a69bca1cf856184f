import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.matching.language import (  # noqa: E402
    detect_language_requirements,
    language_match_factor,
    normalize_language_codes,
    supported_languages,
)


class LanguageRequirementDetectorTests(unittest.TestCase):
    def test_named_languages_are_collected(self):
        self.assertEqual(
            detect_language_requirements("You must be fluent in English and French."),
            frozenset({"en", "fr"}),
        )

    def test_native_and_ascii_folded_names_match(self):
        self.assertEqual(detect_language_requirements("Sehr gute Deutsch-Kenntnisse"), frozenset({"de"}))
        self.assertEqual(detect_language_requirements("Nivel alto de Español"), frozenset({"es"}))
        self.assertEqual(detect_language_requirements("Francais courant"), frozenset({"fr"}))

    def test_native_names_inside_unspaced_text_match(self):
        self.assertEqual(detect_language_requirements("需要流利的中文"), frozenset({"zh"}))
        self.assertEqual(detect_language_requirements("日本語が話せる方"), frozenset({"ja"}))
        self.assertEqual(detect_language_requirements("يجب إتقان العربية"), frozenset({"ar"}))

    def test_native_chinese_posting_favours_chinese_speaker(self):
        required = detect_language_requirements("熟练掌握中文者优先")
        self.assertEqual(language_match_factor({"zh"}, required), 1.0)
        self.assertEqual(language_match_factor({"en"}, required), 0.1)

    def test_signal_phrase_without_language_defaults_to_english(self):
        self.assertEqual(
            detect_language_requirements("Native speaker level communication required."),
            frozenset({"en"}),
        )

    def test_no_information_defaults_to_english(self):
        self.assertEqual(detect_language_requirements(""), frozenset({"en"}))
        self.assertEqual(detect_language_requirements("Build APIs in Go."), frozenset({"en"}))

    def test_language_names_match_whole_words_only(self):
        self.assertEqual(detect_language_requirements("Experience with Germanium detectors"), frozenset({"en"}))

    def test_supported_languages_include_english(self):
        self.assertIn("en", supported_languages())
        self.assertIn("de", supported_languages())


class LanguageMatchScorerTests(unittest.TestCase):
    def test_superset_of_requirements_is_full_match(self):
        self.assertEqual(language_match_factor({"en", "de"}, {"de"}), 1.0)
        self.assertEqual(language_match_factor({"en"}, {"en"}), 1.0)

    def test_half_coverage(self):
        self.assertEqual(language_match_factor({"en"}, {"en", "fr"}), 0.5)

    def test_partial_coverage_has_floor(self):
        self.assertEqual(language_match_factor({"en"}, {"en", "de", "fr"}), 0.5)
        self.assertAlmostEqual(language_match_factor({"en", "de"}, {"en", "de", "fr"}), 2 / 3)

    def test_no_overlap_is_near_total_penalty(self):
        self.assertEqual(language_match_factor({"en"}, {"de"}), 0.1)

    def test_unspecified_spoken_languages_default_to_english(self):
        spoken = normalize_language_codes([])
        self.assertEqual(spoken, frozenset({"en"}))
        self.assertEqual(language_match_factor(spoken, {"de"}), 0.1)

    def test_names_and_regional_codes_normalize(self):
        self.assertEqual(
            normalize_language_codes(["German", "fr", "en-US", "klingon", ""]),
            frozenset({"de", "fr", "en"}),
        )


if __name__ == "__main__":
    unittest.main()
