"""
Unit tests for hull_identity.core.canon.matching and vocabulary.

Covers:
- BASE short-circuit
- Longest vocabulary token wins, ties broken lexicographically
- First-token fallback and the verified flag
- Versioned vocabulary extension
"""

import unittest

from hull_identity.core.canon.matching import VariantMatcher, extract_variant_code
from hull_identity.core.canon.vocabulary import BASE, DEFAULT_VERSION, Vocabulary, default_vocabulary


class TestExtractVariantCode(unittest.TestCase):
    def setUp(self):
        self.matcher = VariantMatcher()

    def test_vocabulary_token(self):
        self.assertEqual(self.matcher.extract_variant_code("Zeus Mk II CL"), "CL")
        self.assertEqual(self.matcher.extract_variant_code("rsi_aurora_mr"), "MR")

    def test_base_short_circuits(self):
        self.assertEqual(self.matcher.extract_variant_code("Aurora MR Base"), BASE)
        self.assertEqual(self.matcher.extract_variant_code("Aurora base"), BASE)

    def test_longest_token_wins(self):
        self.assertEqual(self.matcher.extract_variant_code("Cutlass Black Blue"), "BLACK")

    def test_tie_breaks_lexicographically(self):
        self.assertEqual(self.matcher.extract_variant_code("Hornet F8C F7C"), "F7C")
        self.assertEqual(self.matcher.extract_variant_code("Hornet F7C F8C"), "F7C")

    def test_vocabulary_beats_first_token(self):
        self.assertEqual(self.matcher.extract_variant_code("Nomad Cargo"), "CARGO")

    def test_first_token_fallback(self):
        self.assertEqual(self.matcher.extract_variant_code("Nomad"), "NOMAD")
        self.assertFalse(self.matcher.is_verified("NOMAD"))

    def test_never_empty(self):
        for source in ("", None, "---", "  "):
            self.assertEqual(self.matcher.extract_variant_code(source), BASE)

    def test_result_is_vocabulary_member_or_fallback(self):
        for source in ("Zeus Mk II CL", "Cutlass Black", "Carrack Expedition", "Avenger Titan"):
            code = self.matcher.extract_variant_code(source)
            self.assertTrue(self.matcher.is_verified(code), source)

    def test_is_verified(self):
        self.assertTrue(self.matcher.is_verified("CL"))
        self.assertTrue(self.matcher.is_verified(BASE))
        self.assertFalse(self.matcher.is_verified("HULLX"))

    def test_module_level_function(self):
        self.assertEqual(extract_variant_code("Mustang Alpha"), "ALPHA")

    def test_designation_ignores_livery_label(self):
        self.assertEqual(self.matcher.extract_variant_code("Aurora MR Paint Black Steel"), "BLACK")
        self.assertEqual(self.matcher.extract_from_designation("Aurora MR Paint Black Steel"), "MR")
        self.assertEqual(self.matcher.extract_from_designation("Cutlass Black Livery"), "BLACK")
        self.assertEqual(self.matcher.extract_from_designation(None), BASE)


class TestVocabulary(unittest.TestCase):
    def test_default_version(self):
        self.assertEqual(default_vocabulary().version, DEFAULT_VERSION)

    def test_tokens_are_normalized(self):
        vocab = Vocabulary(version="test", variant_tokens={"hull c", "mr"})
        self.assertEqual(vocab.variant_tokens, frozenset({"HULL_C", "MR"}))

    def test_extended_adds_tokens_under_new_version(self):
        vocab = default_vocabulary().extended("2025.2", variant_tokens=["nomad"])
        self.assertEqual(vocab.version, "2025.2")
        self.assertTrue(vocab.is_variant_token("NOMAD"))
        self.assertTrue(VariantMatcher(vocab).is_verified("NOMAD"))

    def test_extended_leaves_original_untouched(self):
        base = default_vocabulary()
        base.extended("2025.2", variant_tokens=["nomad"])
        self.assertFalse(base.is_variant_token("NOMAD"))
        self.assertFalse(VariantMatcher().is_verified("NOMAD"))

    def test_extended_requires_new_version(self):
        with self.assertRaises(ValueError):
            default_vocabulary().extended(DEFAULT_VERSION, variant_tokens=["nomad"])

    def test_empty_version_rejected(self):
        with self.assertRaises(ValueError):
            Vocabulary(version="")

    def test_without_livery_labels(self):
        vocab = default_vocabulary()
        self.assertEqual(
            vocab.without_livery_labels(["AURORA", "MR", "PAINT", "BLACK", "STEEL"]),
            ["AURORA", "MR", "PAINT"],
        )
        self.assertEqual(
            vocab.without_livery_labels(["CUTLASS", "LIVERY", "A", "B", "C", "BLUE"]),
            ["CUTLASS", "LIVERY", "BLUE"],
        )
        self.assertEqual(vocab.without_livery_labels(["AURORA", "MR"]), ["AURORA", "MR"])

    def test_edition_regex_matches_inside_identifiers(self):
        vocab = default_vocabulary()
        self.assertIsNotNone(vocab.edition_regex.search("AURORA_WARBOND"))
        self.assertIsNone(vocab.edition_regex.search("Packmule"))


if __name__ == "__main__":
    unittest.main()
