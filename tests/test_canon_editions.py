import unittest

from hull_identity.core.canon.editions import EditionDetector, detect_edition_or_livery, is_edition_only
from hull_identity.core.canon.models import EditionMetadata
from hull_identity.core.canon.vocabulary import default_vocabulary


class TestEditionDetection(unittest.TestCase):
    def setUp(self):
        self.detector = EditionDetector()

    def test_fuses_year_and_orders_by_priority(self):
        meta = self.detector.detect("Zeus Mk II CL Warbond IAE 2954")
        self.assertEqual(meta.edition_code, "IAE2954_WARBOND")
        self.assertIsNone(meta.livery)

    def test_priority_then_lexicographic(self):
        meta = self.detector.detect("Cutlass Warbond Showfloor Invictus")
        self.assertEqual(meta.edition_code, "INVICTUS_SHOWFLOOR_WARBOND")

    def test_year_only_counts_after_keyword(self):
        self.assertEqual(self.detector.detect("Aurora 2954 Warbond").edition_code, "WARBOND")

    def test_livery_label(self):
        meta = self.detector.detect("Aurora MR Livery Stormbringer Red")
        self.assertEqual(meta.edition_code, "LIVERY")
        self.assertEqual(meta.livery, "Stormbringer Red")

    def test_livery_label_is_capped(self):
        meta = self.detector.detect("Cutlass Paint blue steel red alert")
        self.assertEqual(meta.livery, "Blue Steel Red")

    def test_livery_keyword_without_label(self):
        meta = self.detector.detect("Aurora Paint")
        self.assertEqual(meta.edition_code, "PAINT")
        self.assertIsNone(meta.livery)

    def test_nothing_detected(self):
        self.assertEqual(self.detector.detect("Aurora MR"), EditionMetadata())
        self.assertEqual(self.detector.detect(""), EditionMetadata())
        self.assertTrue(self.detector.detect(None).is_empty())

    def test_module_level_function(self):
        meta = detect_edition_or_livery("Aurora_Warbond", default_vocabulary())
        self.assertEqual(meta.edition_code, "WARBOND")

    def test_extended_edition_keywords(self):
        vocab = default_vocabulary().extended("2025.2", edition_keywords=["citizencon"])
        self.assertEqual(EditionDetector(vocab).detect("Aurora CitizenCon").edition_code, "CITIZENCON")
        self.assertIsNone(self.detector.detect("Aurora CitizenCon").edition_code)


class TestIsEditionOnly(unittest.TestCase):
    def test_base_variant_with_edition(self):
        self.assertTrue(is_edition_only("Aurora Base Warbond Edition"))
        self.assertTrue(is_edition_only("AURORA_BASE_WARBOND"))

    def test_named_variant_is_not_edition_only(self):
        self.assertFalse(is_edition_only("Aurora MR Warbond"))

    def test_base_without_edition(self):
        self.assertFalse(is_edition_only("Aurora Base"))

    def test_empty(self):
        self.assertFalse(is_edition_only(""))
        self.assertFalse(is_edition_only(None))


if __name__ == "__main__":
    unittest.main()
