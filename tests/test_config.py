import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from hull_identity.config import Settings, VocabularySettings, find_config
from hull_identity.core.canon.models import ManufacturerRef, RawRecord
from hull_identity.core.canon.vocabulary import DEFAULT_VERSION

CONFIG_YAML = """\
vocabulary:
  version: "2025.2"
  extra_variant_tokens: [nomad, " hullc "]
resolver:
  prefix_min_length: 2
  identifier_prefix_fallback: false
  manufacturers:
    "42":
      code: AEGS
      name: Aegis Dynamics
      aliases: [Aegis]
"""


class TestSettingsLoad(unittest.TestCase):
    def test_defaults(self):
        settings = Settings()
        resolver = settings.build_resolver()
        self.assertEqual(resolver.vocabulary.version, DEFAULT_VERSION)
        self.assertTrue(resolver.identifier_prefix_fallback)
        self.assertEqual(resolver.prefix_min_length, 0)
        self.assertEqual(resolver.manufacturers, {})

    def test_load_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "hull-identity.yaml"
            path.write_text(CONFIG_YAML, encoding="utf-8")
            settings = Settings.load(path)

        self.assertEqual(settings.vocabulary.extra_variant_tokens, ["NOMAD", "HULLC"])
        resolver = settings.build_resolver()
        self.assertEqual(resolver.vocabulary.version, "2025.2")
        self.assertTrue(resolver.matcher.is_verified("NOMAD"))
        self.assertEqual(resolver.prefix_min_length, 2)
        self.assertFalse(resolver.identifier_prefix_fallback)
        self.assertEqual(resolver.manufacturers["42"].code, "AEGS")
        self.assertEqual(resolver.manufacturers["42"].aliases, ("Aegis",))

        record = RawRecord(id="v1", name="Avenger Titan", manufacturer=ManufacturerRef(id="42"))
        self.assertEqual(resolver.canonical_variant_id(record), "AEGS_AVENGER_TITAN")

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "hull-identity.yaml"
            path.write_text("", encoding="utf-8")
            settings = Settings.load(path)
        self.assertEqual(settings, Settings())


class TestVocabularySettings(unittest.TestCase):
    def test_extension_requires_new_version(self):
        settings = VocabularySettings(extra_variant_tokens=["nomad"])
        with self.assertRaises(ValueError):
            settings.build()

    def test_extra_edition_keywords(self):
        vocab = VocabularySettings(version="2025.3", extra_edition_keywords=["citizencon"]).build()
        self.assertIn("CITIZENCON", vocab.edition_keywords)
        self.assertEqual(vocab.edition_keywords[0], "IAE")

    def test_livery_label_tokens_must_be_positive(self):
        with self.assertRaises(ValidationError):
            VocabularySettings(livery_label_tokens=0)


class TestFindConfig(unittest.TestCase):
    def test_explicit_missing(self):
        with self.assertRaises(FileNotFoundError):
            find_config(Path("/this/path/does/not/exist.yaml"))

    def test_explicit_existing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "custom.yaml"
            path.write_text("{}", encoding="utf-8")
            self.assertEqual(find_config(path), path)


if __name__ == "__main__":
    unittest.main()
