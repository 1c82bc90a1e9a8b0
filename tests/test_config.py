import json
import os
import tempfile
import unittest

from triad_atlas.core.config import ConfigManager
from triad_atlas.core.factory import ComponentFactory
from triad_atlas.database.builder import TriadDatabaseBuilder
from triad_atlas.database.models import save_database
from triad_atlas.fretboard import FretboardMapper, VoicingConstraints


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults_written(self):
        manager = ConfigManager(self.config_dir)
        for name in ("fretboard", "difficulty", "database"):
            self.assertTrue(os.path.exists(os.path.join(self.config_dir, f"{name}.json")))
        self.assertEqual(manager.get_config("fretboard")["max_fret"], 24)
        self.assertEqual(manager.get_config("database")["max_fret"], 12)
        self.assertEqual(manager.get_config("unknown"), {})

    def test_get_config_returns_copy(self):
        manager = ConfigManager(self.config_dir)
        manager.get_config("fretboard")["tuning"].append("X")
        self.assertEqual(len(manager.get_config("fretboard")["tuning"]), 6)

    def test_update_persists(self):
        self.assertTrue(ConfigManager(self.config_dir).update_config("difficulty", {"beginner_max_score": 1}))
        self.assertEqual(ConfigManager(self.config_dir).get_config("difficulty")["beginner_max_score"], 1)

    def test_missing_keys_filled_from_defaults(self):
        with open(os.path.join(self.config_dir, "database.json"), "w") as f:
            json.dump({"max_fret": 7}, f)
        config = ConfigManager(self.config_dir).get_config("database")
        self.assertEqual(config["max_fret"], 7)
        self.assertEqual(config["max_strings"], 4)

    def test_reset(self):
        manager = ConfigManager(self.config_dir)
        manager.update_config("fretboard", {"max_span": 2})
        self.assertTrue(manager.reset_config("fretboard"))
        self.assertEqual(manager.get_config("fretboard")["max_span"], 4)

    def test_unknown_section(self):
        manager = ConfigManager(self.config_dir)
        with self.assertLogs("triad_atlas.core.config", level="ERROR"):
            self.assertFalse(manager.update_config("audio", {"rate": 44100}))
        with self.assertLogs("triad_atlas.core.config", level="ERROR"):
            self.assertFalse(manager.reset_config("audio"))

    def test_corrupt_file_falls_back_to_defaults(self):
        with open(os.path.join(self.config_dir, "fretboard.json"), "w") as f:
            f.write("[1, 2")
        with self.assertLogs("triad_atlas.core.config", level="ERROR"):
            manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.get_config("fretboard")["max_span"], 4)


class TestComponentFactory(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_manager = ConfigManager(self._tmp.name)
        self.factory = ComponentFactory(self.config_manager)

    def tearDown(self):
        self._tmp.cleanup()

    def test_fretboard_mapper(self):
        mapper = self.factory.create_fretboard_mapper()
        self.assertIsInstance(mapper, FretboardMapper)
        self.assertEqual(mapper.max_fret, 24)

    def test_configured_tuning(self):
        self.config_manager.update_config("fretboard", {"tuning": ["E4", "B3", "G3", "D3", "A2", "D2"]})
        mapper = self.factory.create_fretboard_mapper()
        self.assertEqual(str(mapper.tuning[5]), "D2")

    def test_unknown_implementation(self):
        with self.assertRaises(ValueError):
            self.factory.create_fretboard_mapper("fancy")
        with self.assertRaises(ValueError):
            self.factory.create_database_builder("fancy")

    def test_difficulty_policy(self):
        self.config_manager.update_config("difficulty", {"intermediate_max_score": 6})
        policy = self.factory.create_fretboard_mapper().difficulty_policy
        self.assertEqual(policy.intermediate_max_score, 6)
        self.assertEqual(policy.beginner_max_score, 2)

    def test_database_builder_policy(self):
        builder = self.factory.create_database_builder()
        self.assertIsInstance(builder, TriadDatabaseBuilder)
        self.assertEqual(builder.constraints, VoicingConstraints(max_fret=12, max_strings=4))
        self.assertEqual(builder.common_max_neck_position, 5)

    def test_lookup_from_file(self):
        database = TriadDatabaseBuilder(constraints=VoicingConstraints(max_fret=3, max_strings=3)).build()
        path = os.path.join(self._tmp.name, "triads.json")
        save_database(database, path)

        self.config_manager.update_config("database", {"path": path})
        lookup = self.factory.create_lookup()
        self.assertEqual(lookup.database.max_fret, 3)
        self.assertEqual(lookup.get_database_stats()["total_voicings"], len(database.voicings))


if __name__ == "__main__":
    unittest.main()
