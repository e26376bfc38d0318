import os
import sys
import unittest
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig, load_settings
from settings_schema import validate_settings


class YamlConfigTest(unittest.TestCase):
    def setUp(self) -> None:
        self.path = "test_settings.yaml"
        if os.path.exists(self.path):
            os.remove(self.path)
        for key in ("EXERCISES_DB_PATH", "EXERCISES_LOG_LEVEL"):
            os.environ.pop(key, None)

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        for key in ("EXERCISES_DB_PATH", "EXERCISES_LOG_LEVEL"):
            os.environ.pop(key, None)

    def test_defaults_without_file(self) -> None:
        self.assertEqual(YamlConfig(self.path).load(), {})
        settings = load_settings(self.path)
        self.assertEqual(settings.db_path, "exercises.db")
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.default_unit, "kg")
        self.assertEqual(settings.default_limit, 0)

    def test_save_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({"db_path": "gym.db", "default_unit": "lb"})
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(yaml.safe_load(f)["db_path"], "gym.db")
        settings = load_settings(self.path)
        self.assertEqual(settings.db_path, "gym.db")
        self.assertEqual(settings.default_unit, "lb")

    def test_environment_overrides_file(self) -> None:
        YamlConfig(self.path).save({"db_path": "gym.db", "log_level": "info"})
        os.environ["EXERCISES_DB_PATH"] = "override.db"
        os.environ["EXERCISES_LOG_LEVEL"] = "debug"
        settings = load_settings(self.path)
        self.assertEqual(settings.db_path, "override.db")
        self.assertEqual(settings.log_level, "DEBUG")

    def test_invalid_settings(self) -> None:
        with self.assertRaises(ValueError):
            validate_settings({"default_unit": "stone"})
        with self.assertRaises(ValueError):
            validate_settings({"log_level": "LOUD"})
        with self.assertRaises(ValueError):
            YamlConfig(self.path).save({"default_limit": -1})
        self.assertFalse(os.path.exists(self.path))


if __name__ == "__main__":
    unittest.main()
