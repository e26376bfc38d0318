import logging
import os

import yaml

from settings_schema import SettingsSchema, validate_settings

ENV_OVERRIDES = {
    "EXERCISES_DB_PATH": "db_path",
    "EXERCISES_LOG_LEVEL": "log_level",
}


class YamlConfig:
    """Load and save settings to a YAML file."""

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"{self.path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)


def load_settings(path: str = "settings.yaml") -> SettingsSchema:
    """Read ``path`` and apply environment overrides on top of it."""
    data = YamlConfig(path).load()
    for env_key, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            data[key] = value
    return validate_settings(data)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
