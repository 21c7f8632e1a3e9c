import os
import yaml

APP_VERSION = "1.0.0"
DEFAULT_DB_PATH = "fitavatar.db"
DEFAULT_YAML_PATH = "settings.yaml"


class YamlConfig:
    """Load and save user settings to a YAML file."""

    def __init__(self, path: str = DEFAULT_YAML_PATH) -> None:
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> dict:
        if not self.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a mapping")
        return data

    def save(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f, allow_unicode=True, sort_keys=True)
