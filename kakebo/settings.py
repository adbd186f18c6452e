"""Application settings loaded from config.yaml."""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from kakebo.exceptions import ConfigError
from kakebo.weeks import parse_date

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "config.yaml"

ENV_CONFIG = "KAKEBO_CONFIG"
ENV_OVERRIDES = {
    "KAKEBO_LOG_LEVEL": "log_level",
    "KAKEBO_TEST_DATE": "test_date",
    "KAKEBO_SEED_PATH": "seed_path",
}


@dataclass
class Settings:
    seed_path: str = "data/seed.json"
    log_level: str = "INFO"
    log_file: Optional[str] = None
    # overrides "today" for the dashboard, YYYY-MM-DD
    test_date: Optional[str] = None
    currency_symbol: str = "R$"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
        settings = cls(**data)
        settings.validate()
        return settings

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML, then apply environment overrides.

        A missing file is not an error: defaults apply.
        """
        if config_path is None:
            config_path = Path(os.getenv(ENV_CONFIG, DEFAULT_CONFIG))
        config_path = Path(config_path)

        data: Dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a mapping, got {type(data).__name__}")

        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                data[key] = value

        return cls.from_dict(data)

    def validate(self) -> None:
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Invalid log level: {self.log_level}")
        if self.test_date is not None:
            self.test_date = str(self.test_date)
            if parse_date(self.test_date).is_none():
                raise ConfigError(f"test_date must be YYYY-MM-DD, got {self.test_date!r}")
