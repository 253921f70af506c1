"""
Runtime configuration and the on-disk key-value store.

AppConfig is read from environment variables once at startup; ConfigManager
persists a flat JSON blob in the application data directory.
"""

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger('time_compass.config')

APP_NAME = "Time Compass"
DEFAULT_HOME = Path.home() / ".timecompass"
CONFIG_FILE = "time_compass.json"
LOG_FILE = "time_compass.log"


class LogLevel(Enum):
    """Supported logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _env_flag(key, default):
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppConfig:
    """Process-level settings that are not user preferences"""
    data_dir: Path = DEFAULT_HOME
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = True
    tick_ms: int = 1000

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILE

    @property
    def log_file(self) -> Path:
        return self.data_dir / LOG_FILE

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build the config from TIME_COMPASS_* environment variables"""
        data_dir = Path(os.getenv('TIME_COMPASS_HOME', str(DEFAULT_HOME))).expanduser()

        level_name = os.getenv('TIME_COMPASS_LOG_LEVEL', 'INFO').upper()
        try:
            log_level = LogLevel(level_name)
        except ValueError:
            raise ValueError(f"TIME_COMPASS_LOG_LEVEL has an unknown level: {level_name}")

        raw_tick = os.getenv('TIME_COMPASS_TICK_MS', '1000')
        try:
            tick_ms = int(raw_tick)
        except ValueError:
            raise ValueError(f"TIME_COMPASS_TICK_MS must be an integer, got {raw_tick!r}")
        if tick_ms <= 0:
            raise ValueError("TIME_COMPASS_TICK_MS must be positive")

        return cls(
            data_dir=data_dir,
            log_level=log_level,
            log_to_file=_env_flag('TIME_COMPASS_LOG_TO_FILE', True),
            tick_ms=tick_ms,
        )


class ConfigManager:
    """Flat JSON key-value blob persisted on every write"""

    def __init__(self, config_file=CONFIG_FILE, config_dir=None):
        self.config_file = Path(config_dir or DEFAULT_HOME) / config_file
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.data = self.load()

    def load(self):
        """Read the blob from disk; a missing or unreadable file yields {}"""
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self.config_file}, starting fresh: {e}")
            return {}

        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring {self.config_file}: top level is not an object")
            return {}
        return loaded

    def save(self):
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Save config error: {e}")

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value):
        self.data[key] = value
        self.save()
