import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import dotenv_values

from mpd_playlist.crosscutting.logging import setup_logging


class ConfigError(Exception):
    """Configuration error."""
    pass


LOG_LEVEL_KEY = 'MPD_PLAYLIST_LOG_LEVEL'
LOG_FILE_KEY = 'MPD_PLAYLIST_LOG_FILE'

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Settings:
    """Reads settings from the process environment, falling back to a .env file."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize settings rooted at ``config_dir`` (default ``~/.mpd_playlist``)."""
        self.config_dir = Path(config_dir) if config_dir else Path.home() / '.mpd_playlist'
        self.env_file = self.config_dir / '.env'

    def load_env_vars(self) -> Dict[str, str]:
        """Load variables from the .env file, if present."""
        if not self.env_file.exists():
            return {}

        try:
            values = dotenv_values(self.env_file)
        except (IOError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to load .env file {self.env_file}: {e}")

        return {key: value for key, value in values.items() if value is not None}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Environment wins over the .env file."""
        value = os.environ.get(key)
        if value:
            return value
        return self.load_env_vars().get(key, default)

    def get_log_level(self) -> str:
        level = (self.get(LOG_LEVEL_KEY) or 'INFO').strip().upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"{LOG_LEVEL_KEY} must be one of {', '.join(_LOG_LEVELS)}, got {level!r}")
        return level

    def get_log_file(self) -> Optional[str]:
        log_file = self.get(LOG_FILE_KEY)
        return log_file.strip() if log_file and log_file.strip() else None

    def get_config_summary(self) -> Dict[str, Any]:
        """Get configuration summary."""
        return {
            'config_dir': str(self.config_dir),
            'env_file': str(self.env_file),
            'has_env_file': self.env_file.exists(),
            'log_level': self.get_log_level(),
            'log_file': self.get_log_file(),
        }


# Global instance
settings = Settings()


def get_settings() -> Settings:
    """Get global settings instance."""
    return settings


def setup_config(config_dir: Optional[str] = None) -> Settings:
    """Setup configuration with custom directory."""
    global settings
    settings = Settings(config_dir)
    return settings


def configure_logging(current: Optional[Settings] = None) -> logging.Logger:
    """Configure package logging from settings."""
    current = current or get_settings()
    return setup_logging(level=current.get_log_level(), log_file=current.get_log_file())
