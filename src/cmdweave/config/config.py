"""
Configuration management for cmdweave.

Provides a configuration file at ~/.cmdweave/config.json for default settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Default values - single source of truth
DEFAULTS = {
    "debug": False,
    "log_level": "WARNING",
    "log_file": None,
    "fuzzy_threshold": 0.7,
    "suggestion_threshold": 0.5,
    "max_suggestions": 5,
    "dispatch_timeout": None,
    "modules": [],
    "modules_dir": str(Path.home() / ".cmdweave" / "modules"),
    "prompt_symbol": "> ",
    "history_file": str(Path.home() / ".cmdweave" / "history"),
}


class Config(BaseModel):
    """Configuration settings for cmdweave.

    All settings are optional. Use DEFAULTS for default values.
    """

    model_config = {"extra": "ignore"}  # Ignore unknown fields like _comment

    # Dispatch settings
    debug: Optional[bool] = Field(
        default=None,
        description="Show debug information (location, stack trace) on errors"
    )
    dispatch_timeout: Optional[float] = Field(
        default=None,
        description="Seconds a command may run before it is reported as timed out"
    )

    # Matching settings
    fuzzy_threshold: Optional[float] = Field(
        default=None,
        description="Minimum edit-distance similarity for a fuzzy match"
    )
    suggestion_threshold: Optional[float] = Field(
        default=None,
        description="Minimum similarity for 'did you mean' suggestions"
    )
    max_suggestions: Optional[int] = Field(
        default=None,
        description="Maximum suggestions shown for an unknown command"
    )

    # Source modules
    modules: Optional[list[str]] = Field(
        default=None,
        description="Extra source modules as 'package.module:attribute' specs"
    )
    modules_dir: Optional[str] = Field(
        default=None,
        description="Directory scanned for user source modules"
    )

    # Logging settings
    log_level: Optional[str] = Field(
        default=None,
        description="Log level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional file that receives log output"
    )

    # REPL settings
    prompt_symbol: Optional[str] = Field(
        default=None,
        description="REPL prompt"
    )
    history_file: Optional[str] = Field(
        default=None,
        description="REPL history file"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS, then to provided default."""
        value = getattr(self, key, None)
        if value is not None:
            return value
        return DEFAULTS.get(key, default)


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_DIR = Path.home() / ".cmdweave"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    def __init__(self):
        self._config: Optional[Config] = None

    def _ensure_dir(self) -> None:
        """Ensure config directory exists."""
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def config(self) -> Config:
        """Get the current config, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def _read_file(self) -> dict[str, Any]:
        if not self.CONFIG_FILE.exists():
            return {}
        try:
            data = json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def _write_file(self, data: dict[str, Any]) -> None:
        self._ensure_dir()
        self.CONFIG_FILE.write_text(json.dumps(data, indent=2) + "\n")

    def load(self, create_if_missing: bool = True) -> Config:
        """Load configuration from file.

        Args:
            create_if_missing: If True, create default config file if it doesn't exist.

        Returns:
            Config object with loaded settings, or defaults if file doesn't exist.
        """
        if not self.CONFIG_FILE.exists():
            if create_if_missing:
                self._create_default_config()
            return Config()

        try:
            data = json.loads(self.CONFIG_FILE.read_text())
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Invalid config file ({e}), using defaults")
            return Config()

    def _create_default_config(self) -> None:
        """Create default config file with actual default values."""
        default_config = {"_comment": "cmdweave configuration file"}
        default_config.update(DEFAULTS)
        self._write_file(default_config)

    def save(self, config: Optional[Config] = None) -> Path:
        """Save configuration to file, preserving existing structure.

        Args:
            config: Config to save. If None, saves current config.

        Returns:
            Path to saved config file.
        """
        if config is not None:
            self._config = config
        if self._config is None:
            self._config = Config()

        existing_data = self._read_file()
        # Update only non-None config values, preserving everything else
        for key, value in self._config.model_dump().items():
            if value is not None:
                existing_data[key] = value

        self._write_file(existing_data)
        return self.CONFIG_FILE

    def set(self, key: str, value: Any) -> None:
        """Set a config value and save.

        The value is validated against the Config model before saving.

        Raises:
            ValueError: if the key is unknown or the value is invalid.
        """
        # Always reload from file to get latest values
        current = self.load(create_if_missing=True)

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        data = current.model_dump()
        data[key] = value
        self._config = Config.model_validate(data)
        self.save()

    def unset(self, key: str) -> None:
        """Remove a config value (reset to default)."""
        self._config = self.load(create_if_missing=True)

        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

        self._config = self._config.model_copy(update={key: None})

        existing_data = self._read_file()
        if key in existing_data:
            existing_data[key] = None
        self._write_file(existing_data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS."""
        return self.config.get(key, default)

    def list_settings(self) -> dict[str, Any]:
        """List user-customized settings (values that differ from defaults)."""
        result = {}
        for k, v in self.config.model_dump().items():
            if v is None:
                continue
            if k not in DEFAULTS or v != DEFAULTS[k]:
                result[k] = v
        return result

    def effective_settings(self) -> dict[str, Any]:
        """Every known setting with defaults filled in."""
        return {key: self.config.get(key) for key in Config.model_fields}

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = Config()
        if self.CONFIG_FILE.exists():
            self.CONFIG_FILE.unlink()


# Singleton instance
_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def get_config() -> Config:
    """Get the current configuration."""
    return get_config_manager().config
