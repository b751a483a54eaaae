"""
Storygrid Configuration Management

Centralized configuration system with JSON loading and validation.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_LANGUAGE,
    DEFAULT_LAYOUT,
    DEFAULT_SHOT_MODEL,
    DEFAULT_STORYBOARD_MODEL,
    GEMINI_BASE_URL,
    AspectRatio,
    GridLayout,
    Language,
)
from .exceptions import ConfigurationError, InvalidConfigError
from .logging_config import LogLevel

DEFAULT_CONFIG_PATH = Path("config/storygrid_config.json")


@dataclass
class StorygridConfig:
    """Main configuration class for Storygrid."""

    # Models
    storyboard_model: str = DEFAULT_STORYBOARD_MODEL
    shot_model: str = DEFAULT_SHOT_MODEL
    api_base_url: str = GEMINI_BASE_URL
    timeout: float = 120.0
    temperature: float = 0.7

    # Parsing: False keeps the degrade-to-empty behaviour for blank replies
    strict_parsing: bool = False

    # Defaults offered to callers
    default_layout: GridLayout = DEFAULT_LAYOUT
    default_aspect_ratio: AspectRatio = DEFAULT_ASPECT_RATIO
    default_language: Language = DEFAULT_LANGUAGE

    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "StorygridConfig":
        """Create StorygridConfig from dictionary."""
        config = cls()

        llm = data.get("llm", {})
        config.storyboard_model = llm.get("storyboard_model", config.storyboard_model)
        config.shot_model = llm.get("shot_model", config.shot_model)
        config.api_base_url = llm.get("api_base_url", config.api_base_url)

        try:
            config.timeout = float(llm.get("timeout", config.timeout))
            config.temperature = float(llm.get("temperature", config.temperature))
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(f"Invalid numeric LLM setting: {e}")

        strict_parsing = data.get("strict_parsing", config.strict_parsing)
        if not isinstance(strict_parsing, bool):
            raise InvalidConfigError(f"strict_parsing must be true or false, got {strict_parsing!r}")
        config.strict_parsing = strict_parsing

        defaults = data.get("defaults", {})
        try:
            config.default_layout = GridLayout(defaults.get("layout", config.default_layout))
            config.default_aspect_ratio = AspectRatio(
                defaults.get("aspect_ratio", config.default_aspect_ratio)
            )
            config.default_language = Language(defaults.get("language", config.default_language))
        except ValueError as e:
            raise InvalidConfigError(str(e), {"defaults": defaults})

        config.log_level = str(data.get("log_level", config.log_level)).upper()
        if config.log_level not in LogLevel.__members__:
            raise InvalidConfigError(f"Unknown log level: {config.log_level}")
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "llm": {
                "storyboard_model": self.storyboard_model,
                "shot_model": self.shot_model,
                "api_base_url": self.api_base_url,
                "timeout": self.timeout,
                "temperature": self.temperature,
            },
            "strict_parsing": self.strict_parsing,
            "defaults": {
                "layout": self.default_layout.value,
                "aspect_ratio": self.default_aspect_ratio.value,
                "language": self.default_language.value,
            },
            "log_level": self.log_level,
        }


def get_default_config() -> StorygridConfig:
    """Return a configuration with every value at its default."""
    return StorygridConfig()


def load_config(config_path: Optional[Path] = None) -> StorygridConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file. If None, uses default.

    Returns:
        Loaded StorygridConfig instance (defaults when the file is missing)
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return get_default_config()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to load config: {e}")

    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config must be a JSON object: {config_path}")

    return StorygridConfig.from_dict(data)


def save_config(config: StorygridConfig, config_path: Path) -> None:
    """Write configuration to a JSON file."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
