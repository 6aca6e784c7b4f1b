#!/usr/bin/env python3
"""
Parser Configuration - Centralized tuning constants for the content engine

The scan limits bound the worst-case cost of parsing untrusted message text.
They are tunables, not hard contracts: raise them if legitimate payloads are
being folded into text.
"""

import os
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONTENT_ENGINE_"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Smallest accepted value per integer setting
FIELD_MINIMUMS = {
    'max_content_length': 1,
    'max_candidate_length': 1,
    'max_candidates': 0,
    'cache_size': 0,
}

BOOL_FIELDS = ('enable_cache', 'enable_strict_fallback')


@dataclass(frozen=True)
class ParserConfig:
    """Scan limits, cache sizing and fallback switches for ContentParser"""

    # Block scanner limits
    max_content_length: int = 50_000
    max_candidate_length: int = 10_000
    max_candidates: int = 10

    # Parse cache
    cache_size: int = 100
    enable_cache: bool = True

    # Strict schema decode when the alias builder rejects a tagged object
    enable_strict_fallback: bool = True

    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration values"""
        if self.max_content_length <= 0:
            raise ValueError("max_content_length must be positive")

        if self.max_candidate_length <= 0:
            raise ValueError("max_candidate_length must be positive")

        if self.max_candidates < 0:
            raise ValueError("max_candidates must be non-negative")

        if self.cache_size < 0:
            raise ValueError("cache_size must be non-negative")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_content_length': self.max_content_length,
            'max_candidate_length': self.max_candidate_length,
            'max_candidates': self.max_candidates,
            'cache_size': self.cache_size,
            'enable_cache': self.enable_cache,
            'enable_strict_fallback': self.enable_strict_fallback,
            'log_level': self.log_level,
        }


class ParserConfigManager:
    """Configuration manager with config-file and environment variable support"""

    _instance: Optional['ParserConfigManager'] = None
    _config: Optional[ParserConfig] = None

    def __new__(cls) -> 'ParserConfigManager':
        """Singleton pattern for configuration management"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_config(self) -> ParserConfig:
        """Get configuration with environment variable overrides"""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload_config(self) -> ParserConfig:
        """Force reload configuration from environment"""
        self._config = None
        return self.get_config()

    def _load_config(self) -> ParserConfig:
        """Load configuration from .env, an optional JSON file and environment variables"""
        load_dotenv()

        config_dict: Dict[str, Any] = {}

        config_file = os.getenv(f"{ENV_PREFIX}CONFIG_FILE")
        if config_file:
            config_dict.update(self._read_config_file(Path(config_file)))

        env_overrides = {
            'max_content_length': self._get_env_int('MAX_CONTENT_LENGTH'),
            'max_candidate_length': self._get_env_int('MAX_CANDIDATE_LENGTH'),
            'max_candidates': self._get_env_int('MAX_CANDIDATES'),
            'cache_size': self._get_env_int('CACHE_SIZE'),
            'enable_cache': self._get_env_bool('ENABLE_CACHE'),
            'enable_strict_fallback': self._get_env_bool('STRICT_FALLBACK'),
            'log_level': self._get_env_log_level('LOG_LEVEL'),
        }

        # Apply non-None overrides
        env_values = {key: value for key, value in env_overrides.items() if value is not None}
        config_dict.update(self._clean_values(env_values, "environment"))

        return ParserConfig(**config_dict)

    def _read_config_file(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning(f"Config file {path} not found, using defaults")
            return {}
        try:
            with open(path, 'r') as f:
                file_config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not read config file {path}: {e}")
            return {}

        if not isinstance(file_config, dict):
            logger.warning(f"Config file {path} must contain a JSON object")
            return {}

        known = ParserConfig.__dataclass_fields__.keys()
        unknown = [key for key in file_config if key not in known]
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {unknown}")
        known_values = {key: value for key, value in file_config.items() if key in known}
        return self._clean_values(known_values, str(path))

    def _clean_values(self, values: Dict[str, Any], source: str) -> Dict[str, Any]:
        """Drop values of the wrong type or out of range, keeping the defaults for them"""
        cleaned: Dict[str, Any] = {}
        for key, value in values.items():
            if key in FIELD_MINIMUMS:
                valid = isinstance(value, int) and not isinstance(value, bool) and value >= FIELD_MINIMUMS[key]
            elif key in BOOL_FIELDS:
                valid = isinstance(value, bool)
            else:
                valid = isinstance(value, str) and value.upper() in VALID_LOG_LEVELS
                if valid:
                    value = value.upper()

            if valid:
                cleaned[key] = value
            else:
                logger.warning(f"Ignoring invalid {key}={value!r} from {source}")
        return cleaned

    def _get_env_int(self, key: str) -> Optional[int]:
        """Get integer environment variable with error handling"""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Ignoring non-integer {ENV_PREFIX + key}={value!r}")
            return None

    def _get_env_bool(self, key: str) -> Optional[bool]:
        """Get boolean environment variable with error handling"""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return None
        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _get_env_log_level(self, key: str) -> Optional[str]:
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return None
        if value.upper() not in VALID_LOG_LEVELS:
            logger.warning(f"Ignoring unknown log level {value!r}")
            return None
        return value.upper()


# Global configuration instance
config_manager = ParserConfigManager()
