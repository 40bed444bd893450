"""
Configuration management for SonicMind.

Loads and validates configuration from YAML files with environment
variable interpolation support.
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sonicmind.utils.errors import ConfigurationError

logger = logging.getLogger("config")


class ConfigManager:
    """
    Manages configuration loaded from YAML files.

    Features:
    - YAML configuration loading
    - Environment variable interpolation (${VAR_NAME})
    - Nested key access with dot notation
    - Defaults merged underneath user values
    - Schema validation
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        self._config: Dict[str, Any] = config_dict or {}
        self._env_pattern = re.compile(r'\$\{([^}]+)\}')

    @classmethod
    def from_file(cls, file_path: Path) -> "ConfigManager":
        """
        Create ConfigManager from a YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable, or not a mapping
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                config_key=str(file_path)
            )

        try:
            with open(file_path, 'r') as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML configuration: {e}",
                config_key=str(file_path)
            ) from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping",
                config_key=str(file_path)
            )

        manager = cls(config_dict)
        manager._interpolate_env_vars()
        logger.debug(f"Loaded configuration from {file_path}")
        return manager

    def _interpolate_env_vars(self) -> None:
        """Replace ${ENV_VAR} patterns throughout the configuration."""
        self._config = self._interpolate(self._config)

    def _interpolate(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: self._interpolate(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._interpolate(item) for item in value]
        if isinstance(value, str):
            return self._interpolate_string(value)
        return value

    def _interpolate_string(self, s: str) -> str:
        """Replace ${ENV_VAR} with its value, keeping unknown variables verbatim."""
        def replace(match: re.Match) -> str:
            value = os.environ.get(match.group(1))
            if value is None:
                return match.group(0)
            return value

        return self._env_pattern.sub(replace, s)

    def get(
        self,
        key: str,
        default: Any = None,
        required: bool = False
    ) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            config.get("engine.max_workers", default=4)
            config.get("analyzers.harmonic_signature.enabled")
        """
        value: Any = self._config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                if required:
                    raise ConfigurationError(
                        f"Required configuration key not found: {key}",
                        config_key=key
                    )
                return default

        return value

    def get_section(self, key: str) -> Dict[str, Any]:
        """Return a whole section as a dict (empty if missing or not a mapping)."""
        value = self.get(key, default={})
        if not isinstance(value, dict):
            return {}
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        keys = key.split('.')
        current = self._config

        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def merge_defaults(self, defaults: Dict[str, Any]) -> None:
        """Fill in every key missing from the loaded config with ``defaults``."""
        self._config = _deep_merge(defaults, self._config)

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the configuration."""
        return copy.deepcopy(self._config)

    def validate(self, schema: Dict[str, Any]) -> None:
        """
        Validate configuration against a schema.

        Schema format:
            {
                "engine.max_workers": {"type": int, "required": True, "min": 1},
                "engine.timeout": {"type": (int, float)},
            }

        Raises:
            ConfigurationError: If validation fails
        """
        for key, rules in schema.items():
            value = self.get(key)
            expected_type = rules.get("type")

            if value is None:
                if rules.get("required", False):
                    raise ConfigurationError(
                        f"Required configuration missing: {key}",
                        config_key=key
                    )
                continue

            if expected_type and not _type_ok(value, expected_type):
                names = "/".join(t.__name__ for t in _as_tuple(expected_type))
                raise ConfigurationError(
                    f"Invalid type for {key}: expected {names}, "
                    f"got {type(value).__name__}",
                    config_key=key
                )

            minimum = rules.get("min")
            if minimum is not None and value < minimum:
                raise ConfigurationError(
                    f"Invalid value for {key}: {value} < {minimum}",
                    config_key=key
                )

            choices = rules.get("choices")
            if choices is not None and value not in choices:
                raise ConfigurationError(
                    f"Invalid value for {key}: {value!r} not in {sorted(choices)}",
                    config_key=key
                )


CONFIG_SCHEMA: Dict[str, Any] = {
    "engine.max_workers": {"type": int, "required": True, "min": 1},
    "engine.timeout": {"type": (int, float), "min": 0},
    "engine.seed": {"type": int, "min": 0},
    "engine.parallel": {"type": bool},
    "suggestions.max_suggestions": {"type": int, "min": 0},
    "analyzers.harmonic_signature.subharmonic_tolerance": {"type": (int, float), "min": 0},
    "loader.max_file_size": {"type": int, "min": 1},
    "logging.level": {"choices": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}},
    "logging.format": {"choices": {"json", "text"}},
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file, merged over the defaults.

    Args:
        config_path: Optional path to a YAML file. If None, tries
                     "config/sonicmind.yaml" and "sonicmind.yaml".

    Returns:
        Dict[str, Any]: Validated configuration dictionary
    """
    if config_path is None:
        for path in (Path("config/sonicmind.yaml"), Path("sonicmind.yaml")):
            if path.exists():
                config_path = str(path)
                break

    if config_path:
        manager = ConfigManager.from_file(Path(config_path))
        manager.merge_defaults(get_default_config())
    else:
        manager = ConfigManager(get_default_config())

    manager.validate(CONFIG_SCHEMA)
    return manager.to_dict()


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "engine": {
            "max_workers": 4,
            "timeout": None,
            "seed": None,
            "parallel": True,
        },
        "analyzers": {
            "harmonic_signature": {"enabled": True, "subharmonic_tolerance": 0.01},
            "quantum_beat_grid": {"enabled": True},
            "emotional_dna": {"enabled": True},
            "synaesthetic_map": {"enabled": True},
            "temporal_fractal": {"enabled": True},
            "crowd_energy": {"enabled": True},
            "sonic_texture": {"enabled": True},
            "probability_wave": {"enabled": True},
            "dimensional_rift": {"enabled": True},
            "consciousness_sync": {"enabled": True},
        },
        "suggestions": {
            "max_suggestions": 5,
        },
        "loader": {
            "supported_formats": [".wav", ".aiff", ".aif", ".flac", ".ogg", ".mp3"],
            "max_file_size": 524288000,  # 500 MB
            "target_sample_rate": None,
        },
        "logging": {
            "level": "INFO",
            "format": "json",
        },
    }


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _as_tuple(expected_type: Any) -> tuple:
    return expected_type if isinstance(expected_type, tuple) else (expected_type,)


def _type_ok(value: Any, expected_type: Any) -> bool:
    # bool is an int subclass; only accept it where bool is asked for
    if isinstance(value, bool):
        return bool in _as_tuple(expected_type)
    return isinstance(value, expected_type)
