"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger
from .naming import FieldNaming

logger = get_logger(__name__)

CONFIG_FILE_NAME = "rpc-typegen.json"

_FIELD_TYPES = {
    "output_file": str,
    "indent_size": int,
    "header": bool,
    "field_naming": str,
    "preserve_docs": bool,
    "branded_newtypes": bool,
    "type_overrides": dict,
    "bigint_types": list,
    "custom": dict,
}

_TYPE_NAMES = {
    str: "a string",
    int: "an integer",
    bool: "true or false",
    dict: "an object",
    list: "a list",
}


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Configuration for the TypeScript generator."""

    # Output settings
    output_file: Optional[str] = None
    indent_size: int = 2
    header: bool = True

    # Naming settings
    field_naming: str = "preserve"  # preserve, camelCase

    # Declarations
    preserve_docs: bool = False
    branded_newtypes: bool = False

    # Type handling
    type_overrides: Dict[str, str] = field(default_factory=dict)
    bigint_types: List[str] = field(default_factory=list)

    # Custom settings
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary with custom keys merged in."""
        config_dict = {
            "output_file": self.output_file,
            "indent_size": self.indent_size,
            "header": self.header,
            "field_naming": self.field_naming,
            "preserve_docs": self.preserve_docs,
            "branded_newtypes": self.branded_newtypes,
            "type_overrides": dict(self.type_overrides),
            "bigint_types": list(self.bigint_types),
        }
        config_dict.update(self.custom)
        return config_dict


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configuration values."""
        self._defaults = {
            "indent_size": 2,
            "header": True,
            "field_naming": FieldNaming.PRESERVE.value,
            "preserve_docs": False,
            "branded_newtypes": False,
            "type_overrides": {},
            "bigint_types": [],
        }

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = json.loads(json.dumps(self._defaults))

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(
                {k: v for k, v in custom_config.items() if v is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _check_types(self, config_dict: Dict[str, Any]):
        """
        Reject values of the wrong JSON type for known settings.

        Raises:
            ConfigError: On the first mistyped setting
        """
        for key, expected in _FIELD_TYPES.items():
            if key not in config_dict:
                continue
            value = config_dict[key]
            if key == "output_file" and value is None:
                continue
            # bool is a subclass of int
            if isinstance(value, bool) and expected is not bool:
                ok = False
            else:
                ok = isinstance(value, expected)
            if not ok:
                raise ConfigError(
                    f"'{key}' must be {_TYPE_NAMES[expected]}, got {value!r}"
                )

        overrides = config_dict.get("type_overrides") or {}
        for name, target in overrides.items():
            if not isinstance(target, str):
                raise ConfigError(
                    f"type override for {name} must be a string, got {target!r}"
                )

        for name in config_dict.get("bigint_types") or []:
            if not isinstance(name, str):
                raise ConfigError(f"bigint_types entries must be strings, got {name!r}")

        indent_size = config_dict.get("indent_size")
        if isinstance(indent_size, int) and indent_size < 0:
            raise ConfigError(f"'indent_size' must not be negative, got {indent_size}")

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """
        Convert dictionary to GeneratorConfig instance.

        Raises:
            ConfigError: If a known setting has the wrong type
        """
        self._check_types(config_dict)
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        config = GeneratorConfig(**config_args)

        if FieldNaming.parse(config.field_naming) is None:
            logger.warning(
                "Unknown field_naming %r, falling back to 'preserve'",
                config.field_naming,
            )
            config.field_naming = FieldNaming.PRESERVE.value

        return config

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}")

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if FieldNaming.parse(config.field_naming) is None:
            warnings.append(f"Invalid field_naming: {config.field_naming}")

        if not isinstance(config.indent_size, int) or config.indent_size < 0:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if not isinstance(config.type_overrides, dict):
            warnings.append("type_overrides must be an object")
        else:
            for name, target in config.type_overrides.items():
                if not isinstance(target, str) or not target.strip():
                    warnings.append(f"Empty type override for {name}")

        for name in config.bigint_types:
            if name in config.type_overrides:
                warnings.append(
                    f"bigint type {name} is shadowed by an explicit type override"
                )

        return warnings


def discover_config(start: Union[str, Path, None] = None) -> Optional[Path]:
    """
    Walk up from ``start`` looking for a configuration file.

    Args:
        start: Directory to begin in (defaults to the working directory)

    Returns:
        Path to the nearest ``rpc-typegen.json`` or None
    """
    current = Path(start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent

    for directory in [current, *current.parents]:
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            logger.debug("Discovered configuration at %s", candidate)
            return candidate
    return None


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)
