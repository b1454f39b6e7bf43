"""
Configuration - JSON Schema validation and loading of config.json
"""
import copy
import json
import math
import os
from typing import Any, Dict, List, Tuple

import jsonschema

from .constants import (
    ARTNET_PORT, DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_DEVICE_HOST, DEFAULT_DEVICE_PORT,
    DEFAULT_DEVICE_TIMEOUT, DEFAULT_DEVICE_WORKERS, DEFAULT_EMIT_CHANNELS,
    DEFAULT_EMIT_INTERVAL, DEFAULT_EMIT_TARGET_IP, DEFAULT_LIVEEDIT_TIMEOUT,
    DEFAULT_LOG_DIR, DEFAULT_MAX_LOG_FILES, DMX_CHANNELS_PER_UNIVERSE
)
from .logger import get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CHANNEL_SCHEMA = {
    "type": "object",
    "required": ["index", "param", "min", "max"],
    "properties": {
        "index": {
            "type": "integer",
            "minimum": 0,
            "maximum": DMX_CHANNELS_PER_UNIVERSE - 1,
            "description": "0-based DMX channel slot"
        },
        "name": {
            "type": "string",
            "description": "Display name"
        },
        "param": {
            "type": "string",
            "minLength": 1,
            "description": "Device parameter id"
        },
        "min": {"type": "number", "description": "Value at DMX 0"},
        "center": {"type": "number", "description": "Value at DMX 127"},
        "default": {"type": "number", "description": "Alias for center"},
        "max": {"type": "number", "description": "Value at DMX 255"}
    },
    "anyOf": [
        {"required": ["center"]},
        {"required": ["default"]}
    ]
}

# JSON Schema for config.json
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "artnet": {
            "type": "object",
            "properties": {
                "listen_ip": {
                    "type": "string",
                    "description": "Interface for DMX input"
                },
                "listen_port": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 65535,
                    "description": "UDP port for DMX input"
                },
                "net": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 127,
                    "description": "Art-Net net"
                },
                "subnet": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 15,
                    "description": "Art-Net subnet"
                },
                "universe": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 15,
                    "description": "Art-Net universe"
                },
                "emit_random": {
                    "type": "object",
                    "properties": {
                        "enabled": {"type": "boolean"},
                        "target_ip": {
                            "type": "string",
                            "pattern": "^\\d{1,3}\\.\\d{1,3}\\.\\d{1,3}\\.\\d{1,3}$"
                        },
                        "interval": {"type": "number", "exclusiveMinimum": 0},
                        "channel_count": {
                            "type": "integer",
                            "minimum": 1,
                            "maximum": DMX_CHANNELS_PER_UNIVERSE
                        }
                    },
                    "description": "Random test frames"
                }
            }
        },
        "device": {
            "type": "object",
            "properties": {
                "host": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Device host name or IP"
                },
                "port": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 65535,
                    "description": "Device HTTP port"
                },
                "timeout": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "maximum": 60,
                    "description": "Request timeout in seconds"
                },
                "max_workers": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 64,
                    "description": "Parallel device requests"
                }
            }
        },
        "bridge": {
            "type": "object",
            "properties": {
                "log_schema_miss": {
                    "type": "boolean",
                    "description": "Log changes on unmapped channels (DEBUG)"
                }
            }
        },
        "liveedit": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "url": {"type": "string"},
                "timeout": {"type": "number", "exclusiveMinimum": 0}
            }
        },
        "app": {
            "type": "object",
            "properties": {
                "console_log_level": {
                    "type": "string",
                    "enum": LOG_LEVELS,
                    "description": "Console log level"
                },
                "log_dir": {
                    "type": ["string", "null"],
                    "description": "Directory for log files (null = no log file)"
                },
                "max_log_files": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Log files to keep (0 = all)"
                },
                "debug_modules": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Logger patterns forced to DEBUG"
                }
            }
        },
        "channels": {
            "type": "array",
            "items": CHANNEL_SCHEMA,
            "description": "Channel table (built-in table if omitted)"
        }
    },
    "additionalProperties": True
}


class ConfigError(Exception):
    """Configuration could not be loaded or is invalid."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class ConfigValidator:
    """Validates configuration against the schema."""

    def __init__(self):
        self.validator = jsonschema.Draft7Validator(CONFIG_SCHEMA)

    def validate(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate configuration.

        Args:
            config: Configuration dictionary

        Returns:
            Tuple[bool, List[str]]: (is_valid, error_messages)
        """
        errors = []

        for error in self.validator.iter_errors(config):
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            errors.append(f"{path}: {error.message}")

        # Range checks only make sense once the structure is right
        if not errors:
            errors.extend(self._custom_validations(config))

        if errors:
            logger.error(f"Config validation failed: {len(errors)} error(s)")
            for error in errors:
                logger.error(f"  - {error}")
        else:
            logger.debug("Config validation passed")

        return len(errors) == 0, errors

    def _custom_validations(self, config: Dict[str, Any]) -> List[str]:
        """
        Checks the JSON schema cannot express.

        Args:
            config: Configuration dictionary

        Returns:
            List[str]: Error messages
        """
        errors = []

        seen = set()
        for i, channel in enumerate(config.get("channels", [])):
            center = channel.get("center", channel.get("default"))
            if not all(math.isfinite(bound) for bound in (channel["min"], center, channel["max"])):
                errors.append(f"channels.{i}: min, center and max must be finite numbers")
            else:
                if channel["min"] > center:
                    errors.append(f"channels.{i}: min ({channel['min']}) is greater than center ({center})")
                if center > channel["max"]:
                    errors.append(f"channels.{i}: center ({center}) is greater than max ({channel['max']})")
            if channel["index"] in seen:
                errors.append(f"channels.{i}: duplicate index {channel['index']}")
            seen.add(channel["index"])

        liveedit = config.get("liveedit", {})
        if liveedit.get("enabled") and not liveedit.get("url"):
            errors.append("liveedit.url: required when liveedit.enabled is true")

        return errors

    def get_default_config(self) -> Dict[str, Any]:
        """
        Default configuration.

        Returns:
            Dict[str, Any]: Default configuration (without a channel table)
        """
        return {
            "artnet": {
                "listen_ip": "0.0.0.0",
                "listen_port": ARTNET_PORT,
                "net": 0,
                "subnet": 0,
                "universe": 0,
                "emit_random": {
                    "enabled": False,
                    "target_ip": DEFAULT_EMIT_TARGET_IP,
                    "interval": DEFAULT_EMIT_INTERVAL,
                    "channel_count": DEFAULT_EMIT_CHANNELS
                }
            },
            "device": {
                "host": DEFAULT_DEVICE_HOST,
                "port": DEFAULT_DEVICE_PORT,
                "timeout": DEFAULT_DEVICE_TIMEOUT,
                "max_workers": DEFAULT_DEVICE_WORKERS
            },
            "bridge": {
                "log_schema_miss": False
            },
            "liveedit": {
                "enabled": False,
                "url": "",
                "timeout": DEFAULT_LIVEEDIT_TIMEOUT
            },
            "app": {
                "console_log_level": DEFAULT_CONSOLE_LOG_LEVEL,
                "log_dir": DEFAULT_LOG_DIR,
                "max_log_files": DEFAULT_MAX_LOG_FILES,
                "debug_modules": []
            }
        }


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into ``base`` returning a new dict."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config_file(config_path: str) -> Tuple[bool, List[str], Dict[str, Any]]:
    """
    Load and validate a config file.

    Args:
        config_path: Path to config.json

    Returns:
        Tuple[bool, List[str], Dict]: (is_valid, errors, config_dict)
    """
    validator = ConfigValidator()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        return False, [f"Config file not found: {config_path}"], {}
    except json.JSONDecodeError as e:
        return False, [f"JSON parse error: {str(e)}"], {}
    except OSError as e:
        return False, [f"Cannot read config file: {e}"], {}

    is_valid, errors = validator.validate(config)
    return is_valid, errors, config


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load config.json merged over the defaults.

    A missing file falls back to the defaults; an unreadable or invalid
    file is an error.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation
    """
    defaults = ConfigValidator().get_default_config()

    if not os.path.exists(config_path):
        logger.warning(f"Config file not found: {config_path} - using default configuration")
        return defaults

    is_valid, errors, config = validate_config_file(config_path)
    if not is_valid:
        raise ConfigError(errors)

    logger.info(f"Configuration loaded from {config_path}")
    return deep_merge(defaults, config)
