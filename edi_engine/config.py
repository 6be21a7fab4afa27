"""
Configuration loading.

Settings come from config.yaml; a .env file next to it and the process
environment override the delimiter, qualifier policy and thread settings.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .code_tables import CodeTables, load_code_tables
from .exceptions import ConfigurationError
from .models import X12Options

DEFAULT_CONFIG: Dict[str, Any] = {
    "segment_terminator": "~",
    "element_separator": "*",
    "composite_separator": ":",
    "line_breaks": False,
    "strict_qualifiers": False,
    "max_threads": 5,
    "log_dir": "logs",
    "log_retention_days": 10,
    "code_tables_path": None,
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "EDI_SEGMENT_TERMINATOR": "segment_terminator",
    "EDI_ELEMENT_SEPARATOR": "element_separator",
    "EDI_COMPOSITE_SEPARATOR": "composite_separator",
    "EDI_STRICT_QUALIFIERS": "strict_qualifiers",
    "EDI_MAX_THREADS": "max_threads",
}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml, or None for defaults plus environment

    Returns:
        Configuration dictionary with every key of DEFAULT_CONFIG

    Raises:
        ConfigurationError: file missing, unreadable or holding invalid values
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")

        load_dotenv(config_file.parent / ".env")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse config file {config_file}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_file}")

        unknown = sorted(set(file_config) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

        config.update(file_config)

        # Relative code table paths are resolved against the config file
        tables_path = config.get("code_tables_path")
        if tables_path and not Path(tables_path).is_absolute():
            config["code_tables_path"] = str(config_file.parent / tables_path)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            config[key] = value

    return validate_config(config)


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce and validate config values; raises ConfigurationError."""
    config = dict(config)
    config["line_breaks"] = _as_bool("line_breaks", config["line_breaks"])
    config["strict_qualifiers"] = _as_bool("strict_qualifiers", config["strict_qualifiers"])
    config["max_threads"] = _as_positive_int("max_threads", config["max_threads"])
    config["log_retention_days"] = _as_positive_int("log_retention_days", config["log_retention_days"])

    # Delimiter checks live on X12Options
    build_options(config)
    return config


def build_options(config: Dict[str, Any]) -> X12Options:
    """X12Options from a loaded config."""
    try:
        return X12Options(
            segment_terminator=str(config["segment_terminator"]),
            element_separator=str(config["element_separator"]),
            composite_separator=str(config["composite_separator"]),
            line_breaks=config["line_breaks"],
            strict_qualifiers=config["strict_qualifiers"],
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid delimiter configuration: {e}") from e


def build_code_tables(config: Dict[str, Any]) -> CodeTables:
    return load_code_tables(config.get("code_tables_path"))


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{key} must be true or false, got {value!r}")


def _as_positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")
    if number < 1:
        raise ConfigurationError(f"{key} must be a positive integer, got {value!r}")
    return number
