"""Configuration loading and management."""

from pathlib import Path
from typing import Any

import yaml

from .types import AuditConfig

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"


def load_yaml(file_path: Path) -> dict[str, Any]:
    """Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML as dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path, encoding="utf-8") as f:
        result: dict[str, Any] | None = yaml.safe_load(f)
        return result or {}


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AuditConfig:
    """Load and merge configuration from a YAML file and runtime overrides.

    An explicitly given ``config_path`` must exist; the bundled default is
    optional.

    Args:
        config_path: Path to config file (default: configs/default.yaml)
        overrides: Additional runtime overrides

    Returns:
        Validated AuditConfig instance

    Raises:
        FileNotFoundError: If an explicit config file is missing
        pydantic.ValidationError: If configuration is invalid
    """
    if config_path is not None:
        config_dict = load_yaml(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        config_dict = load_yaml(DEFAULT_CONFIG_PATH)
    else:
        config_dict = {}

    if overrides:
        config_dict = merge_configs(config_dict, overrides)

    return AuditConfig(**config_dict)
