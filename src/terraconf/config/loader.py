"""Configuration loader with YAML and environment variable support.

This module provides a configuration loader that reads from ~/.config/terraconf/config.yaml
and allows environment variable overrides using the TERRACONF_* prefix.

Environment variables:
- TERRACONF_RENDER_STRICT: Override render.strict
- TERRACONF_RENDER_SKIP_EMPTY: Override render.skip_empty_collections
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from terraconf.models.config import Config

TRUE_WORDS = {"1", "true", "yes", "on"}
FALSE_WORDS = {"0", "false", "no", "off"}


def default_config_path() -> Path:
    return Path.home() / ".config" / "terraconf" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    A missing file is not an error: every setting has a default.

    Args:
        config_path: Path to config file. If None, uses ~/.config/terraconf/config.yaml

    Returns:
        Validated Config object

    Raises:
        ValueError: If config file is invalid
    """
    if config_path is None:
        config_path = default_config_path()

    if config_path.exists():
        data = Config.load(config_path).model_dump()
    else:
        data = {}

    data = _apply_env_overrides(data)

    return Config(**data)


def _parse_bool(value: str) -> Optional[bool]:
    word = value.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Unrecognized boolean words are ignored.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    render = dict(data.get("render") or {})

    if env_strict := os.getenv("TERRACONF_RENDER_STRICT"):
        if (strict := _parse_bool(env_strict)) is not None:
            render["strict"] = strict

    if env_skip := os.getenv("TERRACONF_RENDER_SKIP_EMPTY"):
        if (skip := _parse_bool(env_skip)) is not None:
            render["skip_empty_collections"] = skip

    return {**data, "render": render}
