"""Locate and merge the TOML files under config/."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "COURIER_CONFIG_DIR"
ENVIRONMENT_VAR = "COURIER_ENV"
DEFAULT_ENVIRONMENT = "development"

# How many parents of the working directory are searched for config/
_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Return the directory holding default.toml and the per-environment files.

    COURIER_CONFIG_DIR wins when set and must exist. Otherwise the first
    `config/` found in the working directory or one of its parents is used.
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        config_dir = Path(explicit)
        if not config_dir.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} points to a missing directory: {explicit}")
        return config_dir

    start = Path.cwd()
    for directory in [start, *start.parents][:_SEARCH_DEPTH]:
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate

    return Path("config")


def get_environment() -> str:
    """Name of the environment overlay, e.g. 'test' loads config/test.toml."""
    return os.environ.get(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    return tomllib.loads(file_path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay `override` onto `base` section by section; neither input is modified."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Read config/default.toml and overlay config/{COURIER_ENV}.toml if present.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = get_config_dir()

    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/default.toml or set {CONFIG_DIR_VAR}."
        )
    config = load_toml(default_path)

    overlay_path = config_dir / f"{get_environment()}.toml"
    if overlay_path.is_file():
        config = deep_merge(config, load_toml(overlay_path))

    return config
