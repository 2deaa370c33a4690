"""Layered TOML configuration for Conductor.

Layers, lowest precedence first:

1. ``default.toml``: every setting Conductor reads (required)
2. ``{CONDUCTOR_ENV}.toml``: per-environment overrides (optional)

CONDUCTOR_* environment variables are applied on top by pydantic-settings.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from conductor.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_ENV = "CONDUCTOR_CONFIG_DIR"
ENVIRONMENT_ENV = "CONDUCTOR_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"


def get_config_dir() -> Path:
    """Locate the directory holding default.toml.

    CONDUCTOR_CONFIG_DIR wins when set. Otherwise the nearest ``config/``
    containing a default.toml, searching the working directory and then
    its parents.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} is not a directory: {override}")
        return path

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate
    return cwd / "config"


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; tables merge, everything else replaces."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, env: str) -> list[Path]:
    """Files to merge for env, lowest precedence first.

    Raises:
        FileNotFoundError: If config_dir has no default.toml
    """
    default_path = config_dir / DEFAULT_FILE
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create config/{DEFAULT_FILE} or set {CONFIG_DIR_ENV}."
        )

    layers = [default_path]
    env_path = config_dir / f"{env}.toml"
    if env_path != default_path and env_path.is_file():
        layers.append(env_path)
    return layers


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Merge the TOML layers for an environment.

    Args:
        config_dir: Directory to read, located with get_config_dir when omitted
        env: Environment name, CONDUCTOR_ENV when omitted

    Returns:
        Merged configuration dictionary
    """
    config_dir = config_dir or get_config_dir()
    env = env or get_environment()

    config: dict[str, Any] = {}
    layers = config_layers(config_dir, env)
    for path in layers:
        config = deep_merge(config, load_toml(path))

    logger.debug(
        "configuration_loaded",
        environment=env,
        config_dir=str(config_dir),
        files=[path.name for path in layers],
    )
    return config
