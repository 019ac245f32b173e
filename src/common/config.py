"""Shared helpers for YAML-backed configuration."""

import os
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml

T = TypeVar("T")


def find_config_path(
    name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Resolve a config name or path to an existing YAML file.

    Args:
        name: Config name without extension, a path to a YAML file, or None
        config_dir: Directory searched for ``{name}.yaml``
        default_name: Name used when neither ``name`` nor ``env_var`` is set
        env_var: Environment variable holding the config name

    Raises:
        FileNotFoundError: If the resolved file does not exist
    """
    if name is None:
        name = os.environ.get(env_var, default_name) if env_var else default_name

    if "/" in name or name.endswith((".yaml", ".yml")):
        config_path = Path(name)
    else:
        config_path = Path(config_dir) / f"{name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return config_path


def load_yaml(path: Path) -> dict:
    """Load a YAML mapping; an empty file gives an empty dict."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def get_section(data: dict, key: str) -> dict:
    """Return a nested mapping from config data, or an empty dict."""
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return section


class ConfigSingleton(Generic[T]):
    """Lazily loaded process-wide config with get/set/reset accessors."""

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        self._config = config

    def reset(self) -> None:
        self._config = None
