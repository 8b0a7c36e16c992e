"""YAML configuration for gotoolchain.

Provisioning defaults (install directory, Go version, mirror) are carried in
an explicit ToolchainConfig value instead of module-level state, so separate
provisioning calls in one process never interfere.

Example gotoolchain.yaml:

    version: "1.12"
    install_dir: ~/.gotoolchain/go
    base_url: https://dl.google.com/go
    use_modules: true
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gotoolchain.core.exceptions import ConfigError

DEFAULT_GO_VERSION = "1.12"
DEFAULT_BASE_URL = "https://dl.google.com/go"


def get_default_install_dir() -> Path:
    """
    Get the platform-specific default Go installation directory.

    Returns:
        Path: The default install directory.
            - Windows: %USERPROFILE%\\.gotoolchain\\go
            - Linux/macOS: ~/.gotoolchain/go
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine default install directory."
            )
        return Path(user_profile) / ".gotoolchain" / "go"
    return Path.home() / ".gotoolchain" / "go"


@dataclass
class ToolchainConfig:
    """Provisioning configuration."""

    version: str = DEFAULT_GO_VERSION
    install_dir: Path = field(default_factory=get_default_install_dir)
    base_url: str = DEFAULT_BASE_URL
    use_modules: bool = False
    download_timeout: int = 30  # seconds
    lock_timeout: int = 300  # seconds


_FIELD_TYPES = {
    "version": (str,),
    "install_dir": (str,),
    "base_url": (str,),
    "use_modules": (bool,),
    "download_timeout": (int,),
    "lock_timeout": (int,),
}


def parse_config(config_path: Path) -> ToolchainConfig:
    """
    Parse a gotoolchain.yaml configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ConfigError("Configuration file is empty")

    return config_from_mapping(data, base_dir=config_path.parent)


def config_from_mapping(
    data: Dict[str, Any], base_dir: Optional[Path] = None
) -> ToolchainConfig:
    """
    Validate an in-memory mapping and build a ToolchainConfig.

    Args:
        data: Mapping with any of the recognized keys
        base_dir: Directory relative install_dir values are resolved against

    Raises:
        ConfigError: On unknown keys or wrongly typed values
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    unknown = sorted(set(data) - set(_FIELD_TYPES))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    # YAML reads bare 1.12 as a float
    if isinstance(data.get("version"), (int, float)) and not isinstance(
        data.get("version"), bool
    ):
        raise ConfigError(
            f"version must be a quoted string (got {data['version']!r}); "
            'write e.g. version: "1.12"'
        )

    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is a subclass of int
        if not isinstance(value, expected) or (
            expected == (int,) and isinstance(value, bool)
        ):
            raise ConfigError(
                f"{key} must be of type {expected[0].__name__}, "
                f"got {type(value).__name__}"
            )

    kwargs: Dict[str, Any] = {k: v for k, v in data.items() if k != "install_dir"}

    if "install_dir" in data:
        install_dir = Path(data["install_dir"]).expanduser()
        if not install_dir.is_absolute() and base_dir is not None:
            install_dir = Path(base_dir) / install_dir
        kwargs["install_dir"] = install_dir

    for key in ("download_timeout", "lock_timeout"):
        if key in kwargs and kwargs[key] <= 0:
            raise ConfigError(f"{key} must be positive")

    return ToolchainConfig(**kwargs)


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_GO_VERSION",
    "ToolchainConfig",
    "config_from_mapping",
    "get_default_install_dir",
    "parse_config",
]
