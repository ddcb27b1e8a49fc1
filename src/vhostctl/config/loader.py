"""
Configuration file loading.

Search order:
1. Explicit path (--config flag or VHOSTCTL_CONFIG_FILE)
2. .vhostctl/config.yaml (current directory)
3. ~/.vhostctl/config.yaml (invoking user's home)
4. Default configuration
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from vhostctl.config.models import VhostctlConfig
from vhostctl.core.errors import ConfigurationError
from vhostctl.core.identity import Identity

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".vhostctl"
REGISTRY_FILE_NAME = "sites.json"


def get_config_path(
    explicit_path: str | Path | None = None,
    home: Path | None = None,
) -> Path | None:
    """
    Find the configuration file to use.

    Search order:
    1. Explicit path if provided (must exist)
    2. .vhostctl/config.yaml in current directory
    3. .vhostctl/config.yaml in the given home (defaults to Path.home())

    Returns:
        Path to config file or None if not found

    Raises:
        ConfigurationError: If an explicit path was given but does not exist
    """
    if explicit_path:
        path = Path(explicit_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        return path

    cwd_config = Path.cwd() / CONFIG_DIR_NAME / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = (home or Path.home()) / CONFIG_DIR_NAME / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def load_config(
    path: str | Path | None = None,
    identity: Identity | None = None,
) -> VhostctlConfig:
    """
    Load configuration from file or defaults.

    Args:
        path: Optional explicit config file path
        identity: Invoking user; their home is searched for a config file

    Returns:
        VhostctlConfig instance
    """
    config_path = get_config_path(path, home=identity.home if identity else None)
    if config_path is None:
        return VhostctlConfig.default()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to read config file: {e}", details={"path": str(config_path)}
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping", details={"path": str(config_path)}
        )

    try:
        config = VhostctlConfig.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(
            f"Invalid config file: {e}", details={"path": str(config_path)}
        ) from e

    logger.debug("loaded_config", path=str(config_path))
    return config


def resolve_registry_path(
    config: VhostctlConfig,
    identity: Identity,
    override: str | Path | None = None,
) -> Path:
    """
    Decide where the site registry lives.

    Precedence: explicit override > config file > ~/.vhostctl/sites.json
    """
    if override:
        return Path(override).expanduser()
    if config.registry_path:
        return Path(config.registry_path).expanduser()
    return identity.home / CONFIG_DIR_NAME / REGISTRY_FILE_NAME
