"""
vhostctl configuration.

- Pydantic-based settings (VHOSTCTL_* environment variables, .env files)
- Per-project and user-level YAML config files
"""

from vhostctl.config.loader import (
    get_config_path,
    load_config,
    resolve_registry_path,
)
from vhostctl.config.models import (
    ApacheConfig,
    HostsConfig,
    NginxConfig,
    PermissionsConfig,
    PhpConfig,
    SslConfig,
    VhostctlConfig,
)
from vhostctl.config.settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # File config
    "VhostctlConfig",
    "HostsConfig",
    "PhpConfig",
    "PermissionsConfig",
    "SslConfig",
    "ApacheConfig",
    "NginxConfig",
    # Loader
    "get_config_path",
    "load_config",
    "resolve_registry_path",
]
