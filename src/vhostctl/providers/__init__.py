"""
Capability providers.

Contracts live in ``base``; the Linux implementations shell out through
``shell.run_command``.
"""

from vhostctl.providers.base import (
    CertIssuer,
    CertPaths,
    HostsEditor,
    PermissionFixer,
    PhpProbe,
    ServerConfigurator,
)
from vhostctl.providers.factory import Capabilities, build_capabilities
from vhostctl.providers.registry import ConfiguratorRegistry, detect_installed

__all__ = [
    "CertPaths",
    "HostsEditor",
    "CertIssuer",
    "PermissionFixer",
    "ServerConfigurator",
    "PhpProbe",
    "ConfiguratorRegistry",
    "detect_installed",
    "Capabilities",
    "build_capabilities",
]
