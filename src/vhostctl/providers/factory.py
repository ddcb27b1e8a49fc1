"""Wiring of the Linux capability providers from configuration."""

from __future__ import annotations

from dataclasses import dataclass

from vhostctl.config.models import VhostctlConfig
from vhostctl.core.identity import Identity
from vhostctl.providers.apache import ApacheConfigurator
from vhostctl.providers.base import CertIssuer, HostsEditor, PermissionFixer, PhpProbe
from vhostctl.providers.hosts import HostsFileEditor
from vhostctl.providers.nginx import NginxConfigurator
from vhostctl.providers.permissions import AclPermissionFixer
from vhostctl.providers.php import PhpCli
from vhostctl.providers.registry import ConfiguratorRegistry
from vhostctl.providers.ssl import MkcertIssuer


@dataclass
class Capabilities:
    """Every provider an orchestrator may call."""

    hosts: HostsEditor
    certs: CertIssuer
    permissions: PermissionFixer
    configurators: ConfiguratorRegistry
    php: PhpProbe


def build_capabilities(config: VhostctlConfig, identity: Identity) -> Capabilities:
    """Create the Linux providers for one invocation."""
    timeout = config.command_timeout
    php = PhpCli(socket_dir=config.php.socket_dir)

    configurators = ConfiguratorRegistry(
        [
            ApacheConfigurator(
                sites_available=config.apache.sites_available,
                php=php,
                timeout=timeout,
            ),
            NginxConfigurator(
                sites_available=config.nginx.sites_available,
                sites_enabled=config.nginx.sites_enabled,
                php=php,
                timeout=timeout,
            ),
        ]
    )

    return Capabilities(
        hosts=HostsFileEditor(config.hosts.path),
        certs=MkcertIssuer(identity, config.ssl, timeout=timeout),
        permissions=AclPermissionFixer(
            identity, web_group=config.permissions.web_group, timeout=timeout
        ),
        configurators=configurators,
        php=php,
    )
