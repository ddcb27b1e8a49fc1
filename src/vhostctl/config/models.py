"""
File-based configuration for vhostctl.

Sections:
- hosts: hosts file location
- php: PHP-FPM socket directory
- permissions: web server group used for document roots
- ssl: certificate directory and mkcert installation
- apache / nginx: site config directories

Defaults match a Debian/Ubuntu layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_COMMAND_TIMEOUT = 120
DEFAULT_MKCERT_VERSION = "1.4.4"


@dataclass
class HostsConfig:
    """Hosts file settings."""
    path: str = "/etc/hosts"

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostsConfig:
        return cls(path=data.get("path", "/etc/hosts"))


@dataclass
class PhpConfig:
    """PHP-FPM settings used when rendering site configs."""
    socket_dir: str = "/var/run/php"

    def to_dict(self) -> dict[str, Any]:
        return {"socket_dir": self.socket_dir}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PhpConfig:
        return cls(socket_dir=data.get("socket_dir", "/var/run/php"))


@dataclass
class PermissionsConfig:
    """Document root ownership settings."""
    web_group: str = "www-data"

    def to_dict(self) -> dict[str, Any]:
        return {"web_group": self.web_group}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PermissionsConfig:
        return cls(web_group=data.get("web_group", "www-data"))


@dataclass
class SslConfig:
    """Certificate issuance settings."""
    cert_dir: str = "/etc/ssl"
    web_user: str = "www-data"
    mkcert_version: str = DEFAULT_MKCERT_VERSION
    mkcert_path: str = "/usr/local/bin/mkcert"

    @property
    def mkcert_url(self) -> str:
        version = self.mkcert_version
        return (
            "https://github.com/FiloSottile/mkcert/releases/download/"
            f"v{version}/mkcert-v{version}-linux-amd64"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "cert_dir": self.cert_dir,
            "web_user": self.web_user,
            "mkcert_version": self.mkcert_version,
            "mkcert_path": self.mkcert_path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SslConfig:
        return cls(
            cert_dir=data.get("cert_dir", "/etc/ssl"),
            web_user=data.get("web_user", "www-data"),
            mkcert_version=str(data.get("mkcert_version", DEFAULT_MKCERT_VERSION)),
            mkcert_path=data.get("mkcert_path", "/usr/local/bin/mkcert"),
        )


@dataclass
class ApacheConfig:
    """Apache site layout."""
    sites_available: str = "/etc/apache2/sites-available"

    def to_dict(self) -> dict[str, Any]:
        return {"sites_available": self.sites_available}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApacheConfig:
        return cls(sites_available=data.get("sites_available", "/etc/apache2/sites-available"))


@dataclass
class NginxConfig:
    """Nginx site layout."""
    sites_available: str = "/etc/nginx/sites-available"
    sites_enabled: str = "/etc/nginx/sites-enabled"

    def to_dict(self) -> dict[str, Any]:
        return {
            "sites_available": self.sites_available,
            "sites_enabled": self.sites_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NginxConfig:
        return cls(
            sites_available=data.get("sites_available", "/etc/nginx/sites-available"),
            sites_enabled=data.get("sites_enabled", "/etc/nginx/sites-enabled"),
        )


@dataclass
class VhostctlConfig:
    """Complete vhostctl configuration."""
    registry_path: str | None = None
    command_timeout: int = DEFAULT_COMMAND_TIMEOUT
    hosts: HostsConfig = field(default_factory=HostsConfig)
    php: PhpConfig = field(default_factory=PhpConfig)
    permissions: PermissionsConfig = field(default_factory=PermissionsConfig)
    ssl: SslConfig = field(default_factory=SslConfig)
    apache: ApacheConfig = field(default_factory=ApacheConfig)
    nginx: NginxConfig = field(default_factory=NginxConfig)

    def to_dict(self) -> dict[str, Any]:
        return {
            "registry_path": self.registry_path,
            "command_timeout": self.command_timeout,
            "hosts": self.hosts.to_dict(),
            "php": self.php.to_dict(),
            "permissions": self.permissions.to_dict(),
            "ssl": self.ssl.to_dict(),
            "apache": self.apache.to_dict(),
            "nginx": self.nginx.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VhostctlConfig:
        return cls(
            registry_path=data.get("registry_path"),
            command_timeout=int(data.get("command_timeout", DEFAULT_COMMAND_TIMEOUT)),
            hosts=HostsConfig.from_dict(data.get("hosts") or {}),
            php=PhpConfig.from_dict(data.get("php") or {}),
            permissions=PermissionsConfig.from_dict(data.get("permissions") or {}),
            ssl=SslConfig.from_dict(data.get("ssl") or {}),
            apache=ApacheConfig.from_dict(data.get("apache") or {}),
            nginx=NginxConfig.from_dict(data.get("nginx") or {}),
        )

    @classmethod
    def default(cls) -> VhostctlConfig:
        return cls()
