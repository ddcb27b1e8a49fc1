"""
Nginx site configuration.

Sites are written to ``<sites_available>/<domain>`` and enabled by a symlink
in ``<sites_enabled>``. The configuration is tested with ``nginx -t`` before
every reload.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import ServerConfigFailed
from vhostctl.providers.base import CertPaths
from vhostctl.providers.php import PhpCli
from vhostctl.providers.shell import CommandRunner, run_command
from vhostctl.providers.webserver import WebServerConfigurator

logger = structlog.get_logger()


def _server_block(listen: str, domain: str, path: Path, php_socket: Path, tls: str = "") -> str:
    return f"""server {{
{listen}
    server_name {domain};
    root {path};
    index index.php index.html index.htm;
{tls}
    location / {{
        try_files $uri $uri/ /index.php?$query_string;
    }}

    location ~ \\.php$ {{
        include fastcgi_params;
        fastcgi_split_path_info ^(.+\\.php)(/.+)$;
        fastcgi_param SCRIPT_FILENAME $realpath_root$fastcgi_script_name;
        fastcgi_pass unix:{php_socket};
    }}

    location ~ /\\.(?!well-known).* {{
        deny all;
    }}

    access_log /var/log/nginx/{domain}-access.log;
    error_log /var/log/nginx/{domain}-error.log;
}}
"""


def render_nginx_config(
    domain: str,
    path: Path,
    php_socket: Path,
    cert_paths: CertPaths | None = None,
) -> str:
    """Render the server blocks for a site."""
    config = _server_block("    listen 80;\n    listen [::]:80;", domain, path, php_socket)

    if cert_paths is not None:
        tls = (
            f"\n    ssl_certificate {cert_paths.cert_file};\n"
            f"    ssl_certificate_key {cert_paths.key_file};\n"
        )
        config += "\n" + _server_block(
            "    listen 443 ssl;\n    listen [::]:443 ssl;", domain, path, php_socket, tls
        )
    return config


class NginxConfigurator(WebServerConfigurator):
    """ServerConfigurator for Nginx."""

    backend = BackendId.NGINX
    binary_name = "nginx"
    binary_paths = (
        "/usr/sbin/nginx",
        "/usr/local/sbin/nginx",
        "/usr/local/bin/nginx",
    )

    def __init__(
        self,
        sites_available: Path | str = "/etc/nginx/sites-available",
        sites_enabled: Path | str = "/etc/nginx/sites-enabled",
        php: PhpCli | None = None,
        runner: CommandRunner = run_command,
        timeout: float = 120,
    ) -> None:
        super().__init__(php=php, runner=runner, timeout=timeout)
        self.sites_available = Path(sites_available)
        self.sites_enabled = Path(sites_enabled)

    def config_path(self, domain: str) -> Path:
        return self.sites_available / domain

    def enabled_path(self, domain: str) -> Path:
        return self.sites_enabled / domain

    def enable_site(
        self,
        domain: str,
        path: Path,
        ssl: bool,
        cert_paths: CertPaths | None = None,
    ) -> None:
        if ssl and cert_paths is None:
            raise ServerConfigFailed(f"SSL requested for {domain} without a certificate")

        config_path = self.config_path(domain)
        content = render_nginx_config(
            domain, Path(path), self.php.socket_path(), cert_paths if ssl else None
        )
        self._write_config(config_path, content)
        self._link(config_path, self.enabled_path(domain))

        self._command(["nginx", "-t"], "Nginx configuration test failed")
        self.reload()
        logger.info("nginx_site_enabled", domain=domain)

    def disable_site(self, domain: str, server: BackendId) -> None:
        self._remove_file(self.enabled_path(domain))
        self._remove_file(self.config_path(domain))
        self._command(["nginx", "-t"], "Nginx configuration test failed")
        self.reload()
        logger.info("nginx_site_disabled", domain=domain)

    def reload(self) -> None:
        self._command(["nginx", "-s", "reload"], "Nginx reload failed")

    def _link(self, config_path: Path, enabled_path: Path) -> None:
        if enabled_path.is_symlink() or enabled_path.exists():
            return
        try:
            enabled_path.parent.mkdir(parents=True, exist_ok=True)
            enabled_path.symlink_to(config_path)
        except FileExistsError:
            return
        except OSError as e:
            raise ServerConfigFailed(
                f"Failed to enable nginx site: {e}", details={"path": str(enabled_path)}
            ) from e
        logger.info("nginx_site_linked", path=str(enabled_path))
