"""
Apache site configuration (Debian layout).

Sites are written to ``<sites_available>/<domain>.conf`` and activated with
``a2ensite``. PHP is handed to PHP-FPM through mod_proxy_fcgi.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import CommandError, ServerConfigFailed
from vhostctl.providers.base import CertPaths
from vhostctl.providers.php import PhpCli
from vhostctl.providers.shell import CommandRunner, run_command
from vhostctl.providers.webserver import WebServerConfigurator

logger = structlog.get_logger()


def render_apache_config(
    domain: str,
    path: Path,
    php_socket: Path,
    cert_paths: CertPaths | None = None,
) -> str:
    """Render the VirtualHost blocks for a site."""
    body = f"""    ServerName {domain}
    DocumentRoot "{path}"

    <Directory "{path}">
        Options Indexes FollowSymLinks
        AllowOverride All
        Require all granted
    </Directory>

    <FilesMatch \\.php$>
        SetHandler "proxy:unix:{php_socket}|fcgi://localhost"
    </FilesMatch>

    ErrorLog ${{APACHE_LOG_DIR}}/{domain}-error.log
    CustomLog ${{APACHE_LOG_DIR}}/{domain}-access.log combined
"""
    config = f"<VirtualHost *:80>\n{body}</VirtualHost>\n"

    if cert_paths is not None:
        config += (
            "\n<VirtualHost *:443>\n"
            f"{body}\n"
            "    SSLEngine on\n"
            f"    SSLCertificateFile {cert_paths.cert_file}\n"
            f"    SSLCertificateKeyFile {cert_paths.key_file}\n"
            "</VirtualHost>\n"
        )
    return config


class ApacheConfigurator(WebServerConfigurator):
    """ServerConfigurator for Apache."""

    backend = BackendId.APACHE
    binary_name = "apache2"
    binary_paths = (
        "/usr/sbin/apache2",
        "/usr/sbin/httpd",
        "/usr/local/apache2/bin/apachectl",
        "/usr/local/bin/apachectl",
    )

    def __init__(
        self,
        sites_available: Path | str = "/etc/apache2/sites-available",
        php: PhpCli | None = None,
        runner: CommandRunner = run_command,
        timeout: float = 120,
    ) -> None:
        super().__init__(php=php, runner=runner, timeout=timeout)
        self.sites_available = Path(sites_available)

    def config_path(self, domain: str) -> Path:
        return self.sites_available / f"{domain}.conf"

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
        content = render_apache_config(
            domain, Path(path), self.php.socket_path(), cert_paths if ssl else None
        )
        self._write_config(config_path, content)

        self._soft_command(["a2enmod", "proxy_fcgi"], "apache_module_enable_failed")
        if ssl:
            self._soft_command(["a2enmod", "ssl"], "apache_module_enable_failed")
        self._soft_command(["a2ensite", config_path.name], "apache_site_enable_failed")

        self._command(["apachectl", "configtest"], "Apache configuration test failed")
        self.reload()
        logger.info("apache_site_enabled", domain=domain)

    def disable_site(self, domain: str, server: BackendId) -> None:
        config_path = self.config_path(domain)
        self._soft_command(["a2dissite", config_path.name], "apache_site_disable_failed")
        self._remove_file(config_path)
        self.reload()
        logger.info("apache_site_disabled", domain=domain)

    def reload(self) -> None:
        """Graceful reload, trying apachectl then apache2ctl."""
        try:
            self._run(["apachectl", "graceful"], timeout=self.timeout)
        except CommandError:
            self._command(["apache2ctl", "graceful"], "Apache reload failed")
