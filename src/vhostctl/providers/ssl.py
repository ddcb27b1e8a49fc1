"""
Locally-trusted certificates with mkcert.

mkcert is used from PATH when present, otherwise downloaded from the GitHub
release for the configured version. The local CA and the certificates are
created as the invoking user so the CA lands in their trust store, not
root's.

Certificates live in ``<cert_dir>/<domain>/<domain>.pem`` and
``<cert_dir>/<domain>/<domain>-key.pem``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import httpx
import structlog

from vhostctl.config.models import SslConfig
from vhostctl.core.errors import CertificateSetupFailed, CommandError
from vhostctl.core.identity import Identity
from vhostctl.providers.base import CertPaths
from vhostctl.providers.shell import CommandRunner, run_command, which

logger = structlog.get_logger()

DOWNLOAD_TIMEOUT = 60.0


def download_file(url: str, destination: Path, timeout: float = DOWNLOAD_TIMEOUT) -> None:
    """Stream ``url`` to ``destination``, following redirects."""
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)


class MkcertIssuer:
    """CertIssuer backed by mkcert."""

    def __init__(
        self,
        identity: Identity,
        config: SslConfig | None = None,
        runner: CommandRunner = run_command,
        downloader: Callable[[str, Path], None] = download_file,
        timeout: float = 120,
    ) -> None:
        self.identity = identity
        self.config = config or SslConfig()
        self._run = runner
        self._download = downloader
        self.timeout = timeout

    def setup_ssl(self, domain: str) -> CertPaths:
        mkcert = self.ensure_mkcert()

        try:
            self._run_as_user([mkcert, "-install"])
            logger.info("mkcert_ca_installed")
        except CommandError as e:
            logger.warning("mkcert_ca_install_failed", error=e.message)

        cert_dir = Path(self.config.cert_dir) / domain
        paths = CertPaths(
            cert_file=cert_dir / f"{domain}.pem",
            key_file=cert_dir / f"{domain}-key.pem",
        )

        try:
            cert_dir.mkdir(parents=True, exist_ok=True)
            self._run_as_user(
                [
                    mkcert,
                    "-cert-file",
                    str(paths.cert_file),
                    "-key-file",
                    str(paths.key_file),
                    domain,
                ]
            )
        except (OSError, CommandError) as e:
            raise CertificateSetupFailed(
                f"Failed to generate certificate for {domain}: {e}",
                details={"cert_dir": str(cert_dir)},
            ) from e

        self._grant_web_user(cert_dir, paths)
        logger.info("certificate_issued", domain=domain, cert_file=str(paths.cert_file))
        return paths

    def ensure_mkcert(self) -> str:
        """Return the mkcert executable, installing it if needed."""
        found = which("mkcert")
        if found:
            return found

        target = Path(self.config.mkcert_path)
        if target.exists() and os.access(target, os.X_OK):
            return str(target)

        return str(self._install_mkcert(target))

    def _install_mkcert(self, target: Path) -> Path:
        url = self.config.mkcert_url
        logger.info("mkcert_downloading", url=url, version=self.config.mkcert_version)

        tmp_path = target.with_name(f".{target.name}.download")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            self._download(url, tmp_path)
            tmp_path.chmod(0o755)
            os.replace(tmp_path, target)
        except (OSError, httpx.HTTPError) as e:
            tmp_path.unlink(missing_ok=True)
            raise CertificateSetupFailed(
                f"Failed to install mkcert: {e}", details={"url": url}
            ) from e

        logger.info("mkcert_installed", path=str(target))
        return target

    def _run_as_user(self, args: list[str]) -> None:
        self._run(args, env=self.identity.env(), timeout=self.timeout)

    def _grant_web_user(self, cert_dir: Path, paths: CertPaths) -> None:
        web_user = self.config.web_user
        try:
            self._run(["setfacl", "-R", "-m", f"u:{web_user}:rX", str(cert_dir)], timeout=self.timeout)
            self._run(
                ["setfacl", "-R", "-d", "-m", f"u:{web_user}:rX", str(cert_dir)],
                timeout=self.timeout,
            )
            logger.info("certificate_acl_set", web_user=web_user)
            return
        except CommandError:
            logger.warning("certificate_acl_unavailable", cert_dir=str(cert_dir))

        try:
            paths.cert_file.chmod(0o644)
            paths.key_file.chmod(0o640)
            cert_dir.chmod(0o755)
        except OSError as e:
            logger.warning("certificate_permissions_failed", error=str(e))
