"""PHP toolchain detection for listings and PHP-FPM socket paths."""

from __future__ import annotations

from pathlib import Path

from vhostctl.core.errors import CommandError
from vhostctl.providers.shell import CommandRunner, run_command

VERSION_SNIPPET = 'echo PHP_MAJOR_VERSION.".".PHP_MINOR_VERSION;'
FALLBACK_SOCKET_NAME = "php-fpm.sock"


class PhpCli:
    """PhpProbe using the ``php`` binary on PATH."""

    def __init__(
        self,
        socket_dir: Path | str = "/var/run/php",
        runner: CommandRunner = run_command,
        timeout: float = 10,
    ) -> None:
        self.socket_dir = Path(socket_dir)
        self._run = runner
        self.timeout = timeout
        self._version: str | None = None
        self._probed = False

    def version(self) -> str | None:
        """Installed ``major.minor`` version, or None when PHP is missing."""
        if not self._probed:
            self._probed = True
            try:
                proc = self._run(["php", "-r", VERSION_SNIPPET], timeout=self.timeout)
            except CommandError:
                return None
            self._version = proc.stdout.strip() or None
        return self._version

    def socket_path(self) -> Path:
        """PHP-FPM socket for the installed version."""
        version = self.version()
        if version is None:
            return self.socket_dir / FALLBACK_SOCKET_NAME
        return self.socket_dir / f"php{version}-fpm.sock"
