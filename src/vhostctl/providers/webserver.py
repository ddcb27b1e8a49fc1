"""Shared plumbing for web server configurators."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import structlog

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import CommandError, ServerConfigFailed
from vhostctl.core.fileio import atomic_write_text
from vhostctl.providers.php import PhpCli
from vhostctl.providers.shell import CommandRunner, run_command, which

logger = structlog.get_logger()


class WebServerConfigurator:
    """Base class: install detection, config file writes and command wrappers."""

    backend: BackendId
    binary_name: str = ""
    binary_paths: Sequence[str] = ()

    def __init__(
        self,
        php: PhpCli | None = None,
        runner: CommandRunner = run_command,
        timeout: float = 120,
    ) -> None:
        self._run = runner
        self.php = php or PhpCli(runner=runner)
        self.timeout = timeout

    def is_installed(self) -> bool:
        for candidate in self.binary_paths:
            if Path(candidate).exists():
                return True
        return which(self.binary_name) is not None

    def _write_config(self, config_path: Path, content: str) -> None:
        try:
            atomic_write_text(config_path, content, mode=0o644)
        except OSError as e:
            raise ServerConfigFailed(
                f"Failed to write {self.backend.value} config: {e}",
                details={"path": str(config_path)},
            ) from e
        logger.info("site_config_written", backend=self.backend.value, path=str(config_path))

    def _remove_file(self, path: Path) -> bool:
        if not path.exists() and not path.is_symlink():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise ServerConfigFailed(
                f"Failed to remove {path}: {e}", details={"backend": self.backend.value}
            ) from e
        logger.info("site_config_removed", backend=self.backend.value, path=str(path))
        return True

    def _command(self, args: Sequence[str], failure: str) -> None:
        """Run a command whose failure means the site is not served."""
        try:
            self._run(list(args), timeout=self.timeout)
        except CommandError as e:
            raise ServerConfigFailed(f"{failure}: {e.message}", details=e.details) from e

    def _soft_command(self, args: Sequence[str], event: str) -> bool:
        """Run a command that commonly fails when its work is already done."""
        try:
            self._run(list(args), timeout=self.timeout)
        except CommandError as e:
            logger.warning(event, command=" ".join(args), error=e.message)
            return False
        return True
