"""
Document root ownership and ACLs.

The developer owns the files; the web server group gets read/write through
ACLs when ``setfacl`` is available, plain modes otherwise. Laravel's
writable directories (``storage``, ``bootstrap/cache``) get group-writable
permissions and the setgid bit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import structlog

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import CommandError, ValidationError
from vhostctl.core.identity import Identity
from vhostctl.providers.shell import CommandRunner, run_command, which

logger = structlog.get_logger()

WRITABLE_DIRS = ("storage", "bootstrap/cache")


class AclPermissionFixer:
    """PermissionFixer using chown, setfacl and chmod."""

    def __init__(
        self,
        identity: Identity,
        web_group: str = "www-data",
        runner: CommandRunner = run_command,
        acl_available: Callable[[], bool] | None = None,
        timeout: float = 120,
    ) -> None:
        self.identity = identity
        self.web_group = web_group
        self._run = runner
        self._acl_available = acl_available or (lambda: which("setfacl") is not None)
        self.timeout = timeout

    def fix_permissions(self, path: Path, server: BackendId) -> None:
        root = Path(path).resolve()
        if not root.is_dir():
            raise ValidationError(f"Document root does not exist: {root}")

        user = self.identity.user
        logger.info("fixing_permissions", path=str(root), user=user, server=server.value)

        self._run(["chown", "-R", f"{user}:{self.web_group}", str(root)], timeout=self.timeout)

        use_acl = self._acl_available()
        if use_acl:
            self._apply_acl(root, user)
        else:
            logger.warning("acl_unavailable", path=str(root))
            self._apply_modes(root)

        for name in WRITABLE_DIRS:
            directory = root / name
            if directory.is_dir():
                self._make_writable(directory, use_acl)

    def _apply_acl(self, root: Path, user: str) -> None:
        spec = f"u::rwx,g::rwx,o::rx,u:{user}:rwx,g:{self.web_group}:rwx"
        try:
            self._run(["setfacl", "-R", "-m", spec, str(root)], timeout=self.timeout)
            self._run(["setfacl", "-R", "-d", "-m", spec, str(root)], timeout=self.timeout)
        except CommandError as e:
            # filesystem mounted without ACL support
            logger.warning("acl_failed", path=str(root), error=e.message)
            self._apply_modes(root)

    def _apply_modes(self, root: Path) -> None:
        self._run(
            ["find", str(root), "-type", "d", "-exec", "chmod", "755", "{}", "+"],
            timeout=self.timeout,
        )
        self._run(
            ["find", str(root), "-type", "f", "-exec", "chmod", "644", "{}", "+"],
            timeout=self.timeout,
        )

    def _make_writable(self, directory: Path, use_acl: bool) -> None:
        if use_acl:
            try:
                self._run(
                    ["setfacl", "-R", "-m", "u::rwx,g::rwx,o::rx", str(directory)],
                    timeout=self.timeout,
                )
                self._run(
                    ["setfacl", "-R", "-d", "-m", "u::rwx,g::rwx,o::rx", str(directory)],
                    timeout=self.timeout,
                )
                self._run(["chmod", "g+s", str(directory)], timeout=self.timeout)
                logger.info("writable_dir_acl_set", path=str(directory))
                return
            except CommandError as e:
                logger.warning("writable_dir_acl_failed", path=str(directory), error=e.message)

        self._run(["chmod", "-R", "775", str(directory)], timeout=self.timeout)
        logger.info("writable_dir_mode_set", path=str(directory))
