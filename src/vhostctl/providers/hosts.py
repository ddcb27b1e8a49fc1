"""
Hosts file editing.

Entries are recognised as ``127.0.0.1 <domain>`` or ``::1 <domain>`` lines.
The file is copied to ``<hosts>.backup.<epoch-ms>`` before every change and
rewritten through an atomic rename.
"""

from __future__ import annotations

import re
import shutil
import time
from pathlib import Path

import structlog

from vhostctl.core.errors import HostsFileError
from vhostctl.core.fileio import atomic_write_text

logger = structlog.get_logger()

DEFAULT_HOSTS_PATH = Path("/etc/hosts")
LOOPBACK_ADDRESSES = ("127.0.0.1", "::1")


def _entry_pattern(domain: str) -> re.Pattern[str]:
    addresses = "|".join(re.escape(ip) for ip in LOOPBACK_ADDRESSES)
    return re.compile(rf"^(?:{addresses})[ \t]+{re.escape(domain)}[ \t]*$\n?", re.MULTILINE)


def has_entry(domain: str, hosts_content: str) -> bool:
    """Whether ``domain`` already resolves to a loopback address."""
    return _entry_pattern(domain).search(hosts_content) is not None


class HostsFileEditor:
    """HostsEditor backed by a hosts file."""

    def __init__(self, hosts_path: Path | str = DEFAULT_HOSTS_PATH) -> None:
        self.hosts_path = Path(hosts_path)

    def add_entry(self, domain: str, ip: str = "127.0.0.1") -> str:
        content = self._read()

        if has_entry(domain, content):
            logger.info("hosts_entry_exists", domain=domain)
            return f"Entry for {domain} already exists"

        updated = content.strip() + "\n" + f"{ip} {domain}" + "\n"
        self._backup()
        self._write(updated)

        logger.info("hosts_entry_added", domain=domain, ip=ip)
        return f"Added {domain} to hosts file"

    def remove_entry(self, domain: str) -> str:
        content = self._read()
        updated = _entry_pattern(domain).sub("", content).strip() + "\n"

        if updated == content.strip() + "\n":
            logger.info("hosts_entry_absent", domain=domain)
            return f"No entry found for {domain}"

        self._backup()
        self._write(updated)

        logger.info("hosts_entry_removed", domain=domain)
        return f"Removed {domain} from hosts file"

    def _read(self) -> str:
        try:
            return self.hosts_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HostsFileError(
                f"Failed to read hosts file: {e}", details={"path": str(self.hosts_path)}
            ) from e

    def _write(self, content: str) -> None:
        try:
            atomic_write_text(self.hosts_path, content)
        except OSError as e:
            raise HostsFileError(
                f"Failed to write hosts file: {e}", details={"path": str(self.hosts_path)}
            ) from e

    def _backup(self) -> Path:
        backup_path = self.hosts_path.with_name(
            f"{self.hosts_path.name}.backup.{int(time.time() * 1000)}"
        )
        try:
            shutil.copy2(self.hosts_path, backup_path)
        except OSError as e:
            raise HostsFileError(
                f"Failed to backup hosts file: {e}", details={"path": str(self.hosts_path)}
            ) from e
        return backup_path
