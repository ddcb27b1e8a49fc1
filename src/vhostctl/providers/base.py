"""Capability contracts the orchestrators depend on."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from vhostctl.core.backends import BackendId


@dataclass(frozen=True)
class CertPaths:
    """Certificate and key issued for a domain."""

    cert_file: Path
    key_file: Path


@runtime_checkable
class HostsEditor(Protocol):
    """Maps domains to loopback addresses in the hosts file."""

    def add_entry(self, domain: str, ip: str = "127.0.0.1") -> str:
        """Add an entry; an existing loopback entry is success. Returns a message."""
        ...

    def remove_entry(self, domain: str) -> str:
        """Remove loopback entries; absence is success. Returns a message."""
        ...


@runtime_checkable
class CertIssuer(Protocol):
    """Issues locally-trusted TLS certificates."""

    def setup_ssl(self, domain: str) -> CertPaths:
        ...


@runtime_checkable
class PermissionFixer(Protocol):
    """Makes a document root usable by the web server and the developer."""

    def fix_permissions(self, path: Path, server: BackendId) -> None:
        ...


@runtime_checkable
class ServerConfigurator(Protocol):
    """Writes, activates and removes site configs for one backend."""

    @property
    def backend(self) -> BackendId:
        ...

    def is_installed(self) -> bool:
        ...

    def enable_site(
        self,
        domain: str,
        path: Path,
        ssl: bool,
        cert_paths: CertPaths | None = None,
    ) -> None:
        ...

    def disable_site(self, domain: str, server: BackendId) -> None:
        ...


@runtime_checkable
class PhpProbe(Protocol):
    """Reports the installed PHP toolchain."""

    def version(self) -> str | None:
        ...
