"""Site registry record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import RegistryCorrupt


def normalise_domain(domain: str | None) -> str:
    """Registry key form of a domain: trimmed, lower-case, no trailing dot."""
    return (domain or "").strip().lower().rstrip(".")


@dataclass(frozen=True)
class SiteRecord:
    """One provisioned site, keyed by domain."""

    domain: str
    path: str
    server: BackendId
    ssl: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "path": self.path,
            "server": self.server.value,
            "ssl": self.ssl,
        }

    @classmethod
    def from_dict(cls, data: Any) -> SiteRecord:
        if not isinstance(data, dict):
            raise RegistryCorrupt(f"Site entry must be an object, got {type(data).__name__}")

        domain = data.get("domain")
        path = data.get("path")
        if not isinstance(domain, str) or not domain:
            raise RegistryCorrupt("Site entry has no domain", details={"entry": data})
        if not isinstance(path, str) or not path:
            raise RegistryCorrupt("Site entry has no path", details={"domain": domain})

        try:
            server = BackendId(data.get("server"))
        except ValueError:
            raise RegistryCorrupt(
                f"Unknown server type: {data.get('server')}", details={"domain": domain}
            ) from None

        ssl = data.get("ssl", False)
        if not isinstance(ssl, bool):
            raise RegistryCorrupt(
                f"Site entry has a non-boolean ssl flag: {ssl!r}", details={"domain": domain}
            )

        return cls(domain=domain, path=path, server=server, ssl=ssl)
