"""
Durable site registry.

The registry is a single JSON document holding the ordered list of
provisioned sites. It is always read whole and written whole; writes go
through a temp file and an atomic rename so readers never see a partial
file.

File format::

    {
      "version": 1,
      "sites": [
        {"domain": "blog.test", "path": "/srv/blog", "server": "nginx", "ssl": true}
      ]
    }

A bare top-level list of sites is accepted on load for registries written
by older releases.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import structlog

from vhostctl.core.errors import RegistryCorrupt, RegistryIOError
from vhostctl.core.fileio import atomic_write_text
from vhostctl.registry.models import SiteRecord

logger = structlog.get_logger()

REGISTRY_VERSION = 1


def upsert(records: Sequence[SiteRecord], new_record: SiteRecord) -> list[SiteRecord]:
    """Return a copy with ``new_record`` replacing its domain's entry, or appended."""
    updated = list(records)
    for index, record in enumerate(updated):
        if record.domain == new_record.domain:
            updated[index] = new_record
            return updated
    updated.append(new_record)
    return updated


def remove(
    records: Sequence[SiteRecord], domain: str
) -> tuple[Sequence[SiteRecord], SiteRecord | None]:
    """Return the records without ``domain`` and the removed record.

    When the domain is absent, the original sequence is returned with None.
    """
    for index, record in enumerate(records):
        if record.domain == domain:
            return [*records[:index], *records[index + 1 :]], record
    return records, None


def find(records: Sequence[SiteRecord], domain: str) -> SiteRecord | None:
    """Return the record for ``domain`` if present."""
    for record in records:
        if record.domain == domain:
            return record
    return None


class RegistryStore:
    """Owns the on-disk registry file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> list[SiteRecord]:
        """Load all records; an absent file is an empty registry."""
        if not self.path.exists():
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise RegistryCorrupt(
                f"Registry is not valid UTF-8: {e}", details={"path": str(self.path)}
            ) from e
        except OSError as e:
            raise RegistryIOError(
                f"Failed to read registry: {e}", details={"path": str(self.path)}
            ) from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RegistryCorrupt(
                f"Registry is not valid JSON: {e}", details={"path": str(self.path)}
            ) from e

        if isinstance(data, list):
            entries = data
        elif isinstance(data, dict) and isinstance(data.get("sites"), list):
            entries = data["sites"]
        else:
            raise RegistryCorrupt(
                "Registry must contain a list of sites", details={"path": str(self.path)}
            )

        return [SiteRecord.from_dict(entry) for entry in entries]

    def save(self, records: Sequence[SiteRecord]) -> None:
        """Replace the registry file with ``records``."""
        payload = {
            "version": REGISTRY_VERSION,
            "sites": [record.to_dict() for record in records],
        }
        content = json.dumps(payload, indent=2) + "\n"

        try:
            atomic_write_text(self.path, content)
        except OSError as e:
            raise RegistryIOError(
                f"Failed to write registry: {e}", details={"path": str(self.path)}
            ) from e

        logger.debug("registry_saved", path=str(self.path), sites=len(records))
