"""Site registry: records and their durable store."""

from vhostctl.registry.models import SiteRecord, normalise_domain
from vhostctl.registry.store import RegistryStore, find, remove, upsert

__all__ = [
    "SiteRecord",
    "normalise_domain",
    "RegistryStore",
    "upsert",
    "remove",
    "find",
]
