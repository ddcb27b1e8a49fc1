"""Read-only views over the registry."""

from __future__ import annotations

from vhostctl.core.errors import SiteNotFound
from vhostctl.orchestration.results import SiteListing
from vhostctl.providers.base import PhpProbe
from vhostctl.registry.models import SiteRecord, normalise_domain
from vhostctl.registry.store import RegistryStore, find


def list_sites(store: RegistryStore, php: PhpProbe | None = None) -> SiteListing:
    """All sites in insertion order, with the PHP version for display."""
    sites = store.load()
    return SiteListing(sites=sites, php_version=php.version() if php else None)


def get_site(store: RegistryStore, domain: str) -> SiteRecord:
    """The record for ``domain``; raises SiteNotFound."""
    domain = normalise_domain(domain)
    record = find(store.load(), domain)
    if record is None:
        raise SiteNotFound(f"Website '{domain}' not found.")
    return record
