"""
Site teardown.

Every system step is best-effort so that as much as possible gets cleaned
up even when the machine has drifted from the registry. Only the registry
update decides whether the removal failed. The document root is never
deleted.
"""

from __future__ import annotations

import structlog

from vhostctl.core.errors import RegistryIOError, SiteNotFound
from vhostctl.orchestration.results import DeprovisionResult, StepCollector
from vhostctl.orchestration.steps import Step, StepPolicy, run_step
from vhostctl.providers.factory import Capabilities
from vhostctl.registry.models import normalise_domain
from vhostctl.registry.store import RegistryStore, remove

logger = structlog.get_logger()

DISABLE_SITE = Step("server-config", "Server config removal", StepPolicy.WARN_ON_ERROR)
REMOVE_HOSTS_ENTRY = Step("hosts-entry", "Hosts file cleanup", StepPolicy.WARN_ON_ERROR)
REMOVE_RECORD = Step(
    "registry-commit", "Registry update", StepPolicy.FATAL_ON_ERROR, RegistryIOError
)


class Deprovisioner:
    """Removes one site and everything vhostctl set up for it."""

    def __init__(self, store: RegistryStore, capabilities: Capabilities) -> None:
        self.store = store
        self.capabilities = capabilities

    def deprovision(self, domain: str) -> DeprovisionResult:
        domain = normalise_domain(domain)
        records = self.store.load()
        remaining, record = remove(records, domain)
        if record is None:
            raise SiteNotFound(f"Website '{domain}' not found.")

        collector = StepCollector()
        log = logger.bind(domain=domain)
        log.info("removing_site", server=record.server.value)

        def disable() -> None:
            configurator = self.capabilities.configurators.get(record.server)
            configurator.disable_site(domain, record.server)

        run_step(DISABLE_SITE, disable, collector)
        run_step(REMOVE_HOSTS_ENTRY, lambda: self.capabilities.hosts.remove_entry(domain), collector)
        run_step(REMOVE_RECORD, lambda: self.store.save(remaining), collector)

        log.info("site_removed", warnings=len(collector.warnings))
        return DeprovisionResult(record=record, steps=collector.steps, warnings=collector.warnings)
