"""
Site provisioning.

Steps run strictly in order:

1. resolve-backend   fatal   pick apache/nginx (auto-detect when unspecified)
2. permissions       warn    ownership and ACLs on the document root
3. certificate       fatal   mkcert certificate (only when ssl is requested)
4. server-config     fatal   write and activate the site config, reload
5. hosts-entry       fatal   loopback entry in the hosts file
6. registry-commit   fatal   record the site

The registry is written last, so a failed run never leaves a record for a
site that is not being served.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import structlog

from vhostctl.core.backends import BackendId, parse_backend, preferred_backend
from vhostctl.core.errors import (
    CertificateSetupFailed,
    HostsFileError,
    NoServerDetected,
    RegistryIOError,
    ServerConfigFailed,
    ValidationError,
)
from vhostctl.orchestration.results import ProvisionResult, StepCollector
from vhostctl.orchestration.steps import Step, StepPolicy, run_step
from vhostctl.providers.factory import Capabilities
from vhostctl.registry.models import SiteRecord, normalise_domain
from vhostctl.registry.store import RegistryStore, upsert

logger = structlog.get_logger()

LOOPBACK_IP = "127.0.0.1"

_HOSTNAME_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$", re.IGNORECASE)

RESOLVE_BACKEND = Step(
    "resolve-backend", "Web server detection", StepPolicy.FATAL_ON_ERROR, NoServerDetected
)
FIX_PERMISSIONS = Step("permissions", "Permission setup", StepPolicy.WARN_ON_ERROR)
ISSUE_CERTIFICATE = Step(
    "certificate", "Certificate setup", StepPolicy.FATAL_ON_ERROR, CertificateSetupFailed
)
ENABLE_SITE = Step(
    "server-config", "Server configuration", StepPolicy.FATAL_ON_ERROR, ServerConfigFailed
)
ADD_HOSTS_ENTRY = Step("hosts-entry", "Hosts file update", StepPolicy.FATAL_ON_ERROR, HostsFileError)
COMMIT_RECORD = Step(
    "registry-commit", "Registry update", StepPolicy.FATAL_ON_ERROR, RegistryIOError
)


@dataclass(frozen=True)
class SiteIntent:
    """What the caller wants provisioned."""

    domain: str
    path: Path
    server: BackendId | None = None
    ssl: bool = False


def validate_domain(domain: str) -> str:
    """Normalise and validate a hostname, raising ValidationError."""
    domain = normalise_domain(domain)
    if not domain:
        raise ValidationError("Domain is required")
    if len(domain) > 253 or not all(_HOSTNAME_LABEL.match(label) for label in domain.split(".")):
        raise ValidationError(f"Invalid domain name: {domain}")
    return domain


def validate_intent(intent: SiteIntent) -> SiteIntent:
    """Check an intent before anything on the system is touched."""
    domain = validate_domain(intent.domain)

    path = Path(intent.path).expanduser()
    if not path.is_dir():
        raise ValidationError(f"Document root does not exist: {path}")

    server = parse_backend(intent.server) if intent.server is not None else None
    return SiteIntent(domain=domain, path=path.resolve(), server=server, ssl=intent.ssl)


class Provisioner:
    """Provisions one site at a time."""

    def __init__(self, store: RegistryStore, capabilities: Capabilities) -> None:
        self.store = store
        self.capabilities = capabilities

    def provision(self, intent: SiteIntent) -> ProvisionResult:
        intent = validate_intent(intent)
        records = self.store.load()
        collector = StepCollector()
        log = logger.bind(domain=intent.domain)

        # fatal step, never None
        server = cast(
            BackendId,
            run_step(RESOLVE_BACKEND, lambda: self.resolve_backend(intent.server), collector),
        )
        configurator = self.capabilities.configurators.get(server)
        log.info("provisioning_site", server=server.value, path=str(intent.path), ssl=intent.ssl)

        run_step(
            FIX_PERMISSIONS,
            lambda: self.capabilities.permissions.fix_permissions(intent.path, server),
            collector,
        )

        cert_paths = None
        if intent.ssl:
            cert_paths = run_step(
                ISSUE_CERTIFICATE,
                lambda: self.capabilities.certs.setup_ssl(intent.domain),
                collector,
            )
        else:
            collector.record_skipped(ISSUE_CERTIFICATE.name)

        run_step(
            ENABLE_SITE,
            lambda: configurator.enable_site(intent.domain, intent.path, intent.ssl, cert_paths),
            collector,
        )

        run_step(
            ADD_HOSTS_ENTRY,
            lambda: self.capabilities.hosts.add_entry(intent.domain, LOOPBACK_IP),
            collector,
        )

        record = SiteRecord(
            domain=intent.domain, path=str(intent.path), server=server, ssl=intent.ssl
        )
        run_step(COMMIT_RECORD, lambda: self.store.save(upsert(records, record)), collector)

        log.info("site_provisioned", server=server.value, warnings=len(collector.warnings))
        return ProvisionResult(
            record=record,
            cert_paths=cert_paths,
            steps=collector.steps,
            warnings=collector.warnings,
        )

    def resolve_backend(self, requested: BackendId | None) -> BackendId:
        """Use the requested backend, or detect one (nginx preferred)."""
        if requested is not None:
            return requested

        installed = self.capabilities.configurators.detect_installed()
        backend = preferred_backend(installed)
        if backend is None:
            raise NoServerDetected(
                "No web server (Apache or Nginx) detected. Please install Apache or Nginx first."
            )
        logger.info("backend_detected", backend=backend.value, installed=sorted(installed))
        return backend
