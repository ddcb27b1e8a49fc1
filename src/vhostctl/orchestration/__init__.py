"""Provisioning and teardown orchestration."""

from vhostctl.orchestration.deprovision import Deprovisioner
from vhostctl.orchestration.provision import Provisioner, SiteIntent, validate_domain
from vhostctl.orchestration.query import get_site, list_sites
from vhostctl.orchestration.results import (
    DeprovisionResult,
    ProvisionResult,
    SiteListing,
    StepCollector,
)
from vhostctl.orchestration.steps import Step, StepPolicy, run_step

__all__ = [
    "Provisioner",
    "Deprovisioner",
    "SiteIntent",
    "validate_domain",
    "list_sites",
    "get_site",
    "ProvisionResult",
    "DeprovisionResult",
    "SiteListing",
    "StepCollector",
    "Step",
    "StepPolicy",
    "run_step",
]
