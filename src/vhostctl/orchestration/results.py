"""Result types for site provisioning and teardown."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from vhostctl.providers.base import CertPaths
from vhostctl.registry.models import SiteRecord

StepStatus = Literal["ok", "warning", "failed", "skipped"]


@dataclass
class ProvisionResult:
    """Result of provisioning a site."""

    record: SiteRecord
    cert_paths: Optional[CertPaths] = None
    steps: Dict[str, StepStatus] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """Whether every step succeeded without warnings."""
        return len(self.warnings) == 0


@dataclass
class DeprovisionResult:
    """Result of removing a site."""

    record: SiteRecord
    steps: Dict[str, StepStatus] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """Whether every teardown step succeeded."""
        return len(self.warnings) == 0


@dataclass
class SiteListing:
    """Registry projection for display."""

    sites: List[SiteRecord]
    php_version: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.sites)


class StepCollector:
    """Aggregates step outcomes while an orchestrator runs."""

    def __init__(self) -> None:
        self.steps: Dict[str, StepStatus] = {}
        self.warnings: List[str] = []

    def record_success(self, step: str) -> None:
        self.steps[step] = "ok"

    def record_skipped(self, step: str) -> None:
        self.steps[step] = "skipped"

    def record_warning(self, step: str, message: str) -> None:
        self.steps[step] = "warning"
        self.warnings.append(message)

    def record_failure(self, step: str) -> None:
        self.steps[step] = "failed"
