"""
Step execution with an explicit failure policy.

Each orchestration step declares whether its failure aborts the operation
(``FATAL_ON_ERROR``) or is recorded as a warning (``WARN_ON_ERROR``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional, TypeVar

import structlog

from vhostctl.core.errors import VhostctlError
from vhostctl.orchestration.results import StepCollector

logger = structlog.get_logger()

T = TypeVar("T")


class StepPolicy(StrEnum):
    """What a step failure means for the whole operation."""

    FATAL_ON_ERROR = "fatal"
    WARN_ON_ERROR = "warn"


@dataclass(frozen=True)
class Step:
    """A named unit of work and its failure policy."""

    name: str
    description: str
    policy: StepPolicy
    error_class: type[VhostctlError] = VhostctlError


def run_step(
    step: Step,
    action: Callable[[], T],
    collector: StepCollector,
) -> Optional[T]:
    """
    Run ``action`` under ``step``'s policy.

    Fatal steps re-raise errors that already are ``step.error_class`` and
    wrap anything else in it. Warn steps record the failure and return None.
    """
    logger.debug("step_started", step=step.name)
    try:
        value = action()
    except Exception as e:
        message = e.message if isinstance(e, VhostctlError) else str(e)

        if step.policy is StepPolicy.FATAL_ON_ERROR:
            collector.record_failure(step.name)
            logger.error("step_failed", step=step.name, policy=step.policy.value, error=message)
            if isinstance(e, step.error_class):
                raise
            details = e.details if isinstance(e, VhostctlError) else {}
            raise step.error_class(f"{step.description} failed: {message}", details) from e

        collector.record_warning(step.name, f"{step.description} failed: {message}")
        logger.warning("step_failed", step=step.name, policy=step.policy.value, error=message)
        return None

    collector.record_success(step.name)
    logger.debug("step_completed", step=step.name)
    return value
