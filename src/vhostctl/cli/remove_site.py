"""
CLI command for removing a site.
"""

from typing import Optional

from vhostctl.cli.add_site import STEP_LABELS
from vhostctl.cli.context import build_context
from vhostctl.cli.ux import (
    confirm,
    console,
    header,
    info,
    is_interactive,
    step_line,
    success,
    warning,
)
from vhostctl.core.errors import main_with_error_handling
from vhostctl.logging import bind_context
from vhostctl.orchestration.deprovision import Deprovisioner
from vhostctl.orchestration.query import get_site
from vhostctl.orchestration.results import DeprovisionResult


def print_deprovision_summary(result: DeprovisionResult) -> None:
    """Print teardown outcome; warnings never change the exit status."""
    record = result.record
    console.print()

    for step, status in result.steps.items():
        step_line(STEP_LABELS.get(step, step), status)

    for message in result.warnings:
        warning(message)

    console.print()
    success("Website removed successfully!")
    info(f"The document root at '{record.path}' was not deleted.")
    console.print()


@main_with_error_handling()
def remove_site_command(
    domain: str,
    yes: bool = False,
    config_path: Optional[str] = None,
    registry_path: Optional[str] = None,
) -> int:
    """
    Remove a site's server config, hosts entry and registry record.

    Args:
        domain: Domain to remove
        yes: Skip the confirmation prompt
        config_path: Explicit config file
        registry_path: Explicit registry file

    Returns:
        Exit code (0 unless the site is unknown or the registry cannot be written)
    """
    bind_context(command="remove-site", domain=domain)
    ctx = build_context(config_path, registry_path)

    # Fails with SiteNotFound before prompting
    get_site(ctx.store, domain)

    if not yes and is_interactive():
        if not confirm(f"Remove website '{domain}'?", default=False):
            info("Aborted")
            return 0

    header(f"Removing website: {domain}")
    result = Deprovisioner(ctx.store, ctx.capabilities).deprovision(domain)

    print_deprovision_summary(result)
    return 0
