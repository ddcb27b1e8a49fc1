"""
CLI command for provisioning a site.
"""

from pathlib import Path
from typing import Optional

from vhostctl.cli.context import build_context
from vhostctl.cli.ux import console, header, spinner, step_line, success, warning
from vhostctl.core.backends import parse_backend
from vhostctl.core.errors import main_with_error_handling
from vhostctl.logging import bind_context
from vhostctl.orchestration.provision import Provisioner, SiteIntent
from vhostctl.orchestration.results import ProvisionResult

STEP_LABELS = {
    "resolve-backend": "Server",
    "permissions": "Permissions",
    "certificate": "SSL",
    "server-config": "Config",
    "hosts-entry": "Hosts",
    "registry-commit": "Registry",
}


def print_provision_summary(result: ProvisionResult) -> None:
    """Print the per-step outcome and the site URL."""
    record = result.record
    console.print()

    for step, status in result.steps.items():
        step_line(STEP_LABELS.get(step, step), status)

    console.print()
    scheme = "https" if record.ssl else "http"
    success(f"Website {record.domain} is ready on {record.server.value}")
    console.print(f"   [url]{scheme}://{record.domain}[/url] → {record.path}")

    if result.cert_paths is not None:
        console.print(f"   [muted]cert: {result.cert_paths.cert_file}[/muted]")
        console.print(f"   [muted]key:  {result.cert_paths.key_file}[/muted]")

    if result.warnings:
        console.print()
        for message in result.warnings:
            warning(message)

    console.print()


@main_with_error_handling()
def add_site_command(
    domain: str,
    path: str,
    server: Optional[str] = None,
    ssl: bool = False,
    config_path: Optional[str] = None,
    registry_path: Optional[str] = None,
) -> int:
    """
    Provision a site: permissions, certificate, server config, hosts entry.

    Args:
        domain: Domain to serve (e.g. blog.test)
        path: Document root
        server: apache or nginx; auto-detected when omitted
        ssl: Issue a locally-trusted certificate and serve HTTPS
        config_path: Explicit config file
        registry_path: Explicit registry file

    Returns:
        Exit code (0 for success, including best-effort warnings)
    """
    bind_context(command="add-site", domain=domain)
    ctx = build_context(config_path, registry_path)

    intent = SiteIntent(
        domain=domain,
        path=Path(path),
        server=parse_backend(server) if server else None,
        ssl=ssl,
    )

    header(f"Adding website: {domain}")
    with spinner(f"Provisioning {domain}..."):
        result = Provisioner(ctx.store, ctx.capabilities).provision(intent)

    print_provision_summary(result)
    return 0
