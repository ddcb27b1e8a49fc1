"""
CLI commands for listing and inspecting registered sites.
"""

import json
from typing import Optional

from vhostctl.cli.context import build_context
from vhostctl.cli.ux import console, header, info, key_values, site_table
from vhostctl.core.errors import main_with_error_handling
from vhostctl.orchestration.query import get_site, list_sites
from vhostctl.orchestration.results import SiteListing
from vhostctl.registry.models import SiteRecord


def print_sites_table(listing: SiteListing) -> None:
    """Print sites with rich formatting."""
    header("Configured Websites")

    if listing.total == 0:
        info("No websites configured yet.")
        console.print(
            "\n  Use: [cyan]vhostctl add-site <domain> <path> "
            "[--server apache|nginx] [--ssl][/cyan]"
        )
        return

    rows = [
        [site.domain, site.server.value, "Yes" if site.ssl else "No", site.path]
        for site in listing.sites
    ]
    site_table(["Domain", "Server", "SSL", "Path"], rows)

    console.print(f"\nTotal: {listing.total} website(s)")
    if listing.php_version:
        console.print(f"PHP: {listing.php_version}")


def print_sites_json(listing: SiteListing) -> None:
    """Print sites in JSON format."""
    output = {
        "sites": [site.to_dict() for site in listing.sites],
        "total": listing.total,
        "php_version": listing.php_version,
    }
    print(json.dumps(output, indent=2))


def print_site(record: SiteRecord, output_format: str = "text") -> None:
    """Print one site."""
    if output_format == "json":
        print(json.dumps(record.to_dict(), indent=2))
        return

    scheme = "https" if record.ssl else "http"
    key_values(
        {
            "Domain": record.domain,
            "URL": f"{scheme}://{record.domain}",
            "Server": record.server.value,
            "SSL": "Yes" if record.ssl else "No",
            "Path": record.path,
        },
        title=record.domain,
    )


@main_with_error_handling()
def list_sites_command(
    output_format: str = "text",
    config_path: Optional[str] = None,
    registry_path: Optional[str] = None,
) -> int:
    """List registered sites in registration order."""
    ctx = build_context(config_path, registry_path)
    listing = list_sites(ctx.store, ctx.capabilities.php)

    if output_format == "json":
        print_sites_json(listing)
    else:
        print_sites_table(listing)
    return 0


@main_with_error_handling()
def show_site_command(
    domain: str,
    output_format: str = "text",
    config_path: Optional[str] = None,
    registry_path: Optional[str] = None,
) -> int:
    """Show one registered site."""
    ctx = build_context(config_path, registry_path)
    print_site(get_site(ctx.store, domain), output_format)
    return 0
