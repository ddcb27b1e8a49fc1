"""
CLI commands for vhostctl.
"""

from vhostctl.cli.add_site import add_site_command
from vhostctl.cli.list_sites import list_sites_command, show_site_command
from vhostctl.cli.remove_site import remove_site_command

__all__ = [
    "add_site_command",
    "remove_site_command",
    "list_sites_command",
    "show_site_command",
]
