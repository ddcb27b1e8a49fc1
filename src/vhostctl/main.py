"""
vhostctl - local development virtual hosts

Usage:
    vhostctl <command> [args]

Commands:
    add-site      Provision a site (server config, hosts entry, optional SSL)
    remove-site   Tear a site down (document root is kept)
    list-sites    List registered sites
    show-site     Show one registered site
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from vhostctl.config.settings import get_settings
from vhostctl.core.backends import BACKEND_NAMES
from vhostctl.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vhostctl", description="Provision local development virtual hosts"
    )
    parser.add_argument("--config", dest="config_path", help="Path to config.yaml")
    parser.add_argument("--registry", dest="registry_path", help="Path to the sites registry")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress logs")

    subparsers = parser.add_subparsers(dest="command")

    add_parser = subparsers.add_parser("add-site", help="Provision a website")
    add_parser.add_argument("domain", help="Domain to serve (e.g. blog.test)")
    add_parser.add_argument("path", help="Document root")
    add_parser.add_argument(
        "--server",
        choices=BACKEND_NAMES,
        help="Web server backend (auto-detected when omitted, nginx preferred)",
    )
    add_parser.add_argument("--ssl", action="store_true", help="Serve HTTPS with a mkcert certificate")

    remove_parser = subparsers.add_parser("remove-site", help="Remove a website")
    remove_parser.add_argument("domain", help="Domain to remove")
    remove_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    list_parser = subparsers.add_parser("list-sites", help="List configured websites")
    list_parser.add_argument("--output", choices=["text", "json"], default="text")

    show_parser = subparsers.add_parser("show-site", help="Show a configured website")
    show_parser.add_argument("domain", help="Domain to show")
    show_parser.add_argument("--output", choices=["text", "json"], default="text")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    level = logging.INFO if args.verbose else settings.log_level
    configure_logging(level, json_output=settings.log_json)

    if args.command == "add-site":
        from vhostctl.cli.add_site import add_site_command
        sys.exit(add_site_command(
            domain=args.domain,
            path=args.path,
            server=args.server,
            ssl=args.ssl,
            config_path=args.config_path,
            registry_path=args.registry_path,
        ))

    if args.command == "remove-site":
        from vhostctl.cli.remove_site import remove_site_command
        sys.exit(remove_site_command(
            domain=args.domain,
            yes=args.yes,
            config_path=args.config_path,
            registry_path=args.registry_path,
        ))

    if args.command == "list-sites":
        from vhostctl.cli.list_sites import list_sites_command
        sys.exit(list_sites_command(
            output_format=args.output,
            config_path=args.config_path,
            registry_path=args.registry_path,
        ))

    if args.command == "show-site":
        from vhostctl.cli.list_sites import show_site_command
        sys.exit(show_site_command(
            domain=args.domain,
            output_format=args.output,
            config_path=args.config_path,
            registry_path=args.registry_path,
        ))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
