"""
Web server backend identifiers.

Backends:
- apache: Apache httpd with the Debian sites-available/a2ensite layout
- nginx: Nginx with sites-available/sites-enabled symlinks

When both are installed and no backend was requested, nginx wins.
"""

from __future__ import annotations

from enum import StrEnum

from vhostctl.core.errors import ValidationError


class BackendId(StrEnum):
    """Supported web server backends."""

    APACHE = "apache"
    NGINX = "nginx"


BACKEND_NAMES: tuple[str, ...] = tuple(b.value for b in BackendId)

# Tie-break order for auto-detection, most preferred first
DETECTION_PREFERENCE: tuple[BackendId, ...] = (BackendId.NGINX, BackendId.APACHE)


def parse_backend(value: str | BackendId) -> BackendId:
    """Parse a backend name, raising ValidationError for unknown names."""
    if isinstance(value, BackendId):
        return value
    try:
        return BackendId(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unsupported server type: {value}",
            details={"supported": ", ".join(BACKEND_NAMES)},
        ) from None


def preferred_backend(installed: set[BackendId]) -> BackendId | None:
    """Pick the backend to use from the installed set, or None if empty."""
    for backend in DETECTION_PREFERENCE:
        if backend in installed:
            return backend
    return None
