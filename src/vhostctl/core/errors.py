"""
Error types and exit codes.

Every failure a command can report is a ``VhostctlError`` carrying the exit
code the process should end with:

    0    success, including runs where best-effort steps warned
    10   configuration file missing or invalid
    11   external provider failed (web server, certificate, hosts file)
    12   invalid input (domain, document root, backend name)
    13   site not in the registry
    14   registry unreadable or unwritable
    130  interrupted
    127  anything else
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    NOT_FOUND = 13
    REGISTRY_ERROR = 14
    INTERRUPTED = 130
    UNKNOWN_ERROR = 127


class VhostctlError(Exception):
    """Base class for errors reported to the user."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(VhostctlError):
    exit_code = ExitCode.CONFIG_ERROR


class ValidationError(VhostctlError):
    """Bad domain, missing document root or unknown backend."""

    exit_code = ExitCode.VALIDATION_ERROR


class ProviderError(VhostctlError):
    """A system-facing provider could not do its job."""

    exit_code = ExitCode.PROVIDER_ERROR


class CommandError(ProviderError):
    """External command missing, timed out or exited non-zero."""


class NoServerDetected(ProviderError):
    pass


class CertificateSetupFailed(ProviderError):
    pass


class ServerConfigFailed(ProviderError):
    pass


class HostsFileError(ProviderError):
    """Hosts file could not be read, backed up or written."""


class SiteNotFound(VhostctlError):
    exit_code = ExitCode.NOT_FOUND


class RegistryError(VhostctlError):
    exit_code = ExitCode.REGISTRY_ERROR


class RegistryCorrupt(RegistryError):
    """Registry file exists but is not a valid site list."""


class RegistryIOError(RegistryError):
    """Registry file could not be read or replaced."""


Command = TypeVar("Command", bound=Callable[..., int])


def format_error_message(error: VhostctlError) -> str:
    """Message plus ``key=value`` details for the terminal."""
    if not error.details:
        return error.message
    details = ", ".join(f"{key}={value}" for key, value in error.details.items())
    return f"{error.message} ({details})"


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[Command], Command]:
    """
    Wrap a command so that it always returns an exit code.

    ``VhostctlError`` is printed and mapped to its ``exit_code``; Ctrl-C
    maps to 130 and anything else to 127.

        @main_with_error_handling()
        def list_sites_command() -> int:
            ...
    """

    def decorate(command: Command) -> Command:
        @functools.wraps(command)
        def run(*args: Any, **kwargs: Any) -> int:
            from vhostctl.cli.ux import error as print_error

            try:
                return command(*args, **kwargs)
            except VhostctlError as e:
                if log_errors:
                    logger.error(
                        "command_failed",
                        error_type=type(e).__name__,
                        exit_code=int(e.exit_code),
                        message=e.message,
                        **e.details,
                    )
                print_error(format_error_message(e))
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                print_error("Interrupted")
                return ExitCode.INTERRUPTED
            except Exception as e:
                if log_errors:
                    logger.exception("command_crashed", error_type=type(e).__name__)
                print_error(f"Unexpected error: {e}")
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return run  # type: ignore[return-value]

    return decorate
