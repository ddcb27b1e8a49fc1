"""Core modules for vhostctl - errors, backend identifiers, identity and file I/O."""

from vhostctl.core.backends import BackendId, parse_backend, preferred_backend
from vhostctl.core.errors import (
    CertificateSetupFailed,
    CommandError,
    ConfigurationError,
    ExitCode,
    HostsFileError,
    NoServerDetected,
    ProviderError,
    RegistryCorrupt,
    RegistryError,
    RegistryIOError,
    ServerConfigFailed,
    SiteNotFound,
    ValidationError,
    VhostctlError,
    format_error_message,
    main_with_error_handling,
)
from vhostctl.core.identity import Identity, resolve_identity

__all__ = [
    # Errors
    "ExitCode",
    "VhostctlError",
    "ConfigurationError",
    "ValidationError",
    "ProviderError",
    "CommandError",
    "NoServerDetected",
    "CertificateSetupFailed",
    "ServerConfigFailed",
    "HostsFileError",
    "SiteNotFound",
    "RegistryError",
    "RegistryCorrupt",
    "RegistryIOError",
    "main_with_error_handling",
    "format_error_message",
    # Backends
    "BackendId",
    "parse_backend",
    "preferred_backend",
    # Identity
    "Identity",
    "resolve_identity",
]
