"""Per-invocation wiring shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vhostctl.config.loader import load_config, resolve_registry_path
from vhostctl.config.models import VhostctlConfig
from vhostctl.config.settings import get_settings
from vhostctl.core.identity import Identity, resolve_identity
from vhostctl.providers.factory import Capabilities, build_capabilities
from vhostctl.registry.store import RegistryStore


@dataclass
class CommandContext:
    """Everything a command needs, resolved once."""

    identity: Identity
    config: VhostctlConfig
    store: RegistryStore
    capabilities: Capabilities


def build_context(
    config_path: str | Path | None = None,
    registry_path: str | Path | None = None,
) -> CommandContext:
    """
    Resolve identity, configuration, registry and providers.

    Explicit arguments win over VHOSTCTL_* environment settings.
    """
    settings = get_settings()
    identity = resolve_identity()
    config = load_config(config_path or settings.config_file, identity=identity)
    store = RegistryStore(
        resolve_registry_path(config, identity, registry_path or settings.registry_path)
    )
    return CommandContext(
        identity=identity,
        config=config,
        store=store,
        capabilities=build_capabilities(config, identity),
    )
