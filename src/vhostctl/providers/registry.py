from __future__ import annotations

from typing import Dict, Iterable, List, Set

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import ValidationError
from vhostctl.providers.base import ServerConfigurator


class ConfiguratorRegistry:
    """Lookup table from backend to its ServerConfigurator."""

    def __init__(self, configurators: Iterable[ServerConfigurator] = ()) -> None:
        self._configurators: Dict[BackendId, ServerConfigurator] = {}
        for configurator in configurators:
            self.register(configurator)

    def register(self, configurator: ServerConfigurator) -> None:
        self._configurators[configurator.backend] = configurator

    def get(self, backend: BackendId) -> ServerConfigurator:
        configurator = self._configurators.get(backend)
        if configurator is None:
            raise ValidationError(f"No configurator registered for server '{backend}'")
        return configurator

    def list(self) -> List[ServerConfigurator]:
        return list(self._configurators.values())

    def detect_installed(self) -> Set[BackendId]:
        return detect_installed(self._configurators.values())


def detect_installed(configurators: Iterable[ServerConfigurator]) -> Set[BackendId]:
    """Backends whose server binary is present on this machine."""
    return {c.backend for c in configurators if c.is_installed()}
