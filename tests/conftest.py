"""Root test configuration and in-memory capability providers."""

import logging
import subprocess
from pathlib import Path

import pytest
import structlog

from vhostctl.core.backends import BackendId
from vhostctl.core.errors import CommandError
from vhostctl.providers.base import CertPaths
from vhostctl.providers.factory import Capabilities
from vhostctl.providers.registry import ConfiguratorRegistry
from vhostctl.registry.store import RegistryStore


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakeHosts:
    def __init__(self, journal):
        self.journal = journal
        self.entries = {}
        self.add_error = None
        self.remove_error = None

    def add_entry(self, domain, ip="127.0.0.1"):
        self.journal.append(("hosts.add", domain))
        if self.add_error:
            raise self.add_error
        if domain in self.entries:
            return f"Entry for {domain} already exists"
        self.entries[domain] = ip
        return f"Added {domain} to hosts file"

    def remove_entry(self, domain):
        self.journal.append(("hosts.remove", domain))
        if self.remove_error:
            raise self.remove_error
        if self.entries.pop(domain, None) is None:
            return f"No entry found for {domain}"
        return f"Removed {domain} from hosts file"


class FakeCerts:
    def __init__(self, journal, cert_dir):
        self.journal = journal
        self.cert_dir = Path(cert_dir)
        self.error = None

    def setup_ssl(self, domain):
        self.journal.append(("certs.setup", domain))
        if self.error:
            raise self.error
        return CertPaths(
            cert_file=self.cert_dir / f"{domain}.pem",
            key_file=self.cert_dir / f"{domain}-key.pem",
        )


class FakePermissions:
    def __init__(self, journal):
        self.journal = journal
        self.error = None

    def fix_permissions(self, path, server):
        self.journal.append(("permissions.fix", str(path), server))
        if self.error:
            raise self.error


class FakeConfigurator:
    def __init__(self, backend, journal, installed=True):
        self._backend = backend
        self.journal = journal
        self.installed = installed
        self.sites = {}
        self.enable_error = None
        self.disable_error = None

    @property
    def backend(self):
        return self._backend

    def is_installed(self):
        return self.installed

    def enable_site(self, domain, path, ssl, cert_paths=None):
        self.journal.append((f"{self._backend.value}.enable", domain))
        if self.enable_error:
            raise self.enable_error
        self.sites[domain] = {"path": Path(path), "ssl": ssl, "cert_paths": cert_paths}

    def disable_site(self, domain, server):
        self.journal.append((f"{self._backend.value}.disable", domain))
        if self.disable_error:
            raise self.disable_error
        self.sites.pop(domain, None)


class FakePhp:
    def __init__(self, version="8.3"):
        self._version = version

    def version(self):
        return self._version


class FakeSystem:
    """Bundle of fakes sharing one call journal."""

    def __init__(self, tmp_path):
        self.journal = []
        self.hosts = FakeHosts(self.journal)
        self.certs = FakeCerts(self.journal, tmp_path / "certs")
        self.permissions = FakePermissions(self.journal)
        self.apache = FakeConfigurator(BackendId.APACHE, self.journal)
        self.nginx = FakeConfigurator(BackendId.NGINX, self.journal)
        self.php = FakePhp()

    @property
    def capabilities(self):
        return Capabilities(
            hosts=self.hosts,
            certs=self.certs,
            permissions=self.permissions,
            configurators=ConfiguratorRegistry([self.apache, self.nginx]),
            php=self.php,
        )

    def calls(self, prefix):
        return [c for c in self.journal if c[0].startswith(prefix)]


@pytest.fixture
def system(tmp_path):
    """Fake capability providers recording every call."""
    return FakeSystem(tmp_path)


@pytest.fixture
def store(tmp_path):
    """Registry store in a temp directory."""
    return RegistryStore(tmp_path / "registry" / "sites.json")


@pytest.fixture
def docroot(tmp_path):
    """An existing document root."""
    path = tmp_path / "www" / "blog"
    path.mkdir(parents=True)
    return path


class RecordingRunner:
    """CommandRunner that records commands instead of running them.

    ``failures`` maps a command prefix (tuple) to the CommandError it raises,
    ``outputs`` maps a prefix to the stdout it returns.
    """

    def __init__(self):
        self.calls = []
        self.envs = []
        self.failures = {}
        self.outputs = {}

    def __call__(self, args, *, env=None, timeout=None, check=True):
        args = [str(a) for a in args]
        self.calls.append(args)
        self.envs.append(env)
        for prefix, error in self.failures.items():
            if tuple(args[: len(prefix)]) == prefix:
                raise error
        stdout = ""
        for prefix, output in self.outputs.items():
            if tuple(args[: len(prefix)]) == prefix:
                stdout = output
        return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")

    def fail(self, *prefix, message="command failed"):
        self.failures[prefix] = CommandError(message, {"returncode": 1})

    def commands(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def runner():
    """Recording command runner."""
    return RecordingRunner()
