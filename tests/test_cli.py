"""Tests for the vhostctl command line."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from vhostctl.config.settings import get_settings
from vhostctl.core.backends import BackendId
from vhostctl.core.errors import CommandError, ExitCode, HostsFileError, ServerConfigFailed
from vhostctl.core.identity import Identity
from vhostctl.main import build_parser, main


@pytest.fixture
def cli_env(tmp_path, monkeypatch, system):
    """Run commands against fakes with the registry under a temp home."""
    for name in ("VHOSTCTL_CONFIG_FILE", "VHOSTCTL_REGISTRY_PATH", "VHOSTCTL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    get_settings.cache_clear()

    home = tmp_path / "home" / "dev"
    home.mkdir(parents=True)
    identity = Identity(user="dev", home=home)

    with patch("vhostctl.cli.context.resolve_identity", return_value=identity), patch(
        "vhostctl.cli.context.build_capabilities", return_value=system.capabilities
    ):
        yield home / ".vhostctl" / "sites.json"

    get_settings.cache_clear()


def run(*argv):
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


class TestParser:
    """Tests for build_parser."""

    def test_add_site_arguments(self):
        args = build_parser().parse_args(
            ["add-site", "blog.test", "/srv/blog", "--server", "nginx", "--ssl"]
        )

        assert args.command == "add-site"
        assert args.domain == "blog.test"
        assert args.path == "/srv/blog"
        assert args.server == "nginx"
        assert args.ssl is True

    def test_global_options(self):
        args = build_parser().parse_args(["--registry", "/tmp/s.json", "-v", "list-sites"])

        assert args.registry_path == "/tmp/s.json"
        assert args.verbose is True
        assert args.output == "text"

    def test_unknown_server_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["add-site", "blog.test", "/srv", "--server", "caddy"])

        assert exc_info.value.code == 2


class TestMain:
    """Tests for command dispatch and exit codes."""

    def test_no_command_prints_help(self, cli_env, capsys):
        assert run() == 1
        assert "usage: vhostctl" in capsys.readouterr().out

    def test_add_site(self, cli_env, system, docroot, capsys):
        code = run("add-site", "blog.test", str(docroot), "--server", "apache")

        assert code == 0
        assert "blog.test" in capsys.readouterr().out
        data = json.loads(cli_env.read_text())
        assert data["sites"] == [
            {
                "domain": "blog.test",
                "path": str(docroot.resolve()),
                "server": "apache",
                "ssl": False,
            }
        ]
        assert "blog.test" in system.apache.sites

    def test_add_site_auto_detects_nginx(self, cli_env, system, docroot):
        assert run("add-site", "blog.test", str(docroot)) == 0

        assert "blog.test" in system.nginx.sites

    def test_add_site_with_permission_warning_succeeds(self, cli_env, system, docroot, capsys):
        """Test best-effort warnings keep a zero exit code."""
        system.permissions.error = CommandError("setfacl failed")

        assert run("add-site", "blog.test", str(docroot)) == 0
        assert "Permission setup failed" in capsys.readouterr().out

    def test_add_site_missing_path(self, cli_env, tmp_path, capsys):
        code = run("add-site", "blog.test", str(tmp_path / "missing"))

        assert code == ExitCode.VALIDATION_ERROR
        assert "Document root does not exist" in capsys.readouterr().out
        assert not cli_env.exists()

    def test_add_site_no_server(self, cli_env, system, docroot):
        system.apache.installed = False
        system.nginx.installed = False

        assert run("add-site", "blog.test", str(docroot)) == ExitCode.PROVIDER_ERROR
        assert not cli_env.exists()

    def test_add_site_server_config_failure(self, cli_env, system, docroot):
        system.nginx.enable_error = ServerConfigFailed("nginx -t failed")

        assert run("add-site", "blog.test", str(docroot)) == ExitCode.PROVIDER_ERROR
        assert not cli_env.exists()

    def test_registry_override(self, cli_env, docroot, tmp_path):
        registry = tmp_path / "custom" / "sites.json"

        assert run("--registry", str(registry), "add-site", "blog.test", str(docroot)) == 0

        assert registry.exists()
        assert not cli_env.exists()

    def test_list_sites_empty(self, cli_env, capsys):
        assert run("list-sites") == 0
        assert "No websites configured yet." in capsys.readouterr().out

    def test_list_sites_json(self, cli_env, docroot, capsys):
        run("add-site", "b.test", str(docroot), "--server", "nginx")
        run("add-site", "a.test", str(docroot), "--server", "apache", "--ssl")
        capsys.readouterr()

        assert run("list-sites", "--output", "json") == 0

        data = json.loads(capsys.readouterr().out)
        assert [s["domain"] for s in data["sites"]] == ["b.test", "a.test"]
        assert data["total"] == 2
        assert data["php_version"] == "8.3"
        assert data["sites"][1]["ssl"] is True

    def test_show_site(self, cli_env, docroot, capsys):
        run("add-site", "blog.test", str(docroot), "--server", "nginx", "--ssl")
        capsys.readouterr()

        assert run("show-site", "blog.test", "--output", "json") == 0

        data = json.loads(capsys.readouterr().out)
        assert data["server"] == "nginx"
        assert data["ssl"] is True

    def test_show_unknown_site(self, cli_env, capsys):
        assert run("show-site", "ghost.test") == ExitCode.NOT_FOUND
        assert "Website 'ghost.test' not found." in capsys.readouterr().out

    def test_remove_site(self, cli_env, system, docroot, capsys):
        run("add-site", "blog.test", str(docroot), "--server", "nginx")
        capsys.readouterr()

        assert run("remove-site", "blog.test", "--yes") == 0

        assert json.loads(cli_env.read_text())["sites"] == []
        assert "blog.test" not in system.hosts.entries
        assert docroot.is_dir()
        assert "deleted" in capsys.readouterr().out

    def test_remove_site_hosts_failure_still_succeeds(self, cli_env, system, docroot):
        run("add-site", "blog.test", str(docroot), "--server", "nginx")
        system.hosts.remove_error = HostsFileError("Permission denied")

        assert run("remove-site", "blog.test", "--yes") == 0
        assert json.loads(cli_env.read_text())["sites"] == []

    def test_remove_unknown_site(self, cli_env, system):
        assert run("remove-site", "ghost.test", "--yes") == ExitCode.NOT_FOUND
        assert system.journal == []

    def test_remove_site_declined(self, cli_env, system, docroot):
        """Test declining the prompt leaves the site in place."""
        run("add-site", "blog.test", str(docroot), "--server", "nginx")
        system.journal.clear()

        with patch("vhostctl.cli.remove_site.is_interactive", return_value=True), patch(
            "vhostctl.cli.remove_site.confirm", return_value=False
        ) as confirm:
            assert run("remove-site", "blog.test") == 0

        confirm.assert_called_once()
        assert system.journal == []
        assert len(json.loads(cli_env.read_text())["sites"]) == 1

    def test_corrupt_registry(self, cli_env):
        cli_env.parent.mkdir(parents=True)
        cli_env.write_text("{oops")

        assert run("list-sites") == ExitCode.REGISTRY_ERROR
        assert cli_env.read_text() == "{oops"

    def test_missing_config_file(self, cli_env, tmp_path):
        assert run("--config", str(tmp_path / "nope.yaml"), "list-sites") == ExitCode.CONFIG_ERROR

    def test_config_file_registry_path(self, cli_env, docroot, tmp_path):
        registry = tmp_path / "from-config.json"
        config = tmp_path / "config.yaml"
        config.write_text(f"registry_path: {registry}\n")

        assert run("--config", str(config), "add-site", "blog.test", str(docroot)) == 0
        assert Path(registry).exists()

    def test_registry_path_from_environment(self, cli_env, docroot, tmp_path, monkeypatch):
        registry = tmp_path / "env.json"
        monkeypatch.setenv("VHOSTCTL_REGISTRY_PATH", str(registry))
        get_settings.cache_clear()

        assert run("add-site", "blog.test", str(docroot)) == 0
        assert registry.exists()


class TestBackendChoices:
    """Tests that every backend is exposed on the command line."""

    def test_all_backends_accepted(self):
        parser = build_parser()
        for backend in BackendId:
            args = parser.parse_args(["add-site", "a.test", "/srv", "--server", backend.value])
            assert args.server == backend.value
