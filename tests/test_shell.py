"""Tests for providers/shell.py and providers/php.py."""

import os
import subprocess
import sys
from unittest.mock import patch

import pytest

from vhostctl.core.errors import CommandError
from vhostctl.providers.php import PhpCli
from vhostctl.providers.shell import run_command


class TestRunCommand:
    """Tests for run_command."""

    def test_captures_output(self):
        proc = run_command([sys.executable, "-c", "print('hello')"])

        assert proc.returncode == 0
        assert proc.stdout.strip() == "hello"

    def test_nonzero_exit_raises(self):
        with pytest.raises(CommandError) as exc_info:
            run_command(
                [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
            )

        assert exc_info.value.details["returncode"] == 3
        assert exc_info.value.details["stderr"] == "bad"

    def test_nonzero_exit_without_check(self):
        proc = run_command([sys.executable, "-c", "import sys; sys.exit(3)"], check=False)

        assert proc.returncode == 3

    def test_missing_binary_raises(self):
        with pytest.raises(CommandError, match="Command not found"):
            run_command(["vhostctl-no-such-binary"])

    def test_timeout_raises(self):
        with patch(
            "vhostctl.providers.shell.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="nginx", timeout=1),
        ):
            with pytest.raises(CommandError, match="timed out"):
                run_command(["nginx", "-t"], timeout=1)

    def test_passes_environment(self):
        proc = run_command(
            [sys.executable, "-c", "import os; print(os.environ['HOME'])"],
            env={**os.environ, "HOME": "/home/dev"},
        )

        assert proc.stdout.strip() == "/home/dev"


class TestPhpCli:
    """Tests for PhpCli."""

    def test_version(self, runner):
        runner.outputs[("php",)] = "8.3\n"
        php = PhpCli(runner=runner)

        assert php.version() == "8.3"

    def test_version_is_probed_once(self, runner):
        runner.outputs[("php",)] = "8.2"
        php = PhpCli(runner=runner)

        php.version()
        php.version()

        assert len(runner.commands("php")) == 1

    def test_missing_php(self, runner):
        runner.fail("php", message="Command not found: php")
        php = PhpCli(runner=runner)

        assert php.version() is None
        assert php.version() is None
        assert len(runner.commands("php")) == 1

    def test_socket_path(self, runner, tmp_path):
        runner.outputs[("php",)] = "8.1"
        php = PhpCli(socket_dir=tmp_path, runner=runner)

        assert php.socket_path() == tmp_path / "php8.1-fpm.sock"

    def test_socket_path_without_php(self, runner, tmp_path):
        runner.fail("php")
        php = PhpCli(socket_dir=tmp_path, runner=runner)

        assert php.socket_path() == tmp_path / "php-fpm.sock"
