"""
Running external commands.

Every provider shells out through a ``CommandRunner`` so tests can swap in
a recorder instead of touching the real system.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Callable, Mapping, Sequence

import structlog

from vhostctl.core.errors import CommandError

logger = structlog.get_logger()

CommandRunner = Callable[..., subprocess.CompletedProcess]


def run_command(
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = 120,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a command and capture its output.

    Args:
        args: Command and arguments (never passed through a shell)
        env: Full environment for the child process
        timeout: Seconds before the command is killed
        check: Raise CommandError on a non-zero exit status

    Raises:
        CommandError: If the command is missing, times out, or fails with check=True
    """
    cmd = [str(a) for a in args]
    logger.debug("running_command", command=" ".join(cmd))

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=dict(env) if env is not None else None,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandError(
            f"Command not found: {cmd[0]}", details={"command": " ".join(cmd)}
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(
            f"Command timed out after {timeout}s: {cmd[0]}",
            details={"command": " ".join(cmd)},
        ) from e

    if check and proc.returncode != 0:
        raise CommandError(
            f"Command failed: {' '.join(cmd)}",
            details={
                "returncode": proc.returncode,
                "stderr": (proc.stderr or "").strip()[:500],
            },
        )
    return proc


def which(name: str) -> str | None:
    """Locate an executable on PATH."""
    return shutil.which(name)
