"""
Invoking-user identity.

vhostctl normally runs under sudo, so the process user is root while files
(document roots, mkcert's CA, the registry) belong to the developer who
typed the command. The identity is resolved once per invocation and passed
to the providers that need it.
"""

from __future__ import annotations

import os
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


@dataclass(frozen=True)
class Identity:
    """The human user on whose behalf vhostctl runs."""

    user: str
    home: Path

    def env(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Environment for commands that must run with the user's HOME/USER."""
        env = dict(base if base is not None else os.environ)
        env["HOME"] = str(self.home)
        env["USER"] = self.user
        return env


def _home_for(user: str) -> Path | None:
    try:
        return Path(pwd.getpwnam(user).pw_dir)
    except KeyError:
        return None


def resolve_identity(environ: Mapping[str, str] | None = None) -> Identity:
    """
    Resolve the invoking user.

    Order:
    1. SUDO_USER (home from the passwd database, else /home/<user>)
    2. USER with HOME
    3. root with /root
    """
    environ = os.environ if environ is None else environ

    sudo_user = environ.get("SUDO_USER")
    if sudo_user:
        home = _home_for(sudo_user) or Path("/home") / sudo_user
        return Identity(user=sudo_user, home=home)

    user = environ.get("USER") or "root"
    home_env = environ.get("HOME")
    if home_env:
        return Identity(user=user, home=Path(home_env))
    return Identity(user=user, home=_home_for(user) or Path("/root"))
