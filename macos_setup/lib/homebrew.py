from __future__ import annotations

import getpass
import logging
import os
import platform
from pathlib import Path
from typing import Sequence

from .command import have_command, run_cmd
from .env import PATHS

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

# Directories brew needs to write to when the prefix is owned by another user.
_WRITABLE_DIRS = (
    "",
    "etc/bash_completion.d",
    "share/doc",
    "share/man",
    "share/man/man1",
    "share/zsh",
    "share/zsh/site-functions",
    "var/homebrew/locks",
)


class HomebrewBackend:
    """Package backend on top of the `brew` CLI."""

    def __init__(self, prefix: str = PATHS.homebrew_prefix) -> None:
        self.prefix = prefix

    def is_available(self) -> bool:
        return have_command("brew")

    def bootstrap(self) -> None:
        """Run the official installer and put brew on PATH for this process."""
        script = run_cmd(["curl", "-fsSL", INSTALL_SCRIPT_URL]).stdout
        run_cmd(["/bin/bash", "-c", script], capture=False)

        if platform.machine() == "arm64":
            zprofile = Path.home() / ".zprofile"
            line = f'eval "$({self.prefix}/bin/brew shellenv)"\n'
            existing = zprofile.read_text(encoding="utf-8") if zprofile.exists() else ""
            if line not in existing:
                with zprofile.open("a", encoding="utf-8") as f:
                    f.write(line)
            os.environ["PATH"] = f"{self.prefix}/bin:{self.prefix}/sbin:" + os.environ.get("PATH", "")

    def update(self) -> None:
        run_cmd(["brew", "update"], capture=False)

    def needs_permission_fix(self) -> bool:
        p = Path(self.prefix)
        return p.is_dir() and not os.access(p, os.W_OK)

    def fix_permissions(self) -> None:
        user = getpass.getuser()
        run_cmd(["sudo", "chown", "-R", user, self.prefix], capture=False)
        dirs = [str(Path(self.prefix) / d) if d else self.prefix for d in _WRITABLE_DIRS]
        run_cmd(["chmod", "u+w", *dirs], check=False)

    def install(self, name: str, *, cask: bool = True) -> None:
        argv: Sequence[str] = ["brew", "install", "--cask", name] if cask else ["brew", "install", name]
        run_cmd(argv, capture=False)

    def uninstall(self, name: str, *, cask: bool = True) -> None:
        argv: Sequence[str] = ["brew", "uninstall", "--cask", name] if cask else ["brew", "uninstall", name]
        run_cmd(argv, capture=False)
