from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .command import have_command, run_cmd
from .env import PATHS

logger = logging.getLogger(__name__)


def find_app(label: str, search_dirs: Sequence[str] = PATHS.app_search_dirs) -> Optional[str]:
    """Return the first `<label>.app` bundle found in the usual locations."""
    for d in search_dirs:
        p = Path(d) / f"{label}.app"
        if p.is_dir():
            return str(p)
    return None


class DockutilBackend:
    """Dock backend on top of `dockutil`. Changes are applied on the next Dock restart."""

    def __init__(self, search_dirs: Sequence[str] = PATHS.app_search_dirs) -> None:
        self.search_dirs = tuple(search_dirs)

    def is_available(self) -> bool:
        return have_command("dockutil")

    def add(self, label: str) -> str:
        path = find_app(label, self.search_dirs)
        if path is None:
            raise FileNotFoundError(f"Could not find {label}.app in common locations")
        run_cmd(["dockutil", "--add", path, "--no-restart"])
        return path

    def remove(self, label: str) -> None:
        r = run_cmd(["dockutil", "--remove", label, "--no-restart"], check=False)
        if r.returncode != 0:
            raise RuntimeError(f"Could not remove {label} (may not be in Dock)")
