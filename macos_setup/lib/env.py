from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    config_default: str = str(Path.home() / ".macos-setup.cfg")
    log_default: str = str(Path.home() / "Library" / "Logs" / "macos-setup.log")
    homebrew_prefix: str = "/opt/homebrew"
    applications: str = "/Applications"
    # Where Dock items are looked up, in order.
    app_search_dirs: tuple[str, ...] = field(
        default=(
            "/Applications",
            "/System/Applications",
            "/Applications/Utilities",
        )
    )


PATHS = Paths()
