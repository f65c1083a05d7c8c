from __future__ import annotations

import logging
from typing import List

from .command import run_cmd
from .download import download_app

logger = logging.getLogger(__name__)


def parse_recommended_updates(listing: str) -> List[str]:
    """Pick the recommended entries out of `softwareupdate -l` output.

    Each update is a `* Label: ...` line followed by a details line that
    carries `Recommended: YES`.
    """

    updates: List[str] = []
    label = None
    for raw in listing.splitlines():
        line = raw.strip()
        if line.startswith("* Label:"):
            label = line[len("* Label:"):].strip()
        elif line.startswith("*"):
            label = line.lstrip("* ").strip()
        elif label and "recommended: yes" in line.lower():
            updates.append(label)
            label = None
    return updates


def local_host_name(name: str) -> str:
    return name.replace(" ", "-")


class MacSystemBackend:
    """softwareupdate, scutil, killall, open and one-off app downloads."""

    def pending_updates(self) -> List[str]:
        r = run_cmd(["softwareupdate", "-l"], check=False)
        return parse_recommended_updates(r.stdout + "\n" + r.stderr)

    def install_updates(self) -> None:
        run_cmd(["sudo", "softwareupdate", "-i", "-a"], capture=False)

    def set_computer_name(self, name: str) -> None:
        run_cmd(["sudo", "scutil", "--set", "ComputerName", name])
        run_cmd(["sudo", "scutil", "--set", "HostName", name])
        run_cmd(["sudo", "scutil", "--set", "LocalHostName", local_host_name(name)])

    def restart_service(self, name: str) -> None:
        run_cmd(["killall", name])

    def open_url(self, url: str) -> None:
        run_cmd(["open", url])

    def download_app(self, url: str, bundle: str) -> str:
        return download_app(url, bundle)
