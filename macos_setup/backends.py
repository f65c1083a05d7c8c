"""Capability interfaces for everything that touches the machine.

Production adapters live in `lib/` and shell out; tests pass in-memory
fakes with the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol


class PackageBackend(Protocol):
    def is_available(self) -> bool:
        ...

    def bootstrap(self) -> None:
        ...

    def update(self) -> None:
        ...

    def needs_permission_fix(self) -> bool:
        ...

    def fix_permissions(self) -> None:
        ...

    def install(self, name: str, *, cask: bool = True) -> None:
        ...

    def uninstall(self, name: str, *, cask: bool = True) -> None:
        ...


class PreferenceBackend(Protocol):
    def write(self, domain: str, name: str, type_: str, value: Any, *, current_host: bool = False) -> None:
        ...


class DockBackend(Protocol):
    def is_available(self) -> bool:
        ...

    def add(self, label: str) -> str:
        ...

    def remove(self, label: str) -> None:
        ...


class SystemBackend(Protocol):
    def pending_updates(self) -> List[str]:
        ...

    def install_updates(self) -> None:
        ...

    def set_computer_name(self, name: str) -> None:
        ...

    def restart_service(self, name: str) -> None:
        ...

    def open_url(self, url: str) -> None:
        ...

    def download_app(self, url: str, bundle: str) -> str:
        ...


@dataclass(frozen=True)
class Capabilities:
    package_manager: bool
    dock_tool: bool


@dataclass(frozen=True)
class Backends:
    packages: PackageBackend
    preferences: PreferenceBackend
    dock: DockBackend
    system: SystemBackend

    def capabilities(self) -> Capabilities:
        return Capabilities(
            package_manager=self.packages.is_available(),
            dock_tool=self.dock.is_available(),
        )


def real_backends() -> Backends:
    from .lib.defaults import DefaultsBackend
    from .lib.dockutil import DockutilBackend
    from .lib.homebrew import HomebrewBackend
    from .lib.system import MacSystemBackend

    return Backends(
        packages=HomebrewBackend(),
        preferences=DefaultsBackend(),
        dock=DockutilBackend(),
        system=MacSystemBackend(),
    )
