"""Planned side effects.

Each action is a small immutable record with a `run(ctx)` that realizes it
through the backends and returns a short detail string. An action may name a
capability it `provides` (Homebrew, dockutil) or `requires`; when the
provider fails, the executor skips the dependents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple

from .catalog import PreferenceWrite, is_affirmative
from .session import declines

if TYPE_CHECKING:
    from .executor import ExecutionContext

logger = logging.getLogger(__name__)

HOMEBREW = "homebrew"
DOCKUTIL = "dockutil"

PREFERENCES_STAGE = "Configuring System Preferences"


class Action:
    provides: Optional[str] = None
    requires: Optional[str] = None
    grouped_summary = False
    # Heading the executor prints when the stage changes.
    stage: Optional[str] = None

    @property
    def action_id(self) -> str:
        raise NotImplementedError

    @property
    def description(self) -> str:
        return self.action_id

    def summary_text(self) -> Optional[str]:
        return None

    def run(self, ctx: "ExecutionContext") -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ApplyPreference(Action):
    setting: str
    write: PreferenceWrite
    done: Optional[str] = None
    restarts: Optional[str] = None
    stage: Optional[str] = PREFERENCES_STAGE

    @property
    def action_id(self) -> str:
        host = "currentHost:" if self.write.current_host else ""
        return f"preference:{host}{self.write.domain}:{self.write.name}"

    @property
    def description(self) -> str:
        return f"{self.write.domain} {self.write.name} = {self.write.value}"

    def summary_text(self) -> Optional[str]:
        return self.done

    def run(self, ctx: "ExecutionContext") -> str:
        w = self.write
        ctx.backends.preferences.write(w.domain, w.name, w.type, w.value, current_host=w.current_host)
        if self.done:
            ctx.console.success(self.done)
        return f"wrote {self.description}"


@dataclass(frozen=True)
class ToggleDockAutohide(Action):
    enabled: bool = True
    restarts: Optional[str] = "Dock"
    stage = PREFERENCES_STAGE

    @property
    def action_id(self) -> str:
        return "dock:autohide"

    def summary_text(self) -> Optional[str]:
        return "Dock set to auto-hide" if self.enabled else "Dock auto-hide disabled"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info("Setting Dock to auto-hide...")
        ctx.backends.preferences.write("com.apple.dock", "autohide", "bool", self.enabled)
        ctx.console.success("Dock auto-hide enabled" if self.enabled else "Dock auto-hide disabled")
        return "autohide written"


@dataclass(frozen=True)
class EnsurePackageManager(Action):
    provides: Optional[str] = HOMEBREW
    stage = "Setting up Homebrew"

    @property
    def action_id(self) -> str:
        return "homebrew:setup"

    def run(self, ctx: "ExecutionContext") -> str:
        packages = ctx.backends.packages
        if not packages.is_available():
            ctx.console.info("Installing Homebrew...")
            packages.bootstrap()
            if not packages.is_available():
                raise RuntimeError("Homebrew installation did not put `brew` on PATH")
            ctx.console.success("Homebrew installed")
            return "installed"

        # brew is present from here on. Maintenance failures are warnings and
        # never cost the dependents their package manager.
        ctx.console.info("Homebrew already installed, updating...")
        if packages.needs_permission_fix():
            ctx.console.warning("Homebrew permission issue detected")
            answer = ctx.ask("Fix Homebrew permissions for current user? [Y/n]", "y")
            if declines(answer):
                ctx.console.warning("Skipping permission fix - you may encounter errors during installation")
            else:
                ctx.console.info("Fixing Homebrew permissions...")
                try:
                    packages.fix_permissions()
                except RuntimeError as e:
                    logger.warning("Homebrew permission fix failed: %s", e)
                    ctx.console.warning(f"Could not fix Homebrew permissions: {e}")
                else:
                    ctx.console.success("Homebrew permissions fixed")

        try:
            packages.update()
        except RuntimeError as e:
            logger.warning("brew update failed: %s", e)
            ctx.console.warning(f"Homebrew update failed, continuing with installed formulae: {e}")
            return "available, update failed"
        return "updated"


@dataclass(frozen=True)
class InstallPackage(Action):
    name: str
    cask: bool = True
    provides: Optional[str] = None
    requires: Optional[str] = HOMEBREW

    @property
    def action_id(self) -> str:
        return f"install:{self.name}"

    @property
    def grouped_summary(self) -> bool:  # type: ignore[override]
        return self.cask

    @property
    def stage(self) -> str:  # type: ignore[override]
        return "Installing Applications via Homebrew" if self.cask else "Customizing Dock"

    def summary_text(self) -> Optional[str]:
        return None if self.cask else f"{self.name} installed"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Installing {self.name}...")
        ctx.backends.packages.install(self.name, cask=self.cask)
        ctx.console.success(f"{self.name} installed")
        return "installed"


@dataclass(frozen=True)
class RemovePackage(Action):
    name: str
    cask: bool = True
    requires: Optional[str] = HOMEBREW
    stage = "Removing Applications"

    @property
    def action_id(self) -> str:
        return f"uninstall:{self.name}"

    def summary_text(self) -> Optional[str]:
        return f"Removed {self.name}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Removing {self.name}...")
        ctx.backends.packages.uninstall(self.name, cask=self.cask)
        ctx.console.success(f"{self.name} removed")
        return "removed"


@dataclass(frozen=True)
class InstallDownloadedApp(Action):
    name: str
    url: str
    bundle: str
    done: Optional[str] = None
    stage = "Installing Special Applications"

    @property
    def action_id(self) -> str:
        return f"download:{self.name}"

    def summary_text(self) -> Optional[str]:
        return self.done or f"Installed {self.bundle}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Downloading and installing {self.bundle}...")
        dst = ctx.backends.system.download_app(self.url, self.bundle)
        ctx.console.success(f"{self.bundle} installed to Applications")
        return dst


@dataclass(frozen=True)
class SetComputerName(Action):
    name: str
    stage = "Setting Computer Name"

    @property
    def action_id(self) -> str:
        return "computer-name"

    def summary_text(self) -> Optional[str]:
        return f"Computer name set to: {self.name}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Setting computer name to '{self.name}'...")
        ctx.backends.system.set_computer_name(self.name)
        ctx.console.success("Computer name set")
        return self.name


@dataclass(frozen=True)
class CheckSystemUpdates(Action):
    stage = "Checking for macOS Updates"

    @property
    def action_id(self) -> str:
        return "softwareupdate"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info("Checking for macOS software updates...")
        updates = ctx.backends.system.pending_updates()
        if not updates:
            ctx.console.success("macOS is up to date")
            return "up to date"

        ctx.console.warning(f"Found {len(updates)} recommended macOS update(s)")
        for label in updates:
            ctx.console.echo(f"  {label}")
        answer = ctx.ask("Install macOS updates now? This may require a restart [y/N]", "n")
        if not is_affirmative(answer):
            ctx.console.info("Skipping macOS updates")
            return f"{len(updates)} pending, skipped"

        ctx.console.info("Installing macOS updates...")
        ctx.backends.system.install_updates()
        ctx.console.success("macOS updates installed")
        ctx.console.warning("You may need to restart your Mac after the script completes")
        return f"{len(updates)} installed"


@dataclass(frozen=True)
class ShowReminder(Action):
    """Print a manual follow-up, optionally offering to open a settings pane."""

    title: str
    lines: Tuple[str, ...] = ()
    open_prompt: Optional[str] = None
    open_url: Optional[str] = None

    @property
    def action_id(self) -> str:
        return f"reminder:{self.title}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.divider()
        ctx.console.info(self.title)
        for line in self.lines:
            ctx.console.echo(line)
        if not (self.open_prompt and self.open_url):
            return "shown"

        ctx.console.echo()
        answer = ctx.ask(self.open_prompt, "n")
        if not is_affirmative(answer):
            return "shown"
        ctx.console.info("Opening settings...")
        ctx.backends.system.open_url(self.open_url)
        return "opened"


@dataclass(frozen=True)
class RemoveDockItem(Action):
    label: str
    requires: Optional[str] = DOCKUTIL
    restarts: Optional[str] = "Dock"
    stage = "Customizing Dock"

    @property
    def action_id(self) -> str:
        return f"dock:remove:{self.label}"

    def summary_text(self) -> Optional[str]:
        return f"Removed from Dock: {self.label}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Removing {self.label} from Dock...")
        ctx.backends.dock.remove(self.label)
        return "removed"


@dataclass(frozen=True)
class AddDockItem(Action):
    label: str
    requires: Optional[str] = DOCKUTIL
    restarts: Optional[str] = "Dock"
    stage = "Customizing Dock"

    @property
    def action_id(self) -> str:
        return f"dock:add:{self.label}"

    def summary_text(self) -> Optional[str]:
        return f"Added to Dock: {self.label}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Adding {self.label} to Dock...")
        path = ctx.backends.dock.add(self.label)
        ctx.console.success(f"{self.label} added to Dock")
        return path


@dataclass(frozen=True)
class RestartService(Action):
    name: str
    stage = "Applying Changes"

    @property
    def action_id(self) -> str:
        return f"restart:{self.name}"

    def run(self, ctx: "ExecutionContext") -> str:
        ctx.console.info(f"Restarting {self.name}...")
        ctx.backends.system.restart_service(self.name)
        ctx.console.success(f"{self.name} restarted")
        return "restarted"


@dataclass(frozen=True)
class SkippedAction(Action):
    """A planned action that cannot run on this machine."""

    action: Any
    reason: str

    @property
    def action_id(self) -> str:
        return self.action.action_id

    @property
    def stage(self) -> Optional[str]:  # type: ignore[override]
        return self.action.stage

    def run(self, ctx: "ExecutionContext") -> str:
        return self.reason
