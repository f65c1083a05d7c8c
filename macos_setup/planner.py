from __future__ import annotations

import logging
from typing import List, Mapping

from .actions import (
    DOCKUTIL,
    PREFERENCES_STAGE,
    Action,
    AddDockItem,
    ApplyPreference,
    CheckSystemUpdates,
    EnsurePackageManager,
    InstallDownloadedApp,
    InstallPackage,
    RemoveDockItem,
    RestartService,
    SetComputerName,
    ShowReminder,
    SkippedAction,
    ToggleDockAutohide,
)
from .backends import Capabilities
from .catalog import Catalog, is_affirmative, parse_list

logger = logging.getLogger(__name__)

# Restart order when both are needed.
RESTARTABLE = ("Dock", "Finder")

NO_DOCK_TOOL = "Homebrew not found - cannot install dockutil"


def _append_restarts(plan: List[Action]) -> List[Action]:
    """Append one RestartService per service any planned action needs restarted."""

    needed: list[str] = []
    for action in plan:
        if isinstance(action, SkippedAction):
            continue
        service = getattr(action, "restarts", None)
        if service and service not in needed:
            needed.append(service)

    ordered = [s for s in RESTARTABLE if s in needed] + [s for s in needed if s not in RESTARTABLE]
    return plan + [RestartService(name=s) for s in ordered]


def _reminders(catalog: Catalog) -> List[Action]:
    return [
        ShowReminder(
            title=str(r.get("title") or ""),
            lines=tuple(str(line) for line in (r.get("lines") or ())),
            open_prompt=r.get("open_prompt"),
            open_url=r.get("open_url"),
        )
        for r in catalog.reminders
    ]


def plan_software(
    catalog: Catalog,
    settings: Mapping[str, str],
) -> List[Action]:
    """Updates check, Homebrew, catalog apps in catalog order, computer name."""

    plan: List[Action] = [CheckSystemUpdates(), EnsurePackageManager()]
    computer_name = ""

    for setting in catalog.settings:
        value = settings.get(setting.key, "")
        if setting.computer_name:
            computer_name = value.strip()
            continue
        if not is_affirmative(value):
            continue
        if setting.cask:
            plan.append(InstallPackage(name=setting.cask))
        elif setting.download:
            plan.append(
                InstallDownloadedApp(
                    name=setting.key,
                    url=setting.download["url"],
                    bundle=setting.download["bundle"],
                    done=setting.done,
                )
            )

    if computer_name:
        plan.append(SetComputerName(name=computer_name))

    plan.extend(_reminders(catalog))
    return plan


def plan_system(
    catalog: Catalog,
    settings: Mapping[str, str],
    caps: Capabilities,
) -> List[Action]:
    """Preferences in catalog order, then Dock items, then restarts.

    Dock items need dockutil. When it is missing it is installed through
    Homebrew first; without Homebrew the Dock items are planned as skipped
    and everything else still runs.
    """

    plan: List[Action] = []
    removals: List[Action] = []
    additions: List[Action] = []

    stages = {s.key: section.stage for section in catalog.sections for s in section.settings}

    for setting in catalog.settings:
        value = settings.get(setting.key, "")
        if setting.kind == "list":
            items = parse_list(value)
            if setting.dock == "remove":
                removals.extend(RemoveDockItem(label=item) for item in items)
            elif setting.dock == "add":
                additions.extend(AddDockItem(label=item) for item in items)
            continue

        if not is_affirmative(value):
            continue
        if setting.dock_autohide:
            plan.append(ToggleDockAutohide(enabled=True))
            continue
        for i, write in enumerate(setting.writes):
            last = i == len(setting.writes) - 1
            plan.append(
                ApplyPreference(
                    setting=setting.key,
                    write=write,
                    done=setting.done if last else None,
                    restarts=setting.restarts,
                    stage=stages.get(setting.key) or PREFERENCES_STAGE,
                )
            )

    dock_items = removals + additions
    if dock_items:
        if caps.dock_tool:
            plan.extend(dock_items)
        elif caps.package_manager:
            plan.append(InstallPackage(name=DOCKUTIL, cask=False, provides=DOCKUTIL))
            plan.extend(dock_items)
        else:
            logger.warning("Dock customization will be skipped: %s", NO_DOCK_TOOL)
            plan.extend(SkippedAction(action=a, reason=NO_DOCK_TOOL) for a in dock_items)

    return _append_restarts(plan)


def plan_for(catalog: Catalog, settings: Mapping[str, str], caps: Capabilities) -> List[Action]:
    if catalog.tool == "software":
        return plan_software(catalog, settings)
    return plan_system(catalog, settings, caps)
