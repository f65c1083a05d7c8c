from __future__ import annotations

import pytest

from macos_setup.actions import (
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
from macos_setup.backends import Capabilities
from macos_setup.catalog import is_affirmative, parse_list
from macos_setup.planner import NO_DOCK_TOOL, plan_for, plan_software, plan_system

ALL_CAPS = Capabilities(package_manager=True, dock_tool=True)


def _all(catalog, value: str) -> dict:
    return {s.key: value for s in catalog.settings if s.kind == "flag"}


@pytest.mark.parametrize(
    "value, expected",
    [("y", True), ("Y", True), (" y ", False), ("y\n", False), ("yes", False), ("n", False), ("", False), ("maybe", False), (None, False)],
)
def test_is_affirmative(value, expected) -> None:
    assert is_affirmative(value) is expected


def test_parse_list_trims_and_drops_empty() -> None:
    assert parse_list(" Safari , Mail,,Photos, ") == ["Safari", "Mail", "Photos"]
    assert parse_list("") == []
    assert parse_list(" , ") == []


def test_software_plan_order(software) -> None:
    settings = _all(software, "n")
    settings.update({"INSTALL_VLC": "y", "INSTALL_CHROME": "Y", "INSTALL_ACRONIS": "y", "COMPUTER_NAME": " Office Mac "})

    plan = plan_software(software, settings)

    assert isinstance(plan[0], CheckSystemUpdates)
    assert isinstance(plan[1], EnsurePackageManager)
    assert plan[2] == InstallPackage(name="google-chrome")
    assert plan[3] == InstallPackage(name="vlc")
    assert isinstance(plan[4], InstallDownloadedApp)
    assert plan[4].bundle == "Acronis Cyber Protect Connect Quick Assist.app"
    assert plan[5] == SetComputerName(name="Office Mac")
    assert [type(a) for a in plan[6:]] == [ShowReminder, ShowReminder]


def test_software_plan_non_y_values_are_no(software) -> None:
    settings = _all(software, "yes")
    plan = plan_software(software, settings)
    assert not [a for a in plan if isinstance(a, (InstallPackage, InstallDownloadedApp))]
    assert not [a for a in plan if isinstance(a, SetComputerName)]


def test_system_plan_nothing_selected_is_empty(system) -> None:
    assert plan_system(system, _all(system, "n"), ALL_CAPS) == []


def test_system_plan_preferences_in_catalog_order(system) -> None:
    settings = _all(system, "n")
    settings.update({"SET_TRACKPAD_CLICK": "y", "DISABLE_STAGE_MANAGER": "y"})

    plan = plan_system(system, settings, ALL_CAPS)

    assert all(isinstance(a, ApplyPreference) for a in plan)
    assert [a.write.domain for a in plan] == [
        "com.apple.AppleMultitouchTrackpad",
        "com.apple.driver.AppleBluetoothMultitouch.trackpad",
        "NSGlobalDomain",
        "NSGlobalDomain",
        "com.apple.WindowManager",
    ]
    assert plan[2].write.current_host is True
    # Only the last write of a setting reports completion.
    assert [a.done is not None for a in plan] == [False, False, False, True, True]


def test_finder_settings_restart_finder_once(system) -> None:
    settings = _all(system, "n")
    settings.update({"SHOW_HIDDEN_FILES": "y", "SHOW_PATH_BAR": "y"})

    plan = plan_system(system, settings, ALL_CAPS)

    assert [a for a in plan if isinstance(a, RestartService)] == [RestartService(name="Finder")]
    assert plan[-1] == RestartService(name="Finder")


def test_dock_restart_deduplicated_and_before_finder(system) -> None:
    settings = _all(system, "n")
    settings.update(
        {
            "SET_DOCK_AUTOHIDE": "y",
            "SHOW_FILE_EXTENSIONS": "y",
            "DOCK_REMOVE_ITEMS": "Safari",
            "DOCK_ADD_ITEMS": "Notes",
        }
    )

    plan = plan_system(system, settings, ALL_CAPS)

    assert plan[0] == ToggleDockAutohide(enabled=True)
    assert plan[-2:] == [RestartService(name="Dock"), RestartService(name="Finder")]
    assert sum(isinstance(a, RestartService) for a in plan) == 2


def test_dock_items_removals_before_additions(system) -> None:
    settings = _all(system, "n")
    settings.update({"DOCK_ADD_ITEMS": "Notes, Mail", "DOCK_REMOVE_ITEMS": "Safari,,Photos"})

    plan = plan_system(system, settings, ALL_CAPS)

    assert plan == [
        RemoveDockItem(label="Safari"),
        RemoveDockItem(label="Photos"),
        AddDockItem(label="Notes"),
        AddDockItem(label="Mail"),
        RestartService(name="Dock"),
    ]


def test_missing_dockutil_installed_through_homebrew(system) -> None:
    settings = _all(system, "n")
    settings["DOCK_ADD_ITEMS"] = "Notes"

    plan = plan_system(system, settings, Capabilities(package_manager=True, dock_tool=False))

    assert plan[0] == InstallPackage(name="dockutil", cask=False, provides="dockutil")
    assert plan[1] == AddDockItem(label="Notes")


def test_dock_items_skipped_without_homebrew(system) -> None:
    settings = _all(system, "n")
    settings.update({"SHOW_PATH_BAR": "y", "DOCK_ADD_ITEMS": "Notes"})

    plan = plan_system(system, settings, Capabilities(package_manager=False, dock_tool=False))

    skipped = [a for a in plan if isinstance(a, SkippedAction)]
    assert skipped == [SkippedAction(action=AddDockItem(label="Notes"), reason=NO_DOCK_TOOL)]
    assert any(isinstance(a, ApplyPreference) for a in plan)
    # A skipped Dock item does not schedule a Dock restart.
    assert [a for a in plan if isinstance(a, RestartService)] == [RestartService(name="Finder")]


def test_plan_for_dispatches_on_tool(software, system) -> None:
    assert isinstance(plan_for(software, {}, ALL_CAPS)[0], CheckSystemUpdates)
    assert plan_for(system, {}, ALL_CAPS) == []


def test_padded_yes_is_not_affirmative(software) -> None:
    settings = _all(software, "n")
    settings.update({"INSTALL_VLC": " y ", "INSTALL_IINA": "y"})

    plan = plan_software(software, settings)

    assert [a.name for a in plan if isinstance(a, InstallPackage)] == ["iina"]


def test_preference_stage_follows_catalog_section(system) -> None:
    settings = _all(system, "n")
    settings.update({"DISABLE_STAGE_MANAGER": "y", "SHOW_PATH_BAR": "y", "ALWAYS_SHOW_SCROLLBARS": "y"})

    plan = plan_system(system, settings, ALL_CAPS)

    prefs = [a for a in plan if isinstance(a, ApplyPreference)]
    assert [(a.write.name, a.stage) for a in prefs] == [
        ("EnableStandardClickToShowDesktop", "Configuring System Preferences"),
        ("ShowPathbar", "Configuring Finder Preferences"),
        ("AppleShowScrollBars", "Configuring Finder Preferences"),
    ]
