from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .lib.manifests import load_tool_manifest

KINDS = {"flag", "text", "list"}
TOOLS = ("software", "system")


@dataclass(frozen=True)
class PreferenceWrite:
    """One `defaults write` call."""

    domain: str
    name: str
    type: str
    value: Any
    current_host: bool = False


@dataclass(frozen=True)
class Setting:
    key: str
    owner: str
    kind: str
    prompt: str
    summary: str
    default: str = ""
    done: Optional[str] = None
    cask: Optional[str] = None
    download: Optional[Dict[str, str]] = None
    computer_name: bool = False
    dock_autohide: bool = False
    dock: Optional[str] = None
    restarts: Optional[str] = None
    writes: Tuple[PreferenceWrite, ...] = ()


@dataclass(frozen=True)
class Section:
    settings: Tuple[Setting, ...]
    heading: Optional[str] = None
    hint: Optional[str] = None
    # Executor heading for the actions this section plans.
    stage: Optional[str] = None


@dataclass(frozen=True)
class Catalog:
    tool: str
    title: str
    version: str
    banner: str
    subject: str
    verb: str
    sections: Tuple[Section, ...]
    reminders: Tuple[Dict[str, Any], ...] = ()
    closing: Tuple[str, ...] = ()

    @property
    def settings(self) -> List[Setting]:
        return [s for section in self.sections for s in section.settings]

    @property
    def owned_keys(self) -> List[str]:
        return [s.key for s in self.settings]

    def get(self, key: str) -> Setting:
        for s in self.settings:
            if s.key == key:
                return s
        raise KeyError(key)


def _parse_write(raw: Dict[str, Any]) -> PreferenceWrite:
    return PreferenceWrite(
        domain=str(raw["domain"]),
        name=str(raw["name"]),
        type=str(raw.get("type") or "bool"),
        value=raw.get("value", True),
        current_host=bool(raw.get("current_host", False)),
    )


def _parse_setting(tool: str, raw: Dict[str, Any]) -> Setting:
    kind = str(raw.get("kind") or "flag")
    if kind not in KINDS:
        raise ValueError(f"Setting {raw.get('key')}: unknown kind {kind!r}")

    writes = raw.get("writes") or []
    if not isinstance(writes, list):
        raise ValueError(f"Setting {raw.get('key')}: writes must be a list")

    return Setting(
        key=str(raw["key"]),
        owner=tool,
        kind=kind,
        prompt=str(raw.get("prompt") or raw["key"]),
        summary=str(raw.get("summary") or raw["key"]),
        default=str(raw.get("default") or ""),
        done=raw.get("done"),
        cask=raw.get("cask"),
        download=raw.get("download"),
        computer_name=bool(raw.get("computer_name", False)),
        dock_autohide=bool(raw.get("dock_autohide", False)),
        dock=raw.get("dock"),
        restarts=raw.get("restarts"),
        writes=tuple(_parse_write(w) for w in writes),
    )


def catalog_from_manifest(raw: Dict[str, Any]) -> Catalog:
    tool = str(raw.get("tool") or "")
    if tool not in TOOLS:
        raise ValueError(f"Unknown tool in manifest: {tool!r}")

    sections: list[Section] = []
    for sec in raw.get("sections") or []:
        settings = tuple(_parse_setting(tool, s) for s in (sec.get("settings") or []))
        sections.append(
            Section(settings=settings, heading=sec.get("heading"), hint=sec.get("hint"), stage=sec.get("stage"))
        )

    return Catalog(
        tool=tool,
        title=str(raw.get("title") or tool),
        version=str(raw.get("version") or "0"),
        banner=str(raw.get("banner") or raw.get("title") or tool),
        subject=str(raw.get("subject") or f"{tool} configuration"),
        verb=str(raw.get("verb") or "setup"),
        sections=tuple(sections),
        reminders=tuple(raw.get("reminders") or ()),
        closing=tuple(str(c) for c in (raw.get("closing") or ())),
    )


def load_catalog(tool: str) -> Catalog:
    """Load the built-in catalog for `software` or `system`."""
    return catalog_from_manifest(load_tool_manifest(tool))


def is_affirmative(value: Optional[str]) -> bool:
    """Only exactly `y` or `Y` means yes; everything else, padded or empty, is no."""
    return value in {"y", "Y"}


def parse_list(value: Optional[str]) -> List[str]:
    """Split a comma list, trimming entries and dropping empty ones."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]
