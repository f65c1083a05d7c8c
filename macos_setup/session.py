"""Settings resolution for one run.

Values come from three places, in order of precedence: the answer typed at a
prompt, the shared config file, and the catalog default. CLI flags decide
which of those are consulted. Values stay raw strings here; yes/no
interpretation happens where a setting is consumed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from .catalog import Catalog, Section, Setting
from .config_store import ConfigNotFoundError, load_config, save_config
from .report import Console

logger = logging.getLogger(__name__)

AskFn = Callable[[str, str], str]


class RunMode(str, Enum):
    INTERACTIVE = "interactive"
    USE_CONFIG = "use-config"
    SKIP_PROMPTS = "skip-prompts"
    SAVE_ONLY = "save-only"


@dataclass(frozen=True)
class RunContext:
    config_path: str
    use_config: bool = False
    skip_prompts: bool = False
    save_only: bool = False

    @property
    def prompt_mode(self) -> RunMode:
        if self.skip_prompts:
            return RunMode.SKIP_PROMPTS
        if self.use_config:
            return RunMode.USE_CONFIG
        return RunMode.INTERACTIVE

    @property
    def mode(self) -> RunMode:
        if self.save_only:
            return RunMode.SAVE_ONLY
        return self.prompt_mode


@dataclass
class SessionResult:
    settings: Dict[str, str]
    loaded: Optional[Dict[str, str]] = None
    saved: bool = False
    stop: bool = False


def prompt_with_default(label: str, default: str, *, input_fn: Callable[[str], str] = input) -> str:
    """Read one line; an empty line (or EOF) keeps the default."""

    text = f"{label} [{default}]: " if default else f"{label}: "
    try:
        answer = input_fn(text)
    except EOFError:
        return default
    if answer == "":
        return default
    return answer


def default_answer(label: str, default: str) -> str:
    """Stand-in for `ask` when prompts are skipped."""
    logger.info("Prompt skipped, using default: %s [%s]", label, default)
    return default


def current_value(setting: Setting, loaded: Mapping[str, str]) -> str:
    value = loaded.get(setting.key, "")
    if value == "":
        return setting.default
    return value


def resolve_settings(
    catalog: Catalog,
    mode: RunMode,
    loaded: Mapping[str, str],
    ask: AskFn,
    *,
    announce: Optional[Callable[[Section], None]] = None,
) -> Dict[str, str]:
    """Resolve a final raw value for every setting in catalog order."""

    resolved: Dict[str, str] = {}
    if mode == RunMode.SKIP_PROMPTS:
        for setting in catalog.settings:
            resolved[setting.key] = current_value(setting, loaded)
        return resolved

    for section in catalog.sections:
        if announce is not None:
            announce(section)
        for setting in section.settings:
            resolved[setting.key] = ask(setting.prompt, current_value(setting, loaded))
    return resolved


def _display(setting: Setting, loaded: Mapping[str, str]) -> str:
    value = current_value(setting, loaded)
    if value:
        return value
    if setting.kind == "list":
        return "(none)"
    return "(not set)"


def print_loaded_summary(catalog: Catalog, loaded: Mapping[str, str], console: Console) -> None:
    console.echo(f"Loaded {catalog.subject}:")
    for setting in catalog.settings:
        console.echo(f"  {setting.summary}: {_display(setting, loaded)}")
    console.echo()


def _announcer(console: Console) -> Callable[[Section], None]:
    def announce(section: Section) -> None:
        if section.heading:
            console.echo()
            console.echo(section.heading)
        if section.hint:
            console.echo(section.hint)

    return announce


def declines(answer: str) -> bool:
    return answer in {"n", "N"}


def _save(catalog: Catalog, ctx: RunContext, settings: Mapping[str, str], console: Console) -> None:
    path = save_config(ctx.config_path, catalog.owned_keys, settings, title=catalog.title)
    subject = catalog.subject[:1].upper() + catalog.subject[1:]
    console.success(f"{subject} saved to {path}")


def run_session(catalog: Catalog, ctx: RunContext, ask: AskFn, console: Console) -> SessionResult:
    """Load, resolve, and optionally persist this tool's settings.

    Raises ConfigNotFoundError when prompts are skipped and there is no
    config file; unattended runs never fall back to defaults silently.
    """

    mode = ctx.prompt_mode
    loaded: Dict[str, str] = {}
    loaded_ok: Optional[Dict[str, str]] = None

    if mode in {RunMode.USE_CONFIG, RunMode.SKIP_PROMPTS}:
        try:
            loaded = load_config(ctx.config_path)
        except ConfigNotFoundError:
            if mode == RunMode.SKIP_PROMPTS:
                raise
            console.warning("No config file found, will create one")
        else:
            console.info(f"Loading configuration from {ctx.config_path}")
            loaded_ok = loaded
            print_loaded_summary(catalog, loaded, console)

    if mode != RunMode.SKIP_PROMPTS:
        if mode == RunMode.USE_CONFIG:
            console.echo(f"Review and update {catalog.title.lower()} settings (press Enter to keep current value):")
        else:
            console.echo(f"Let's configure your {catalog.title.lower()} preferences:")

    settings = resolve_settings(catalog, mode, loaded, ask, announce=_announcer(console))
    result = SessionResult(settings=settings, loaded=loaded_ok)

    if mode != RunMode.SKIP_PROMPTS:
        console.echo()
        answer = ask("Save this configuration for future use? [Y/n]", "")
        if not declines(answer):
            _save(catalog, ctx, settings, console)
            result.saved = True

    if ctx.save_only:
        if not result.saved:
            _save(catalog, ctx, settings, console)
            result.saved = True
        console.echo(f"Configuration saved. Run without --save-config to execute {catalog.verb}.")
        result.stop = True

    return result
