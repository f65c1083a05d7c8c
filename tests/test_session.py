from __future__ import annotations

from pathlib import Path

import pytest

from macos_setup.config_store import ConfigNotFoundError, load_config, save_config
from macos_setup.session import (
    RunContext,
    RunMode,
    current_value,
    prompt_with_default,
    resolve_settings,
    run_session,
)
from tests.fakes import ScriptedAsk

SAVE_PROMPT = "Save this configuration for future use? [Y/n]"


def _never_ask(label: str, default: str) -> str:
    raise AssertionError(f"unexpected prompt: {label}")


def test_run_mode_precedence() -> None:
    assert RunContext("x").mode == RunMode.INTERACTIVE
    assert RunContext("x", use_config=True).mode == RunMode.USE_CONFIG
    assert RunContext("x", use_config=True, skip_prompts=True).mode == RunMode.SKIP_PROMPTS
    assert RunContext("x", skip_prompts=True, save_only=True).mode == RunMode.SAVE_ONLY
    assert RunContext("x", skip_prompts=True, save_only=True).prompt_mode == RunMode.SKIP_PROMPTS


def test_prompt_with_default_shows_default_and_keeps_it_on_enter() -> None:
    seen = []

    def fake_input(text: str) -> str:
        seen.append(text)
        return ""

    assert prompt_with_default("Chrome? [Y/n]", "y", input_fn=fake_input) == "y"
    assert prompt_with_default("Computer name", "", input_fn=fake_input) == ""
    assert seen == ["Chrome? [Y/n] [y]: ", "Computer name: "]


def test_prompt_with_default_returns_typed_text_and_handles_eof() -> None:
    assert prompt_with_default("Q", "y", input_fn=lambda _: "n") == "n"

    def eof(_: str) -> str:
        raise EOFError

    assert prompt_with_default("Q", "y", input_fn=eof) == "y"


def test_empty_loaded_value_falls_back_to_default(software) -> None:
    chrome = software.get("INSTALL_CHROME")
    assert current_value(chrome, {"INSTALL_CHROME": ""}) == "y"
    assert current_value(chrome, {"INSTALL_CHROME": "n"}) == "n"
    assert current_value(chrome, {}) == "y"


def test_prompts_follow_catalog_order(software) -> None:
    ask = ScriptedAsk()
    resolve_settings(software, RunMode.INTERACTIVE, {}, ask)
    assert ask.labels == [s.prompt for s in software.settings]
    assert ask.labels[0].startswith("Enter the computer name")


def test_skip_prompts_missing_config_raises_without_prompting(software, console, config_path) -> None:
    ctx = RunContext(config_path, skip_prompts=True)
    with pytest.raises(ConfigNotFoundError):
        run_session(software, ctx, _never_ask, console)
    assert not Path(config_path).exists()


def test_skip_prompts_uses_loaded_values_and_defaults(system, console, config_path) -> None:
    save_config(config_path, ["SHOW_PATH_BAR", "DOCK_ADD_ITEMS"], {"SHOW_PATH_BAR": "y", "DOCK_ADD_ITEMS": "Safari"}, title="x")
    before = Path(config_path).read_text(encoding="utf-8")

    result = run_session(system, RunContext(config_path, skip_prompts=True), _never_ask, console)

    assert result.settings["SHOW_PATH_BAR"] == "y"
    assert result.settings["DOCK_ADD_ITEMS"] == "Safari"
    assert result.settings["SHOW_HIDDEN_FILES"] == "n"
    assert result.saved is False
    assert Path(config_path).read_text(encoding="utf-8") == before
    assert "Loaded system customization configuration:" in console.stdout
    assert "  Dock - Remove: (none)" in console.stdout


def test_use_config_missing_file_warns_and_prompts(software, console, config_path) -> None:
    ask = ScriptedAsk({SAVE_PROMPT: "n"})
    result = run_session(software, RunContext(config_path, use_config=True), ask, console)

    assert "[WARNING] No config file found, will create one" in console.stdout
    assert result.loaded is None
    assert len(ask.prompts) == len(software.settings) + 1
    assert not Path(config_path).exists()


def test_use_config_offers_loaded_values_as_defaults(software, console, config_path) -> None:
    save_config(config_path, ["INSTALL_VLC", "COMPUTER_NAME"], {"INSTALL_VLC": "n", "COMPUTER_NAME": "Studio"}, title="x")
    ask = ScriptedAsk()

    run_session(software, RunContext(config_path, use_config=True), ask, console)

    defaults = dict(ask.prompts)
    assert defaults["VLC? [Y/n]"] == "n"
    assert defaults["Enter the computer name (leave blank to skip)"] == "Studio"
    assert defaults["Chrome? [Y/n]"] == "y"
    assert "Review and update software installation settings" in console.stdout


@pytest.mark.parametrize("answer", ["", "y", "yes", "whatever", " n ", "no"])
def test_save_confirmation_defaults_to_yes(answer, software, console, config_path) -> None:
    result = run_session(software, RunContext(config_path), ScriptedAsk({SAVE_PROMPT: answer}), console)
    assert result.saved is True
    assert set(load_config(config_path)) == set(software.owned_keys)


@pytest.mark.parametrize("answer", ["n", "N"])
def test_save_declined(answer, software, console, config_path) -> None:
    result = run_session(software, RunContext(config_path), ScriptedAsk({SAVE_PROMPT: answer}), console)
    assert result.saved is False
    assert not Path(config_path).exists()


def test_raw_answer_is_persisted_verbatim(software, console, config_path) -> None:
    ask = ScriptedAsk({"Chrome? [Y/n]": "maybe"})
    result = run_session(software, RunContext(config_path), ask, console)

    assert result.settings["INSTALL_CHROME"] == "maybe"
    assert load_config(config_path)["INSTALL_CHROME"] == "maybe"


def test_save_only_writes_and_stops(system, console, config_path) -> None:
    result = run_session(system, RunContext(config_path, save_only=True), ScriptedAsk(), console)

    assert result.stop is True
    assert result.saved is True
    assert set(load_config(config_path)) == set(system.owned_keys)
    assert "Run without --save-config to execute customization." in console.stdout


def test_save_only_saves_even_when_confirmation_declined(system, console, config_path) -> None:
    result = run_session(system, RunContext(config_path, save_only=True), ScriptedAsk({SAVE_PROMPT: "n"}), console)
    assert result.stop is True
    assert Path(config_path).exists()


def test_save_only_with_skip_prompts_persists_loaded_values(system, console, config_path) -> None:
    save_config(config_path, ["SHOW_PATH_BAR"], {"SHOW_PATH_BAR": "y"}, title="x")
    ctx = RunContext(config_path, skip_prompts=True, save_only=True)

    result = run_session(system, ctx, _never_ask, console)

    assert result.stop is True
    loaded = load_config(config_path)
    assert loaded["SHOW_PATH_BAR"] == "y"
    assert loaded["SET_DOCK_AUTOHIDE"] == "n"


def test_section_headings_are_announced(system, console, config_path) -> None:
    run_session(system, RunContext(config_path), ScriptedAsk({SAVE_PROMPT: "n"}), console)
    out = console.stdout
    assert out.index("System preferences (y/n):") < out.index("Finder preferences (y/n):") < out.index("Dock customization:")
    assert "Enter app names separated by commas" in out
