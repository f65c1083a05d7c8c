from __future__ import annotations

import logging
from typing import Any, List

from .command import run_cmd

logger = logging.getLogger(__name__)

_TYPE_FLAGS = {"bool": "-bool", "int": "-int", "float": "-float", "string": "-string"}


def _format_value(type_: str, value: Any) -> str:
    if type_ == "bool":
        return "true" if value in (True, "true", "TRUE", "yes", "1", 1) else "false"
    return str(value)


def defaults_write_argv(domain: str, name: str, type_: str, value: Any, *, current_host: bool = False) -> List[str]:
    flag = _TYPE_FLAGS.get(type_)
    if flag is None:
        raise ValueError(f"Unsupported defaults type: {type_}")
    argv = ["defaults"]
    if current_host:
        argv.append("-currentHost")
    return [*argv, "write", domain, name, flag, _format_value(type_, value)]


class DefaultsBackend:
    """Preference backend on top of `defaults write`."""

    def write(self, domain: str, name: str, type_: str, value: Any, *, current_host: bool = False) -> None:
        run_cmd(defaults_write_argv(domain, name, type_, value, current_host=current_host))
