from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def have_command(name: str) -> bool:
    return shutil.which(name) is not None


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    capture: bool = True,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - capture=False lets long-running tools (brew, softwareupdate) write
      straight to the terminal; stdout/stderr are then empty in the result.
    - There is no timeout: a hung command hangs the run.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    pipe = subprocess.PIPE if capture else None
    p = subprocess.run(
        argv_list,
        text=True,
        stdout=pipe,
        stderr=pipe,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )
    stdout = p.stdout or ""
    stderr = p.stderr or ""

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{stderr}")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
