"""Run log shared by both tools.

User-facing lines go through report.Console; the log file gets every
external command and every planning decision.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
FALLBACK_LOG_NAME = "macos-setup.log"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


class RunLogHandler(logging.FileHandler):
    """The one file handler configure_logging owns on the root logger."""


def _open_run_log(log_path: str) -> RunLogHandler:
    path = Path(log_path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RunLogHandler(path, encoding="utf-8")
    except OSError:
        # ~/Library/Logs can be missing or locked down on managed Macs.
        return RunLogHandler(Path.cwd() / FALLBACK_LOG_NAME, encoding="utf-8")


def configure_logging(log_path: str = DEFAULT_LOG_PATH, level: int = logging.INFO) -> str:
    """Attach the run log to the root logger; return the file actually used.

    Calling it again is a no-op that reports the file chosen the first time.
    """

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers:
        if isinstance(h, RunLogHandler):
            return h.baseFilename

    handler = _open_run_log(log_path)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)

    log = logging.getLogger(__name__)
    requested = os.path.abspath(os.path.expanduser(log_path))
    if handler.baseFilename != requested:
        log.warning("Cannot write log to %s, using %s", requested, handler.baseFilename)
    log.info("Logging initialized at %s", handler.baseFilename)
    return handler.baseFilename
