from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, TextIO

if TYPE_CHECKING:
    from .catalog import Catalog
    from .executor import ExecutionResult

logger = logging.getLogger(__name__)

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
NC = "\033[0m"

CHECK = "✓"


@dataclass
class Console:
    """Labeled user-facing output. Every labeled line is also logged."""

    out: Optional[TextIO] = None
    err: Optional[TextIO] = None
    divider_glyph: str = "🔷"

    def _stream(self, error: bool = False) -> TextIO:
        if error:
            return self.err or sys.stderr
        return self.out or sys.stdout

    def _label(self, label: str, color: str, stream: TextIO) -> str:
        isatty = getattr(stream, "isatty", None)
        if isatty is not None and isatty():
            return f"{color}[{label}]{NC}"
        return f"[{label}]"

    def echo(self, text: str = "", *, error: bool = False) -> None:
        stream = self._stream(error)
        stream.write(text + "\n")
        stream.flush()

    def info(self, msg: str) -> None:
        logger.info(msg)
        stream = self._stream()
        self.echo(f"{self._label('INFO', BLUE, stream)} {msg}")

    def success(self, msg: str) -> None:
        logger.info(msg)
        stream = self._stream()
        self.echo(f"{self._label('SUCCESS', GREEN, stream)} {msg}")

    def warning(self, msg: str) -> None:
        logger.warning(msg)
        stream = self._stream()
        self.echo(f"{self._label('WARNING', YELLOW, stream)} {msg}")

    def error(self, msg: str) -> None:
        logger.error(msg)
        stream = self._stream(error=True)
        self.echo(f"{self._label('ERROR', RED, stream)} {msg}", error=True)

    def divider(self) -> None:
        line = "═" * 80
        self.echo()
        self.echo(f"{self.divider_glyph}{line}{self.divider_glyph}")
        self.echo()


def summary_lines(result: "ExecutionResult") -> List[str]:
    """Check-marked lines for what actually succeeded, in plan order."""

    lines: List[str] = []
    casks: List[str] = []
    casks_at: Optional[int] = None

    for action, outcome in result.pairs():
        if not outcome.succeeded:
            continue
        if getattr(action, "grouped_summary", False):
            if casks_at is None:
                casks_at = len(lines)
                lines.append("")
            casks.append(action.name)
            continue
        text = action.summary_text()
        if text:
            lines.append(f"  {CHECK} {text}")

    if casks_at is not None:
        lines[casks_at] = f"  {CHECK} Installed via Homebrew: {', '.join(casks)}"
    return lines


def render_summary(
    catalog: "Catalog",
    result: "ExecutionResult",
    console: Console,
    *,
    config_path: str,
    config_exists: bool,
) -> None:
    console.divider()
    console.success(f"{catalog.title} complete! 🎉")
    console.echo()
    console.echo(f"Summary of {catalog.verb}:")
    for line in summary_lines(result):
        console.echo(line)

    failures = result.failures
    if failures:
        console.echo()
        console.echo("Problems during this run:")
        for outcome in failures:
            console.echo(f"  - {outcome.action_id}: {outcome.detail}")

    console.echo()
    if config_exists:
        console.echo(f"Configuration saved to: {config_path}")
    for line in catalog.closing:
        console.echo(line)
