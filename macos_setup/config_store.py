"""Shared KEY="value" configuration file.

Both tools read and write the same file. Each tool owns a disjoint set of
keys; a save rewrites only the saving tool's keys and keeps every other line
as it was. There is no locking: two runs saving at the same time race and
the later rename wins.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

FILE_HEADER = "# macOS Setup Configuration"

_ASSIGNMENT = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")

# Hand-edited files may carry Latin-1 comments; keep those bytes as they are.
_ERRORS = "surrogateescape"


class ConfigNotFoundError(FileNotFoundError):
    pass


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")


def _unquote(raw: str) -> str:
    v = raw.strip()
    if len(v) >= 2 and v[0] == v[-1] and v[0] in {'"', "'"}:
        return v[1:-1]
    return v


def parse_assignment(line: str) -> Optional[tuple[str, str]]:
    """Return (key, value) for a KEY=value line, None for anything else."""
    if line.lstrip().startswith("#"):
        return None
    m = _ASSIGNMENT.match(line)
    if not m:
        return None
    return m.group(1), _unquote(m.group(2))


def stamp_comment(title: str, now: Optional[datetime] = None) -> str:
    return f"# {title} Settings - Updated {_timestamp(now)}"


def _read_lines(p: Path) -> List[str]:
    """Lines with their original endings. Bytes that are not UTF-8 survive a
    read and write cycle unchanged."""
    with open(p, encoding="utf-8", errors=_ERRORS, newline="") as f:
        return f.readlines()


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def load_config(path: str) -> Dict[str, str]:
    p = Path(path).expanduser()
    if not p.is_file():
        raise ConfigNotFoundError(str(p))

    values: Dict[str, str] = {}
    for line in _read_lines(p):
        parsed = parse_assignment(_strip_eol(line))
        if parsed is None:
            continue
        key, value = parsed
        values[key] = value

    logger.info("Loaded %d keys from %s", len(values), p)
    return values


def _owned_block(
    owned_keys: Iterable[str],
    values: Mapping[str, str],
    *,
    title: str,
    now: Optional[datetime],
) -> List[str]:
    lines = [stamp_comment(title, now)]
    for key in owned_keys:
        lines.append(f'{key}="{values.get(key, "")}"')
    return lines


def save_config(
    path: str,
    owned_keys: Iterable[str],
    values: Mapping[str, str],
    *,
    title: str,
    now: Optional[datetime] = None,
) -> Path:
    """Merge this tool's keys into the shared file and write it atomically."""

    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    owned = list(dict.fromkeys(owned_keys))
    owned_set = set(owned)
    own_stamp = f"# {title} Settings - Updated "

    if p.is_file():
        existing = _read_lines(p)
        eol = "\r\n" if existing and existing[0].endswith("\r\n") else "\n"
        kept: List[str] = []
        dropped = 0
        for line in existing:
            bare = _strip_eol(line)
            parsed = parse_assignment(bare)
            if parsed is not None and parsed[0] in owned_set:
                dropped += 1
                continue
            if bare.startswith(own_stamp):
                continue
            kept.append(line)
        if kept and not kept[-1].endswith(("\n", "\r")):
            kept[-1] += eol
        block = _owned_block(owned, values, title=title, now=now)
        text = "".join(kept) + "".join(line + eol for line in block)
        logger.info("Replacing %d owned assignments in %s", dropped, p)
    else:
        lines = [FILE_HEADER, f"# Generated on {_timestamp(now)}"]
        lines += _owned_block(owned, values, title=title, now=now)[1:]
        text = "\n".join(lines) + "\n"
        logger.info("Creating %s", p)

    tmp = p.with_name(p.name + ".tmp")
    with open(tmp, "w", encoding="utf-8", errors=_ERRORS, newline="") as f:
        f.write(text)
    os.replace(tmp, p)
    return p
