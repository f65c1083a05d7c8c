from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from .command import run_cmd
from .env import PATHS

logger = logging.getLogger(__name__)


def _newest_file(d: Path) -> Path | None:
    files = [p for p in d.iterdir() if p.is_file()]
    if not files:
        return None
    return max(files, key=lambda p: p.stat().st_mtime)


def download_app(url: str, bundle: str, *, applications: str = PATHS.applications) -> str:
    """Download a zipped .app, unpack it and move it into /Applications.

    The server picks the filename and sends it without a .zip suffix, so the
    newest file in the scratch directory is renamed before unzipping. An
    existing copy of the bundle is replaced.
    """

    with tempfile.TemporaryDirectory(prefix="macos-setup-") as tmp:
        work = Path(tmp)
        run_cmd(["curl", "-L", "-J", "-O", url], cwd=str(work))

        downloaded = _newest_file(work)
        if downloaded is None:
            raise RuntimeError("No file found after download")

        archive = downloaded.with_name(downloaded.name + ".zip")
        logger.info("Renaming %s to %s", downloaded.name, archive.name)
        downloaded.rename(archive)

        try:
            run_cmd(["unzip", "-q", str(archive)], cwd=str(work))
        except RuntimeError as e:
            raise RuntimeError(f"Failed to extract {archive.name}") from e

        app = work / bundle
        if not app.is_dir():
            found = ", ".join(sorted(p.name for p in work.iterdir()))
            raise FileNotFoundError(f"Could not find '{bundle}' (contents: {found})")

        dst = Path(applications) / bundle
        if dst.exists():
            logger.info("Removing existing installation %s", dst)
            shutil.rmtree(dst)
        shutil.move(str(app), str(dst))
        return str(dst)
