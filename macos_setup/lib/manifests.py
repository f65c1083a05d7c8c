from __future__ import annotations

from pathlib import Path
from typing import Any, Dict


def _manifest_root() -> Path:
    # macos_setup/lib/manifests.py -> macos_setup/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped inside the package (manifests/...)."""
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load manifests") from e

    p = _manifest_root() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def load_tool_manifest(tool: str) -> Dict[str, Any]:
    return load_yaml_rel(f"{tool}.yaml")
