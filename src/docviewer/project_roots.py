"""Loading the fixed set of documented project directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


class ProjectRootsLoadError(RuntimeError):
    """Raised when the project roots document cannot be parsed."""


def _iter_items(data: Any):
    if isinstance(data, dict):
        yield from data.items()
        return
    if isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                yield item.get("name"), item.get("path")


def load_project_roots(path: str | Path) -> Dict[str, str]:
    """Load a ``name -> directory`` mapping from YAML; return empty mapping if missing.

    Both a plain mapping and a list of ``{name, path}`` items are accepted.
    Entries without a usable name or path are skipped.
    """

    roots_path = Path(path)
    if not roots_path.exists():
        logger.warning("project_roots.missing path=%s", roots_path)
        return {}

    try:
        data = yaml.safe_load(roots_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ProjectRootsLoadError(f"Invalid project roots document at {roots_path}") from exc

    roots: Dict[str, str] = {}
    for name, directory in _iter_items(data):
        if not isinstance(name, str) or not isinstance(directory, str):
            logger.warning("project_roots.invalid_entry path=%s name=%r", roots_path, name)
            continue
        name_clean = name.strip()
        directory_clean = directory.strip()
        if not name_clean or not directory_clean:
            continue
        roots[name_clean] = str(Path(directory_clean).expanduser())
    return roots


__all__ = ["ProjectRootsLoadError", "load_project_roots"]
