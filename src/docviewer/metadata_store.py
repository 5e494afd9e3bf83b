"""JSON-backed persistence for project metadata records."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from .categories import OTHER_CATEGORY, DEFAULT_ICON

logger = logging.getLogger(__name__)

# Accepted spellings for each field when reading records or update payloads.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "display_name": ("displayName", "display_name"),
    "description": ("description",),
    "category": ("category",),
    "path": ("path",),
    "icon": ("icon",),
    "tags": ("tags",),
    "auto_detected": ("autoDetected", "auto_detected"),
}


@dataclass(slots=True)
class ProjectMetadata:
    """Metadata describing a documented project."""

    name: str
    display_name: str
    description: str
    category: str
    path: str
    icon: str
    tags: list[str] = field(default_factory=list)
    auto_detected: bool = True

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "category": self.category,
            "path": self.path,
            "icon": self.icon,
            "tags": list(self.tags),
            "autoDetected": self.auto_detected,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], *, name: str | None = None) -> "ProjectMetadata":
        values = _pick_fields(payload)
        record_name = str(values.get("name") or name or "")
        return cls(
            name=record_name,
            display_name=str(values.get("display_name") or record_name),
            description=str(values.get("description") or ""),
            category=str(values.get("category") or OTHER_CATEGORY),
            path=str(values.get("path") or ""),
            icon=str(values.get("icon") or DEFAULT_ICON),
            tags=_normalize_tags(values.get("tags")),
            auto_detected=_stored_bool(values.get("auto_detected"), default=True),
        )

    def merged(self, updates: Mapping[str, Any]) -> "ProjectMetadata":
        """Return a copy with *updates* shallow-merged over this record.

        The record name is the store key and is never overwritten.
        """

        values = _pick_fields(updates)
        values.pop("name", None)
        if "tags" in values:
            values["tags"] = _normalize_tags(values["tags"])
        if "auto_detected" in values:
            values["auto_detected"] = _stored_bool(values["auto_detected"], default=self.auto_detected)
        for key in ("display_name", "description", "category", "path", "icon"):
            if key in values:
                values[key] = "" if values[key] is None else str(values[key])
        return replace(self, **values)


def _pick_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for attribute, keys in _FIELD_ALIASES.items():
        for key in keys:
            if key in payload:
                values[attribute] = payload[key]
                break
    return values


def _stored_bool(value: Any, *, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _normalize_tags(values: Any) -> list[str]:
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)):
        return []
    tags: list[str] = []
    for value in values:
        if value is None:
            continue
        cleaned = str(value).strip()
        if cleaned and cleaned not in tags:
            tags.append(cleaned)
    return tags


class MetadataStore:
    """File-based mapping from project name to :class:`ProjectMetadata`.

    Every ``save`` rewrites the whole document. There is no locking: when two
    writers interleave a load/modify/save cycle the last ``save`` wins.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Dict[str, ProjectMetadata]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("metadata_store.load_failed path=%s", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("metadata_store.invalid_document path=%s type=%s", self._path, type(data).__name__)
            return {}

        records: Dict[str, ProjectMetadata] = {}
        for key, payload in data.items():
            if not isinstance(payload, dict):
                logger.warning("metadata_store.invalid_record path=%s project=%s", self._path, key)
                continue
            records[str(key)] = ProjectMetadata.from_dict(payload, name=str(key))
        return records

    def save(self, records: Mapping[str, ProjectMetadata]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {name: record.to_dict() for name, record in records.items()}
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
        tmp_path.replace(self._path)
        logger.debug("metadata_store.saved path=%s projects=%s", self._path, len(payload))


__all__ = ["MetadataStore", "ProjectMetadata"]
