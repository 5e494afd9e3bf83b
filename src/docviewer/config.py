"""Configuration helpers for the docs viewer service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from dotenv import load_dotenv

if TYPE_CHECKING:  # pragma: no cover
    from .observability import MetricsRecorder

load_dotenv()

_DEFAULT_DATA_DIR: Final[str] = ".docs-viewer-data"
_DEFAULT_METADATA_FILENAME: Final[str] = "project-metadata.json"
_DEFAULT_PROJECT_ROOTS_PATH: Final[str] = "projects.yaml"
_DEFAULT_PREVIEW_CHAR_LIMIT: Final[int] = 300
_DEFAULT_KEY_DOCS_LIMIT: Final[int] = 5
_DEFAULT_DOC_TREE_MAX_DEPTH: Final[int] = 5
_DEFAULT_OBSERVABILITY_NAMESPACE: Final[str] = "docviewer"


def _env_optional_bool(name: str) -> bool | None:
    """Read an optional boolean environment variable."""

    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    msg = f"Environment variable {name} must be a boolean value (true/false)."
    raise ValueError(msg)


def _env_bool(name: str, default: bool) -> bool:
    value = _env_optional_bool(name)
    return default if value is None else value


def _env_int(name: str, default: int, *, min_value: int = 0) -> int:
    """Read an integer environment variable, clamped to *min_value*."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc
    return max(min_value, value)


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    data_dir: str = _DEFAULT_DATA_DIR
    metadata_filename: str = _DEFAULT_METADATA_FILENAME
    project_roots_path: str = _DEFAULT_PROJECT_ROOTS_PATH
    preview_char_limit: int = _DEFAULT_PREVIEW_CHAR_LIMIT
    key_docs_limit: int = _DEFAULT_KEY_DOCS_LIMIT
    doc_tree_max_depth: int = _DEFAULT_DOC_TREE_MAX_DEPTH
    observability_metrics_enabled: bool = True
    observability_namespace: str = _DEFAULT_OBSERVABILITY_NAMESPACE
    observability_prometheus_enabled: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings by reading environment variables."""

        return cls(
            data_dir=os.getenv("DOCVIEWER_DATA_DIR", _DEFAULT_DATA_DIR),
            metadata_filename=os.getenv("DOCVIEWER_METADATA_FILE", _DEFAULT_METADATA_FILENAME),
            project_roots_path=os.getenv("DOCVIEWER_PROJECT_ROOTS", _DEFAULT_PROJECT_ROOTS_PATH),
            preview_char_limit=_env_int("DOCVIEWER_PREVIEW_LIMIT", _DEFAULT_PREVIEW_CHAR_LIMIT),
            key_docs_limit=_env_int("DOCVIEWER_KEY_DOCS_LIMIT", _DEFAULT_KEY_DOCS_LIMIT),
            doc_tree_max_depth=_env_int("DOCVIEWER_TREE_MAX_DEPTH", _DEFAULT_DOC_TREE_MAX_DEPTH),
            observability_metrics_enabled=_env_bool("OBSERVABILITY_METRICS_ENABLED", True),
            observability_namespace=os.getenv("OBSERVABILITY_NAMESPACE", _DEFAULT_OBSERVABILITY_NAMESPACE),
            observability_prometheus_enabled=_env_bool("OBSERVABILITY_PROMETHEUS_ENABLED", False),
        )

    def metadata_path(self) -> Path:
        """Return the location of the persisted project metadata document."""

        return Path(self.data_dir).expanduser().resolve() / self.metadata_filename

    def build_metrics_recorder(self) -> "MetricsRecorder":
        from .observability import MetricsRecorder

        return MetricsRecorder(
            enabled=self.observability_metrics_enabled,
            namespace=self.observability_namespace,
            prometheus_enabled=self.observability_prometheus_enabled,
        )


__all__ = ["Settings"]
