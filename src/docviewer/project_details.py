"""Assemble the detailed project record shown on a project's landing page."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List

from .catalog import ProjectCatalog
from .doc_scanner import find_readme, iter_markdown_files
from .markdown_parser import DEFAULT_PREVIEW_LIMIT, ParsedMarkdown, extract_readme_preview, parse_markdown_structure
from .metadata_store import ProjectMetadata
from .observability import MetricsRecorder

logger = logging.getLogger(__name__)

DEFAULT_KEY_DOCS_LIMIT = 5
_KEY_DOC_EXACT_NAMES = {"readme", "api", "config"}
_KEY_DOC_FRAGMENTS = ("getting-started", "example")
_COMPONENT_TYPES = {"api", "config"}


@dataclass(slots=True)
class KeyDoc:
    title: str
    path: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "path": self.path, "type": self.type}


@dataclass(slots=True)
class ProjectStats:
    total_docs: int
    last_updated: str
    components: int

    def to_dict(self) -> dict[str, object]:
        return {
            "totalDocs": self.total_docs,
            "lastUpdated": self.last_updated,
            "components": self.components,
        }


@dataclass(slots=True)
class ProjectDetails:
    """Project metadata enriched with filesystem statistics and README data."""

    metadata: ProjectMetadata
    stats: ProjectStats
    readme_preview: str = ""
    readme_structure: ParsedMarkdown | None = None
    key_docs: List[KeyDoc] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        payload = self.metadata.to_dict()
        payload.update(
            {
                "stats": self.stats.to_dict(),
                "readmePreview": self.readme_preview,
                "readmeStructure": self.readme_structure.to_dict() if self.readme_structure else None,
                "keyDocs": [doc.to_dict() for doc in self.key_docs],
            }
        )
        return payload


def classify_key_doc(filename: str) -> str | None:
    """Return the key-doc type for *filename*, or ``None`` if it is not a key doc."""

    stem = Path(filename).stem.lower()
    if stem not in _KEY_DOC_EXACT_NAMES and not any(fragment in stem for fragment in _KEY_DOC_FRAGMENTS):
        return None
    if "api" in stem or "endpoint" in stem:
        return "api"
    if "config" in stem or "setup" in stem:
        return "config"
    if "example" in stem or "demo" in stem:
        return "example"
    return "guide"


def key_doc_title(filename: str) -> str:
    return filename.replace("-", " ").replace("_", " ")


def select_key_docs(root: Path, files: List[Path], *, limit: int = DEFAULT_KEY_DOCS_LIMIT) -> List[KeyDoc]:
    key_docs: List[KeyDoc] = []
    for path in files:
        if len(key_docs) >= limit:
            break
        doc_type = classify_key_doc(path.name)
        if doc_type is None:
            continue
        key_docs.append(
            KeyDoc(
                title=key_doc_title(path.name),
                path=path.relative_to(root).as_posix(),
                type=doc_type,
            )
        )
    return key_docs


def last_modified_date(path: Path) -> str:
    """Return the modification date of *path* as ``YYYY-MM-DD``.

    Falls back to today's date when the path cannot be inspected.
    """

    try:
        mtime = path.stat().st_mtime
    except OSError as exc:
        logger.warning("project_details.stat_failed path=%s error=%s", path, exc)
        return date.today().isoformat()
    return datetime.fromtimestamp(mtime, tz=timezone.utc).date().isoformat()


def _read_readme(root: Path) -> str | None:
    readme = find_readme(root)
    if readme is None:
        return None
    try:
        return readme.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("project_details.readme_unreadable path=%s error=%s", readme, exc)
        return None


def build_project_details(
    catalog: ProjectCatalog,
    project_name: str,
    project_path: str,
    *,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    key_docs_limit: int = DEFAULT_KEY_DOCS_LIMIT,
    metrics: MetricsRecorder | None = None,
) -> ProjectDetails:
    """Combine stored metadata with a fresh scan of the project directory."""

    start = time.perf_counter()
    metadata = catalog.get_project_metadata(project_name, project_path)
    root = Path(project_path).expanduser()

    markdown_files = list(iter_markdown_files(root))
    key_docs = select_key_docs(root, markdown_files, limit=key_docs_limit)
    stats = ProjectStats(
        total_docs=len(markdown_files),
        last_updated=last_modified_date(root),
        components=sum(1 for doc in key_docs if doc.type in _COMPONENT_TYPES),
    )

    details = ProjectDetails(metadata=metadata, stats=stats, key_docs=key_docs)
    readme_text = _read_readme(root)
    if readme_text is not None:
        details.readme_preview = extract_readme_preview(readme_text, preview_limit)
        details.readme_structure = parse_markdown_structure(readme_text)

    logger.info(
        "project_details.built project=%s docs=%s key_docs=%s readme=%s",
        project_name,
        stats.total_docs,
        len(key_docs),
        readme_text is not None,
    )
    if metrics is not None:
        elapsed = time.perf_counter() - start
        metrics.record_timing("project_details.build", elapsed, project=project_name, docs=stats.total_docs)
    return details


__all__ = [
    "KeyDoc",
    "ProjectDetails",
    "ProjectStats",
    "build_project_details",
    "classify_key_doc",
    "key_doc_title",
    "select_key_docs",
]
