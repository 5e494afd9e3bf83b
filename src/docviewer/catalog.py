"""Project metadata aggregation on top of the metadata store."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping

from .categories import (
    CATEGORY_TABLE,
    CategoryTable,
    generate_description,
    get_category_icon,
    title_case_slug,
)
from .metadata_store import MetadataStore, ProjectMetadata
from .observability import MetricsRecorder

logger = logging.getLogger(__name__)


class ProjectNotFoundError(LookupError):
    """Raised when an update targets a project without a stored record."""

    def __init__(self, project_name: str) -> None:
        super().__init__(f"Project {project_name} not found")
        self.project_name = project_name


class ProjectCatalog:
    """Resolve, create and update project metadata records."""

    def __init__(
        self,
        store: MetadataStore,
        *,
        categories: CategoryTable = CATEGORY_TABLE,
        metrics: MetricsRecorder | None = None,
    ) -> None:
        self._store = store
        self._categories = categories
        self._metrics = metrics

    @property
    def store(self) -> MetadataStore:
        return self._store

    def get_project_metadata(self, project_name: str, project_path: str) -> ProjectMetadata:
        records = self._store.load()
        existing = records.get(project_name)
        if existing is not None:
            # Stored categories are re-validated in case the taxonomy changed.
            return replace(existing, category=self._categories.normalize(existing.category))

        category = self._categories.auto_detect(project_name, project_path)
        metadata = ProjectMetadata(
            name=project_name,
            display_name=title_case_slug(project_name),
            description=generate_description(project_name, category),
            category=category,
            path=project_path,
            icon=get_category_icon(category),
            tags=[],
            auto_detected=True,
        )
        records[project_name] = metadata
        self._store.save(records)
        logger.info("catalog.metadata.created project=%s category=%s", project_name, category)
        if self._metrics is not None:
            self._metrics.increment("catalog.metadata.created", category=category)
        return metadata

    def update_project_metadata(self, project_name: str, updates: Mapping[str, Any]) -> ProjectMetadata:
        records = self._store.load()
        existing = records.get(project_name)
        if existing is None:
            raise ProjectNotFoundError(project_name)

        changes = dict(updates)
        if "category" in changes:
            changes["category"] = self._categories.normalize(changes["category"])
        changes["autoDetected"] = False
        changes.pop("auto_detected", None)

        updated = existing.merged(changes)
        records[project_name] = updated
        self._store.save(records)
        logger.info(
            "catalog.metadata.updated project=%s category=%s fields=%s",
            project_name,
            updated.category,
            sorted(key for key in updates.keys()),
        )
        if self._metrics is not None:
            self._metrics.increment("catalog.metadata.updated", category=updated.category)
        return updated

    def list_projects(self, project_roots: Mapping[str, str]) -> List[ProjectMetadata]:
        return [self.get_project_metadata(name, path) for name, path in project_roots.items()]

    def get_projects_by_category(self, project_roots: Mapping[str, str]) -> Dict[str, List[ProjectMetadata]]:
        """Group projects by category in taxonomy order, omitting empty groups."""

        buckets: dict[str, list[ProjectMetadata]] = {}
        if self._metrics is not None:
            with self._metrics.track_timing("catalog.group_by_category", projects=len(project_roots)):
                resolved = self.list_projects(project_roots)
        else:
            resolved = self.list_projects(project_roots)
        for metadata in resolved:
            buckets.setdefault(metadata.category, []).append(metadata)

        grouped: Dict[str, List[ProjectMetadata]] = {}
        for definition in self._categories:
            projects = buckets.get(definition.name)
            if not projects:
                continue
            grouped[definition.name] = sorted(projects, key=_display_sort_key)
        return grouped


def _display_sort_key(metadata: ProjectMetadata) -> tuple[str, str]:
    return (metadata.display_name.casefold(), metadata.display_name)


__all__ = ["ProjectCatalog", "ProjectNotFoundError"]
