"""FastAPI application exposing project metadata and documentation content."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Mapping

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response

from .catalog import ProjectCatalog, ProjectNotFoundError
from .categories import get_all_categories, get_category_definition
from .config import Settings
from .doc_scanner import PathOutsideProjectError, build_doc_tree, read_document
from .metadata_store import MetadataStore
from .observability import MetricsRecorder
from .project_details import build_project_details
from .project_roots import load_project_roots

logger = logging.getLogger(__name__)


_LOGGING_CONFIGURED = False


def _ensure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    app_logger = logging.getLogger("docviewer")
    uvicorn_logger = logging.getLogger("uvicorn.error")

    handlers = list(uvicorn_logger.handlers)
    if handlers:
        app_logger.handlers = []
        for handler in handlers:
            app_logger.addHandler(handler)
    else:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        app_logger.addHandler(handler)

    if app_logger.level == logging.NOTSET or app_logger.level > logging.INFO:
        app_logger.setLevel(logging.INFO)
    app_logger.propagate = False
    _LOGGING_CONFIGURED = True


class ApplicationState:
    """Container for runtime dependencies used by the FastAPI app."""

    def __init__(
        self,
        *,
        settings: Settings,
        project_roots: Mapping[str, str],
        catalog: ProjectCatalog,
        metrics: MetricsRecorder | None,
    ) -> None:
        self.settings = settings
        self.project_roots: Dict[str, str] = dict(project_roots)
        self.catalog = catalog
        self.metrics = metrics


def create_app(
    *,
    settings: Settings | None = None,
    project_roots: Mapping[str, str] | None = None,
    catalog: ProjectCatalog | None = None,
    metrics: MetricsRecorder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    _ensure_logging()

    settings = settings or Settings.from_env()
    metrics = metrics or settings.build_metrics_recorder()
    if project_roots is None:
        project_roots = load_project_roots(settings.project_roots_path)
    catalog = catalog or ProjectCatalog(MetadataStore(settings.metadata_path()), metrics=metrics)
    logger.info(
        "app.start metadata_path=%s projects=%s",
        catalog.store.path,
        len(project_roots),
    )

    app = FastAPI()
    app.state.services = ApplicationState(
        settings=settings,
        project_roots=project_roots,
        catalog=catalog,
        metrics=metrics,
    )

    def get_state(request: Request) -> ApplicationState:
        return request.app.state.services

    def get_catalog(request: Request) -> ProjectCatalog:
        return get_state(request).catalog

    def get_project_roots(request: Request) -> Dict[str, str]:
        return get_state(request).project_roots

    def get_settings_dependency(request: Request) -> Settings:
        return get_state(request).settings

    def get_metrics(request: Request) -> MetricsRecorder | None:
        return get_state(request).metrics

    def _resolve_root(project_roots: Mapping[str, str], project: str | None, *, status_code: int) -> str:
        name = (project or "").strip()
        root = project_roots.get(name)
        if root is None:
            raise HTTPException(status_code=status_code, detail="Invalid project")
        return root

    @app.get("/api/projects", response_class=JSONResponse)
    async def list_projects(
        action: str | None = Query(None),
        project: str | None = Query(None),
        settings: Settings = Depends(get_settings_dependency),
        catalog: ProjectCatalog = Depends(get_catalog),
        project_roots: Dict[str, str] = Depends(get_project_roots),
        metrics: MetricsRecorder | None = Depends(get_metrics),
    ) -> JSONResponse:
        if action == "by-category":
            grouped = catalog.get_projects_by_category(project_roots)
            payload: dict[str, object] = {}
            for category_name, projects in grouped.items():
                definition = get_category_definition(category_name)
                payload[category_name] = {
                    "definition": definition.to_dict() if definition else None,
                    "projects": [metadata.to_dict() for metadata in projects],
                }
            return JSONResponse(payload)

        if action == "metadata":
            root = _resolve_root(project_roots, project, status_code=404)
            details = build_project_details(
                catalog,
                project.strip(),
                root,
                preview_limit=settings.preview_char_limit,
                key_docs_limit=settings.key_docs_limit,
                metrics=metrics,
            )
            return JSONResponse(details.to_dict())

        projects = catalog.list_projects(project_roots)
        return JSONResponse([metadata.to_dict() for metadata in projects])

    @app.put("/api/projects", response_class=JSONResponse)
    async def update_project(
        request: Request,
        catalog: ProjectCatalog = Depends(get_catalog),
    ) -> JSONResponse:
        try:
            payload = await request.json()
        except json.JSONDecodeError as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="projectName and updates are required")
        project_name = payload.get("projectName")
        updates = payload.get("updates")
        if not project_name or not isinstance(project_name, str) or not isinstance(updates, dict) or not updates:
            raise HTTPException(status_code=400, detail="projectName and updates are required")
        if "category" in updates and not isinstance(updates["category"], str):
            raise HTTPException(status_code=400, detail="category must be a string")
        tags = updates.get("tags")
        if "tags" in updates and (
            not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags)
        ):
            raise HTTPException(status_code=400, detail="tags must be a list of strings")
        try:
            updated = catalog.update_project_metadata(project_name, updates)
        except ProjectNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return JSONResponse(updated.to_dict())

    @app.get("/api/categories", response_class=JSONResponse)
    async def list_categories() -> JSONResponse:
        return JSONResponse([definition.to_dict() for definition in get_all_categories()])

    @app.get("/api/docs", response_class=JSONResponse)
    async def list_docs(
        project: str | None = Query(None),
        settings: Settings = Depends(get_settings_dependency),
        project_roots: Dict[str, str] = Depends(get_project_roots),
    ) -> JSONResponse:
        max_depth = settings.doc_tree_max_depth
        if project and project in project_roots:
            tree = build_doc_tree(Path(project_roots[project]), max_depth=max_depth)
            return JSONResponse({"project": project, "files": [node.to_dict() for node in tree]})

        payload = {
            name: [node.to_dict() for node in build_doc_tree(Path(root), max_depth=max_depth)]
            for name, root in project_roots.items()
        }
        return JSONResponse(payload)

    @app.get("/api/content", response_class=JSONResponse)
    async def read_content(
        project: str | None = Query(None),
        file: str | None = Query(None),
        project_roots: Dict[str, str] = Depends(get_project_roots),
    ) -> JSONResponse:
        if not project or not file:
            raise HTTPException(status_code=400, detail="Missing project or file parameter")
        root = _resolve_root(project_roots, project, status_code=400)
        try:
            content = read_document(Path(root), file)
        except PathOutsideProjectError as exc:
            raise HTTPException(status_code=403, detail="Access denied") from exc
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise HTTPException(status_code=404, detail="File not found") from exc
        return JSONResponse({"project": project, "filePath": file, "content": content})

    @app.get("/metrics")
    async def metrics_endpoint(metrics: MetricsRecorder | None = Depends(get_metrics)) -> Response:
        if metrics is None or not metrics.prometheus_enabled:
            raise HTTPException(status_code=404, detail="Metrics export disabled")
        return Response(content=metrics.render_prometheus(), media_type=metrics.prometheus_content_type)

    return app


__all__ = ["ApplicationState", "create_app"]
