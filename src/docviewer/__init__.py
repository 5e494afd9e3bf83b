"""Documentation viewer package."""

from __future__ import annotations

from .catalog import ProjectCatalog, ProjectNotFoundError
from .categories import (
    CategoryDefinition,
    auto_detect_category,
    get_all_categories,
    get_category_definition,
    normalize_category,
)
from .config import Settings
from .markdown_parser import ParsedMarkdown, extract_readme_preview, parse_markdown_structure
from .metadata_store import MetadataStore, ProjectMetadata

__all__ = [
    "CategoryDefinition",
    "MetadataStore",
    "ParsedMarkdown",
    "ProjectCatalog",
    "ProjectMetadata",
    "ProjectNotFoundError",
    "Settings",
    "auto_detect_category",
    "create_app",
    "extract_readme_preview",
    "get_all_categories",
    "get_category_definition",
    "normalize_category",
    "parse_markdown_structure",
]


def __getattr__(name: str):  # pragma: no cover - small helper
    if name == "create_app":
        from .app import create_app

        return create_app
    raise AttributeError(f"module 'docviewer' has no attribute {name}")
