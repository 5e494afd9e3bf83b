"""CLI for classifying configured projects and summarising their documentation."""

from __future__ import annotations

import argparse
import json
import sys

from docviewer.catalog import ProjectCatalog
from docviewer.categories import get_category_definition
from docviewer.config import Settings
from docviewer.metadata_store import MetadataStore
from docviewer.project_details import build_project_details
from docviewer.project_roots import ProjectRootsLoadError, load_project_roots


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Classify documented projects and summarise their docs")
    parser.add_argument(
        "--roots",
        dest="roots_path",
        help="YAML file mapping project names to directories (default: DOCVIEWER_PROJECT_ROOTS)",
    )
    parser.add_argument(
        "--project",
        help="Show the detailed record of a single project instead of the category overview",
    )
    parser.add_argument("--json", dest="as_json", action="store_true", help="Emit JSON instead of text")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    try:
        project_roots = load_project_roots(args.roots_path or settings.project_roots_path)
    except ProjectRootsLoadError as exc:  # pragma: no cover - CLI validation
        parser.error(str(exc))
        return 1

    catalog = ProjectCatalog(MetadataStore(settings.metadata_path()))

    if args.project:
        root = project_roots.get(args.project)
        if root is None:
            print(f"Unknown project '{args.project}'", file=sys.stderr)
            return 2
        details = build_project_details(
            catalog,
            args.project,
            root,
            preview_limit=settings.preview_char_limit,
            key_docs_limit=settings.key_docs_limit,
        )
        if args.as_json:
            print(json.dumps(details.to_dict(), indent=2, ensure_ascii=False))
            return 0
        stats = details.stats
        print(f"{details.metadata.display_name} [{details.metadata.category}]")
        print(f"  {details.metadata.description}")
        print(f"  docs={stats.total_docs} components={stats.components} updated={stats.last_updated}")
        for doc in details.key_docs:
            print(f"  - {doc.title} ({doc.type}): {doc.path}")
        return 0

    grouped = catalog.get_projects_by_category(project_roots)
    if args.as_json:
        payload = {name: [metadata.to_dict() for metadata in projects] for name, projects in grouped.items()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0
    for category_name, projects in grouped.items():
        definition = get_category_definition(category_name)
        print(definition.display_name if definition else category_name)
        for metadata in projects:
            marker = "*" if metadata.auto_detected else " "
            print(f" {marker} {metadata.display_name} ({metadata.path})")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
