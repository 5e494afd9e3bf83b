from __future__ import annotations

import logging
from pathlib import Path

import pytest

from docviewer.catalog import ProjectCatalog
from docviewer.metadata_store import MetadataStore


def write_files(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def metadata_store(tmp_path: Path) -> MetadataStore:
    return MetadataStore(tmp_path / "state" / "project-metadata.json")


@pytest.fixture()
def catalog(metadata_store: MetadataStore) -> ProjectCatalog:
    return ProjectCatalog(metadata_store)


@pytest.fixture()
def sample_project(tmp_path: Path) -> Path:
    root = tmp_path / "projects" / "my-api-server"
    return write_files(
        root,
        {
            "README.md": (
                "# My API Server\n\n"
                "Intro.\n\n"
                "Handles every request for the workspace documentation portal.\n\n"
                "## Install\n"
                "```bash\nnpm install my-api-server\n```\n"
            ),
            "docs/api.md": "# API\n",
            "docs/getting-started.md": "# Start\n",
            "docs/config.md": "# Config\n",
            "docs/deep/example-usage.md": "# Example\n",
            "docs/notes.md": "# Notes\n",
            "docs/setup.txt": "not markdown",
            "node_modules/pkg/README.md": "# Vendored\n",
            ".git/HEAD.md": "# hidden\n",
            ".hidden.md": "# hidden file\n",
            "build/output.md": "# generated\n",
        },
    )


@pytest.fixture(autouse=True)
def _propagate_app_logs():
    # create_app() detaches the package logger from the root logger; caplog needs it attached.
    logger = logging.getLogger("docviewer")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous
