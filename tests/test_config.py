from __future__ import annotations

from pathlib import Path

import pytest

from docviewer.config import Settings

_ENV_VARS = (
    "DOCVIEWER_DATA_DIR",
    "DOCVIEWER_METADATA_FILE",
    "DOCVIEWER_PROJECT_ROOTS",
    "DOCVIEWER_PREVIEW_LIMIT",
    "DOCVIEWER_KEY_DOCS_LIMIT",
    "DOCVIEWER_TREE_MAX_DEPTH",
    "OBSERVABILITY_METRICS_ENABLED",
    "OBSERVABILITY_NAMESPACE",
    "OBSERVABILITY_PROMETHEUS_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.data_dir == ".docs-viewer-data"
    assert settings.metadata_filename == "project-metadata.json"
    assert settings.project_roots_path == "projects.yaml"
    assert settings.preview_char_limit == 300
    assert settings.key_docs_limit == 5
    assert settings.doc_tree_max_depth == 5
    assert settings.observability_metrics_enabled is True
    assert settings.observability_prometheus_enabled is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DOCVIEWER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DOCVIEWER_METADATA_FILE", "meta.json")
    monkeypatch.setenv("DOCVIEWER_PREVIEW_LIMIT", " 120 ")
    monkeypatch.setenv("DOCVIEWER_TREE_MAX_DEPTH", "-3")
    monkeypatch.setenv("OBSERVABILITY_PROMETHEUS_ENABLED", "yes")
    monkeypatch.setenv("OBSERVABILITY_METRICS_ENABLED", "off")

    settings = Settings.from_env()

    assert settings.metadata_path() == tmp_path.resolve() / "meta.json"
    assert settings.preview_char_limit == 120
    assert settings.doc_tree_max_depth == 0
    assert settings.observability_prometheus_enabled is True
    assert settings.observability_metrics_enabled is False


def test_invalid_boolean_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OBSERVABILITY_PROMETHEUS_ENABLED", "maybe")

    with pytest.raises(ValueError, match="OBSERVABILITY_PROMETHEUS_ENABLED"):
        Settings.from_env()


def test_invalid_integer_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCVIEWER_KEY_DOCS_LIMIT", "five")

    with pytest.raises(ValueError, match="DOCVIEWER_KEY_DOCS_LIMIT"):
        Settings.from_env()


def test_build_metrics_recorder_follows_settings() -> None:
    recorder = Settings(observability_prometheus_enabled=True).build_metrics_recorder()

    assert recorder.enabled
    assert recorder.prometheus_enabled
