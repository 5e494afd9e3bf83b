from __future__ import annotations

import json
from pathlib import Path

import pytest

from docviewer.scripts.scan_projects import main


@pytest.fixture()
def roots_file(tmp_path: Path, sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("DOCVIEWER_DATA_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("DOCVIEWER_METADATA_FILE", raising=False)
    path = tmp_path / "projects.yaml"
    path.write_text(f"my-api-server: {sample_project}\n", encoding="utf-8")
    return path


def test_overview_lists_categories(roots_file: Path, tmp_path: Path, capsys) -> None:
    assert main(["--roots", str(roots_file)]) == 0

    output = capsys.readouterr().out
    assert "Backend Services" in output
    assert " * My Api Server" in output
    assert (tmp_path / "state" / "project-metadata.json").exists()


def test_overview_json(roots_file: Path, capsys) -> None:
    assert main(["--roots", str(roots_file), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [project["name"] for project in payload["backend"]] == ["my-api-server"]


def test_project_details_json(roots_file: Path, capsys) -> None:
    assert main(["--roots", str(roots_file), "--project", "my-api-server", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["stats"]["totalDocs"] == 6
    assert payload["keyDocs"][1] == {"title": "api.md", "path": "docs/api.md", "type": "api"}


def test_project_details_text(roots_file: Path, capsys) -> None:
    assert main(["--roots", str(roots_file), "--project", "my-api-server"]) == 0

    output = capsys.readouterr().out
    assert output.startswith("My Api Server [backend]")
    assert "docs=6 components=2" in output


def test_unknown_project(roots_file: Path, capsys) -> None:
    assert main(["--roots", str(roots_file), "--project", "ghost"]) == 2

    assert "Unknown project 'ghost'" in capsys.readouterr().err
