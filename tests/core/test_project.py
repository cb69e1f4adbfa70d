"""Tests for project descriptor files."""

import json

import pytest

from cardtrace.project import (
    PROJECT_FILE_VERSION,
    ProjectFile,
    ProjectMetadata,
    is_project_file,
    load_project_file,
)


@pytest.fixture
def project_data():
    return {
        "version": "1.0.0",
        "metadata": {
            "name": "demo",
            "description": "Card files for the demo",
            "createdAt": "2025-11-06T09:30:00.000Z",
            "updatedAt": "2025-11-06T09:30:00.000Z",
        },
        "files": {
            "cardFiles": ["left.json", "right.json"],
            "traceFiles": ["trace_left_right.json"],
        },
    }


class TestProjectFile:
    def test_from_dict(self, project_data):
        project = ProjectFile.from_dict(project_data)

        assert project.metadata.name == "demo"
        assert project.metadata.created_at == "2025-11-06T09:30:00.000Z"
        assert project.card_files == ["left.json", "right.json"]
        assert project.trace_files == ["trace_left_right.json"]

    def test_round_trip(self, project_data):
        assert ProjectFile.from_dict(project_data).to_dict() == project_data

    def test_defaults(self):
        project = ProjectFile(metadata=ProjectMetadata(name="p"))

        assert project.version == PROJECT_FILE_VERSION
        assert project.to_dict()["files"] == {"cardFiles": [], "traceFiles": []}

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda d: d.pop("version"),
            lambda d: d["metadata"].pop("updatedAt"),
            lambda d: d["files"].update(traceFiles="trace.json"),
            lambda d: d.update(files=[]),
        ],
    )
    def test_invalid_shape(self, project_data, mutate):
        mutate(project_data)

        assert is_project_file(project_data) is False
        with pytest.raises(ValueError, match="Invalid project file format"):
            ProjectFile.from_dict(project_data)

    def test_not_an_object(self):
        assert is_project_file([]) is False


class TestLoadProjectFile:
    def test_load(self, tmp_path, project_data):
        path = tmp_path / "demo.msp"
        path.write_text(json.dumps(project_data), encoding="utf-8")

        assert load_project_file(path).metadata.name == "demo"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "demo.msp"
        path.write_text("not json", encoding="utf-8")

        with pytest.raises(ValueError):
            load_project_file(path)

    def test_missing(self, tmp_path):
        with pytest.raises(OSError):
            load_project_file(tmp_path / "missing.msp")
