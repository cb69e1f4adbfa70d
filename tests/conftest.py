"""Shared fixtures: card, trace and project files on disk."""

import json

import pytest


def _card(card_id):
    return {
        "id": card_id,
        "title": card_id,
        "body": "",
        "status": "draft",
        "kind": "paragraph",
        "hasLeftTrace": False,
        "hasRightTrace": False,
        "markdownPreviewEnabled": False,
        "updatedAt": "2025-11-06T09:30:00.000Z",
        "parent_id": None,
        "child_ids": [],
        "prev_id": None,
        "next_id": None,
        "level": 0,
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON payload under tmp_path and return its file name."""

    def _write(name, payload):
        (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")
        return name

    return _write


@pytest.fixture
def project_dir(tmp_path, write_json):
    """Directory with two card files, one consistent trace file and a project."""
    from cardtrace.project import ProjectFile, ProjectMetadata

    write_json(
        "left.json",
        {"cards": [_card("L1"), _card("L2")], "savedAt": "2025-11-06T09:30:00.000Z"},
    )
    write_json("right.json", {"cards": [_card("R1"), _card("R2")], "savedAt": "x"})
    write_json(
        "trace_left_right.json",
        {
            "schemaVersion": 1,
            "left_file": "left.json",
            "right_file": "right.json",
            "relations": [
                {
                    "id": "rel-1",
                    "left_ids": ["L1"],
                    "right_ids": ["R1", "R2"],
                    "type": "trace",
                    "directed": "left_to_right",
                },
                {
                    "id": "rel-2",
                    "left_ids": ["L2"],
                    "right_ids": ["R2"],
                    "type": "tests",
                    "directed": "bidirectional",
                },
            ],
        },
    )
    project = ProjectFile(
        metadata=ProjectMetadata(name="demo"),
        card_files=["left.json", "right.json"],
        trace_files=["trace_left_right.json"],
    )
    return tmp_path, project
