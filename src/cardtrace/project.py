"""
cardtrace.project - Project descriptor files.

A project lists the card files and trace files that belong together.
It is the input to the consistency validator.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

PROJECT_FILE_VERSION = "1.0.0"

_METADATA_FIELDS = ("name", "description", "createdAt", "updatedAt")


@dataclass
class ProjectMetadata:
    name: str
    description: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ProjectFile:
    """A project descriptor.

    Attributes:
        version: Descriptor format version.
        metadata: Name, description and timestamps.
        card_files: Card file names, relative to the output directory.
        trace_files: Trace file names, relative to the output directory.
    """

    metadata: ProjectMetadata
    card_files: list[str] = field(default_factory=list)
    trace_files: list[str] = field(default_factory=list)
    version: str = PROJECT_FILE_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectFile:
        """Create a ProjectFile from its JSON shape.

        Raises:
            ValueError: If ``data`` is not a valid project descriptor.
        """
        if not is_project_file(data):
            raise ValueError("Invalid project file format")
        meta = data["metadata"]
        return cls(
            version=data["version"],
            metadata=ProjectMetadata(
                name=meta["name"],
                description=meta["description"],
                created_at=meta["createdAt"],
                updated_at=meta["updatedAt"],
            ),
            card_files=[str(f) for f in data["files"]["cardFiles"]],
            trace_files=[str(f) for f in data["files"]["traceFiles"]],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "metadata": {
                "name": self.metadata.name,
                "description": self.metadata.description,
                "createdAt": self.metadata.created_at,
                "updatedAt": self.metadata.updated_at,
            },
            "files": {
                "cardFiles": list(self.card_files),
                "traceFiles": list(self.trace_files),
            },
        }


def is_project_file(value: Any) -> bool:
    """True if ``value`` has the structure of a project descriptor."""
    if not isinstance(value, dict):
        return False
    metadata = value.get("metadata")
    files = value.get("files")
    if not isinstance(value.get("version"), str):
        return False
    if not isinstance(metadata, dict) or not isinstance(files, dict):
        return False
    if not all(isinstance(metadata.get(key), str) for key in _METADATA_FIELDS):
        return False
    return isinstance(files.get("cardFiles"), list) and isinstance(files.get("traceFiles"), list)


def load_project_file(path: Path) -> ProjectFile:
    """Load a project descriptor from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not JSON or not a project descriptor.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return ProjectFile.from_dict(data)
