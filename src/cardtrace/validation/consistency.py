"""Consistency validation - Check trace files against the cards they reference.

For a project descriptor this checks that:
- every declared card file exists
- every declared trace file loads and is well formed
- each trace file's left/right card files are declared by the project
- every card ID named by a relation exists in the corresponding card file

Problems are collected as ValidationIssue entries; one bad file never
stops the rest of the project from being checked.

File access goes through three callables (card-ID resolver, trace loader,
existence check) so the validator can run against any store. The
``directory_*`` factories build them for a directory of JSON files.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Union

from cardtrace.graph.deserializer import (
    ShapeError,
    TraceFilePayload,
    extract_card_ids,
    parse_trace_file,
)
from cardtrace.project import ProjectFile

logger = logging.getLogger(__name__)


class IssueLevel(Enum):
    """Severity of a validation issue. Only errors fail validation."""

    ERROR = "error"
    WARN = "warn"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found during validation.

    Attributes:
        level: Error or warning.
        message: Human-readable description.
        file: File name, or ``<traceFile>#<relationIndex>`` for relation issues.
    """

    level: IssueLevel
    message: str
    file: str | None = None

    def __str__(self) -> str:
        location = f" [{self.file}]" if self.file else ""
        return f"{self.level.value.upper()}{location}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"level": self.level.value, "message": self.message}
        if self.file is not None:
            data["file"] = self.file
        return data


@dataclass
class ValidationResult:
    """Outcome of one validation run."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no issue is an error."""
        return all(issue.level != IssueLevel.ERROR for issue in self.issues)

    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == IssueLevel.ERROR]

    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == IssueLevel.WARN]

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "issues": [i.to_dict() for i in self.issues]}


CardIdLookup = Union[set[str], ValidationIssue]
CardIdResolver = Callable[[str], CardIdLookup]
TraceLoader = Callable[[str], Union[TraceFilePayload, ShapeError]]
FileExists = Callable[[str], bool]


class CardIdCache:
    """Per-run memo of card-ID lookups, keyed by card file name.

    Each file name is handed to the resolver at most once; failures are
    remembered as well. Create one cache per validation run.
    """

    def __init__(self, resolver: CardIdResolver) -> None:
        self._resolver = resolver
        self._entries: dict[str, CardIdLookup] = {}

    def __contains__(self, file_name: str) -> bool:
        return file_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, file_name: str) -> CardIdLookup:
        """Return the card IDs of ``file_name`` or the issue that prevented resolution."""
        if file_name not in self._entries:
            try:
                self._entries[file_name] = self._resolver(file_name)
            except Exception as e:
                logger.debug("Resolver failed for %s: %s", file_name, e)
                self._entries[file_name] = ValidationIssue(
                    IssueLevel.ERROR, f"Cannot read card file: {e}", file_name
                )
        return self._entries[file_name]


def _load_trace(load_trace: TraceLoader, trace_file: str) -> TraceFilePayload | ShapeError:
    try:
        return load_trace(trace_file)
    except Exception as e:
        logger.debug("Trace loader failed for %s: %s", trace_file, e)
        return ShapeError(str(e) or type(e).__name__)


def _missing_ids(ids: list[str], known: set[str] | None) -> list[str]:
    if known is None:
        return list(ids)
    return [card_id for card_id in ids if card_id not in known]


def validate_trace_consistency(
    project: ProjectFile,
    resolver: CardIdResolver,
    load_trace: TraceLoader,
    file_exists: FileExists,
    cache: CardIdCache | None = None,
) -> ValidationResult:
    """Validate every trace file of ``project`` against its card files.

    Args:
        project: The project descriptor.
        resolver: Returns the card IDs of a card file, or a ValidationIssue.
        load_trace: Loads and parses a trace file. Any exception it raises
            is reported as an unreadable file.
        file_exists: Whether a declared card file exists.
        cache: Memo for card-ID lookups. A fresh one is created when omitted;
            never share one between concurrent runs.

    Returns:
        ValidationResult with issues in card-file, trace-file, then
        relation-index order.
    """
    if cache is None:
        cache = CardIdCache(resolver)
    issues: list[ValidationIssue] = []
    reported_failures: set[str] = set()
    declared = set(project.card_files)

    for card_file in project.card_files:
        if not file_exists(card_file):
            issues.append(ValidationIssue(IssueLevel.ERROR, "Card file does not exist", card_file))

    def resolve(card_file: str) -> set[str] | None:
        if not card_file:
            return None
        found = cache.lookup(card_file)
        if isinstance(found, ValidationIssue):
            if card_file not in reported_failures:
                reported_failures.add(card_file)
                issues.append(found)
            return None
        return found

    for trace_file in project.trace_files:
        payload = _load_trace(load_trace, trace_file)
        if isinstance(payload, ShapeError):
            issues.append(
                ValidationIssue(IssueLevel.ERROR, f"Cannot read trace file: {payload}", trace_file)
            )
            continue

        for side, card_file in (("left_file", payload.left_file), ("right_file", payload.right_file)):
            if card_file not in declared:
                issues.append(
                    ValidationIssue(
                        IssueLevel.ERROR,
                        f"{side} '{card_file}' is not part of the project",
                        trace_file,
                    )
                )

        left_ids = resolve(payload.left_file)
        right_ids = resolve(payload.right_file)

        for index, relation in enumerate(payload.relations):
            location = f"{trace_file}#{index}"
            left_missing = _missing_ids(relation.left_ids, left_ids)
            right_missing = _missing_ids(relation.right_ids, right_ids)
            if left_missing:
                issues.append(
                    ValidationIssue(
                        IssueLevel.ERROR,
                        f"left_ids reference unknown cards: {', '.join(left_missing)}",
                        location,
                    )
                )
            if right_missing:
                issues.append(
                    ValidationIssue(
                        IssueLevel.ERROR,
                        f"right_ids reference unknown cards: {', '.join(right_missing)}",
                        location,
                    )
                )

    result = ValidationResult(issues=issues)
    logger.info(
        "Validated %d card files, %d trace files: %d errors, %d warnings",
        len(project.card_files),
        len(project.trace_files),
        len(result.errors()),
        len(result.warnings()),
    )
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Directory-backed file access
# ─────────────────────────────────────────────────────────────────────────────


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def directory_resolver(base_dir: Path) -> CardIdResolver:
    """Card-ID resolver reading JSON card files under ``base_dir``.

    Unreadable or invalid JSON yields an error issue; JSON without a card
    array yields a warning.
    """

    def resolve(file_name: str) -> CardIdLookup:
        try:
            data = _read_json(base_dir / file_name)
        except (OSError, ValueError) as e:
            logger.debug("Cannot read card file %s: %s", file_name, e)
            return ValidationIssue(IssueLevel.ERROR, "Cannot read card file", file_name)
        ids = extract_card_ids(data)
        if ids is None:
            return ValidationIssue(IssueLevel.WARN, "Cannot interpret card array", file_name)
        return ids

    return resolve


def directory_trace_loader(base_dir: Path) -> TraceLoader:
    """Trace loader reading JSON trace files under ``base_dir``."""

    def load(file_name: str) -> TraceFilePayload | ShapeError:
        return parse_trace_file(_read_json(base_dir / file_name))

    return load


def directory_file_exists(base_dir: Path) -> FileExists:
    def exists(file_name: str) -> bool:
        return (base_dir / file_name).is_file()

    return exists


def validate_project_directory(project: ProjectFile, base_dir: Path) -> ValidationResult:
    """Validate ``project`` against card and trace files stored in ``base_dir``."""
    return validate_trace_consistency(
        project,
        resolver=directory_resolver(base_dir),
        load_trace=directory_trace_loader(base_dir),
        file_exists=directory_file_exists(base_dir),
    )
