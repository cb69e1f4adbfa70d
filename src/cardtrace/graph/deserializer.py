"""Deserializer - Shape checks for persisted card and trace payloads.

Payloads come from JSON on disk and are untrusted. The ``is_*`` guards
answer yes/no; the ``parse_*`` functions return either the typed value
or a ``ShapeError`` describing the first offending field, so callers
branch with ``isinstance`` instead of probing optional keys.

Only structure is checked here. Whether referenced card IDs exist is the
consistency validator's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cardtrace.graph.relations import RelationDirection, RelationKind, TraceabilityRelation


@dataclass(frozen=True)
class ShapeError:
    """A payload that does not have the expected structure.

    Attributes:
        message: What is wrong.
        path: Dotted location of the offending field (``relations[2].left_ids``).
    """

    message: str
    path: str = ""

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass
class TraceFilePayload:
    """The body of a trace file: two card files and their relations."""

    left_file: str
    right_file: str
    relations: list[TraceabilityRelation] = field(default_factory=list)
    schema_version: int | None = None
    header: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "left_file": self.left_file,
            "right_file": self.right_file,
            "relations": [r.to_dict() for r in self.relations],
        }
        if self.schema_version is not None:
            data["schemaVersion"] = self.schema_version
        if self.header:
            data["header"] = dict(self.header)
        return data


def _relation_shape_error(value: Any, path: str) -> ShapeError | None:
    if not isinstance(value, dict):
        return ShapeError("relation must be an object", path)
    if not isinstance(value.get("id"), str):
        return ShapeError("'id' must be a string", f"{path}.id")
    for key in ("left_ids", "right_ids"):
        if not isinstance(value.get(key), list):
            return ShapeError(f"'{key}' must be an array", f"{path}.{key}")
    for key in ("type", "directed"):
        if not isinstance(value.get(key), str):
            return ShapeError(f"'{key}' must be a string", f"{path}.{key}")
    return None


def is_traceability_relation(value: Any) -> bool:
    """True if ``value`` has the fields of a stored relation."""
    return _relation_shape_error(value, "relation") is None


def _coerce_enum(enum_cls: type, raw: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError:
        return raw


def parse_relation(value: Any, path: str = "relation") -> TraceabilityRelation | ShapeError:
    """Parse one stored relation.

    Unknown ``type``/``directed`` strings are kept verbatim rather than
    rejected; an unknown direction normalizes to bidirectional.
    """
    error = _relation_shape_error(value, path)
    if error is not None:
        return error
    memo = value.get("memo")
    return TraceabilityRelation(
        id=value["id"],
        left_ids=[str(i) for i in value["left_ids"]],
        right_ids=[str(i) for i in value["right_ids"]],
        type=_coerce_enum(RelationKind, value["type"]),
        directed=_coerce_enum(RelationDirection, value["directed"]),
        memo=memo if isinstance(memo, str) else None,
    )


def parse_trace_file(value: Any) -> TraceFilePayload | ShapeError:
    """Parse a trace file, unwrapping a ``{"payload": {...}}`` envelope if present."""
    if isinstance(value, dict) and isinstance(value.get("payload"), dict):
        value = value["payload"]
    if not isinstance(value, dict):
        return ShapeError("trace file must be an object")
    for key in ("left_file", "right_file"):
        if not isinstance(value.get(key), str):
            return ShapeError(f"'{key}' must be a string", key)
    raw_relations = value.get("relations")
    if not isinstance(raw_relations, list):
        return ShapeError("'relations' must be an array", "relations")

    relations: list[TraceabilityRelation] = []
    for index, raw in enumerate(raw_relations):
        parsed = parse_relation(raw, f"relations[{index}]")
        if isinstance(parsed, ShapeError):
            return parsed
        relations.append(parsed)

    schema_version = value.get("schemaVersion")
    header = value.get("header")
    return TraceFilePayload(
        left_file=value["left_file"],
        right_file=value["right_file"],
        relations=relations,
        schema_version=schema_version if isinstance(schema_version, int) else None,
        header=header if isinstance(header, dict) else {},
    )


def is_traceability_file(value: Any) -> bool:
    """True if ``value`` is a well-formed trace file (with or without envelope)."""
    return not isinstance(parse_trace_file(value), ShapeError)


def _find_card_array(value: Any) -> list[Any] | None:
    if isinstance(value, list):
        return value
    if not isinstance(value, dict):
        return None
    for key in ("cards", "body"):
        if isinstance(value.get(key), list):
            return value[key]
    return None


def extract_card_ids(value: Any) -> set[str] | None:
    """Collect the card IDs of a parsed card file.

    Accepts a workspace snapshot or ``{"cards": [...]}`` object, a card
    file with a ``body`` array, or a bare array. Each card contributes its
    ``cardId`` if set, else its ``id``.

    Returns:
        The ID set, or None if no card array can be found.
    """
    cards = _find_card_array(value)
    if cards is None:
        return None
    ids: set[str] = set()
    for card in cards:
        if not isinstance(card, dict):
            continue
        card_id = card.get("cardId") or card.get("id")
        if card_id:
            ids.add(str(card_id))
    return ids
