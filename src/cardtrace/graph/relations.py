"""Relations - Traceability relations between two card collections.

This module defines the stored and derived forms of traceability:
- RelationKind: Enum of relation types
- RelationDirection: Stored direction, relative to the left/right files
- LinkDirection: Normalized direction of an expanded link
- TraceabilityRelation: Many-to-many relation as persisted
- TraceabilityLink: One (source, target) edge from a relation's cross product

All transforms are pure: they never modify their inputs.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable

if TYPE_CHECKING:
    from cardtrace.graph.cards import Card


class RelationKind(Enum):
    """Types of traceability relations."""

    TRACE = "trace"
    REFINES = "refines"
    TESTS = "tests"
    DUPLICATES = "duplicates"
    SATISFY = "satisfy"
    RELATE = "relate"
    SPECIALIZE = "specialize"


class RelationDirection(Enum):
    """Direction of a relation as stored, relative to its left/right files."""

    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"
    BIDIRECTIONAL = "bidirectional"


class LinkDirection(Enum):
    """Direction of an expanded link, relative to source and target."""

    FORWARD = "forward"
    BACKWARD = "backward"
    BIDIRECTIONAL = "bidirectional"


class RelationTooWideError(ValueError):
    """Raised when expanding a relation would exceed the configured link ceiling."""

    def __init__(self, relation_id: str, link_count: int, max_links: int) -> None:
        super().__init__(
            f"Relation {relation_id} expands to {link_count} links (limit {max_links})"
        )
        self.relation_id = relation_id
        self.link_count = link_count
        self.max_links = max_links


@dataclass
class TraceabilityRelation:
    """A stored many-to-many relation between card IDs of two files.

    Attributes:
        id: Relation identifier.
        left_ids: Card IDs from the left file.
        right_ids: Card IDs from the right file.
        type: Relation kind. Unknown kinds from disk are kept as strings.
        directed: Stored direction. Unknown tokens are kept as strings and
            normalize to bidirectional.
        memo: Optional free text.
    """

    id: str
    left_ids: list[str]
    right_ids: list[str]
    type: RelationKind | str = RelationKind.TRACE
    directed: RelationDirection | str = RelationDirection.LEFT_TO_RIGHT
    memo: str | None = None

    @property
    def kind_value(self) -> str:
        return self.type.value if isinstance(self.type, RelationKind) else self.type

    @property
    def directed_value(self) -> str:
        if isinstance(self.directed, RelationDirection):
            return self.directed.value
        return self.directed

    def link_count(self) -> int:
        """Number of links this relation expands to."""
        return len(self.left_ids) * len(self.right_ids)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "left_ids": list(self.left_ids),
            "right_ids": list(self.right_ids),
            "type": self.kind_value,
            "directed": self.directed_value,
        }
        if self.memo is not None:
            data["memo"] = self.memo
        return data


@dataclass(frozen=True)
class TraceabilityLink:
    """One atomic edge derived from a relation.

    Attributes:
        id: ``<relationId>:<leftId>-><rightId>``, identical under both
            orientations of the same pair.
        relation_id: ID of the originating relation.
        source_card_id: Card the link starts from in the current view.
        target_card_id: Card the link points to in the current view.
        relation: Relation kind.
        direction: Normalized direction relative to source/target.
    """

    id: str
    relation_id: str
    source_card_id: str
    target_card_id: str
    relation: RelationKind | str
    direction: LinkDirection

    def as_triple(self) -> tuple[str, str, LinkDirection]:
        return (self.source_card_id, self.target_card_id, self.direction)


def normalize_direction(token: RelationDirection | str | None) -> LinkDirection:
    """Map a stored direction token to a link direction.

    ``left_to_right`` becomes forward, ``right_to_left`` backward, and
    anything else (including unknown tokens) bidirectional.
    """
    if isinstance(token, RelationDirection):
        token = token.value
    if token == RelationDirection.LEFT_TO_RIGHT.value:
        return LinkDirection.FORWARD
    if token == RelationDirection.RIGHT_TO_LEFT.value:
        return LinkDirection.BACKWARD
    return LinkDirection.BIDIRECTIONAL


def invert_direction(direction: LinkDirection) -> LinkDirection:
    """Swap forward and backward; bidirectional is unchanged."""
    if direction == LinkDirection.FORWARD:
        return LinkDirection.BACKWARD
    if direction == LinkDirection.BACKWARD:
        return LinkDirection.FORWARD
    return LinkDirection.BIDIRECTIONAL


def make_link_id(relation_id: str, left_id: str, right_id: str) -> str:
    return f"{relation_id}:{left_id}->{right_id}"


def relation_to_links(
    relation: TraceabilityRelation,
    swap_orientation: bool = False,
    max_links: int | None = None,
) -> list[TraceabilityLink]:
    """Expand a relation into one link per ``left_ids x right_ids`` pair.

    Args:
        relation: The relation to expand.
        swap_orientation: The viewer shows the relation's right file on the
            left. Sources become right IDs and the direction is inverted.
        max_links: Optional ceiling on the cross product size. None means
            unbounded.

    Returns:
        Links ordered by left ID, then right ID.

    Raises:
        RelationTooWideError: If ``max_links`` is set and exceeded.
    """
    count = relation.link_count()
    if max_links is not None and count > max_links:
        raise RelationTooWideError(relation.id, count, max_links)

    direction = normalize_direction(relation.directed)
    if swap_orientation:
        direction = invert_direction(direction)

    links: list[TraceabilityLink] = []
    for left_id in relation.left_ids:
        for right_id in relation.right_ids:
            source, target = (right_id, left_id) if swap_orientation else (left_id, right_id)
            links.append(
                TraceabilityLink(
                    id=make_link_id(relation.id, left_id, right_id),
                    relation_id=relation.id,
                    source_card_id=source,
                    target_card_id=target,
                    relation=relation.type,
                    direction=direction,
                )
            )
    return links


def relations_to_links(
    relations: Iterable[TraceabilityRelation],
    swap_orientation: bool = False,
    max_links: int | None = None,
) -> list[TraceabilityLink]:
    """Expand relations in order; ``max_links`` applies to each relation."""
    links: list[TraceabilityLink] = []
    for relation in relations:
        links.extend(relation_to_links(relation, swap_orientation, max_links))
    return links


def is_swapped(payload_left: str, payload_right: str, view_left: str, view_right: str) -> bool:
    """True unless the viewer shows the payload's files in recorded order."""
    return not (payload_left == view_left and payload_right == view_right)


# ─────────────────────────────────────────────────────────────────────────────
# Relation editing
# ─────────────────────────────────────────────────────────────────────────────


def build_relation_lookup(
    relations: Iterable[TraceabilityRelation],
) -> dict[tuple[str, str], TraceabilityRelation]:
    """Index relations by every (left_id, right_id) pair they cover.

    Later relations win when two cover the same pair.
    """
    lookup: dict[tuple[str, str], TraceabilityRelation] = {}
    for relation in relations:
        for left_id in relation.left_ids:
            for right_id in relation.right_ids:
                lookup[(left_id, right_id)] = relation
    return lookup


def toggle_trace_relation(
    relations: list[TraceabilityRelation],
    left_id: str,
    right_id: str,
    new_id: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> tuple[list[TraceabilityRelation], bool]:
    """Add or remove the link between ``left_id`` and ``right_id``.

    When no relation covers the pair, a new ``trace`` relation directed
    left to right is appended. Otherwise both IDs are removed from the
    owning relation, which is dropped once either side is empty.

    Args:
        relations: Current relations.
        left_id: Card ID in the left file.
        right_id: Card ID in the right file.
        new_id: Factory for the ID of a newly created relation.

    Returns:
        Tuple of (new relation list, whether the pair is now linked).
    """
    existing = build_relation_lookup(relations).get((left_id, right_id))
    if existing is None:
        created = TraceabilityRelation(
            id=new_id(),
            left_ids=[left_id],
            right_ids=[right_id],
            type=RelationKind.TRACE,
            directed=RelationDirection.LEFT_TO_RIGHT,
        )
        return [*relations, created], True

    updated: list[TraceabilityRelation] = []
    for relation in relations:
        if relation.id != existing.id:
            updated.append(relation)
            continue
        left_ids = [i for i in relation.left_ids if i != left_id]
        right_ids = [i for i in relation.right_ids if i != right_id]
        if left_ids and right_ids:
            updated.append(replace(relation, left_ids=left_ids, right_ids=right_ids))
    return updated, False


def change_relation_kind(
    relations: list[TraceabilityRelation],
    left_id: str,
    right_id: str,
    kind: RelationKind,
) -> list[TraceabilityRelation]:
    """Set the kind of the relation covering (left_id, right_id), if any."""
    existing = build_relation_lookup(relations).get((left_id, right_id))
    if existing is None:
        return list(relations)
    return [replace(r, type=kind) if r.id == existing.id else r for r in relations]


def mark_traced_cards(
    cards: list[Card],
    relations: Iterable[TraceabilityRelation],
    side: str,
) -> list[Card]:
    """Copy ``cards`` with their trace flags set from ``relations``.

    Args:
        cards: Cards of one collection.
        relations: Relations of a trace file that includes the collection.
        side: ``"left"`` if the cards belong to the relations' left file,
            ``"right"`` otherwise. A left-file card is traced on its right
            edge and vice versa.

    Returns:
        New Card objects; the inputs are not modified.
    """
    if side not in ("left", "right"):
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")
    traced: set[str] = set()
    for relation in relations:
        traced.update(relation.left_ids if side == "left" else relation.right_ids)
    flag = "has_right_trace" if side == "left" else "has_left_trace"
    return [
        replace(
            card,
            child_ids=list(card.child_ids),
            **{flag: getattr(card, flag) or card.trace_id in traced},
        )
        for card in cards
    ]


__all__ = [
    "LinkDirection",
    "RelationDirection",
    "RelationKind",
    "RelationTooWideError",
    "TraceabilityLink",
    "TraceabilityRelation",
    "build_relation_lookup",
    "change_relation_kind",
    "invert_direction",
    "is_swapped",
    "make_link_id",
    "mark_traced_cards",
    "normalize_direction",
    "relation_to_links",
    "relations_to_links",
    "toggle_trace_relation",
]
