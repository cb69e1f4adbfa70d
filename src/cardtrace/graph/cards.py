"""Cards - The durable content unit of a converted document.

This module defines:
- CardKind: Enum of card types
- CardStatus: Enum of review states, with the editing-layer cycle
- Card: One card positioned in the parent/child/sibling graph
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class CardKind(Enum):
    """Types of cards.

    The builder only produces HEADING, PARAGRAPH and BULLET. The other
    kinds come from the editing layer and are accepted when loading.
    """

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET = "bullet"
    FIGURE = "figure"
    TABLE = "table"
    TEST = "test"
    QA = "qa"


class CardStatus(Enum):
    """Review status of a card."""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    DEPRECATED = "deprecated"


CARD_STATUS_SEQUENCE: tuple[CardStatus, ...] = (
    CardStatus.DRAFT,
    CardStatus.REVIEW,
    CardStatus.APPROVED,
    CardStatus.DEPRECATED,
)


def next_card_status(current: CardStatus | str) -> CardStatus:
    """Advance a status one step along draft -> review -> approved -> deprecated.

    Deprecated wraps around to draft; unknown values restart at draft.
    """
    try:
        index = CARD_STATUS_SEQUENCE.index(CardStatus(current))
    except ValueError:
        return CARD_STATUS_SEQUENCE[0]
    return CARD_STATUS_SEQUENCE[(index + 1) % len(CARD_STATUS_SEQUENCE)]


@dataclass
class Card:
    """A card in the converted document graph.

    Hierarchy is expressed with ``parent_id``/``child_ids``; order among
    siblings with the ``prev_id``/``next_id`` doubly linked list.

    Attributes:
        id: Unique ID within one conversion (``card-0001``...).
        title: Display title, bounded by the configured maximum length.
        body: Full segment text.
        kind: Card type.
        status: Review status.
        level: Hierarchy depth (0 = root).
        updated_at: ISO-8601 timestamp of the conversion pass.
        card_id: Optional user-facing identifier (e.g. ``REQ-001``).
    """

    id: str
    title: str
    body: str
    kind: CardKind
    status: CardStatus = CardStatus.DRAFT
    level: int = 0
    updated_at: str = ""
    parent_id: str | None = None
    child_ids: list[str] = field(default_factory=list)
    prev_id: str | None = None
    next_id: str | None = None
    has_left_trace: bool = False
    has_right_trace: bool = False
    markdown_preview_enabled: bool = False
    card_id: str | None = None

    @property
    def is_root(self) -> bool:
        """True if this card has no parent."""
        return self.parent_id is None

    @property
    def trace_id(self) -> str:
        """ID used by traceability relations (``card_id`` when set)."""
        return self.card_id or self.id

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "status": self.status.value,
            "kind": self.kind.value,
            "hasLeftTrace": self.has_left_trace,
            "hasRightTrace": self.has_right_trace,
            "markdownPreviewEnabled": self.markdown_preview_enabled,
            "updatedAt": self.updated_at,
            "parent_id": self.parent_id,
            "child_ids": list(self.child_ids),
            "prev_id": self.prev_id,
            "next_id": self.next_id,
            "level": self.level,
        }
        if self.card_id is not None:
            data["cardId"] = self.card_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        """Create a Card from its persisted JSON shape.

        Raises:
            KeyError: If ``id``, ``kind`` or ``title`` is missing.
            ValueError: If ``kind`` or ``status`` is not a known value.
        """
        return cls(
            id=data["id"],
            title=data["title"],
            body=data.get("body", ""),
            kind=CardKind(data["kind"]),
            status=CardStatus(data.get("status", CardStatus.DRAFT.value)),
            level=data.get("level", 0),
            updated_at=data.get("updatedAt", ""),
            parent_id=data.get("parent_id"),
            child_ids=list(data.get("child_ids", [])),
            prev_id=data.get("prev_id"),
            next_id=data.get("next_id"),
            has_left_trace=data.get("hasLeftTrace", False),
            has_right_trace=data.get("hasRightTrace", False),
            markdown_preview_enabled=data.get("markdownPreviewEnabled", False),
            card_id=data.get("cardId"),
        )


def card_index(cards: list[Card]) -> dict[str, Card]:
    """Map card ID to card."""
    return {card.id: card for card in cards}


def iter_siblings(cards: list[Card], parent_id: str | None) -> Iterator[Card]:
    """Walk the sibling chain under ``parent_id`` from its head.

    The head is the child whose ``prev_id`` is None. Iteration follows
    ``next_id`` and stops at the end of the chain or on a cycle.

    Args:
        cards: All cards of one conversion.
        parent_id: Parent card ID, or None for the root chain.

    Yields:
        Cards in sibling order.
    """
    index = card_index(cards)
    head = next(
        (c for c in cards if c.parent_id == parent_id and c.prev_id is None),
        None,
    )
    seen: set[str] = set()
    current = head
    while current is not None and current.id not in seen:
        seen.add(current.id)
        yield current
        current = index.get(current.next_id) if current.next_id else None
