"""Card Graph Builder - Constructs the card forest from parsed segments.

The builder assigns sequential IDs, resolves each card's parent through
a heading stack, derives titles, and finally links siblings into doubly
linked lists grouped by parent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from cardtrace.graph.cards import Card, CardKind, CardStatus
from cardtrace.graph.parsers import ParsedSegment, SegmentKind

DEFAULT_MAX_TITLE_LENGTH = 20
ELLIPSIS = "…"

_CONTROL_WHITESPACE = re.compile(r"[\t\f\v]+")


def create_card_id(index: int) -> str:
    """Card ID for the 1-based emission index, e.g. ``card-0007``."""
    return f"card-{index:04d}"


def sanitize_text(text: str) -> str:
    """Collapse tab/formfeed/vertical-tab runs to one space and trim."""
    return _CONTROL_WHITESPACE.sub(" ", text).strip()


def truncate_title(text: str, max_length: int) -> str:
    """Bound ``text`` to ``max_length`` characters, ellipsis included."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + ELLIPSIS


def summarize_title(text: str, fallback: str, max_length: int) -> str:
    """Title for a body segment: sanitized, truncated, or ``fallback`` if empty."""
    sanitized = sanitize_text(text)
    if not sanitized:
        return fallback
    return truncate_title(sanitized, max_length)


def format_timestamp(now: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix for UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class BuildOptions:
    """Options for one conversion pass.

    Attributes:
        now: Timestamp stamped on every card. Defaults to the current time.
        max_title_length: Upper bound on title length, ellipsis included.
        markdown_preview: Value for ``Card.markdown_preview_enabled``.
    """

    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH
    markdown_preview: bool = False

    def __post_init__(self) -> None:
        if self.max_title_length < 1:
            raise ValueError(f"max_title_length must be >= 1, got {self.max_title_length}")


@dataclass
class _StackEntry:
    level: int
    card_id: str


class CardGraphBuilder:
    """Builder for one card forest.

    Usage:
        builder = CardGraphBuilder(options)
        for seg in segments:
            builder.add_segment(seg)
        cards = builder.build()

    Each builder owns its heading stack and child groups, so independent
    builders can run concurrently.
    """

    def __init__(self, options: BuildOptions | None = None) -> None:
        self.options = options or BuildOptions()
        self._timestamp = format_timestamp(self.options.now)
        self._cards: list[Card] = []
        self._index: dict[str, Card] = {}
        # Insertion-ordered children per parent; None groups the roots
        self._children: dict[str | None, list[str]] = {}
        self._heading_stack: list[_StackEntry] = []

    def add_segment(self, segment: ParsedSegment) -> Card:
        """Create the card for ``segment`` and attach it to its parent.

        Args:
            segment: Next segment in document order.

        Returns:
            The new card. Sibling links are only final after ``build()``.
        """
        is_heading = segment.kind == SegmentKind.HEADING
        stack = self._heading_stack

        if is_heading:
            while stack and stack[-1].level >= segment.level:
                stack.pop()

        parent = stack[-1] if stack else None
        parent_id = parent.card_id if parent else None
        parent_level = parent.level if parent else -1
        level = segment.level if is_heading else max(parent_level + 1, 0)

        position = len(self._cards) + 1
        card_id = create_card_id(position)
        body = segment.text.strip()
        title = self._derive_title(segment, body, position)

        card = Card(
            id=card_id,
            title=title,
            body=body,
            kind=CardKind(segment.kind.value),
            status=CardStatus.DRAFT,
            level=level,
            updated_at=self._timestamp,
            parent_id=parent_id,
            markdown_preview_enabled=self.options.markdown_preview,
        )

        self._cards.append(card)
        self._index[card_id] = card
        self._children.setdefault(parent_id, []).append(card_id)

        if is_heading:
            stack.append(_StackEntry(level=segment.level, card_id=card_id))

        return card

    def _derive_title(self, segment: ParsedSegment, body: str, position: int) -> str:
        max_length = self.options.max_title_length
        if segment.kind == SegmentKind.HEADING:
            title = sanitize_text(segment.text) or f"Heading {position}"
        else:
            title = summarize_title(body, f"Section {position}", max_length)
        return truncate_title(title, max_length)

    def build(self) -> list[Card]:
        """Link siblings and children, then return the cards in emission order."""
        for parent_id, child_ids in self._children.items():
            last = len(child_ids) - 1
            for i, child_id in enumerate(child_ids):
                child = self._index[child_id]
                child.prev_id = child_ids[i - 1] if i > 0 else None
                child.next_id = child_ids[i + 1] if i < last else None
            if parent_id is not None:
                self._index[parent_id].child_ids = list(child_ids)
        return list(self._cards)


def build_cards(
    segments: list[ParsedSegment],
    options: BuildOptions | None = None,
) -> list[Card]:
    """Build a card forest from segments.

    Args:
        segments: Segments in document order.
        options: Conversion options; defaults apply when omitted.

    Returns:
        One card per segment, IDs ``card-0001`` to ``card-NNNN``.
    """
    builder = CardGraphBuilder(options)
    for segment in segments:
        builder.add_segment(segment)
    return builder.build()
