"""Parsers - Line-oriented document segmentation.

This module provides the segment model shared by the Markdown and
plain-text grammars, and the ``segment()`` entry point that picks one.

Exports:
- SegmentKind: Enum of segment types
- ParsedSegment: One heading, paragraph or bullet with its nesting level
- ParagraphBuffer: Accumulates paragraph lines between structural lines
- segment: Split a document into an ordered list of segments
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SegmentKind(Enum):
    """Types of segments produced by the segmenters."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET = "bullet"


@dataclass(frozen=True)
class ParsedSegment:
    """A typed unit of parsed text, prior to card construction.

    Attributes:
        kind: Heading, paragraph or bullet.
        text: Inline content. Paragraph lines are joined with newlines.
        level: Nesting depth. Headings carry their declared depth (0 = top);
            paragraphs and bullets sit one below the enclosing heading.
    """

    kind: SegmentKind
    text: str
    level: int


def body_level(heading_level: int) -> int:
    """Level of a paragraph or bullet under a heading at ``heading_level``.

    ``heading_level`` is -1 while no heading has been seen.
    """
    return max(heading_level + 1, 0)


@dataclass
class ParagraphBuffer:
    """Pending paragraph lines for a single segmentation pass."""

    lines: list[str] = field(default_factory=list)

    def push(self, line: str) -> None:
        self.lines.append(line)

    def flush(self, segments: list[ParsedSegment], heading_level: int) -> None:
        """Emit the buffered lines as one paragraph and clear the buffer.

        Buffers that are empty after trimming are dropped silently.
        """
        if not self.lines:
            return
        text = "\n".join(self.lines).strip()
        self.lines.clear()
        if text:
            segments.append(
                ParsedSegment(
                    kind=SegmentKind.PARAGRAPH,
                    text=text,
                    level=body_level(heading_level),
                )
            )


def segment(content: str, is_markdown: bool) -> list[ParsedSegment]:
    """Split a document into segments.

    Args:
        content: Newline-normalized document text.
        is_markdown: Use the Markdown grammar; otherwise the plain-text
            grammar with numbered headings.

    Returns:
        Segments in document order. Never raises on arbitrary text.
    """
    if is_markdown:
        from cardtrace.graph.parsers.markdown import segment_markdown

        return segment_markdown(content)

    from cardtrace.graph.parsers.plaintext import segment_plain_text

    return segment_plain_text(content)


__all__ = [
    "ParagraphBuffer",
    "ParsedSegment",
    "SegmentKind",
    "body_level",
    "segment",
]
