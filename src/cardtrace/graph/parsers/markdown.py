"""Markdown segmenter.

Recognizes ATX headings (``#`` to ``######``), list items (``-``, ``*``,
``+``, ``1.``, ``1)``) at any indentation, and paragraphs separated by
blank lines. Everything else is paragraph text.
"""

from __future__ import annotations

import re

from cardtrace.graph.parsers import ParagraphBuffer, ParsedSegment, SegmentKind, body_level

HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<title>.+)$")
BULLET_PATTERN = re.compile(r"^\s*(?:[-*+]|[0-9]+[.)])\s+(?P<body>.+)$")


def segment_markdown(content: str) -> list[ParsedSegment]:
    """Segment a Markdown document in a single pass.

    Args:
        content: Newline-normalized Markdown text.

    Returns:
        Ordered segments. Headings are at ``len(hashes) - 1``.
    """
    segments: list[ParsedSegment] = []
    paragraph = ParagraphBuffer()
    heading_level = -1

    for line in content.split("\n"):
        heading = HEADING_PATTERN.match(line)
        if heading:
            paragraph.flush(segments, heading_level)
            heading_level = len(heading.group("hashes")) - 1
            segments.append(
                ParsedSegment(
                    kind=SegmentKind.HEADING,
                    text=heading.group("title").strip(),
                    level=heading_level,
                )
            )
            continue

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            paragraph.flush(segments, heading_level)
            segments.append(
                ParsedSegment(
                    kind=SegmentKind.BULLET,
                    text=bullet.group("body").strip(),
                    level=body_level(heading_level),
                )
            )
            continue

        if not line.strip():
            paragraph.flush(segments, heading_level)
            continue

        paragraph.push(line)

    paragraph.flush(segments, heading_level)
    return segments
