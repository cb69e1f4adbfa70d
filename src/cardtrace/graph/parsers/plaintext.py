"""Plain-text segmenter.

Headings are lines starting with a dotted section number such as ``1``,
``1.2`` or ``1.2.3)``; the number of dots is the nesting level. List items
use the same markers as Markdown.
"""

from __future__ import annotations

import re

from cardtrace.graph.parsers import ParagraphBuffer, ParsedSegment, SegmentKind, body_level

NUMBERED_HEADING_PATTERN = re.compile(r"^(?P<seq>[0-9]+(?:\.[0-9]+)*[.)]?)\s+(?P<title>.+)$")
BULLET_PATTERN = re.compile(r"^\s*(?:[-*+]|[0-9]+[.)])\s+(?P<body>.+)$")


def heading_level_from_sequence(seq: str) -> int:
    """Nesting level for a section number.

    >>> heading_level_from_sequence("1.")
    0
    >>> heading_level_from_sequence("2.1.3)")
    2
    """
    if seq[-1] in ".)":
        seq = seq[:-1]
    return seq.count(".")


def segment_plain_text(content: str) -> list[ParsedSegment]:
    """Segment a plain-text document in a single pass.

    Args:
        content: Newline-normalized text.

    Returns:
        Ordered segments.
    """
    segments: list[ParsedSegment] = []
    paragraph = ParagraphBuffer()
    heading_level = -1

    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            paragraph.flush(segments, heading_level)
            continue

        heading = NUMBERED_HEADING_PATTERN.match(trimmed)
        if heading:
            paragraph.flush(segments, heading_level)
            heading_level = heading_level_from_sequence(heading.group("seq"))
            segments.append(
                ParsedSegment(
                    kind=SegmentKind.HEADING,
                    text=heading.group("title").strip(),
                    level=heading_level,
                )
            )
            continue

        bullet = BULLET_PATTERN.match(trimmed)
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

        paragraph.push(line)

    paragraph.flush(segments, heading_level)
    return segments
