"""
cardtrace.commands.links - Expand a trace file into atomic links.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from cardtrace.graph.deserializer import ShapeError, parse_trace_file
from cardtrace.graph.relations import (
    RelationKind,
    RelationTooWideError,
    TraceabilityLink,
    relations_to_links,
)


def link_dict(link: TraceabilityLink) -> dict[str, Any]:
    relation = link.relation.value if isinstance(link.relation, RelationKind) else link.relation
    return {
        "id": link.id,
        "relationId": link.relation_id,
        "sourceCardId": link.source_card_id,
        "targetCardId": link.target_card_id,
        "relation": relation,
        "direction": link.direction.value,
    }


def run(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Run the links command.

    Returns:
        Exit code (0 for success, 1 on error).
    """
    try:
        data = json.loads(args.trace_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error: Cannot read trace file {args.trace_file}: {e}", file=sys.stderr)
        return 1

    payload = parse_trace_file(data)
    if isinstance(payload, ShapeError):
        print(f"Error: Malformed trace file {args.trace_file}: {payload}", file=sys.stderr)
        return 1

    max_links = config.get("relations", {}).get("max_links") or None
    try:
        links = relations_to_links(payload.relations, args.swap, max_links)
    except RelationTooWideError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([link_dict(link) for link in links], indent=2, ensure_ascii=False))
    return 0
