"""
cardtrace.commands.convert - Convert a document into cards.

Writes a card snapshot (``{"cards": [...], "savedAt": ...}``) as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from cardtrace.graph.builder import BuildOptions, format_timestamp
from cardtrace.graph.cards import Card
from cardtrace.graph.factory import ConversionStrategy, convert_document, load_document

logger = logging.getLogger(__name__)


def snapshot_dict(cards: list[Card], saved_at: str) -> dict[str, Any]:
    """Serialize cards as a workspace snapshot."""
    return {"cards": [card.to_dict() for card in cards], "savedAt": saved_at}


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def run(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Run the convert command.

    Args:
        args: Parsed command line arguments.
        config: Loaded configuration.

    Returns:
        Exit code (0 for success, 1 on error).
    """
    conversion = config.get("conversion", {})
    source: Path = args.file
    if not source.is_file():
        print(f"Error: File not found: {source}", file=sys.stderr)
        return 1

    document = load_document(source)
    if args.markdown:
        document.is_markdown = True
    elif args.plain:
        document.is_markdown = False

    try:
        now = _parse_now(args.now)
    except ValueError:
        print(f"Error: Invalid --now timestamp: {args.now}", file=sys.stderr)
        return 1

    if args.max_title_length is not None:
        max_title_length = args.max_title_length
    else:
        max_title_length = conversion.get("max_title_length", 20)
    options_kwargs: dict[str, Any] = {
        "max_title_length": max_title_length,
        "markdown_preview": document.is_markdown,
    }
    if now is not None:
        options_kwargs["now"] = now
    options = BuildOptions(**options_kwargs)

    strategy = ConversionStrategy(conversion.get("strategy", "rule"))
    result = convert_document(document, strategy, options)
    for warning in result.warnings:
        logger.warning(warning)

    output = json.dumps(
        snapshot_dict(result.cards, format_timestamp(options.now)),
        indent=2,
        ensure_ascii=False,
    )
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {len(result.cards)} cards to {args.output}")
    else:
        print(output)
    return 0
