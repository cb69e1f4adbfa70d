"""Conversion Factory - Single entry point from document to cards.

Commands should use ``convert_document()`` (or ``convert_file()``) rather
than wiring the segmenter and builder themselves. Strategy selection is a
plain dispatch; only the rule-based strategy is implemented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from cardtrace.graph.builder import BuildOptions, build_cards
from cardtrace.graph.cards import Card
from cardtrace.graph.parsers import segment

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})

ProgressCallback = Callable[[str, int], None]


class ConversionStrategy(Enum):
    """How a document is turned into cards."""

    RULE = "rule"
    LLM = "llm"


class UnsupportedStrategyError(ValueError):
    """Raised when a conversion strategy has no implementation here."""


@dataclass
class NormalizedDocument:
    """A decoded, newline-normalized input document.

    Attributes:
        file_name: Name including extension (``srs.md``).
        base_name: Name without extension (``srs``).
        extension: Lower-cased extension with leading dot (``.md``).
        content: Text with ``\\n`` line endings.
        is_markdown: Whether the Markdown grammar applies.
    """

    file_name: str
    base_name: str
    extension: str
    content: str
    is_markdown: bool

    @classmethod
    def from_text(cls, content: str, file_name: str = "document.md") -> NormalizedDocument:
        """Create a document from in-memory text, inferring Markdown from the name."""
        path = Path(file_name)
        extension = path.suffix.lower()
        return cls(
            file_name=path.name,
            base_name=path.stem,
            extension=extension,
            content=normalize_newlines(content),
            is_markdown=extension in MARKDOWN_EXTENSIONS,
        )


@dataclass
class ConversionResult:
    """Cards produced by one conversion plus any non-fatal warnings."""

    cards: list[Card]
    warnings: list[str] = field(default_factory=list)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_document(path: Path) -> NormalizedDocument:
    """Read a UTF-8 document from disk.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    logger.debug("Loading document %s", path)
    return NormalizedDocument.from_text(path.read_text(encoding="utf-8"), path.name)


def convert_document(
    document: NormalizedDocument,
    strategy: ConversionStrategy | str = ConversionStrategy.RULE,
    options: BuildOptions | None = None,
    on_progress: ProgressCallback | None = None,
) -> ConversionResult:
    """Convert a document into a card forest.

    Args:
        document: The normalized input document.
        strategy: Conversion strategy; only ``rule`` is supported.
        options: Build options. ``markdown_preview`` follows the document
            when options are not supplied.
        on_progress: Optional ``(phase, percent)`` callback.

    Returns:
        ConversionResult with the cards.

    Raises:
        UnsupportedStrategyError: For any strategy other than ``rule``.
    """

    def emit(phase: str, percent: int) -> None:
        if on_progress is not None:
            on_progress(phase, percent)

    strategy = ConversionStrategy(strategy)
    emit("prepare", 5)

    if strategy != ConversionStrategy.RULE:
        raise UnsupportedStrategyError(
            f"Conversion strategy '{strategy.value}' is not available; use 'rule'"
        )

    if options is None:
        options = BuildOptions(markdown_preview=document.is_markdown)

    emit("convert", 40)
    segments = segment(document.content, document.is_markdown)
    cards = build_cards(segments, options)
    logger.debug(
        "Converted %s: %d segments -> %d cards", document.file_name, len(segments), len(cards)
    )
    emit("complete", 75)
    return ConversionResult(cards=cards)


def convert_file(
    path: Path,
    options: BuildOptions | None = None,
    is_markdown: bool | None = None,
) -> ConversionResult:
    """Load ``path`` and convert it with the rule-based strategy.

    Args:
        path: Document to convert.
        options: Build options.
        is_markdown: Force the grammar; inferred from the extension if None.
    """
    document = load_document(path)
    if is_markdown is not None:
        document.is_markdown = is_markdown
    return convert_document(document, ConversionStrategy.RULE, options)
