"""
cardtrace - Document-to-card conversion and trace consistency tools

cardtrace splits Markdown or plain-text documents into a hierarchy of
cards, expands the traceability relations recorded between two card
files into atomic links, and checks those relations for references to
files or cards that do not exist.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cardtrace")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from cardtrace.graph.builder import BuildOptions, build_cards
from cardtrace.graph.cards import Card, CardKind, CardStatus
from cardtrace.graph.factory import ConversionStrategy, NormalizedDocument, convert_document
from cardtrace.graph.parsers import ParsedSegment, SegmentKind, segment
from cardtrace.graph.relations import (
    TraceabilityLink,
    TraceabilityRelation,
    invert_direction,
    normalize_direction,
    relation_to_links,
    relations_to_links,
)
from cardtrace.validation import ValidationIssue, ValidationResult, validate_trace_consistency

__all__ = [
    "__version__",
    "BuildOptions",
    "Card",
    "CardKind",
    "CardStatus",
    "ConversionStrategy",
    "NormalizedDocument",
    "ParsedSegment",
    "SegmentKind",
    "TraceabilityLink",
    "TraceabilityRelation",
    "ValidationIssue",
    "ValidationResult",
    "build_cards",
    "convert_document",
    "invert_direction",
    "normalize_direction",
    "relation_to_links",
    "relations_to_links",
    "segment",
    "validate_trace_consistency",
]
