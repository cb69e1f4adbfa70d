"""Graph module - Card graph and traceability data structures.

Exports:
- Card, CardKind, CardStatus: The card model
- BuildOptions, CardGraphBuilder, build_cards: Card forest construction
- TraceabilityRelation, TraceabilityLink: Stored and expanded relations
- RelationKind, RelationDirection, LinkDirection: Relation vocabularies
- normalize_direction, invert_direction, relation_to_links,
  relations_to_links: Relation transforms

Note: document loading and strategy dispatch live in cardtrace.graph.factory
"""

from cardtrace.graph.builder import BuildOptions, CardGraphBuilder, build_cards
from cardtrace.graph.cards import Card, CardKind, CardStatus, next_card_status
from cardtrace.graph.relations import (
    LinkDirection,
    RelationDirection,
    RelationKind,
    RelationTooWideError,
    TraceabilityLink,
    TraceabilityRelation,
    invert_direction,
    normalize_direction,
    relation_to_links,
    relations_to_links,
)

__all__ = [
    "BuildOptions",
    "Card",
    "CardGraphBuilder",
    "CardKind",
    "CardStatus",
    "LinkDirection",
    "RelationDirection",
    "RelationKind",
    "RelationTooWideError",
    "TraceabilityLink",
    "TraceabilityRelation",
    "build_cards",
    "invert_direction",
    "next_card_status",
    "normalize_direction",
    "relation_to_links",
    "relations_to_links",
]
