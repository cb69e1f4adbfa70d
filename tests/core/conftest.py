"""Pytest fixtures for core tests."""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    """Deterministic conversion timestamp."""
    return datetime(2025, 11, 6, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def build_options(fixed_now):
    """BuildOptions with a fixed timestamp and the default title length."""
    from cardtrace.graph.builder import BuildOptions

    return BuildOptions(now=fixed_now)


@pytest.fixture
def markdown_cards(build_options):
    """Cards for a small Markdown document with nested headings."""
    from cardtrace.graph.builder import build_cards
    from cardtrace.graph.parsers import segment

    content = "\n".join(
        [
            "# Overview",
            "",
            "Intro paragraph.",
            "",
            "## Goals",
            "- fast",
            "- small",
            "",
            "## Scope",
            "Scope text.",
            "",
            "# Appendix",
            "Extra notes.",
        ]
    )
    return build_cards(segment(content, is_markdown=True), build_options)


@pytest.fixture
def base_relation():
    """Relation linking two left cards to one right card."""
    from cardtrace.graph.relations import RelationDirection, RelationKind, TraceabilityRelation

    return TraceabilityRelation(
        id="rel-001",
        left_ids=["card-l1", "card-l2"],
        right_ids=["card-r1"],
        type=RelationKind.TRACE,
        directed=RelationDirection.LEFT_TO_RIGHT,
    )
