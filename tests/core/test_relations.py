"""Tests for relations.py - Relation kinds, directions and link expansion."""

import pytest

from cardtrace.graph.cards import Card, CardKind
from cardtrace.graph.relations import (
    LinkDirection,
    RelationDirection,
    RelationKind,
    RelationTooWideError,
    TraceabilityRelation,
    build_relation_lookup,
    change_relation_kind,
    invert_direction,
    is_swapped,
    mark_traced_cards,
    normalize_direction,
    relation_to_links,
    relations_to_links,
    toggle_trace_relation,
)


class TestRelationKind:
    def test_all_relation_kinds_exist(self):
        expected = {"trace", "refines", "tests", "duplicates", "satisfy", "relate", "specialize"}
        assert {k.value for k in RelationKind} == expected


class TestDirections:
    def test_normalize_explicit_tokens(self):
        assert normalize_direction("left_to_right") == LinkDirection.FORWARD
        assert normalize_direction("right_to_left") == LinkDirection.BACKWARD
        assert normalize_direction("bidirectional") == LinkDirection.BIDIRECTIONAL

    def test_normalize_enum_members(self):
        assert normalize_direction(RelationDirection.RIGHT_TO_LEFT) == LinkDirection.BACKWARD

    @pytest.mark.parametrize("token", ["", "sideways", None, "LEFT_TO_RIGHT"])
    def test_unknown_tokens_are_bidirectional(self, token):
        assert normalize_direction(token) == LinkDirection.BIDIRECTIONAL

    def test_invert(self):
        assert invert_direction(LinkDirection.FORWARD) == LinkDirection.BACKWARD
        assert invert_direction(LinkDirection.BACKWARD) == LinkDirection.FORWARD
        assert invert_direction(LinkDirection.BIDIRECTIONAL) == LinkDirection.BIDIRECTIONAL

    @pytest.mark.parametrize("direction", list(LinkDirection))
    def test_invert_is_involution(self, direction):
        assert invert_direction(invert_direction(direction)) == direction


class TestRelationToLinks:
    def test_expands_cross_product(self, base_relation):
        links = relation_to_links(base_relation)

        assert len(links) == 2
        assert links[0].relation_id == "rel-001"
        assert links[0].direction == LinkDirection.FORWARD
        assert [l.as_triple()[:2] for l in links] == [
            ("card-l1", "card-r1"),
            ("card-l2", "card-r1"),
        ]

    @pytest.mark.parametrize("n_left,n_right", [(1, 1), (2, 3), (4, 1), (3, 0)])
    def test_cardinality(self, n_left, n_right):
        relation = TraceabilityRelation(
            id="r",
            left_ids=[f"L{i}" for i in range(n_left)],
            right_ids=[f"R{i}" for i in range(n_right)],
        )

        assert len(relation_to_links(relation)) == n_left * n_right

    def test_link_ids(self, base_relation):
        links = relation_to_links(base_relation)

        assert [l.id for l in links] == ["rel-001:card-l1->card-r1", "rel-001:card-l2->card-r1"]

    def test_link_ids_stable_under_swap(self, base_relation):
        normal = {l.id for l in relation_to_links(base_relation)}
        swapped = {l.id for l in relation_to_links(base_relation, swap_orientation=True)}

        assert normal == swapped

    def test_one_to_many_example(self):
        relation = TraceabilityRelation(
            id="r1", left_ids=["L1"], right_ids=["R1", "R2"], directed="left_to_right"
        )

        links = relation_to_links(relation)
        swapped = relation_to_links(relation, swap_orientation=True)

        assert [l.as_triple() for l in links] == [
            ("L1", "R1", LinkDirection.FORWARD),
            ("L1", "R2", LinkDirection.FORWARD),
        ]
        assert [l.as_triple() for l in swapped] == [
            ("R1", "L1", LinkDirection.BACKWARD),
            ("R2", "L1", LinkDirection.BACKWARD),
        ]

    def test_swap_keeps_bidirectional(self):
        relation = TraceabilityRelation(
            id="r", left_ids=["L"], right_ids=["R"], directed=RelationDirection.BIDIRECTIONAL
        )

        (link,) = relation_to_links(relation, swap_orientation=True)

        assert link.direction == LinkDirection.BIDIRECTIONAL

    def test_double_swap_restores_triples(self, base_relation):
        original = {l.as_triple() for l in relation_to_links(base_relation)}
        swapped = relation_to_links(base_relation, swap_orientation=True)
        restored = {(t, s, invert_direction(d)) for s, t, d in (l.as_triple() for l in swapped)}

        assert restored == original

    def test_relation_kind_carried(self):
        relation = TraceabilityRelation(id="r", left_ids=["L"], right_ids=["R"], type="tests")

        assert relation_to_links(relation)[0].relation == "tests"

    def test_max_links_ceiling(self):
        relation = TraceabilityRelation(id="wide", left_ids=["a", "b", "c"], right_ids=["x", "y"])

        with pytest.raises(RelationTooWideError) as excinfo:
            relation_to_links(relation, max_links=5)

        assert excinfo.value.link_count == 6
        assert len(relation_to_links(relation, max_links=6)) == 6

    def test_no_ceiling_by_default(self):
        relation = TraceabilityRelation(
            id="wide", left_ids=[str(i) for i in range(100)], right_ids=[str(i) for i in range(100)]
        )

        assert len(relation_to_links(relation)) == 10000


class TestRelationsToLinks:
    def test_order_follows_relation_then_left_then_right(self):
        relations = [
            TraceabilityRelation(id="a", left_ids=["L2", "L1"], right_ids=["R2", "R1"]),
            TraceabilityRelation(id="b", left_ids=["L0"], right_ids=["R0"]),
        ]

        ids = [l.id for l in relations_to_links(relations)]

        assert ids == [
            "a:L2->R2",
            "a:L2->R1",
            "a:L1->R2",
            "a:L1->R1",
            "b:L0->R0",
        ]

    def test_swap_orientation(self, base_relation):
        swapped = relations_to_links([base_relation], swap_orientation=True)

        assert len(swapped) == 2
        assert swapped[0].direction == LinkDirection.BACKWARD
        assert not swapped[0].source_card_id.startswith("card-l")

    def test_inputs_not_modified(self, base_relation):
        before = base_relation.to_dict()

        relations_to_links([base_relation], swap_orientation=True)

        assert base_relation.to_dict() == before


class TestIsSwapped:
    def test_same_order(self):
        assert is_swapped("a.json", "b.json", "a.json", "b.json") is False

    def test_reverse_order(self):
        assert is_swapped("a.json", "b.json", "b.json", "a.json") is True


class TestRelationEditing:
    def test_lookup_covers_every_pair(self, base_relation):
        lookup = build_relation_lookup([base_relation])

        assert set(lookup) == {("card-l1", "card-r1"), ("card-l2", "card-r1")}

    def test_toggle_creates_relation(self):
        relations, active = toggle_trace_relation([], "L1", "R1", new_id=lambda: "new")

        assert active is True
        assert relations[0].to_dict() == {
            "id": "new",
            "left_ids": ["L1"],
            "right_ids": ["R1"],
            "type": "trace",
            "directed": "left_to_right",
        }

    def test_toggle_removes_pair_from_wide_relation(self):
        relation = TraceabilityRelation(id="r", left_ids=["L1", "L2"], right_ids=["R1", "R2"])

        relations, active = toggle_trace_relation([relation], "L1", "R1")

        assert active is False
        assert relations[0].left_ids == ["L2"]
        assert relations[0].right_ids == ["R2"]
        assert relation.left_ids == ["L1", "L2"]

    def test_toggle_drops_emptied_relation(self, base_relation):
        single = TraceabilityRelation(id="s", left_ids=["L"], right_ids=["R"])

        relations, active = toggle_trace_relation([base_relation, single], "L", "R")

        assert active is False
        assert [r.id for r in relations] == ["rel-001"]

    def test_change_kind(self, base_relation):
        relations = change_relation_kind([base_relation], "card-l2", "card-r1", RelationKind.REFINES)

        assert relations[0].type == RelationKind.REFINES
        assert base_relation.type == RelationKind.TRACE

    def test_change_kind_missing_pair(self, base_relation):
        relations = change_relation_kind([base_relation], "x", "y", RelationKind.REFINES)

        assert relations == [base_relation]


class TestMarkTracedCards:
    @pytest.fixture
    def cards(self):
        return [
            Card(id="card-l1", title="a", body="", kind=CardKind.PARAGRAPH),
            Card(id="card-l3", title="b", body="", kind=CardKind.PARAGRAPH),
        ]

    def test_left_side_sets_right_flag(self, cards, base_relation):
        marked = mark_traced_cards(cards, [base_relation], "left")

        assert [c.has_right_trace for c in marked] == [True, False]
        assert not any(c.has_left_trace for c in marked)
        assert cards[0].has_right_trace is False

    def test_right_side_sets_left_flag(self, base_relation):
        right = [Card(id="card-r1", title="r", body="", kind=CardKind.HEADING)]

        marked = mark_traced_cards(right, [base_relation], "right")

        assert marked[0].has_left_trace is True

    def test_invalid_side(self, cards, base_relation):
        with pytest.raises(ValueError):
            mark_traced_cards(cards, [base_relation], "middle")
