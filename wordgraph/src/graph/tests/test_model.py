"""
Tests for graph/model.py - nodes, edges and relation kinds.
"""

from datetime import datetime

import pytest

from wordgraph.src.common.exceptions import GraphImportError, InvalidRelationError
from wordgraph.src.graph.model import RelationKind, WordEdge, WordNode, normalize_lemma


class TestNormalizeLemma:
    @pytest.mark.parametrize(
        "term, expected",
        [
            ("Happy", "happy"),
            ("  take   OFF ", "take off"),
            ("look\tup\nto", "look up to"),
            ("", ""),
            ("   ", ""),
        ],
    )
    def test_normalization(self, term, expected):
        assert normalize_lemma(term) == expected


class TestRelationKind:
    def test_parse_known_tags(self):
        assert RelationKind.parse("synonym") is RelationKind.SYNONYM
        assert RelationKind.parse(" Antonym ") is RelationKind.ANTONYM
        assert RelationKind.parse(RelationKind.ETYMOLOGY) is RelationKind.ETYMOLOGY

    def test_parse_unknown_tag_raises(self):
        with pytest.raises(InvalidRelationError) as excinfo:
            RelationKind.parse("cousin")
        assert excinfo.value.relation == "cousin"
        assert "Unknown relation type 'cousin'" in str(excinfo.value)


class TestWordNode:
    def test_lemma_is_normalized(self):
        node = WordNode(lemma="  Break   Down ")
        assert node.lemma == "break down"

    def test_ids_are_unique(self):
        assert WordNode(lemma="a").id != WordNode(lemma="a").id

    def test_move_to(self):
        node = WordNode(lemma="a")
        node.move_to(3, -4)
        assert node.position == (3.0, -4.0)

    def test_export_keys(self):
        node = WordNode(lemma="serene", explanation_ja="穏やかな", x=1.5, y=-2.0)
        data = node.to_dict()
        assert set(data) == {"id", "lemma", "explanation_ja", "x", "y", "expanded", "ease"}
        assert data["ease"] == 2.3

    def test_optional_payload_exported_when_set(self):
        review = datetime(2024, 5, 1, 9, 30)
        node = WordNode(lemma="serene", pos="adj", example_en="A serene lake.", next_review_at=review)
        data = node.to_dict()
        assert data["pos"] == "adj"
        assert data["example_en"] == "A serene lake."
        assert data["next_review_at"] == "2024-05-01T09:30:00"

    def test_round_trip(self):
        node = WordNode(
            lemma="serene",
            explanation_ja="穏やかな",
            pos="adj",
            register="formal",
            x=12.0,
            y=-7.5,
            expanded=True,
            ease=2.5,
            next_review_at=datetime(2024, 5, 1),
        )
        restored = WordNode.from_dict(node.to_dict())
        assert restored.to_dict() == node.to_dict()

    def test_from_dict_missing_fields(self):
        with pytest.raises(GraphImportError, match="lemma"):
            WordNode.from_dict({"id": "n1"})

    def test_from_dict_bad_review_date(self):
        with pytest.raises(GraphImportError, match="next_review_at"):
            WordNode.from_dict({"id": "n1", "lemma": "a", "next_review_at": "tomorrow"})


class TestWordEdge:
    def test_endpoints_are_unordered(self):
        edge = WordEdge(from_id="a", to_id="b", kind=RelationKind.SYNONYM)
        assert edge.endpoints == frozenset({"a", "b"})
        assert edge.connects("b", "a")
        assert not edge.connects("a", "c")

    def test_export_keys(self):
        edge = WordEdge(from_id="a", to_id="b", kind=RelationKind.COLLOCATION, id="e1")
        assert edge.to_dict() == {"id": "e1", "from": "a", "to": "b", "type": "collocation"}

    def test_from_dict_rejects_unknown_type(self):
        with pytest.raises(GraphImportError, match="Unknown relation type"):
            WordEdge.from_dict({"id": "e1", "from": "a", "to": "b", "type": "rhymes"})

    def test_from_dict_missing_fields(self):
        with pytest.raises(GraphImportError, match="type"):
            WordEdge.from_dict({"id": "e1", "from": "a", "to": "b"})
