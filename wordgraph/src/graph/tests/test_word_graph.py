"""
Tests for graph/word_graph.py - arena storage, dedup invariants and export mapping.
"""

import pytest

from wordgraph.src.common.diagnostics import GraphDiagnostics
from wordgraph.src.common.exceptions import GraphError, GraphImportError
from wordgraph.src.graph.model import RelationKind, WordNode
from wordgraph.src.graph.word_graph import WordGraph


@pytest.fixture
def graph():
    return WordGraph(diagnostics=GraphDiagnostics(log_level="info"))


class TestNodes:
    def test_add_and_find(self, graph):
        node = graph.add_node(WordNode(lemma="Happy"))
        assert graph.find_node("  HAPPY ") is node
        assert graph.get_node(node.id) is node
        assert "happy" in graph
        assert len(graph) == 1

    def test_same_lemma_returns_existing(self, graph):
        first = graph.add_node(WordNode(lemma="take off"))
        second = graph.add_node(WordNode(lemma="Take   Off"))
        assert second is first
        assert len(graph) == 1

    def test_duplicate_id_raises(self, graph):
        graph.add_node(WordNode(lemma="a", id="n1"))
        with pytest.raises(GraphError, match="Duplicate node id"):
            graph.add_node(WordNode(lemma="b", id="n1"))

    def test_get_or_create(self, graph):
        node, created = graph.get_or_create_node("Joy", explanation_ja="喜び")
        assert created
        assert node.explanation_ja == "喜び"
        again, created_again = graph.get_or_create_node("joy ")
        assert again is node
        assert not created_again

    def test_iteration_keeps_insertion_order(self, graph):
        for lemma in ("c", "a", "b"):
            graph.add_node(WordNode(lemma=lemma))
        assert [node.lemma for node in graph] == ["c", "a", "b"]


class TestEdges:
    def test_add_edge(self, graph):
        a = graph.add_node(WordNode(lemma="a"))
        b = graph.add_node(WordNode(lemma="b"))
        edge = graph.add_edge(a.id, b.id, "synonym")
        assert edge is not None
        assert edge.kind is RelationKind.SYNONYM
        assert graph.edge_between(b.id, a.id) is edge
        assert graph.edge_count == 1

    def test_second_relation_between_pair_is_dropped(self, graph):
        """One edge per unordered pair, whatever the direction or kind."""
        a = graph.add_node(WordNode(lemma="a"))
        b = graph.add_node(WordNode(lemma="b"))
        graph.add_edge(a.id, b.id, RelationKind.SYNONYM)
        assert graph.add_edge(b.id, a.id, RelationKind.ETYMOLOGY) is None
        assert graph.add_edge(a.id, b.id, RelationKind.SYNONYM) is None
        assert graph.edge_count == 1
        messages = graph.diagnostics.get_messages(graph.diagnostics.min_severity)
        assert any("already connected as 'synonym'" in message for message in messages)

    def test_self_loop_dropped(self, graph):
        a = graph.add_node(WordNode(lemma="a"))
        assert graph.add_edge(a.id, a.id, "associate") is None
        assert graph.edge_count == 0

    def test_unknown_endpoint_warns(self, graph):
        a = graph.add_node(WordNode(lemma="a"))
        assert graph.add_edge(a.id, "missing", "associate") is None
        assert graph.diagnostics.warning_count() == 1

    def test_edge_data_keeps_direction(self, graph):
        a = graph.add_node(WordNode(lemma="a"))
        b = graph.add_node(WordNode(lemma="b"))
        edge = graph.add_edge(b.id, a.id, "antonym")
        assert (edge.from_id, edge.to_id) == (b.id, a.id)


class TestExportMapping:
    def _sample(self, graph):
        a = graph.add_node(WordNode(lemma="serene", x=10.0, y=-5.0, expanded=True, pos="adj"))
        b = graph.add_node(WordNode(lemma="calm", x=-3.0, y=4.0))
        c = graph.add_node(WordNode(lemma="agitated"))
        graph.add_edge(a.id, b.id, "synonym")
        graph.add_edge(a.id, c.id, "antonym")
        return graph

    def test_round_trip(self, graph):
        export = self._sample(graph).to_export()
        restored = WordGraph.from_export(export)
        assert restored.to_export() == export
        assert restored.find_node("serene").position == (10.0, -5.0)
        assert restored.find_node("serene").expanded

    def test_rejects_non_mapping(self):
        with pytest.raises(GraphImportError):
            WordGraph.from_export([])

    def test_rejects_duplicate_lemma(self):
        data = {"nodes": [{"id": "1", "lemma": "a"}, {"id": "2", "lemma": "A"}], "edges": []}
        with pytest.raises(GraphImportError, match="Duplicate lemma"):
            WordGraph.from_export(data)

    def test_rejects_duplicate_node_id(self):
        data = {"nodes": [{"id": "1", "lemma": "a"}, {"id": "1", "lemma": "b"}], "edges": []}
        with pytest.raises(GraphImportError, match="Duplicate node id"):
            WordGraph.from_export(data)

    def test_rejects_dangling_edge(self):
        data = {
            "nodes": [{"id": "1", "lemma": "a"}],
            "edges": [{"id": "e", "from": "1", "to": "2", "type": "synonym"}],
        }
        with pytest.raises(GraphImportError, match="unknown node"):
            WordGraph.from_export(data)

    def test_rejects_parallel_edge(self):
        data = {
            "nodes": [{"id": "1", "lemma": "a"}, {"id": "2", "lemma": "b"}],
            "edges": [
                {"id": "e1", "from": "1", "to": "2", "type": "synonym"},
                {"id": "e2", "from": "2", "to": "1", "type": "etymology"},
            ],
        }
        with pytest.raises(GraphImportError, match="duplicates an existing connection"):
            WordGraph.from_export(data)

    @pytest.mark.parametrize(
        "data, match",
        [
            ({"nodes": [{"id": "1", "lemma": "a", "x": None}]}, "Invalid x"),
            ({"nodes": [{"id": "1", "lemma": "a", "y": "left"}]}, "Invalid y"),
            ({"nodes": [{"id": "1", "lemma": "a", "x": float("inf")}]}, "Invalid x"),
            ({"nodes": [{"id": "1", "lemma": "a", "ease": True}]}, "Invalid ease"),
            ({"nodes": [{"id": "1", "lemma": 5}]}, "Lemma must be a string"),
            ({"nodes": None}, "'nodes' must be a list"),
            ({"nodes": [], "edges": {"id": "e"}}, "'edges' must be a list"),
        ],
    )
    def test_rejects_malformed_values(self, data, match):
        with pytest.raises(GraphImportError, match=match) as excinfo:
            WordGraph.from_export(data)
        if data.get("nodes"):
            assert excinfo.value.subject == "1"
