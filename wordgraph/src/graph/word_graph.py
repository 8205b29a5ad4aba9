"""Insertion-ordered arena of word nodes and edges."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from wordgraph.src.common.diagnostics import GraphDiagnostics
from wordgraph.src.common.exceptions import GraphError, GraphImportError

from .model import RelationKind, WordEdge, WordNode, normalize_lemma


class WordGraph:
    """Nodes and edges addressed by stable ids.

    Invariants maintained here:
    - at most one node per normalized lemma
    - at most one edge per unordered node pair, whatever its relation kind

    The second rule drops legitimate multi-relation information (two words
    can be both synonyms and etymologically related). It is the observed
    behaviour and is kept as-is; every dropped relation is reported through
    diagnostics so it can be reviewed.
    """

    def __init__(self, diagnostics: Optional[GraphDiagnostics] = None) -> None:
        self.diagnostics = diagnostics or GraphDiagnostics()
        self._nodes: Dict[str, WordNode] = {}
        self._edges: Dict[str, WordEdge] = {}
        self._by_lemma: Dict[str, str] = {}
        self._by_pair: Dict[FrozenSet[str], str] = {}

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: WordNode) -> WordNode:
        """Insert ``node``; returns the existing node if its lemma is taken."""
        existing = self.find_node(node.lemma)
        if existing is not None:
            return existing
        if node.id in self._nodes:
            raise GraphError(f"Duplicate node id '{node.id}'", subject=node.id)

        self._nodes[node.id] = node
        self._by_lemma[node.lemma] = node.id
        self.diagnostics.debug(f"Added node '{node.lemma}'", stage="graph")
        return node

    def get_or_create_node(self, lemma: str, **payload: Any) -> Tuple[WordNode, bool]:
        """Resolve ``lemma`` to a node, creating it when needed.

        Returns:
            (node, created)
        """
        existing = self.find_node(lemma)
        if existing is not None:
            return existing, False
        node = WordNode(lemma=lemma, **payload)
        self.add_node(node)
        return node, True

    def find_node(self, lemma: str) -> Optional[WordNode]:
        node_id = self._by_lemma.get(normalize_lemma(lemma))
        return self._nodes[node_id] if node_id is not None else None

    def get_node(self, node_id: str) -> Optional[WordNode]:
        return self._nodes.get(node_id)

    def nodes(self) -> List[WordNode]:
        return list(self._nodes.values())

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def edge_between(self, node_a: str, node_b: str) -> Optional[WordEdge]:
        """Return the edge joining the pair in either direction, if any."""
        edge_id = self._by_pair.get(frozenset((node_a, node_b)))
        return self._edges[edge_id] if edge_id is not None else None

    def edge_exists(self, node_a: str, node_b: str) -> bool:
        return frozenset((node_a, node_b)) in self._by_pair

    def add_edge(
        self, from_id: str, to_id: str, kind: "RelationKind | str"
    ) -> Optional[WordEdge]:
        """Connect two nodes unless they are already connected.

        Returns:
            The new edge, or None when the relation was dropped (pair already
            connected, self-loop, or unknown endpoint).
        """
        kind = RelationKind.parse(kind)

        if from_id not in self._nodes or to_id not in self._nodes:
            self.diagnostics.warning(
                f"Edge '{kind.value}' references unknown node(s) "
                f"'{from_id}' and/or '{to_id}'",
                stage="graph",
            )
            return None

        if from_id == to_id:
            self.diagnostics.info(
                f"Dropped self-relation '{kind.value}' on "
                f"'{self._nodes[from_id].lemma}'",
                stage="graph",
                subject=self._nodes[from_id].lemma,
            )
            return None

        existing = self.edge_between(from_id, to_id)
        if existing is not None:
            self.diagnostics.info(
                f"Dropped '{kind.value}' relation between "
                f"'{self._nodes[from_id].lemma}' and '{self._nodes[to_id].lemma}': "
                f"already connected as '{existing.kind.value}'",
                stage="graph",
                subject=self._nodes[from_id].lemma,
            )
            return None

        edge = WordEdge(from_id=from_id, to_id=to_id, kind=kind)
        self._insert_edge(edge)
        return edge

    def _insert_edge(self, edge: WordEdge) -> None:
        self._edges[edge.id] = edge
        self._by_pair[edge.endpoints] = edge.id

    def edges(self) -> List[WordEdge]:
        return list(self._edges.values())

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, lemma: object) -> bool:
        return isinstance(lemma, str) and self.find_node(lemma) is not None

    def __iter__(self) -> Iterator[WordNode]:
        return iter(list(self._nodes.values()))

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    # ------------------------------------------------------------------
    # Export mapping
    # ------------------------------------------------------------------

    def to_export(self) -> Dict[str, List[Dict[str, Any]]]:
        """Stable mapping consumed by the persistence/export layer."""
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges.values()],
        }

    @classmethod
    def from_export(
        cls,
        data: Dict[str, Any],
        diagnostics: Optional[GraphDiagnostics] = None,
    ) -> "WordGraph":
        """Rebuild a graph from :meth:`to_export` output.

        Raises:
            GraphImportError: malformed entries, duplicate lemmas or ids,
                dangling edge endpoints, or parallel edges.
        """
        if not isinstance(data, dict):
            raise GraphImportError("Graph export must be a mapping")

        node_entries = data.get("nodes", [])
        edge_entries = data.get("edges", [])
        for key, entries in (("nodes", node_entries), ("edges", edge_entries)):
            if not isinstance(entries, list):
                raise GraphImportError(
                    f"'{key}' must be a list, got {type(entries).__name__}"
                )

        graph = cls(diagnostics=diagnostics)

        for entry in node_entries:
            node = WordNode.from_dict(entry)
            if node.id in graph._nodes:
                raise GraphImportError(
                    f"Duplicate node id '{node.id}'", subject=node.id
                )
            if graph.find_node(node.lemma) is not None:
                raise GraphImportError(
                    f"Duplicate lemma '{node.lemma}'", subject=node.id
                )
            graph.add_node(node)

        for entry in edge_entries:
            edge = WordEdge.from_dict(entry)
            if edge.id in graph._edges:
                raise GraphImportError(
                    f"Duplicate edge id '{edge.id}'", subject=edge.id
                )
            for endpoint in (edge.from_id, edge.to_id):
                if endpoint not in graph._nodes:
                    raise GraphImportError(
                        f"Edge references unknown node '{endpoint}'", subject=edge.id
                    )
            if edge.from_id == edge.to_id or graph.edge_exists(
                edge.from_id, edge.to_id
            ):
                raise GraphImportError(
                    "Edge duplicates an existing connection or is a self-loop",
                    subject=edge.id,
                )
            graph._insert_edge(edge)

        return graph
