"""Graph construction from term expansions.

An expansion is a resolved term plus up to a dozen related terms, each
tagged with a relation kind. The builder merges it into a
:class:`WordGraph`:

1. normalize every related term and reuse the node that already carries
   that lemma, or create a new one
2. connect parent and child unless the pair is already connected
3. arrange only the newly created children on a circle around the parent;
   reused nodes keep their position until the next full layout pass

Relation tags outside :class:`RelationKind` are rejected here and reported
through diagnostics and :attr:`ExpansionResult.rejected`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from wordgraph.src.common.constants import DEFAULT_CONFIG, LayoutConfig
from wordgraph.src.common.diagnostics import GraphDiagnostics
from wordgraph.src.common.exceptions import InvalidRelationError
from wordgraph.src.layout.placement import (
    arrange_children_in_circle,
    calculate_optimal_radius,
)

from .model import RelationKind, WordEdge, WordNode, normalize_lemma
from .word_graph import WordGraph


@dataclass
class RelatedTerm:
    """One related term as delivered by the expansion client."""

    term: str
    relation: str


@dataclass
class ExpansionResponse:
    """A resolved term and its related terms."""

    lemma: str
    explanation_ja: str = ""
    pos: Optional[str] = None
    register: Optional[str] = None
    example_en: Optional[str] = None
    example_ja: Optional[str] = None
    related: List[RelatedTerm] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpansionResponse":
        """Build from the expansion client's JSON keys."""
        return cls(
            lemma=data.get("lemma", ""),
            explanation_ja=data.get("explanation_ja", ""),
            pos=data.get("pos"),
            register=data.get("register"),
            example_en=data.get("example_en"),
            example_ja=data.get("example_ja"),
            related=[
                RelatedTerm(term=item.get("term", ""), relation=item.get("relation", ""))
                for item in data.get("related", [])
            ],
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "explanation_ja": self.explanation_ja,
            "pos": self.pos,
            "register": self.register,
            "example_en": self.example_en,
            "example_ja": self.example_ja,
        }


@dataclass
class ExpansionResult:
    """What one expansion changed in the graph."""

    parent: Optional[WordNode]
    created: List[WordNode] = field(default_factory=list)
    reused: List[WordNode] = field(default_factory=list)
    edges: List[WordEdge] = field(default_factory=list)
    dropped: List[Tuple[str, str]] = field(default_factory=list)  # (lemma, relation)
    rejected: List[Tuple[str, str]] = field(default_factory=list)  # (term, reason)
    root_created: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.root_created or self.created or self.edges)


class GraphBuilder:
    """Merge expansion results into a graph, enforcing dedup on insert."""

    def __init__(
        self,
        graph: WordGraph,
        diagnostics: Optional[GraphDiagnostics] = None,
        config: LayoutConfig = DEFAULT_CONFIG,
    ) -> None:
        self.graph = graph
        self.diagnostics = diagnostics or graph.diagnostics
        self.config = config

    def add_root(
        self,
        response: ExpansionResponse,
        position: Tuple[float, float] = (0.0, 0.0),
    ) -> ExpansionResult:
        """Insert the root term of an expansion and its related terms.

        A root whose lemma already exists is reused as-is: it is neither moved
        nor given the new payload, and its related terms are not re-applied.
        """
        lemma = normalize_lemma(response.lemma)
        if not lemma:
            self.diagnostics.warning("Expansion has an empty lemma", stage="expansion")
            return ExpansionResult(parent=None, rejected=[(response.lemma, "empty term")])

        existing = self.graph.find_node(lemma)
        if existing is not None:
            self.diagnostics.info(
                f"'{lemma}' already on the canvas; reusing it",
                stage="expansion",
                subject=lemma,
            )
            return ExpansionResult(parent=existing, reused=[existing])

        root = WordNode(lemma=lemma, x=position[0], y=position[1], **response.payload())
        self.graph.add_node(root)
        result = self.apply_related(root, response.related)
        result.root_created = True
        return result

    def expand_node(self, node: WordNode, response: ExpansionResponse) -> ExpansionResult:
        """Materialize the children of an existing node (once)."""
        if node.expanded:
            return ExpansionResult(parent=node)
        node.expanded = True
        return self.apply_related(node, response.related)

    def apply_related(
        self, parent: WordNode, related: Sequence[RelatedTerm]
    ) -> ExpansionResult:
        """Resolve related terms against the graph and connect them to ``parent``."""
        result = ExpansionResult(parent=parent)

        limit = self.config.max_related_terms
        if len(related) > limit:
            self.diagnostics.warning(
                f"Expansion of '{parent.lemma}' returned {len(related)} related "
                f"terms; only the first {limit} are used",
                stage="expansion",
                subject=parent.lemma,
            )
            related = related[:limit]

        for item in related:
            term = normalize_lemma(item.term)
            if not term:
                result.rejected.append((item.term, "empty term"))
                self.diagnostics.warning(
                    f"Rejected empty related term of '{parent.lemma}'",
                    stage="expansion",
                    subject=parent.lemma,
                )
                continue

            try:
                kind = RelationKind.parse(item.relation)
            except InvalidRelationError as e:
                result.rejected.append((term, e.message))
                self.diagnostics.warning(
                    f"Rejected '{term}': {e.message}",
                    stage="expansion",
                    subject=parent.lemma,
                )
                continue

            child, created = self.graph.get_or_create_node(
                term, explanation_ja=f"Related to {parent.lemma}"
            )
            if created:
                result.created.append(child)
            elif child is not parent and child not in result.reused:
                result.reused.append(child)

            edge = self.graph.add_edge(parent.id, child.id, kind)
            if edge is not None:
                result.edges.append(edge)
            else:
                result.dropped.append((child.lemma, kind.value))

        if result.created:
            radius = calculate_optimal_radius(
                len(result.created),
                self.config.default_node_size,
                self.config.child_spacing_factor,
            )
            arrange_children_in_circle(parent, result.created, radius)

        self.diagnostics.info(
            f"Expanded '{parent.lemma}': {len(result.created)} new, "
            f"{len(result.reused)} reused, {len(result.edges)} edge(s), "
            f"{len(result.dropped)} dropped, {len(result.rejected)} rejected",
            stage="expansion",
            subject=parent.lemma,
        )
        return result
