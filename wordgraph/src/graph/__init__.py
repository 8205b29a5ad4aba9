"""Graph Model
==============

Vocabulary nodes and typed relation edges, stored in an arena that
enforces one node per normalized lemma and one edge per unordered pair.
:class:`GraphBuilder` merges term expansions into the graph and gives new
children their initial circular placement.
"""

from .model import RelationKind, WordNode, WordEdge, normalize_lemma
from .word_graph import WordGraph
from .expansion import (
    ExpansionResponse,
    ExpansionResult,
    GraphBuilder,
    RelatedTerm,
)

__all__ = [
    # Data structures
    "RelationKind",
    "WordNode",
    "WordEdge",
    "normalize_lemma",
    "WordGraph",
    # Construction
    "GraphBuilder",
    "ExpansionResponse",
    "ExpansionResult",
    "RelatedTerm",
]
