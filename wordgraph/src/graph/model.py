"""Data structures for vocabulary graph nodes and edges."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from wordgraph.src.common.constants import DEFAULT_EASE
from wordgraph.src.common.exceptions import GraphImportError, InvalidRelationError


def normalize_lemma(term: str) -> str:
    """Canonical node label: lowercase, internal whitespace collapsed, trimmed."""
    return " ".join(term.split()).lower()


def _new_id() -> str:
    return str(uuid.uuid4())


class RelationKind(Enum):
    """Kinds of relationship between two vocabulary terms."""

    SYNONYM = "synonym"
    ANTONYM = "antonym"
    ASSOCIATE = "associate"
    ETYMOLOGY = "etymology"
    COLLOCATION = "collocation"

    @classmethod
    def parse(cls, value: "str | RelationKind") -> "RelationKind":
        """Resolve a relation tag, raising InvalidRelationError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRelationError(str(value)) from None


@dataclass(eq=False)
class WordNode:
    """A vocabulary term placed on the canvas.

    Only ``x``/``y`` are touched by the layout engine; everything else is
    payload owned by the graph model.
    """

    lemma: str
    explanation_ja: str = ""
    pos: Optional[str] = None
    register: Optional[str] = None
    example_en: Optional[str] = None
    example_ja: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    expanded: bool = False
    ease: float = DEFAULT_EASE
    next_review_at: Optional[datetime] = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        self.lemma = normalize_lemma(self.lemma)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def to_dict(self) -> Dict[str, Any]:
        """Export mapping; optional payload keys are omitted when unset."""
        data: Dict[str, Any] = {
            "id": self.id,
            "lemma": self.lemma,
            "explanation_ja": self.explanation_ja,
            "x": self.x,
            "y": self.y,
            "expanded": self.expanded,
            "ease": self.ease,
        }
        for key in ("pos", "register", "example_en", "example_ja"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.next_review_at is not None:
            data["next_review_at"] = self.next_review_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordNode":
        if not isinstance(data, dict):
            raise GraphImportError("Node entry must be a mapping")
        missing = [key for key in ("id", "lemma") if key not in data]
        if missing:
            raise GraphImportError(
                f"Node entry is missing required fields: {', '.join(missing)}"
            )

        node_id = str(data["id"])
        lemma = data["lemma"]
        if not isinstance(lemma, str):
            raise GraphImportError(
                f"Lemma must be a string, got {type(lemma).__name__}",
                subject=node_id,
            )
        x = _import_number(data, "x", 0.0, node_id)
        y = _import_number(data, "y", 0.0, node_id)
        ease = _import_number(data, "ease", DEFAULT_EASE, node_id)

        next_review = data.get("next_review_at")
        try:
            next_review_at = (
                datetime.fromisoformat(next_review) if next_review else None
            )
        except (TypeError, ValueError):
            raise GraphImportError(
                f"Invalid next_review_at '{next_review}'", subject=node_id
            ) from None

        return cls(
            id=node_id,
            lemma=lemma,
            explanation_ja=data.get("explanation_ja", ""),
            pos=data.get("pos"),
            register=data.get("register"),
            example_en=data.get("example_en"),
            example_ja=data.get("example_ja"),
            x=x,
            y=y,
            expanded=bool(data.get("expanded", False)),
            ease=ease,
            next_review_at=next_review_at,
        )


def _import_number(data: Dict[str, Any], key: str, default: float, subject: str) -> float:
    value = data.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        number = math.nan
    if isinstance(value, bool) or not math.isfinite(number):
        raise GraphImportError(f"Invalid {key} {value!r}", subject=subject)
    return number


@dataclass(eq=False)
class WordEdge:
    """A relationship between two nodes, stored with its original direction."""

    from_id: str
    to_id: str
    kind: RelationKind
    id: str = field(default_factory=_new_id)

    @property
    def endpoints(self) -> FrozenSet[str]:
        """Unordered node pair used for deduplication."""
        return frozenset((self.from_id, self.to_id))

    def connects(self, node_a: str, node_b: str) -> bool:
        return self.endpoints == frozenset((node_a, node_b))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from": self.from_id,
            "to": self.to_id,
            "type": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordEdge":
        if not isinstance(data, dict):
            raise GraphImportError("Edge entry must be a mapping")
        missing = [key for key in ("id", "from", "to", "type") if key not in data]
        if missing:
            raise GraphImportError(
                f"Edge entry is missing required fields: {', '.join(missing)}"
            )
        try:
            kind = RelationKind.parse(data["type"])
        except InvalidRelationError as e:
            raise GraphImportError(e.message, subject=str(data["id"])) from e
        return cls(
            id=str(data["id"]),
            from_id=str(data["from"]),
            to_id=str(data["to"]),
            kind=kind,
        )
