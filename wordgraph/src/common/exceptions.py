from typing import Optional

"""Exceptions raised at the graph and import boundaries."""


class GraphError(Exception):
    """Base exception for graph construction and diagnostics errors."""

    def __init__(self, message: str, subject: Optional[str] = None) -> None:
        self.message = message
        self.subject = subject
        suffix = f" ({subject})" if subject else ""
        super().__init__(f"{message}{suffix}")


class InvalidRelationError(GraphError):
    """A relation tag outside the supported enumeration."""

    def __init__(self, relation: str) -> None:
        self.relation = relation
        super().__init__(f"Unknown relation type '{relation}'", subject=relation)


class GraphImportError(GraphError):
    """An exported graph mapping could not be restored."""
