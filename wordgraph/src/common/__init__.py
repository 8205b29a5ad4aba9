"""Common utilities shared across graph and layout stages."""

from .diagnostics import GraphDiagnostics, DiagnosticSeverity, Diagnostic
from .exceptions import GraphError, InvalidRelationError, GraphImportError
from .constants import *

__all__ = [
    "GraphDiagnostics",
    "DiagnosticSeverity",
    "Diagnostic",
    "GraphError",
    "InvalidRelationError",
    "GraphImportError",
    # Configuration
    "LayoutConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_BOUNDS",
    "DEFAULT_NODE_SIZE",
]
