import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import GraphError

"""Unified diagnostic collection for graph construction and layout."""


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    DEBUG = "debug"  # Internal engine information
    INFO = "info"  # Informational messages for users
    WARNING = "warning"  # Issues that don't stop the operation
    ERROR = "error"  # Issues the caller must act on


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]

_LOGGING_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # graph, expansion, spatial, layout, cli
    subject: Optional[str] = None  # lemma, node id or file the message is about


class GraphDiagnostics:
    """Central diagnostic collection shared by all stages.

    Entries are kept for later querying and also forwarded to the standard
    ``logging`` module under ``wordgraph.<stage>``.

    Usage:
        diagnostics = GraphDiagnostics(log_level="info")
        diagnostics.warning("Unknown relation 'cousin'", stage="expansion")
        if diagnostics.warning_count():
            print(diagnostics.format_for_user())
    """

    def __init__(self, log_level: str = "warning", raise_errors: bool = False):
        try:
            self.min_severity = DiagnosticSeverity(log_level.lower())
        except ValueError:
            raise ValueError(f"Invalid log level: {log_level}") from None
        self.raise_errors = raise_errors
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "graph"

    def debug(
        self, message: str, stage: str | None = None, subject: Optional[str] = None
    ) -> None:
        """Add an internal debug message (kept only at debug level)."""
        self._add(DiagnosticSeverity.DEBUG, message, stage, subject)

    def info(
        self, message: str, stage: str | None = None, subject: Optional[str] = None
    ) -> None:
        """Add an informational message (kept at info level and below)."""
        self._add(DiagnosticSeverity.INFO, message, stage, subject)

    def warning(
        self, message: str, stage: str | None = None, subject: Optional[str] = None
    ) -> None:
        """Add a warning (always kept, doesn't stop the operation)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, subject)
        self._warning_count += 1

    def error(
        self, message: str, stage: str | None = None, subject: Optional[str] = None
    ) -> None:
        """Add an error (always kept; raises in ``raise_errors`` mode)."""
        self._add(DiagnosticSeverity.ERROR, message, stage, subject)
        self._error_count += 1
        if self.raise_errors:
            raise GraphError(message, subject=subject)

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: str | None,
        subject: Optional[str],
    ) -> None:
        """Internal method to add a diagnostic."""
        stage = stage or self.default_stage
        logging.getLogger(f"wordgraph.{stage}").log(_LOGGING_LEVELS[severity], message)

        keep = _SEVERITY_ORDER.index(severity) >= _SEVERITY_ORDER.index(
            self.min_severity
        )
        if not keep and severity not in (
            DiagnosticSeverity.WARNING,
            DiagnosticSeverity.ERROR,
        ):
            return

        self.diagnostics.append(
            Diagnostic(severity=severity, message=message, stage=stage, subject=subject)
        )

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        """Get the number of errors."""
        return self._error_count

    def warning_count(self) -> int:
        """Get the number of warnings."""
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = _SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if _SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        """Format a single diagnostic for display."""
        # Format: SEVERITY [stage:subject]: message
        location = diag.stage
        if diag.subject:
            location = f"{location}:{diag.subject}"
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all kept diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        messages = self.get_messages(self.min_severity)
        summary = (
            f"\nLayout summary: {self._error_count} error(s), "
            f"{self._warning_count} warning(s)"
        )
        return "\n".join(messages) + summary

    def merge(self, other: "GraphDiagnostics") -> None:
        """Merge diagnostics from another collector."""
        self.diagnostics.extend(other.diagnostics)
        self._error_count += other._error_count
        self._warning_count += other._warning_count
