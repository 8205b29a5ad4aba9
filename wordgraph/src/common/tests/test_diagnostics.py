"""
Tests for common/diagnostics.py - Diagnostic collection and reporting.
"""

import logging

import pytest

from wordgraph.src.common.diagnostics import DiagnosticSeverity, GraphDiagnostics
from wordgraph.src.common.exceptions import GraphError


class TestGraphDiagnostics:
    """Tests for GraphDiagnostics class."""

    def test_diagnostics_initialization(self):
        """Test GraphDiagnostics initializes with empty diagnostics."""
        diag = GraphDiagnostics()
        assert not diag.has_errors()
        assert diag.error_count() == 0
        assert diag.warning_count() == 0
        assert diag.format_for_user() == "No diagnostics."

    def test_invalid_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            GraphDiagnostics(log_level="verbose")

    def test_error_collection(self):
        """Test adding and counting errors."""
        diag = GraphDiagnostics()
        diag.error("Test error", stage="layout")
        assert diag.has_errors()
        assert diag.error_count() == 1

    def test_warning_collection(self):
        """Test adding and counting warnings."""
        diag = GraphDiagnostics()
        diag.warning("Test warning", stage="expansion")
        assert not diag.has_errors()  # Warnings don't count as errors
        assert diag.warning_count() == 1

    def test_info_dropped_below_log_level(self):
        """Info messages are not kept at the default warning level."""
        diag = GraphDiagnostics()
        diag.info("Test info", stage="graph")
        assert diag.diagnostics == []

    def test_info_kept_at_info_level(self):
        diag = GraphDiagnostics(log_level="info")
        diag.info("Test info", stage="graph")
        diag.debug("Test debug", stage="graph")
        assert [d.severity for d in diag.diagnostics] == [DiagnosticSeverity.INFO]

    def test_warnings_kept_at_error_level(self):
        """Warnings and errors are always kept."""
        diag = GraphDiagnostics(log_level="error")
        diag.warning("kept", stage="graph")
        assert len(diag.diagnostics) == 1

    def test_message_format(self):
        """Messages carry severity, stage and subject."""
        diag = GraphDiagnostics()
        diag.warning("Rejected 'x'", stage="expansion", subject="cat")
        diag.warning("No subject", stage="layout")
        assert diag.get_messages() == [
            "WARNING [expansion:cat]: Rejected 'x'",
            "WARNING [layout]: No subject",
        ]

    def test_default_stage(self):
        diag = GraphDiagnostics()
        diag.warning("Something")
        assert diag.diagnostics[0].stage == "graph"

    def test_get_messages_filters_by_severity(self):
        diag = GraphDiagnostics()
        diag.warning("warn", stage="graph")
        diag.error("err", stage="graph")
        assert diag.get_messages(DiagnosticSeverity.ERROR) == ["ERROR [graph]: err"]

    def test_format_for_user_summary(self):
        diag = GraphDiagnostics()
        diag.warning("warn", stage="graph")
        diag.error("err", stage="graph")
        text = diag.format_for_user()
        assert "WARNING [graph]: warn" in text
        assert text.endswith("Layout summary: 1 error(s), 1 warning(s)")

    def test_raise_errors_mode(self):
        """Test that raise_errors=True causes errors to raise exceptions."""
        diag = GraphDiagnostics(raise_errors=True)
        with pytest.raises(GraphError) as excinfo:
            diag.error("Fatal", stage="cli", subject="graph.json")
        assert excinfo.value.message == "Fatal"
        assert excinfo.value.subject == "graph.json"

    def test_merge(self):
        first = GraphDiagnostics()
        second = GraphDiagnostics()
        first.warning("one", stage="graph")
        second.error("two", stage="layout")
        first.merge(second)
        assert first.error_count() == 1
        assert first.warning_count() == 1
        assert len(first.diagnostics) == 2

    def test_forwards_to_logging(self, caplog):
        """Every entry is also logged under wordgraph.<stage>."""
        diag = GraphDiagnostics()
        with caplog.at_level(logging.WARNING, logger="wordgraph.layout"):
            diag.warning("Slow layout", stage="layout")
        assert any(
            record.name == "wordgraph.layout" and record.getMessage() == "Slow layout"
            for record in caplog.records
        )
