"""Vocabulary graph model and force-directed layout engine."""

__version__ = "0.3.0"
