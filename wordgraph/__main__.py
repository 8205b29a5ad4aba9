#!/usr/bin/env python3
"""
wordgraph-layout CLI - Entry point for the layout engine.

This module allows running the CLI as:
    python -m wordgraph graph.json
    wordgraph-layout graph.json  (when installed via pip)
"""

from wordgraph.cli import main

if __name__ == "__main__":
    main()
