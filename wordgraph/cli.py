#!/usr/bin/env python3
"""
wordgraph-layout CLI - Command-line interface for the word graph layout engine.

This module provides the entry point for the 'wordgraph-layout' command installed via pip.

Usage:
    wordgraph-layout graph.json                        # Lay out and print to stdout
    wordgraph-layout graph.json -o laid_out.json       # Save the export to a file
    wordgraph-layout graph.json --width 1200 --height 900
    wordgraph-layout graph.json --strategy barnes-hut --theta 0.3
    wordgraph-layout graph.json --center               # Re-centre on the origin afterwards
"""

import json
import logging
import sys
from pathlib import Path

import click
from tqdm import tqdm

from wordgraph.src.common.constants import DEFAULT_CONFIG, LayoutConfig
from wordgraph.src.common.diagnostics import GraphDiagnostics
from wordgraph.src.common.exceptions import GraphImportError
from wordgraph.src.graph.word_graph import WordGraph
from wordgraph.src.layout.layout_engine import ForceLayoutEngine
from wordgraph.src.layout.layout_run import LayoutStrategy
from wordgraph.src.layout.metrics import layout_quality

STRATEGIES = {
    "auto": None,
    "exact": LayoutStrategy.EXACT,
    "barnes-hut": LayoutStrategy.BARNES_HUT,
}


def layout_graph_file(
    source_text: str,
    source_name: str = "<string>",
    width: float | None = None,
    height: float | None = None,
    iterations: int | None = None,
    strategy: str = "auto",
    theta: float | None = None,
    center: bool = False,
    log_level: str = "warning",
    show_progress: bool = False,
    config: LayoutConfig = DEFAULT_CONFIG,
) -> tuple[bool, str, list]:
    """
    Run one full layout pass over a graph export.

    Args:
        source_text: JSON text of a graph export ({"nodes": [...], "edges": [...]})
        source_name: Name of the source (for error messages)
        width, height: Canvas size (default: config.default_bounds)
        iterations: Iteration count override
        strategy: "auto", "exact" or "barnes-hut"
        theta: Barnes-Hut opening criterion override
        center: Translate the result so its bounding box is centred on the origin
        log_level: Diagnostics verbosity level
        show_progress: Show a tqdm progress bar on stderr
        config: Layout configuration settings

    Returns:
        (success: bool, result: str, diagnostics: list)
    """
    diagnostics = GraphDiagnostics(log_level=log_level)

    overrides = {}
    if iterations is not None:
        overrides["iterations"] = iterations
    if theta is not None:
        overrides["theta"] = theta
    try:
        config = config.replace(**overrides) if overrides else config
    except ValueError as e:
        return (
            False,
            f"Invalid layout settings: {e}",
            diagnostics.get_messages(diagnostics.min_severity),
        )

    try:
        data = json.loads(source_text)
    except json.JSONDecodeError as e:
        return (
            False,
            f"{source_name} is not valid JSON: {e}",
            diagnostics.get_messages(diagnostics.min_severity),
        )

    try:
        graph = WordGraph.from_export(data, diagnostics=diagnostics)
    except GraphImportError as e:
        diagnostics.error(e.message, stage="cli", subject=e.subject)
        return False, "Graph import failed", diagnostics.get_messages(diagnostics.min_severity)

    bounds = (
        width if width is not None else config.default_bounds[0],
        height if height is not None else config.default_bounds[1],
    )
    engine = ForceLayoutEngine(config=config, diagnostics=diagnostics)
    nodes = graph.nodes()
    edges = graph.edges()

    with tqdm(
        total=config.iterations,
        desc="Layout",
        unit="it",
        file=sys.stderr,
        disable=None if show_progress else True,
    ) as progress:
        engine.apply_force_directed_layout(
            nodes,
            edges,
            bounds,
            strategy=STRATEGIES[strategy],
            on_iteration=lambda iteration, temperature, positions: progress.update(1),
        )
        engine.run_to_completion()

    if center:
        engine.center_nodes(nodes)

    quality = layout_quality(nodes, edges, config.natural_length)
    diagnostics.info(
        f"Mean edge length {quality.mean_edge_length:.1f}, "
        f"stress {quality.edge_length_stress:.3f}",
        stage="cli",
        subject=source_name,
    )

    result = json.dumps(graph.to_export(), indent=2, ensure_ascii=False)
    return True, result, diagnostics.get_messages(diagnostics.min_severity)


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file for the laid-out graph (default: stdout)",
)
@click.option("--width", type=float, help="Canvas width (default: 800)")
@click.option("--height", type=float, help="Canvas height (default: 600)")
@click.option("--iterations", type=int, help="Number of layout iterations (default: 150)")
@click.option(
    "--strategy",
    type=click.Choice(list(STRATEGIES), case_sensitive=False),
    default="auto",
    help="Repulsion strategy (auto picks by node count)",
)
@click.option("--theta", type=float, help="Barnes-Hut accuracy threshold (default: 0.5)")
@click.option("--center", is_flag=True, help="Centre the result on the origin")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def main(input_file, output, width, height, iterations, strategy, theta, center, log_level):
    """Lay out a word graph export with the force-directed engine."""
    setup_logging(log_level)

    try:
        source_text = input_file.read_text(encoding="utf-8")
    except OSError as e:
        click.echo(f"Failed to read input file: {e}", err=True)
        sys.exit(1)

    verbose = log_level in ["debug", "info"]
    if verbose:
        click.echo(f"Laying out {input_file}...", err=True)

    success, result, diagnostic_messages = layout_graph_file(
        source_text,
        source_name=str(input_file),
        width=width,
        height=height,
        iterations=iterations,
        strategy=strategy.lower(),
        theta=theta,
        center=center,
        log_level=log_level,
        show_progress=True,
    )

    if not success:
        click.echo(f"Layout failed: {result}", err=True)
        for message in diagnostic_messages:
            click.echo(message, err=True)
        sys.exit(1)

    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Layout saved to {output}", err=True)
        except OSError as e:
            click.echo(f"Failed to write output file: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(result)

    if verbose:
        msg_count = len(diagnostic_messages)
        msg = (
            f"Layout completed with {msg_count} diagnostic(s)."
            if msg_count
            else "Layout completed successfully."
        )
        click.echo(msg, err=True)


if __name__ == "__main__":
    main()
