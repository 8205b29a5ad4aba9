"""Layout performance and quality metrics.

Observational only: nothing here raises or changes positions.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
from scipy.spatial.distance import pdist

from wordgraph.src.common.constants import (
    DEFAULT_CONFIG,
    NATURAL_EDGE_LENGTH,
    LayoutConfig,
)
from wordgraph.src.common.diagnostics import GraphDiagnostics

from .layout_run import LayoutRun


@dataclass
class LayoutRunRecord:
    """Summary of one finished layout run."""

    strategy: str
    state: str
    iterations: int
    node_count: int
    edge_count: int
    compute_seconds: float
    wall_seconds: float


@dataclass
class LayoutQuality:
    mean_edge_length: float
    edge_length_stress: float  # mean of ((length - k) / k)²
    min_node_distance: Optional[float]  # None with fewer than two nodes


def layout_quality(
    nodes: Sequence, edges: Sequence, k: float = NATURAL_EDGE_LENGTH
) -> LayoutQuality:
    """Measure how close edges are to the natural length ``k``."""
    positions = np.array(
        [[float(node.x), float(node.y)] for node in nodes], dtype=np.float64
    ).reshape(-1, 2)
    index = {node.id: i for i, node in enumerate(nodes)}

    lengths = []
    for edge in edges:
        a = index.get(edge.from_id)
        b = index.get(edge.to_id)
        if a is None or b is None:
            continue
        lengths.append(float(np.linalg.norm(positions[a] - positions[b])))

    if lengths:
        lengths_arr = np.asarray(lengths)
        mean_length = float(lengths_arr.mean())
        stress = float(np.mean(((lengths_arr - k) / k) ** 2))
    else:
        mean_length = 0.0
        stress = 0.0

    min_distance = float(pdist(positions).min()) if len(positions) >= 2 else None
    return LayoutQuality(mean_length, stress, min_distance)


@dataclass
class LayoutMetrics:
    """Timing and scale monitor for the layout engine."""

    config: LayoutConfig = DEFAULT_CONFIG
    diagnostics: GraphDiagnostics = field(default_factory=GraphDiagnostics)
    history: List[LayoutRunRecord] = field(default_factory=list)
    _started_at: Optional[float] = field(default=None, repr=False)

    @property
    def last_run(self) -> Optional[LayoutRunRecord]:
        return self.history[-1] if self.history else None

    def scale_warning_message(
        self, node_count: int, edge_count: int
    ) -> Optional[str]:
        """Describe which scale limits the graph exceeds, if any."""
        problems = []
        if node_count > self.config.max_nodes:
            problems.append(f"{node_count} nodes (limit {self.config.max_nodes})")
        if edge_count > self.config.max_edges:
            problems.append(f"{edge_count} edges (limit {self.config.max_edges})")
        if not problems:
            return None
        return "Large graph: " + ", ".join(problems) + "; layout may be slow"

    def run_started(self, run: LayoutRun) -> None:
        self._started_at = time.perf_counter()
        message = self.scale_warning_message(run.node_count, run.edge_count)
        if message:
            self.diagnostics.warning(message, stage="layout")

    def run_finished(self, run: LayoutRun) -> LayoutRunRecord:
        wall = 0.0
        if self._started_at is not None:
            wall = time.perf_counter() - self._started_at
            self._started_at = None

        record = LayoutRunRecord(
            strategy=run.strategy.value,
            state=run.state.value,
            iterations=run.iteration,
            node_count=run.node_count,
            edge_count=run.edge_count,
            compute_seconds=run.compute_time,
            wall_seconds=wall,
        )
        self.history.append(record)

        if record.compute_seconds > self.config.slow_layout_seconds:
            self.diagnostics.warning(
                f"Slow layout: {record.compute_seconds * 1000:.0f} ms for "
                f"{record.node_count} nodes ({record.strategy})",
                stage="layout",
            )
        return record
