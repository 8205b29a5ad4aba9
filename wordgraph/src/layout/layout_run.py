"""Resumable force-directed layout run.

A :class:`LayoutRun` owns one relaxation pass over a snapshot of the graph.
Positions are copied into an ``(n, 2)`` array when the run is created; each
:meth:`LayoutRun.step` computes one Fruchterman-Reingold iteration on that
array and writes the result back to the nodes. The host decides when to
call ``step`` (directly, through :meth:`LayoutRun.run_slice` with a time
budget, or through the engine's asyncio driver), so a long run never blocks
rendering.

Iterations are strictly sequential: iteration ``i + 1`` reads the positions
written by iteration ``i``. Cancellation is checked at the top of every
iteration and again right before the write-back, so node positions always
reflect a whole number of iterations.
"""

import threading
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from wordgraph.src.common.constants import DEFAULT_CONFIG, LayoutConfig
from wordgraph.src.common.diagnostics import GraphDiagnostics
from wordgraph.src.forces.cooling import CoolingSchedule
from wordgraph.src.forces.kernels import (
    clamp_to_bounds,
    edge_attraction,
    exact_repulsion,
    limit_displacement,
)
from wordgraph.src.spatial import MassPoint, QuadTree, QuadTreeStats, Rect

IterationCallback = Callable[[int, float, np.ndarray], None]


class LayoutState(Enum):
    """Lifecycle of a layout run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LayoutStrategy(Enum):
    """How all-pairs repulsion is computed."""

    EXACT = "exact"
    BARNES_HUT = "barnes-hut"

    @classmethod
    def choose(cls, node_count: int, threshold: int) -> "LayoutStrategy":
        return cls.EXACT if node_count <= threshold else cls.BARNES_HUT


class LayoutRun:
    """One cancellable, time-sliced relaxation pass.

    Args:
        nodes: Objects with ``id``, ``x`` and ``y``; only positions are written.
        edges: Objects with ``from_id`` and ``to_id``; never modified.
        bounds: Canvas ``(width, height)``; defaults to ``config.default_bounds``.
        config: Layout parameters.
        diagnostics: Collector for warnings and run summaries.
        strategy: Force a strategy instead of choosing by node count.
        lock: Guards position write-back; shared with the owning engine.
        on_iteration: Called after every write-back with
            ``(iteration, temperature, positions)``.
    """

    def __init__(
        self,
        nodes: Sequence,
        edges: Sequence,
        bounds: Optional[Tuple[float, float]] = None,
        config: LayoutConfig = DEFAULT_CONFIG,
        diagnostics: Optional[GraphDiagnostics] = None,
        strategy: Optional[LayoutStrategy] = None,
        lock: Optional[threading.Lock] = None,
        on_iteration: Optional[IterationCallback] = None,
    ) -> None:
        self.config = config
        self.diagnostics = diagnostics or GraphDiagnostics()
        self.nodes = list(nodes)
        self.bounds = tuple(bounds) if bounds is not None else config.default_bounds
        self.lock = lock or threading.Lock()
        self.on_iteration = on_iteration

        self.positions = np.array(
            [[float(node.x), float(node.y)] for node in self.nodes], dtype=np.float64
        ).reshape(-1, 2)
        self.edge_pairs = self._index_edges(edges)
        self.strategy = strategy or LayoutStrategy.choose(
            len(self.nodes), config.barnes_hut_threshold
        )

        self.state = LayoutState.IDLE
        self.iteration = 0
        self.schedule = CoolingSchedule(
            config.initial_temperature, config.final_temperature, config.iterations
        )
        self.temperature = self.schedule.temperature_at(0)
        self.compute_time = 0.0
        self.last_tree_stats: Optional[QuadTreeStats] = None
        self._cancel_requested = False
        self._state_lock = threading.Lock()
        self._finish_claimed = False

    def _index_edges(self, edges: Sequence) -> np.ndarray:
        index: Dict[str, int] = {node.id: i for i, node in enumerate(self.nodes)}
        pairs: List[Tuple[int, int]] = []
        for edge in edges:
            a = index.get(edge.from_id)
            b = index.get(edge.to_id)
            if a is None or b is None:
                self.diagnostics.warning(
                    f"Ignoring edge between '{edge.from_id}' and '{edge.to_id}': "
                    "endpoint is not part of the layout",
                    stage="layout",
                )
                continue
            pairs.append((a, b))
        return np.array(pairs, dtype=np.int64).reshape(-1, 2)

    # ------------------------------------------------------------------
    # Scheduling primitives
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edge_pairs)

    @property
    def is_running(self) -> bool:
        return self.state is LayoutState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.state in (LayoutState.COMPLETED, LayoutState.CANCELLED)

    def start(self) -> None:
        """Move from IDLE to RUNNING; a graph of 0 or 1 nodes completes at once."""
        if self.state is not LayoutState.IDLE:
            return
        if self._cancel_requested:
            self.state = LayoutState.CANCELLED
            return
        if self.node_count <= 1:
            self.state = LayoutState.COMPLETED
            self.diagnostics.debug(
                f"Layout of {self.node_count} node(s) is a no-op", stage="layout"
            )
            return

        self.state = LayoutState.RUNNING
        self.diagnostics.info(
            f"Layout started: {self.node_count} nodes, {self.edge_count} edges, "
            f"{self.strategy.value} strategy, {self.config.iterations} iterations",
            stage="layout",
        )

    def step(self) -> bool:
        """Run one iteration.

        Returns:
            True while further iterations remain.
        """
        if self.state is LayoutState.IDLE:
            self.start()
        if self.state is not LayoutState.RUNNING:
            return False
        if self._cancel_requested:
            self._mark_cancelled()
            return False

        started = time.perf_counter()
        written = self._iterate()
        self.compute_time += time.perf_counter() - started

        if not written:
            self._mark_cancelled()
            return False
        if self.state is not LayoutState.RUNNING:
            return False

        if self.iteration >= self.config.iterations:
            if self._transition(LayoutState.COMPLETED):
                self.diagnostics.info(
                    f"Layout completed after {self.iteration} iterations "
                    f"({self.compute_time * 1000:.1f} ms)",
                    stage="layout",
                )
            return False
        return True

    def run_slice(self, budget: Optional[float] = None) -> bool:
        """Run iterations until ``budget`` seconds have elapsed.

        At least one iteration runs per slice, so a slow iteration cannot
        stall the run. Returns True while further iterations remain.
        """
        budget = self.config.time_slice_budget if budget is None else budget
        deadline = time.perf_counter() + budget
        while self.step():
            if time.perf_counter() >= deadline:
                return True
        return False

    def run_to_completion(self) -> LayoutState:
        while self.step():
            pass
        return self.state

    def cancel(self) -> None:
        """Request cancellation; positions keep the last whole iteration."""
        self._cancel_requested = True
        if self.state is LayoutState.IDLE:
            self.state = LayoutState.CANCELLED

    def claim_finish(self) -> bool:
        """True exactly once, for the first caller after the run has finished."""
        with self._state_lock:
            if not self.is_finished or self._finish_claimed:
                return False
            self._finish_claimed = True
            return True

    def _transition(self, state: LayoutState) -> bool:
        """Leave RUNNING for ``state``; False if another thread got there first."""
        with self._state_lock:
            if self.state is not LayoutState.RUNNING:
                return False
            self.state = state
            return True

    def _mark_cancelled(self) -> None:
        if not self._transition(LayoutState.CANCELLED):
            return
        self.diagnostics.info(
            f"Layout cancelled after {self.iteration} iteration(s)", stage="layout"
        )

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def _iterate(self) -> bool:
        """Compute and write back one iteration; False if cancelled meanwhile."""
        config = self.config
        positions = self.positions
        k = config.natural_length

        if self.strategy is LayoutStrategy.EXACT:
            forces = exact_repulsion(positions, k, config.min_distance)
        else:
            forces = self._barnes_hut_repulsion(positions, k)
        forces += edge_attraction(positions, self.edge_pairs, k, config.min_distance)

        temperature = self.temperature
        updated = positions + limit_displacement(forces, temperature, config.min_force)
        width, height = self.bounds
        clamp_to_bounds(updated, width, height, config.boundary_margin)

        with self.lock:
            if self._cancel_requested:
                return False
            for node, (x, y) in zip(self.nodes, updated):
                node.x = float(x)
                node.y = float(y)
            self.positions = updated

        self.iteration += 1
        self.temperature = self.schedule.temperature_at(self.iteration)
        if self.on_iteration is not None:
            self.on_iteration(self.iteration - 1, temperature, updated)
        return True

    def tree_bounds(self, positions: np.ndarray) -> Rect:
        """Region covered by the quadtree: twice the canvas, grown to fit every node."""
        width, height = self.bounds
        return Rect.canvas(width, height, scale=2.0).union(Rect.enclosing(positions))

    def _barnes_hut_repulsion(self, positions: np.ndarray, k: float) -> np.ndarray:
        config = self.config
        points = [
            MassPoint(node.id, float(x), float(y), 1.0, i)
            for i, (node, (x, y)) in enumerate(zip(self.nodes, positions))
        ]
        tree = QuadTree.build(
            self.tree_bounds(positions),
            points,
            capacity=config.quadtree_capacity,
            theta=config.theta,
            min_distance=config.min_distance,
            distance_power=config.distance_power,
        )

        forces = np.zeros_like(positions)
        for point in points:
            forces[point.index] = tree.calculate_force(point, k)

        self.last_tree_stats = stats = tree.stats()
        if self.iteration == 0:
            self.diagnostics.debug(
                f"Quadtree: {stats.node_count} nodes, {stats.leaf_count} leaves, "
                f"depth {stats.max_depth}",
                stage="spatial",
            )
        return forces
