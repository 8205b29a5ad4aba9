"""UI-facing layout engine.

One :class:`ForceLayoutEngine` is created per layout session. It holds at
most one active :class:`LayoutRun`; starting a new layout, or a user drag
through :meth:`ForceLayoutEngine.move_node`, cancels the one in flight.
"""

import asyncio
import threading
from typing import Optional, Sequence, Tuple

from wordgraph.src.common.constants import DEFAULT_CONFIG, LayoutConfig
from wordgraph.src.common.diagnostics import GraphDiagnostics

from .layout_run import IterationCallback, LayoutRun, LayoutState, LayoutStrategy
from .metrics import LayoutMetrics
from .placement import (
    arrange_children_in_circle,
    calculate_optimal_radius,
    center_nodes,
)


class ForceLayoutEngine:
    """Schedules force-directed layout runs over a caller-owned graph.

    Small graphs (exact strategy) are laid out synchronously inside
    :meth:`apply_force_directed_layout`. Larger graphs are left running for
    the host to drive with :meth:`tick`, :meth:`run_async` or
    :meth:`run_to_completion`.
    """

    def __init__(
        self,
        config: LayoutConfig = DEFAULT_CONFIG,
        diagnostics: Optional[GraphDiagnostics] = None,
    ) -> None:
        self.config = config
        self.diagnostics = diagnostics or GraphDiagnostics()
        self.metrics = LayoutMetrics(config=config, diagnostics=self.diagnostics)
        self.lock = threading.Lock()
        self._run: Optional[LayoutRun] = None

    @property
    def current_run(self) -> Optional[LayoutRun]:
        return self._run

    @property
    def state(self) -> LayoutState:
        return self._run.state if self._run is not None else LayoutState.IDLE

    def is_running(self) -> bool:
        return self._run is not None and self._run.is_running

    def apply_force_directed_layout(
        self,
        nodes: Sequence,
        edges: Sequence,
        bounds: Optional[Tuple[float, float]] = None,
        *,
        strategy: Optional[LayoutStrategy] = None,
        on_iteration: Optional[IterationCallback] = None,
    ) -> LayoutRun:
        """Start a full relaxation pass, cancelling any run in flight."""
        self.cancel_layout()

        run = LayoutRun(
            nodes,
            edges,
            bounds,
            config=self.config,
            diagnostics=self.diagnostics,
            strategy=strategy,
            lock=self.lock,
            on_iteration=on_iteration,
        )
        self._run = run
        self.metrics.run_started(run)
        run.start()

        if run.is_finished:
            self._record_finished(run)
        elif run.strategy is LayoutStrategy.EXACT:
            self.run_to_completion()
        return run

    def tick(self, budget: Optional[float] = None) -> bool:
        """Advance the active run by one time slice.

        Returns:
            True while the run has iterations left.
        """
        run = self._run
        if run is None or not run.is_running:
            return False
        if run.run_slice(budget):
            return True
        self._record_finished(run)
        return False

    async def run_async(self, budget: Optional[float] = None) -> LayoutState:
        """Drive the active run, yielding to the event loop between slices."""
        while self.tick(budget):
            await asyncio.sleep(0)
        return self.state

    def run_to_completion(self) -> LayoutState:
        run = self._run
        if run is None or not run.is_running:
            return self.state
        run.run_to_completion()
        self._record_finished(run)
        return run.state

    def cancel_layout(self) -> None:
        """Stop the active run; positions keep the last completed iteration."""
        run = self._run
        if run is None or not run.is_running:
            return
        run.cancel()
        run.step()
        self._record_finished(run)

    def _record_finished(self, run: LayoutRun) -> None:
        if run.claim_finish():
            self.metrics.run_finished(run)

    def move_node(self, node, x: float, y: float) -> None:
        """Reposition ``node`` as a user drag would, cancelling automatic layout."""
        self.cancel_layout()
        with self.lock:
            node.x = float(x)
            node.y = float(y)

    # ------------------------------------------------------------------
    # Placement helpers
    # ------------------------------------------------------------------

    def calculate_optimal_radius(
        self, child_count: int, node_size: Optional[Tuple[float, float]] = None
    ) -> float:
        return calculate_optimal_radius(
            child_count,
            node_size or self.config.default_node_size,
            self.config.child_spacing_factor,
        )

    def arrange_children_in_circle(
        self, parent, children: Sequence, radius: Optional[float] = None
    ) -> None:
        with self.lock:
            arrange_children_in_circle(
                parent,
                children,
                self.config.default_child_radius if radius is None else radius,
            )

    def center_nodes(self, nodes: Sequence) -> Tuple[float, float]:
        self.cancel_layout()
        with self.lock:
            return center_nodes(nodes)
