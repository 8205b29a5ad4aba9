"""Layout Engine
=================

Force-directed relaxation of a word graph:

1. Initial placement – new children are arranged on a circle around their parent.
2. Layout runs – cancellable, time-sliced Fruchterman-Reingold passes using
   exact repulsion for small graphs and a Barnes-Hut quadtree for large ones.
3. Metrics – run timing, scale warnings and layout quality.

:class:`ForceLayoutEngine` is the surface used by the rendering layer.
"""

from .layout_engine import ForceLayoutEngine
from .layout_run import LayoutRun, LayoutState, LayoutStrategy
from .metrics import LayoutMetrics, LayoutQuality, LayoutRunRecord, layout_quality
from .placement import (
    arrange_children_in_circle,
    calculate_optimal_radius,
    center_nodes,
)

__all__ = [
    "ForceLayoutEngine",
    "LayoutRun",
    "LayoutState",
    "LayoutStrategy",
    "LayoutMetrics",
    "LayoutQuality",
    "LayoutRunRecord",
    "layout_quality",
    "arrange_children_in_circle",
    "calculate_optimal_radius",
    "center_nodes",
]
