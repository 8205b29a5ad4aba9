"""Force Model
==============

Pure force functions and the cooling schedule shared by the exact and the
Barnes-Hut layout strategies.
"""

from .cooling import CoolingSchedule
from .kernels import (
    attraction_magnitude,
    clamp_to_bounds,
    edge_attraction,
    exact_repulsion,
    limit_displacement,
    repulsion_between,
    repulsion_magnitude,
    separation_direction,
)

__all__ = [
    "CoolingSchedule",
    "attraction_magnitude",
    "clamp_to_bounds",
    "edge_attraction",
    "exact_repulsion",
    "limit_displacement",
    "repulsion_between",
    "repulsion_magnitude",
    "separation_direction",
]
