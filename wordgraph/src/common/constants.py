"""Shared constants and layout configuration."""

from dataclasses import dataclass, field, replace as dc_replace
from typing import Tuple

# Fruchterman-Reingold defaults
NATURAL_EDGE_LENGTH = 100.0
DEFAULT_ITERATIONS = 150
INITIAL_TEMPERATURE = 100.0
FINAL_TEMPERATURE = 0.01

# Distances below this are floored before computing forces
MIN_FORCE_DISTANCE = 0.1
MIN_EFFECTIVE_FORCE = 0.1
BOUNDARY_MARGIN = 50.0

# Barnes-Hut
BARNES_HUT_THRESHOLD = 50  # node counts above this use the quadtree
BARNES_HUT_THETA = 0.5
QUADTREE_CAPACITY = 1
BARNES_HUT_DISTANCE_POWER = 1.0  # 1 matches the exact k²/d law
MAX_TREE_DEPTH = 24

# Cooperative scheduling (seconds)
TIME_SLICE_BUDGET = 0.0001

# Canvas and node geometry
DEFAULT_BOUNDS = (800.0, 600.0)
DEFAULT_NODE_SIZE = (80.0, 40.0)
CHILD_SPACING_FACTOR = 1.5
DEFAULT_CHILD_RADIUS = 120.0

# Expansion limits
MAX_RELATED_TERMS = 12

# Scale warnings
MAX_NODES = 200
MAX_EDGES = 300
SLOW_LAYOUT_SECONDS = 0.1

# Spaced-repetition payload carried on nodes, never read by layout
DEFAULT_EASE = 2.3


@dataclass(frozen=True)
class LayoutConfig:
    """Tunable parameters for graph construction and layout."""

    natural_length: float = NATURAL_EDGE_LENGTH
    iterations: int = DEFAULT_ITERATIONS
    initial_temperature: float = INITIAL_TEMPERATURE
    final_temperature: float = FINAL_TEMPERATURE
    min_distance: float = MIN_FORCE_DISTANCE
    min_force: float = MIN_EFFECTIVE_FORCE
    boundary_margin: float = BOUNDARY_MARGIN
    barnes_hut_threshold: int = BARNES_HUT_THRESHOLD
    theta: float = BARNES_HUT_THETA
    quadtree_capacity: int = QUADTREE_CAPACITY
    distance_power: float = BARNES_HUT_DISTANCE_POWER
    time_slice_budget: float = TIME_SLICE_BUDGET
    default_bounds: Tuple[float, float] = field(default=DEFAULT_BOUNDS)
    default_node_size: Tuple[float, float] = field(default=DEFAULT_NODE_SIZE)
    child_spacing_factor: float = CHILD_SPACING_FACTOR
    default_child_radius: float = DEFAULT_CHILD_RADIUS
    max_related_terms: int = MAX_RELATED_TERMS
    max_nodes: int = MAX_NODES
    max_edges: int = MAX_EDGES
    slow_layout_seconds: float = SLOW_LAYOUT_SECONDS

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if self.natural_length <= 0:
            raise ValueError(
                f"natural_length must be positive, got {self.natural_length}"
            )
        if not 0 < self.final_temperature < self.initial_temperature:
            raise ValueError(
                "temperatures must satisfy 0 < final_temperature < initial_temperature "
                f"(got {self.final_temperature}, {self.initial_temperature})"
            )
        if self.min_distance <= 0:
            raise ValueError(f"min_distance must be positive, got {self.min_distance}")
        if self.theta < 0:
            raise ValueError(f"theta must be >= 0, got {self.theta}")
        if self.quadtree_capacity < 1:
            raise ValueError(
                f"quadtree_capacity must be >= 1, got {self.quadtree_capacity}"
            )
        if self.distance_power <= 0:
            raise ValueError(
                f"distance_power must be positive, got {self.distance_power}"
            )
        if self.boundary_margin < 0:
            raise ValueError(
                f"boundary_margin must be >= 0, got {self.boundary_margin}"
            )
        if self.time_slice_budget <= 0:
            raise ValueError(
                f"time_slice_budget must be positive, got {self.time_slice_budget}"
            )

    def replace(self, **changes) -> "LayoutConfig":
        """Return a validated copy with ``changes`` applied."""
        return dc_replace(self, **changes)


DEFAULT_CONFIG = LayoutConfig()
