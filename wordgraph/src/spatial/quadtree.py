"""Barnes-Hut quadtree for approximate all-pairs repulsion.

Each tree node covers a rectangle and keeps the total mass and the
mass-weighted centre of mass of every point below it. A query treats a
whole region as one body when it is far enough away
(``width / distance < theta``), which turns the O(N²) repulsion sum into
roughly O(N log N) per iteration.

The tree is ephemeral: the layout engine rebuilds it from current
positions every iteration and drops it afterwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from wordgraph.src.common.constants import (
    BARNES_HUT_THETA,
    MAX_TREE_DEPTH,
    MIN_FORCE_DISTANCE,
    QUADTREE_CAPACITY,
)
from wordgraph.src.forces.kernels import repulsion_between

from .bounds import Rect


@dataclass(frozen=True)
class MassPoint:
    """A graph node projected into the tree for one iteration."""

    node_id: str
    x: float
    y: float
    mass: float = 1.0
    index: int = 0  # arena index; orders coincident pairs deterministically

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class QuadTreeStats:
    """Structure statistics for diagnostics."""

    node_count: int = 0
    leaf_count: int = 0
    point_count: int = 0
    max_depth: int = 0

    @property
    def average_points_per_leaf(self) -> float:
        return self.point_count / self.leaf_count if self.leaf_count else 0.0

    @property
    def efficiency(self) -> float:
        """Tree nodes per point; lower is better."""
        return self.node_count / self.point_count if self.point_count else 0.0


class QuadTree:
    """Region quadtree aggregating mass for Barnes-Hut force queries.

    Args:
        boundary: Region covered by this node (half-open).
        capacity: Points a leaf holds before it subdivides.
        theta: Opening criterion; 0 always descends to the leaves (exact).
        min_distance: Distance floor applied in force computation.
        distance_power: Exponent of ``d`` in ``k² · mass / d^p``. 1 matches
            the exact strategy's ``k² / d`` law; 2 gives inverse-square falloff.
        max_depth: Leaves at this depth never subdivide and hold any number
            of points, so coincident points cannot recurse forever.
    """

    def __init__(
        self,
        boundary: Rect,
        capacity: int = QUADTREE_CAPACITY,
        theta: float = BARNES_HUT_THETA,
        *,
        min_distance: float = MIN_FORCE_DISTANCE,
        distance_power: float = 1.0,
        max_depth: int = MAX_TREE_DEPTH,
        depth: int = 0,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.boundary = boundary
        self.capacity = capacity
        self.theta = theta
        self.min_distance = min_distance
        self.distance_power = distance_power
        self.max_depth = max_depth
        self.depth = depth

        self.points: List[MassPoint] = []
        self.children: List[QuadTree] = []
        self.center_of_mass: Tuple[float, float] = (0.0, 0.0)
        self.total_mass = 0.0
        self.is_leaf = True

    @classmethod
    def build(
        cls, boundary: Rect, points: Iterable[MassPoint], **kwargs
    ) -> "QuadTree":
        tree = cls(boundary, **kwargs)
        for point in points:
            tree.insert(point)
        return tree

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def insert(self, point: MassPoint) -> bool:
        """Add ``point``; returns False if it lies outside this boundary."""
        if not self.boundary.contains(point.x, point.y):
            return False

        if self.is_leaf and (
            len(self.points) < self.capacity or self.depth >= self.max_depth
        ):
            self.points.append(point)
        else:
            if self.is_leaf:
                self._subdivide()
            if not self._insert_into_children(point):
                return False

        self._accumulate(point)
        return True

    def _accumulate(self, point: MassPoint) -> None:
        """Fold ``point`` into the running mass-weighted centre of mass."""
        new_total = self.total_mass + point.mass
        if new_total > 0:
            cx, cy = self.center_of_mass
            self.center_of_mass = (
                (cx * self.total_mass + point.x * point.mass) / new_total,
                (cy * self.total_mass + point.y * point.mass) / new_total,
            )
        self.total_mass = new_total

    def _subdivide(self) -> None:
        self.children = [
            QuadTree(
                quadrant,
                self.capacity,
                self.theta,
                min_distance=self.min_distance,
                distance_power=self.distance_power,
                max_depth=self.max_depth,
                depth=self.depth + 1,
            )
            for quadrant in self.boundary.quadrants()
        ]
        held, self.points = self.points, []
        self.is_leaf = False
        for point in held:
            self._insert_into_children(point)

    def _insert_into_children(self, point: MassPoint) -> bool:
        for child in self.children:
            if child.insert(point):
                return True
        return False

    def clear(self) -> None:
        """Drop every point and child, keeping the boundary and parameters."""
        self.points = []
        self.children = []
        self.center_of_mass = (0.0, 0.0)
        self.total_mass = 0.0
        self.is_leaf = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def calculate_force(
        self, on_point: MassPoint, repulsion_constant: float
    ) -> Tuple[float, float]:
        """Approximate repulsive force on ``on_point`` from every other point.

        Points in a leaf are evaluated individually (skipping ``on_point``
        itself); a far-away internal region acts as a single mass at its
        centre of mass.
        """
        if self.total_mass <= 0:
            return (0.0, 0.0)

        if self.is_leaf:
            fx, fy = 0.0, 0.0
            for other in self.points:
                if other.index == on_point.index and other.node_id == on_point.node_id:
                    continue
                pfx, pfy = repulsion_between(
                    on_point.x,
                    on_point.y,
                    other.x,
                    other.y,
                    on_point.index,
                    other.index,
                    repulsion_constant,
                    self.min_distance,
                    other.mass,
                    self.distance_power,
                )
                fx += pfx
                fy += pfy
            return (fx, fy)

        cx, cy = self.center_of_mass
        raw = math.hypot(on_point.x - cx, on_point.y - cy)
        distance = max(raw, self.min_distance)
        if raw > 0 and self.boundary.width / distance < self.theta:
            # Far enough away: the region acts as one body
            return repulsion_between(
                on_point.x,
                on_point.y,
                cx,
                cy,
                on_point.index,
                -1,
                repulsion_constant,
                self.min_distance,
                self.total_mass,
                self.distance_power,
            )

        fx, fy = 0.0, 0.0
        for child in self.children:
            cfx, cfy = child.calculate_force(on_point, repulsion_constant)
            fx += cfx
            fy += cfy
        return (fx, fy)

    def query(self, region: Rect) -> List[MassPoint]:
        """All points inside ``region``."""
        if not self.boundary.intersects(region):
            return []

        found = [point for point in self.points if region.contains(point.x, point.y)]
        for child in self.children:
            found.extend(child.query(region))
        return found

    def stats(self) -> QuadTreeStats:
        stats = QuadTreeStats()
        self._collect_stats(stats, 0)
        return stats

    def _collect_stats(self, stats: QuadTreeStats, depth: int) -> None:
        stats.node_count += 1
        stats.point_count += len(self.points)
        if self.is_leaf:
            stats.leaf_count += 1
            stats.max_depth = max(stats.max_depth, depth)
            return
        for child in self.children:
            child._collect_stats(stats, depth + 1)
