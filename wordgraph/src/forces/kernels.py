"""Fruchterman-Reingold force kernels.

Repulsion acts between every pair of nodes with magnitude ``k² / d``;
attraction acts along edges with magnitude ``d² / k``. Every distance is
floored at ``min_distance`` before it enters a force formula, so coincident
nodes produce a large but finite push instead of a division by zero.

Exactly coincident nodes have no line between them. They are pushed apart
along a direction derived from their indices (see
:func:`separation_direction`), which keeps the engine deterministic.

The hot paths are JIT-compiled with numba; the scalar kernels are callable
from plain Python as well, which is how the quadtree uses them.
"""

import math

import numpy as np
from numba import jit

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


# ============================================================================
# SCALAR KERNELS
# ============================================================================


@jit(nopython=True, cache=True)
def repulsion_magnitude(distance: float, k: float, min_distance: float) -> float:
    """Repulsive force ``k² / d`` with ``d`` floored at ``min_distance``."""
    d = max(distance, min_distance)
    return k * k / d


@jit(nopython=True, cache=True)
def attraction_magnitude(distance: float, k: float, min_distance: float) -> float:
    """Attractive force ``d² / k`` with ``d`` floored at ``min_distance``."""
    d = max(distance, min_distance)
    return d * d / k


@jit(nopython=True, cache=True)
def separation_direction(i: int, j: int):
    """Unit vector pushing node ``i`` away from a coincident node ``j``.

    Antisymmetric: the direction for (j, i) is the negation of (i, j).
    """
    lo = min(i, j)
    hi = max(i, j)
    angle = GOLDEN_ANGLE * (lo * 31 + hi + 1)
    ux = math.cos(angle)
    uy = math.sin(angle)
    if i > j:
        return -ux, -uy
    return ux, uy


@jit(nopython=True, cache=True)
def repulsion_between(
    xi: float,
    yi: float,
    xj: float,
    yj: float,
    i: int,
    j: int,
    k: float,
    min_distance: float,
    mass: float,
    distance_power: float,
):
    """Force on point ``i`` pushing it away from mass ``j``.

    Magnitude is ``k² · mass / d^distance_power``; ``distance_power`` is 1 for
    the Fruchterman-Reingold law used by the exact strategy.
    """
    dx = xi - xj
    dy = yi - yj
    raw = math.sqrt(dx * dx + dy * dy)
    d = max(raw, min_distance)

    if raw > 0.0:
        ux = dx / raw
        uy = dy / raw
    else:
        ux, uy = separation_direction(i, j)

    force = k * k * mass / d**distance_power
    return ux * force, uy * force


# ============================================================================
# VECTOR KERNELS
# ============================================================================


@jit(nopython=True, cache=True)
def exact_repulsion(positions: np.ndarray, k: float, min_distance: float) -> np.ndarray:
    """All-pairs repulsion by double iteration over unordered pairs (O(N²))."""
    n = positions.shape[0]
    forces = np.zeros((n, 2))
    for i in range(n):
        for j in range(i + 1, n):
            fx, fy = repulsion_between(
                positions[i, 0],
                positions[i, 1],
                positions[j, 0],
                positions[j, 1],
                i,
                j,
                k,
                min_distance,
                1.0,
                1.0,
            )
            forces[i, 0] += fx
            forces[i, 1] += fy
            forces[j, 0] -= fx
            forces[j, 1] -= fy
    return forces


@jit(nopython=True, cache=True)
def edge_attraction(
    positions: np.ndarray, edge_pairs: np.ndarray, k: float, min_distance: float
) -> np.ndarray:
    """Attraction along each (a, b) row of ``edge_pairs``.

    Coincident endpoints have no direction to pull along and contribute
    nothing.
    """
    n = positions.shape[0]
    forces = np.zeros((n, 2))
    for e in range(edge_pairs.shape[0]):
        a = edge_pairs[e, 0]
        b = edge_pairs[e, 1]
        dx = positions[a, 0] - positions[b, 0]
        dy = positions[a, 1] - positions[b, 1]
        raw = math.sqrt(dx * dx + dy * dy)
        if raw == 0.0:
            continue
        force = attraction_magnitude(raw, k, min_distance)
        fx = (dx / raw) * force
        fy = (dy / raw) * force
        forces[a, 0] -= fx
        forces[a, 1] -= fy
        forces[b, 0] += fx
        forces[b, 1] += fy
    return forces


@jit(nopython=True, cache=True)
def limit_displacement(
    forces: np.ndarray, temperature: float, min_force: float
) -> np.ndarray:
    """Per-node move: ``min(|F|, T)`` along ``F``; forces <= ``min_force`` move nothing."""
    n = forces.shape[0]
    displacement = np.zeros((n, 2))
    for i in range(n):
        fx = forces[i, 0]
        fy = forces[i, 1]
        length = math.sqrt(fx * fx + fy * fy)
        if length > min_force:
            step = min(length, temperature)
            displacement[i, 0] = (fx / length) * step
            displacement[i, 1] = (fy / length) * step
    return displacement


def clamp_to_bounds(
    positions: np.ndarray, width: float, height: float, margin: float
) -> None:
    """Clamp positions in place to the origin-centred canvas minus ``margin``.

    Each axis is clamped independently. A canvas smaller than twice the
    margin collapses that axis to 0.
    """
    half_w = max(width / 2.0 - margin, 0.0)
    half_h = max(height / 2.0 - margin, 0.0)
    np.clip(positions[:, 0], -half_w, half_w, out=positions[:, 0])
    np.clip(positions[:, 1], -half_h, half_h, out=positions[:, 1])
