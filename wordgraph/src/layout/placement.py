"""Initial placement helpers for newly created nodes."""

import math
from typing import Any, Sequence, Tuple

from wordgraph.src.common.constants import (
    CHILD_SPACING_FACTOR,
    DEFAULT_CHILD_RADIUS,
    DEFAULT_NODE_SIZE,
)


def calculate_optimal_radius(
    child_count: int,
    node_size: Tuple[float, float] = DEFAULT_NODE_SIZE,
    spacing_factor: float = CHILD_SPACING_FACTOR,
) -> float:
    """Radius at which ``child_count`` nodes fit around a parent without overlap.

    The circumference is sized to give every child its largest visual
    dimension times ``spacing_factor``.
    """
    if child_count <= 0:
        return 0.0
    circumference = child_count * max(node_size) * spacing_factor
    return circumference / (2.0 * math.pi)


def arrange_children_in_circle(
    parent: Any,
    children: Sequence[Any],
    radius: float = DEFAULT_CHILD_RADIUS,
) -> None:
    """Place ``children`` evenly on a circle centred on ``parent``.

    The first child sits at angle 0 (to the right of the parent) and the
    rest follow counter-clockwise in steps of ``2π / len(children)``.
    """
    if not children:
        return

    angle_step = 2.0 * math.pi / len(children)
    for index, child in enumerate(children):
        angle = index * angle_step
        child.x = parent.x + radius * math.cos(angle)
        child.y = parent.y + radius * math.sin(angle)


def center_nodes(nodes: Sequence[Any]) -> Tuple[float, float]:
    """Translate ``nodes`` so their bounding-box centre is at the origin.

    Returns:
        The (dx, dy) offset that was applied.
    """
    if not nodes:
        return (0.0, 0.0)

    xs = [node.x for node in nodes]
    ys = [node.y for node in nodes]
    offset_x = -(min(xs) + max(xs)) / 2.0
    offset_y = -(min(ys) + max(ys)) / 2.0

    for node in nodes:
        node.x += offset_x
        node.y += offset_y
    return (offset_x, offset_y)
