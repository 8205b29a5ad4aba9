"""Spatial Index
=================

Rectangles and the Barnes-Hut quadtree used to approximate all-pairs
repulsion for large graphs. The tree is rebuilt from current positions on
every layout iteration and never persisted.
"""

from .bounds import Rect
from .quadtree import MassPoint, QuadTree, QuadTreeStats

__all__ = ["Rect", "MassPoint", "QuadTree", "QuadTreeStats"]
