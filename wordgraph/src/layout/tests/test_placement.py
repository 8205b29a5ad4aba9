"""
Tests for layout/placement.py - initial circular placement and centring.
"""

import math

import pytest

from wordgraph.src.graph.model import WordNode
from wordgraph.src.layout.placement import (
    arrange_children_in_circle,
    calculate_optimal_radius,
    center_nodes,
)


class TestCalculateOptimalRadius:
    def test_scales_with_count_and_size(self):
        assert calculate_optimal_radius(6, (80.0, 40.0)) == pytest.approx(6 * 80 * 1.5 / (2 * math.pi))
        assert calculate_optimal_radius(12, (80.0, 40.0)) == pytest.approx(
            2 * calculate_optimal_radius(6, (80.0, 40.0))
        )

    def test_uses_largest_dimension(self):
        assert calculate_optimal_radius(3, (20.0, 90.0), 2.0) == pytest.approx(3 * 90 * 2.0 / (2 * math.pi))

    def test_no_children(self):
        assert calculate_optimal_radius(0) == 0.0


class TestArrangeChildrenInCircle:
    def test_four_children_at_right_angles(self):
        parent = WordNode(lemma="root")
        children = [WordNode(lemma=f"child {i}") for i in range(4)]
        arrange_children_in_circle(parent, children, 120.0)
        expected = [(120.0, 0.0), (0.0, 120.0), (-120.0, 0.0), (0.0, -120.0)]
        for child, (x, y) in zip(children, expected):
            assert child.x == pytest.approx(x, abs=1e-9)
            assert child.y == pytest.approx(y, abs=1e-9)

    def test_centred_on_parent(self):
        parent = WordNode(lemma="root", x=50.0, y=-20.0)
        children = [WordNode(lemma=f"child {i}") for i in range(5)]
        arrange_children_in_circle(parent, children, 80.0)
        for child in children:
            assert math.hypot(child.x - 50.0, child.y + 20.0) == pytest.approx(80.0)

    def test_parent_not_moved(self):
        parent = WordNode(lemma="root", x=1.0, y=2.0)
        arrange_children_in_circle(parent, [WordNode(lemma="a")])
        assert parent.position == (1.0, 2.0)

    def test_no_children_is_noop(self):
        arrange_children_in_circle(WordNode(lemma="root"), [])


class TestCenterNodes:
    def test_bounding_box_centred(self):
        nodes = [WordNode(lemma="a", x=10.0, y=10.0), WordNode(lemma="b", x=30.0, y=50.0)]
        offset = center_nodes(nodes)
        assert offset == (-20.0, -30.0)
        assert [node.position for node in nodes] == [(-10.0, -20.0), (10.0, 20.0)]

    def test_empty(self):
        assert center_nodes([]) == (0.0, 0.0)
