"""
Unit tests for node placement.

Positions are checked against hand-derived values on small structures: the
stem steps straight up from the origin, loop nodes sit on a circle of the
expected radius, and the counter-clockwise sense mirrors the clockwise one.
"""
import math

import pytest

from rna_layout.layout.placement import NodePlacement, RotationDirection, place_tree
from rna_layout.layout.tree import build_layout_tree
from rna_layout.structures.sec_struct import SecStruct

SPACE = 45.0


def placed(dot_bracket: str, rotation=RotationDirection.CW, primary_space=SPACE, pair_space=SPACE):
    root = build_layout_tree(SecStruct.from_dot_bracket(dot_bracket).pairs)
    return root, place_tree(root, primary_space, pair_space, rotation)


def pair_nodes(root):
    return [node for node in root.iter_nodes() if node.is_pair]


def test_cross_is_orthogonal_and_follows_rotation():
    """
    `cross` is the travel direction turned a quarter, mirrored by the rotation sign.
    """
    cw = NodePlacement(0.0, 0.0, 0.0, 1.0, RotationDirection.CW)
    ccw = NodePlacement(0.0, 0.0, 0.0, 1.0, RotationDirection.CCW)
    assert cw.cross == (-1.0, 0.0)
    assert ccw.cross == (1.0, 0.0)


def test_root_sits_at_origin_heading_up():
    """
    The root frame starts at (0, 0) travelling along +y.
    """
    root, placements = placed("(((...)))")
    root_placement = placements[root]
    assert (root_placement.x, root_placement.y) == (0.0, 0.0)
    assert (root_placement.go_x, root_placement.go_y) == (0.0, 1.0)


def test_stem_steps_one_primary_space_each():
    """
    Each stacked pair sits one primary step further along the travel direction.
    """
    root, placements = placed("(((...)))")
    centers = [(placements[p].x, placements[p].y) for p in pair_nodes(root)]
    assert centers == [(0.0, 45.0), (0.0, 90.0), (0.0, 135.0)]


def test_loop_junction_shares_pair_center():
    """
    A pair's single-child loop junction does not advance past the pair.
    """
    root, placements = placed("(((...)))")
    first_pair = root.children[0]
    loop = first_pair.children[0]
    assert (placements[loop].x, placements[loop].y) == (placements[first_pair].x, placements[first_pair].y)


def test_hairpin_loop_on_circle():
    """
    Hairpin bases lie on a circle whose center is one radius past the closing pair.
    """
    root, placements = placed("(((...)))")
    closing = pair_nodes(root)[-1]
    loop = closing.children[0]

    # Three unpaired bases and no pairs: (3 + 1) * 45 + (0 + 1) * 45.
    circle_length = 225.0
    radius = circle_length / (2 * math.pi)
    center = placements[loop]
    assert center.x == pytest.approx(0.0)
    assert center.y == pytest.approx(135.0 + radius)

    for leaf in loop.children:
        leaf_placement = placements[leaf]
        distance = math.hypot(leaf_placement.x - center.x, leaf_placement.y - center.y)
        assert distance == pytest.approx(radius)
        assert math.hypot(leaf_placement.go_x, leaf_placement.go_y) == pytest.approx(1.0)

    # The middle base is at the top of the circle.
    middle = placements[loop.children[1]]
    assert middle.x == pytest.approx(0.0, abs=1e-9)
    assert middle.y == pytest.approx(135.0 + 2 * radius)

    # Clockwise: the first loop base is on the left.
    first = placements[loop.children[0]]
    assert first.x == pytest.approx(-math.cos(0.1 * math.pi) * radius)


def test_exterior_junction_with_two_branches():
    """
    Two exterior helices sit symmetrically on the root circle.
    """
    root, placements = placed("(.)(.)")
    # Two children, both pairs: (2 + 1) * 45 + (2 + 1) * 45.
    radius = 270.0 / (2 * math.pi)
    center = placements[root]
    assert (center.x, center.y) == pytest.approx((0.0, radius))

    left, right = (placements[child] for child in root.children)
    assert left.x == pytest.approx(-math.cos(math.pi / 6) * radius)
    assert right.x == pytest.approx(math.cos(math.pi / 6) * radius)
    assert left.y == pytest.approx(1.5 * radius)
    assert right.y == pytest.approx(1.5 * radius)


def test_counter_clockwise_mirrors_clockwise():
    """
    Flipping the rotation sign mirrors every node across the y axis.
    """
    structure = "..((.((...)).(..)))..((...))"
    root_cw, cw = placed(structure, RotationDirection.CW)
    root_ccw, ccw = placed(structure, RotationDirection.CCW)

    for node_cw, node_ccw in zip(root_cw.iter_nodes(), root_ccw.iter_nodes()):
        a, b = cw[node_cw], ccw[node_ccw]
        assert b.x == pytest.approx(-a.x)
        assert b.y == pytest.approx(a.y)
        assert b.rotation is RotationDirection.CCW


def test_every_node_is_placed_and_deterministic():
    """
    Every node gets a placement and re-running gives identical values.
    """
    root, first = placed("((..((...)).(..)..))")
    second = place_tree(root, SPACE, SPACE, RotationDirection.CW)
    nodes = list(root.iter_nodes())
    assert len(first) == len(nodes)
    assert [first[n] for n in nodes] == [second[n] for n in nodes]


def test_spacings_scale_the_stem():
    """
    The primary spacing sets the step between stacked pairs.
    """
    root, placements = placed("((...))", primary_space=30.0, pair_space=20.0)
    centers = [placements[p].y for p in pair_nodes(root)]
    assert centers == [30.0, 60.0]
