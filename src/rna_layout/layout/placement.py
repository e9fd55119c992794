from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
import logging
import math
from typing import Dict, List, Optional, Tuple

from rna_layout.layout.tree import LayoutNode

logger = logging.getLogger(__name__)


class RotationDirection(IntEnum):
    """Sense in which the 5' to 3' backbone runs around each junction."""
    CCW = -1
    CW = 1


@dataclass(frozen=True, slots=True)
class NodePlacement:
    """
    Geometry assigned to one `LayoutNode`.

    Attributes
    ----------
    x, y : float
        Node center. For a pair this is the midpoint of its two bases, for a
        junction the center of its circle, for an unpaired base its position.
    go_x, go_y : float
        Unit vector pointing from the previous node into this one.
    rotation : RotationDirection
        Rotation sign in effect at this node.
    """
    x: float
    y: float
    go_x: float
    go_y: float
    rotation: RotationDirection

    @property
    def cross(self) -> Tuple[float, float]:
        """
        Unit vector orthogonal to the travel direction, mirrored by the rotation sign.

        For a pair node it points from the 3' base towards the 5' base.
        """
        return -self.go_y * self.rotation, self.go_x * self.rotation


Placements = Dict[LayoutNode, NodePlacement]

# (node, parent placement, start_x, start_y, go_x, go_y)
_Frame = Tuple[LayoutNode, Optional[NodePlacement], float, float, float, float]


def place_tree(
    root: LayoutNode,
    primary_space: float,
    pair_space: float,
    rotation: RotationDirection = RotationDirection.CW,
) -> Placements:
    """
    Assigns a center, an incoming direction and a rotation sign to every node.

    The walk starts with the root at the origin heading along +y. For each
    node, given a start point and an incoming direction:

    - one child: the node sits at the start point and the child is advanced
      one `primary_space` step along the direction, except a junction child,
      which shares its parent's point;
    - several children (a junction): the children are spread around a circle
      whose circumference holds one `primary_space` per child plus one, and one
      `pair_space` per pair child plus one. The circle's center lies one
      radius from the parent's center along the incoming direction, and each
      child heads outward from that center;
    - no children: the node sits at the start point.

    The geometry is closed form: the same tree and spacings always give
    bit-identical placements.

    Parameters
    ----------
    root : LayoutNode
        Root junction from `build_layout_tree`.
    primary_space : float
        Distance between consecutive backbone positions.
    pair_space : float
        Distance between the two bases of a pair.
    rotation : RotationDirection, optional
        Rotation sign propagated to every node, by default clockwise.

    Returns
    -------
    Dict[LayoutNode, NodePlacement]
        Placement of every node in the tree, keyed by node identity.
    """
    placements: Placements = {}
    stack: List[_Frame] = [(root, None, 0.0, 0.0, 0.0, 1.0)]

    # Each child depends only on its parent's placement, so a plain stack
    # replaces the recursion without changing the result.
    while stack:
        node, parent, start_x, start_y, go_x, go_y = stack.pop()
        n_children = len(node.children)

        if n_children > 1:
            placement, child_frames = _place_junction(
                node, parent, go_x, go_y, rotation, primary_space, pair_space
            )
            stack.extend(reversed(child_frames))
        else:
            placement = NodePlacement(start_x, start_y, go_x, go_y, rotation)
            if n_children == 1:
                child = node.children[0]
                if child.is_junction:
                    stack.append((child, placement, start_x, start_y, go_x, go_y))
                else:
                    stack.append((
                        child,
                        placement,
                        start_x + go_x * primary_space,
                        start_y + go_y * primary_space,
                        go_x,
                        go_y,
                    ))

        placements[node] = placement

    logger.debug(f"Placed {len(placements)} layout nodes")
    return placements


def _place_junction(
    node: LayoutNode,
    parent: Optional[NodePlacement],
    go_x: float,
    go_y: float,
    rotation: RotationDirection,
    primary_space: float,
    pair_space: float,
) -> Tuple[NodePlacement, List[_Frame]]:
    """Places a multi-child junction on its circle and computes each child's frame."""
    cross_x = -go_y * rotation
    cross_y = go_x * rotation

    n_pairs = sum(1 for child in node.children if child.is_pair)
    circle_length = (len(node.children) + 1) * primary_space + (n_pairs + 1) * pair_space
    circle_radius = circle_length / (2 * math.pi)

    origin_x = parent.x if parent is not None else 0.0
    origin_y = parent.y if parent is not None else 0.0
    center_x = origin_x + go_x * circle_radius
    center_y = origin_y + go_y * circle_radius
    placement = NodePlacement(center_x, center_y, go_x, go_y, rotation)

    frames: List[_Frame] = []
    length_walker = pair_space / 2.0
    for child in node.children:
        length_walker += primary_space
        if child.is_pair:
            length_walker += pair_space / 2.0

        rad_angle = length_walker / circle_length * 2 * math.pi - math.pi / 2.0
        child_x = (
            center_x
            + math.cos(rad_angle) * cross_x * circle_radius
            + math.sin(rad_angle) * go_x * circle_radius
        )
        child_y = (
            center_y
            + math.cos(rad_angle) * cross_y * circle_radius
            + math.sin(rad_angle) * go_y * circle_radius
        )

        child_go_x = child_x - center_x
        child_go_y = child_y - center_y
        child_go_len = math.hypot(child_go_x, child_go_y)
        frames.append((child, placement, child_x, child_y, child_go_x / child_go_len, child_go_y / child_go_len))

        if child.is_pair:
            length_walker += pair_space / 2.0

    return placement, frames
