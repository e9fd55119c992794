from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Any, Dict, Tuple

import numpy as np

from rna_layout.layout.placement import Placements, RotationDirection
from rna_layout.layout.tree import LayoutNode

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class LayoutCoords:
    """
    Flat per-base coordinates and their bounding box.

    Attributes
    ----------
    xarray, yarray : np.ndarray
        `float64` arrays of the requested output length. Positions the
        structure does not cover are `NaN`.
    xbounds, ybounds : Tuple[float, float]
        `(min, max)` over every emitted coordinate; `(0.0, 0.0)` when nothing
        was emitted.
    """
    xarray: np.ndarray
    yarray: np.ndarray
    xbounds: Bounds
    ybounds: Bounds

    @property
    def length(self) -> int:
        return int(self.xarray.shape[0])

    def as_dict(self) -> Dict[str, Any]:
        """JSON-friendly view (`NaN` becomes `None`)."""
        return {
            "xarray": [None if math.isnan(v) else float(v) for v in self.xarray],
            "yarray": [None if math.isnan(v) else float(v) for v in self.yarray],
            "xbounds": list(self.xbounds),
            "ybounds": list(self.ybounds),
        }


class _BoundsTracker:
    """Running min/max over emitted points."""
    __slots__ = ("x_min", "x_max", "y_min", "y_max")

    def __init__(self):
        self.x_min = math.inf
        self.x_max = -math.inf
        self.y_min = math.inf
        self.y_max = -math.inf

    def add(self, x: float, y: float) -> None:
        self.x_min = min(self.x_min, x)
        self.x_max = max(self.x_max, x)
        self.y_min = min(self.y_min, y)
        self.y_max = max(self.y_max, y)

    def bounds(self) -> Tuple[Bounds, Bounds]:
        if self.x_min > self.x_max:
            return (0.0, 0.0), (0.0, 0.0)
        return (self.x_min, self.x_max), (self.y_min, self.y_max)


def extract_coords(root: LayoutNode, placements: Placements, length: int, pair_space: float) -> LayoutCoords:
    """
    Writes the placed tree out as flat coordinate arrays.

    A pair node puts its two bases `pair_space / 2` either side of its center,
    along the direction orthogonal to travel (mirrored by the node's rotation
    sign), the 5' base on the `+cross` side. An unpaired node emits its own
    center. Junctions emit nothing.

    Parameters
    ----------
    root : LayoutNode
        Root of a tree placed by `place_tree`.
    placements : Dict[LayoutNode, NodePlacement]
        Output of `place_tree` for `root`.
    length : int
        Length of the output arrays. Indices at or beyond it are skipped.
    pair_space : float
        Distance between the two bases of a pair.

    Returns
    -------
    LayoutCoords
        The coordinates and bounding box.
    """
    xarray = np.full(length, np.nan, dtype=np.float64)
    yarray = np.full(length, np.nan, dtype=np.float64)
    tracker = _BoundsTracker()
    half_pair = pair_space / 2.0

    def emit(index: int, x: float, y: float) -> None:
        if 0 <= index < length:
            xarray[index] = x
            yarray[index] = y
            tracker.add(x, y)

    for node in root.iter_nodes():
        placement = placements[node]
        if node.is_pair:
            cross_x, cross_y = placement.cross
            emit(node.index_a, placement.x + cross_x * half_pair, placement.y + cross_y * half_pair)
            emit(node.index_b, placement.x - cross_x * half_pair, placement.y - cross_y * half_pair)
        elif node.is_leaf:
            emit(node.index_a, placement.x, placement.y)

    xbounds, ybounds = tracker.bounds()
    return LayoutCoords(xarray, yarray, xbounds, ybounds)


def line_coords(length: int, primary_space: float) -> LayoutCoords:
    """
    Fallback for very short unstructured sequences: a vertical line at x = 0.

    Base `i` sits at `(0, i * primary_space)`.
    """
    xarray = np.zeros(length, dtype=np.float64)
    yarray = np.arange(length, dtype=np.float64) * primary_space
    tracker = _BoundsTracker()
    for x, y in zip(xarray, yarray):
        tracker.add(float(x), float(y))
    xbounds, ybounds = tracker.bounds()
    return LayoutCoords(xarray, yarray, xbounds, ybounds)


def circle_coords(
    length: int,
    primary_space: float,
    rotation: RotationDirection = RotationDirection.CW,
) -> LayoutCoords:
    """
    Fallback for longer unstructured sequences: one evenly spaced circle.

    The circumference is `length * primary_space`, so neighbouring bases
    (including the last and first) are one primary step apart along the arc.
    Base 0 sits at the origin and the circle's center straight above it.

    Parameters
    ----------
    length : int
        Number of bases.
    primary_space : float
        Arc distance between neighbouring bases.
    rotation : RotationDirection, optional
        Direction in which bases are laid around the circle, by default clockwise.

    Returns
    -------
    LayoutCoords
        The coordinates and bounding box.
    """
    go_x, go_y = 0.0, 1.0
    cross_x = -go_y * rotation
    cross_y = go_x * rotation

    circle_length = length * primary_space
    circle_radius = circle_length / (2 * math.pi)
    center_x = go_x * circle_radius
    center_y = go_y * circle_radius

    xarray = np.empty(length, dtype=np.float64)
    yarray = np.empty(length, dtype=np.float64)
    tracker = _BoundsTracker()
    for idx in range(length):
        rad_angle = idx * primary_space / circle_length * 2 * math.pi - math.pi / 2.0
        x = center_x + math.cos(rad_angle) * cross_x * circle_radius + math.sin(rad_angle) * go_x * circle_radius
        y = center_y + math.cos(rad_angle) * cross_y * circle_radius + math.sin(rad_angle) * go_y * circle_radius
        xarray[idx] = x
        yarray[idx] = y
        tracker.add(x, y)

    xbounds, ybounds = tracker.bounds()
    return LayoutCoords(xarray, yarray, xbounds, ybounds)


def rotation_signs(root: LayoutNode, placements: Placements, length: int) -> np.ndarray:
    """
    Per-base rotation sign taken from the node each base belongs to.

    Bases the tree does not cover keep `+1`.
    """
    signs = np.ones(length, dtype=np.int8)
    for node in root.iter_nodes():
        sign = int(placements[node].rotation)
        for index in (node.index_a, node.index_b):
            if not node.is_junction and 0 <= index < length:
                signs[index] = sign
    return signs
