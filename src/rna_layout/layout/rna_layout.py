from __future__ import annotations
import logging
from typing import Iterable, Optional, Union

import numpy as np

from rna_layout.errors import LayoutStructureError
from rna_layout.layout.config import LayoutConfig
from rna_layout.layout.coords import LayoutCoords, circle_coords, extract_coords, line_coords, rotation_signs
from rna_layout.layout.placement import Placements, place_tree
from rna_layout.layout.tree import LayoutNode, build_layout_tree
from rna_layout.structures.sec_struct import SecStruct

logger = logging.getLogger(__name__)

# Unstructured sequences up to this length are drawn as a straight line.
MAX_LINE_FALLBACK_LENGTH = 4

PairsLike = Union[SecStruct, Iterable[int]]


class RNALayout:
    """
    Turns a secondary structure into 2D base coordinates.

    Usage is three steps, each rebuilding on the previous one:

    1. `setup_tree(pairs)` symmetrises the pairing list, drops pseudoknotted
       pairs and builds a fresh layout tree (the old one is discarded).
    2. `draw_tree()` assigns a center, direction and rotation sign to every node.
    3. `get_coords(length)` writes the per-base coordinates and bounding box.

    `layout(pairs)` runs all three. Structures without any pairs have no tree;
    `get_coords` then places the bases on a line (up to four bases) or a circle.

    An instance owns its tree and is not safe to share between threads; use
    one instance per concurrent layout.

    Parameters
    ----------
    primary_space : float, optional
        Distance between consecutive backbone positions. Ignored if `config` is given.
    pair_space : float, optional
        Distance between the two bases of a pair. Ignored if `config` is given.
    config : LayoutConfig, optional
        Full configuration, including the starting rotation sign.
    """

    def __init__(
        self,
        primary_space: float = 45.0,
        pair_space: float = 45.0,
        config: Optional[LayoutConfig] = None,
    ):
        self._config = config if config is not None else LayoutConfig(primary_space, pair_space)
        self._root: Optional[LayoutNode] = None
        self._placements: Placements = {}

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @property
    def primary_space(self) -> float:
        return self._config.primary_space

    @property
    def pair_space(self) -> float:
        return self._config.pair_space

    @property
    def root(self) -> Optional[LayoutNode]:
        """Root junction of the current tree, or `None` when the structure has no pairs."""
        return self._root

    @property
    def placements(self) -> Placements:
        """Node placements from the last `draw_tree` call (empty before it)."""
        return dict(self._placements)

    def setup_tree(self, pairs: PairsLike) -> None:
        """
        Builds the layout tree for `pairs`.

        Only entries with `pairs[i] > i` are trusted; the list is rebuilt
        symmetrically from them, so a one-sided entry still yields a pair.
        Crossing pairs are removed before the tree is built.

        Parameters
        ----------
        pairs : SecStruct | Iterable[int]
            Pairing list, `-1` for unpaired bases.

        Raises
        ------
        LayoutStructureError
            If two entries claim the same base, or the pairing data cannot be
            nested into a tree.
        """
        raw = pairs.pairs if isinstance(pairs, SecStruct) else [int(p) for p in pairs]

        self._root = None
        self._placements = {}

        bi_pairs = [-1] * len(raw)
        for idx, partner in enumerate(raw):
            if idx < partner < len(raw):
                if bi_pairs[idx] >= 0 or bi_pairs[partner] >= 0:
                    raise LayoutStructureError(
                        f"Base {partner} is claimed by more than one pair", start=idx, end=partner
                    )
                bi_pairs[idx] = partner
                bi_pairs[partner] = idx

        if not any(partner >= 0 for partner in bi_pairs):
            logger.debug(f"setup_tree: no pairs in structure of length {len(raw)}")
            return

        nested = SecStruct(bi_pairs).filter_for_pseudoknots()
        dropped = SecStruct(bi_pairs).num_pairs() - nested.num_pairs()
        if dropped:
            logger.debug(f"setup_tree: dropped {dropped} pseudoknotted pairs before layout")

        self._root = build_layout_tree(nested.pairs)

    def draw_tree(self) -> None:
        """Assigns geometry to every node of the current tree. Safe to call repeatedly."""
        if self._root is None:
            self._placements = {}
            return
        self._placements = place_tree(
            self._root,
            primary_space=self.primary_space,
            pair_space=self.pair_space,
            rotation=self._config.rotation,
        )

    def get_coords(self, length: int) -> LayoutCoords:
        """
        Returns per-base coordinates for an output of `length` bases.

        Calls `draw_tree` first if the current tree has not been placed yet.

        Parameters
        ----------
        length : int
            Number of bases to emit, usually the sequence length.

        Returns
        -------
        LayoutCoords
            Coordinates and bounding box.
        """
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")

        if self._root is not None:
            if not self._placements:
                self.draw_tree()
            return extract_coords(self._root, self._placements, length, self.pair_space)

        if length <= MAX_LINE_FALLBACK_LENGTH:
            logger.debug(f"No structure; placing {length} bases on a line")
            return line_coords(length, self.primary_space)

        logger.debug(f"No structure; placing {length} bases on a circle")
        return circle_coords(length, self.primary_space, self._config.rotation)

    def get_rotation_direction_sign(self, length: int) -> np.ndarray:
        """Per-base rotation sign (+1 everywhere when there is no tree)."""
        if self._root is None:
            return np.ones(length, dtype=np.int8)
        if not self._placements:
            self.draw_tree()
        return rotation_signs(self._root, self._placements, length)

    def layout(self, pairs: PairsLike, length: Optional[int] = None) -> LayoutCoords:
        """
        Runs `setup_tree`, `draw_tree` and `get_coords` in one call.

        Parameters
        ----------
        pairs : SecStruct | Iterable[int]
            Pairing list.
        length : int, optional
            Output length; defaults to the structure length.
        """
        pairs_list = pairs if isinstance(pairs, SecStruct) else list(pairs)
        self.setup_tree(pairs_list)
        self.draw_tree()
        return self.get_coords(len(pairs_list) if length is None else length)
