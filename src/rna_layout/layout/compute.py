from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import numpy as np

from rna_layout.layout.config import LayoutConfig
from rna_layout.layout.coords import Bounds
from rna_layout.layout.rna_layout import RNALayout
from rna_layout.structures.sec_struct import SecStruct
from rna_layout.structures.sequence import Sequence


@dataclass(frozen=True, slots=True)
class RNADrawing:
    """
    Everything a renderer needs to draw one RNA: its sequence and base coordinates.

    Attributes
    ----------
    sequence : Sequence
        Base codes, one per drawn position.
    xarray, yarray : np.ndarray
        Per-base coordinates (`NaN` where the structure does not reach).
    xbounds, ybounds : Tuple[float, float]
        Bounding box of the drawn bases.
    """
    sequence: Sequence
    xarray: np.ndarray
    yarray: np.ndarray
    xbounds: Bounds
    ybounds: Bounds

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sequence": str(self.sequence),
            "xarray": [None if np.isnan(v) else float(v) for v in self.xarray],
            "yarray": [None if np.isnan(v) else float(v) for v in self.yarray],
            "xbounds": list(self.xbounds),
            "ybounds": list(self.ybounds),
        }


def compute_rna(
    pairs: SecStruct | Iterable[int],
    bases: Sequence | Iterable[int],
    config: Optional[LayoutConfig] = None,
) -> RNADrawing:
    """
    Lays out one structure with a fresh `RNALayout`.

    Parameters
    ----------
    pairs : SecStruct | Iterable[int]
        Pairing list, `-1` for unpaired bases.
    bases : Sequence | Iterable[int]
        Base codes; its length sets the number of coordinates emitted.
    config : LayoutConfig, optional
        Spacing settings; 45/45 clockwise when omitted.

    Returns
    -------
    RNADrawing
        The sequence with its coordinates and bounding box.
    """
    sequence = bases if isinstance(bases, Sequence) else Sequence(bases)
    layout = RNALayout(config=config if config is not None else LayoutConfig())
    layout.setup_tree(pairs)
    layout.draw_tree()
    coords = layout.get_coords(sequence.length)
    return RNADrawing(
        sequence=sequence,
        xarray=coords.xarray,
        yarray=coords.yarray,
        xbounds=coords.xbounds,
        ybounds=coords.ybounds,
    )
