from rna_layout.layout.tree import LayoutNode, NodeKind, build_layout_tree
from rna_layout.layout.placement import NodePlacement, RotationDirection, place_tree
from rna_layout.layout.coords import LayoutCoords, circle_coords, extract_coords, line_coords
from rna_layout.layout.config import LayoutConfig, load_layout_config
from rna_layout.layout.rna_layout import RNALayout
from rna_layout.layout.compute import RNADrawing, compute_rna

__all__ = [
    "LayoutConfig",
    "LayoutCoords",
    "LayoutNode",
    "NodeKind",
    "NodePlacement",
    "RNADrawing",
    "RNALayout",
    "RotationDirection",
    "build_layout_tree",
    "circle_coords",
    "compute_rna",
    "extract_coords",
    "line_coords",
    "load_layout_config",
    "place_tree",
]
