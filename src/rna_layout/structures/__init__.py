from rna_layout.structures.pairing import Pair
from rna_layout.structures.sequence import Sequence
from rna_layout.structures.sec_struct import BRACKETS, SecStruct, find_cut_points

__all__ = [
    "BRACKETS",
    "Pair",
    "SecStruct",
    "Sequence",
    "find_cut_points",
]
