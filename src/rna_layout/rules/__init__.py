from rna_layout.rules.constraints import (
    CUT_CHARS,
    RNABase,
    nucleotide_to_string,
    pair_type,
    string_to_nucleotide,
)

__all__ = [
    "CUT_CHARS",
    "RNABase",
    "nucleotide_to_string",
    "pair_type",
    "string_to_nucleotide",
]
