from rna_layout.utils.base_utils import clean_sequence, normalize_base

__all__ = [
    "clean_sequence",
    "normalize_base",
]
