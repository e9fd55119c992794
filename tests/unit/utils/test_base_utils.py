"""
Unit tests for the base normalization utilities.

This module validates the helpers responsible for standardizing nucleotide
input: single characters and whole sequence strings are upper-cased and the
DNA base 'T' (Thymine) is mapped to the RNA base 'U' (Uracil).
"""
from rna_layout.utils.base_utils import clean_sequence, normalize_base


def test_normalize_base_uppercases_and_maps_t_to_u():
    """
    Verifies the two transformations of the function: uppercasing and T-to-U mapping.
    """
    assert normalize_base("a") == "A"
    assert normalize_base("g") == "G"
    assert normalize_base("t") == "U"
    assert normalize_base("T") == "U"
    # Non-nucleotide characters are only uppercased.
    assert normalize_base("n") == "N"
    assert normalize_base("&") == "&"


def test_normalize_base_passes_through_non_single_char_inputs():
    """
    Inputs that are not single-character strings are returned as-is.
    """
    assert normalize_base(5) == 5
    assert normalize_base(None) is None
    assert normalize_base("AU") == "AU"
    assert normalize_base("") == ""


def test_clean_sequence_strips_whitespace_and_maps_t_to_u():
    """
    Pasted sequences lose all whitespace, including wrapped line breaks.
    """
    assert clean_sequence("gga t\nCC ") == "GGAUCC"
    assert clean_sequence("  acgu&acgu\n") == "ACGU&ACGU"
    assert clean_sequence("") == ""


def test_clean_sequence_keeps_unknown_characters():
    """
    Characters that are not bases are left for the base parser to reject.
    """
    assert clean_sequence("gaxn") == "GAXN"
