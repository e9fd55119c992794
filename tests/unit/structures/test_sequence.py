"""
Unit tests for the `Sequence` container.

Covers construction from characters and from a length with cut points,
the cut queries used by the dot-bracket writer, and string rendering.
"""
import pytest

from rna_layout.errors import InvalidBaseError
from rna_layout.rules.constraints import RNABase
from rna_layout.structures.sequence import Sequence


def test_from_string_maps_characters_to_codes():
    """
    Characters become base codes; case is ignored and `&` marks a cut.
    """
    seq = Sequence.from_string("GgAu&c")
    assert seq.bases == [
        RNABase.GUANINE,
        RNABase.GUANINE,
        RNABase.ADENINE,
        RNABase.URACIL,
        RNABase.CUT,
        RNABase.CYTOSINE,
    ]
    assert str(seq) == "GGAU&C"
    assert len(seq) == seq.length == 6


def test_from_string_reads_t_as_u():
    """
    DNA input is drawn as RNA.
    """
    assert str(Sequence.from_string("TTA")) == "UUA"


def test_from_string_strict_mode_rejects_unknown_bases():
    """
    With `allow_unknown=False`, a non-nucleotide character raises.
    """
    with pytest.raises(InvalidBaseError):
        Sequence.from_string("GAX", allow_unknown=False)


def test_cut_queries():
    """
    `has_cut` and `cut_points` report strand breaks.
    """
    seq = Sequence.from_string("GG&AA+C")
    assert seq.cut_points() == [2, 5]
    assert seq.has_cut(2)
    assert not seq.has_cut(0)
    assert seq.nt(3) == RNABase.ADENINE


def test_undefined_sequence_with_cuts():
    """
    `undefined` fills unknown bases and places a cut at each requested index.
    """
    seq = Sequence.undefined(5, [2])
    assert str(seq) == "??&??"
    assert seq.cut_points() == [2]


def test_bases_returns_a_copy():
    """
    Mutating the returned list leaves the sequence untouched.
    """
    seq = Sequence.from_string("ACGU")
    bases = seq.bases
    bases[0] = RNABase.CUT
    assert str(seq) == "ACGU"


def test_equality_and_iteration():
    """
    Sequences compare by their codes and iterate over them.
    """
    assert Sequence.from_string("acgu") == Sequence([1, 2, 3, 4])
    assert list(Sequence.from_string("AC")) == [RNABase.ADENINE, RNABase.CYTOSINE]
    assert repr(Sequence.from_string("AC")) == "Sequence('AC')"
