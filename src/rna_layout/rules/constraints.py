from __future__ import annotations
from enum import IntEnum
from typing import Final

from rna_layout.errors import InvalidBaseError
from rna_layout.utils.base_utils import normalize_base


class RNABase(IntEnum):
    """
    Integer codes a sequence position can hold: the four nucleotides, an
    undefined/unknown base and the strand cut marker.
    """
    UNDEFINED = 0
    ADENINE = 1
    CYTOSINE = 2
    GUANINE = 3
    URACIL = 4
    CUT = 19


# Characters that mark a strand break in sequences and dot-bracket strings.
CUT_CHARS: Final[frozenset[str]] = frozenset({"&", "-", "+"})

_CHAR_TO_BASE: Final[dict[str, RNABase]] = {
    "A": RNABase.ADENINE,
    "C": RNABase.CYTOSINE,
    "G": RNABase.GUANINE,
    "U": RNABase.URACIL,
}
_BASE_TO_CHAR: Final[dict[int, str]] = {code: char for char, code in _CHAR_TO_BASE.items()}

# ---- Pair type table ---------------------------------------------------------
# Row/column order: _ A C G U X K I. Indexed as `a * 8 + b`.
# Nonzero entries: CG=1, GC=2, GU=3, UG=4, AU=5, UA=6, plus the X/K and
# inosine entries of the classic Vienna matrix.
_PAIR_TABLE_WIDTH: Final[int] = 8
_PAIR_TYPE_MAT: Final[tuple[int, ...]] = (
    0, 0, 0, 0, 0, 0, 0, 0,
    0, 0, 0, 0, 5, 0, 0, 5,
    0, 0, 0, 1, 0, 0, 0, 0,
    0, 0, 2, 0, 3, 0, 0, 0,
    0, 6, 0, 4, 0, 0, 0, 6,
    0, 0, 0, 0, 0, 0, 2, 0,
    0, 0, 0, 0, 0, 1, 0, 0,
    0, 6, 0, 0, 5, 0, 0, 0,
)


def pair_type(base_a: int, base_b: int) -> int:
    """
    Return the pair type code for the ordered base pair (`base_a`, `base_b`).

    Parameters
    ----------
    base_a, base_b : int
        Base codes (see `RNABase`).

    Returns
    -------
    int
        A nonzero code for Watson-Crick and GU wobble pairs; 0 when the two
        bases cannot pair or either code lies outside the table (e.g. `CUT`).
    """
    if not (0 <= base_a < _PAIR_TABLE_WIDTH and 0 <= base_b < _PAIR_TABLE_WIDTH):
        return 0
    return _PAIR_TYPE_MAT[base_a * _PAIR_TABLE_WIDTH + base_b]


def string_to_nucleotide(value: str, allow_cut: bool = True, allow_unknown: bool = True) -> RNABase:
    """
    Convert a single sequence character into its base code.

    Parameters
    ----------
    value : str
        One character. A/C/G/U are case-insensitive and T maps to U.
    allow_cut : bool, optional
        Accept the cut markers `&`, `-` and `+`, by default True.
    allow_unknown : bool, optional
        Map any other character to `RNABase.UNDEFINED`, by default True.

    Returns
    -------
    RNABase
        The base code.

    Raises
    ------
    InvalidBaseError
        If `value` is a cut marker and `allow_cut` is False, or is not a
        recognised character and `allow_unknown` is False.
    """
    base = _CHAR_TO_BASE.get(normalize_base(value))
    if base is not None:
        return base

    if value in CUT_CHARS:
        if allow_cut:
            return RNABase.CUT
        raise InvalidBaseError(f"Bad nucleotide '{value}' (cut markers not allowed)")

    if allow_unknown:
        return RNABase.UNDEFINED
    raise InvalidBaseError(f"Bad nucleotide '{value}'")


def nucleotide_to_string(value: int, allow_cut: bool = True, allow_unknown: bool = True) -> str:
    """
    Convert a base code back to its sequence character.

    Parameters
    ----------
    value : int
        Base code.
    allow_cut : bool, optional
        Render `RNABase.CUT` as `&`, by default True.
    allow_unknown : bool, optional
        Render any unrecognised code as `?`, by default True.

    Returns
    -------
    str
        One of `A`, `C`, `G`, `U`, `&` or `?`.

    Raises
    ------
    InvalidBaseError
        If the code falls in a category that was disallowed.
    """
    char = _BASE_TO_CHAR.get(value)
    if char is not None:
        return char

    if value == RNABase.CUT:
        if allow_cut:
            return "&"
        raise InvalidBaseError(f"Bad nucleotide code {value} (cut not allowed)")

    if allow_unknown:
        return "?"
    raise InvalidBaseError(f"Bad nucleotide code {value}")
