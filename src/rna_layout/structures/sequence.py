from __future__ import annotations
from typing import Iterable, Iterator, List

from rna_layout.rules.constraints import RNABase, nucleotide_to_string, string_to_nucleotide


class Sequence:
    """
    Thin container of base codes consumed by the layout and dot-bracket writer.

    Holds one integer code (see `RNABase`) per position. A position holding
    `RNABase.CUT` marks a strand break.
    """
    __slots__ = ("_bases",)

    def __init__(self, bases: Iterable[int] = ()):
        self._bases: List[int] = [int(b) for b in bases]

    @classmethod
    def from_string(cls, seq: str, allow_cut: bool = True, allow_unknown: bool = True) -> Sequence:
        """
        Build a sequence from its character form (e.g. ``"GGAAA&CC"``).

        Raises
        ------
        InvalidBaseError
            Propagated from `string_to_nucleotide` for disallowed characters.
        """
        return cls(string_to_nucleotide(ch, allow_cut, allow_unknown) for ch in seq)

    @classmethod
    def undefined(cls, length: int, cut_points: Iterable[int] = ()) -> Sequence:
        """Sequence of unknown bases, with `RNABase.CUT` at each index in `cut_points`."""
        bases = [RNABase.UNDEFINED] * length
        for idx in cut_points:
            bases[idx] = RNABase.CUT
        return cls(bases)

    @property
    def length(self) -> int:
        return len(self._bases)

    @property
    def bases(self) -> List[int]:
        """A copy of the underlying base codes."""
        return list(self._bases)

    def nt(self, index: int) -> int:
        """Base code at `index`."""
        return self._bases[index]

    def has_cut(self, index: int) -> bool:
        """Whether the position at `index` is a strand cut."""
        return self._bases[index] == RNABase.CUT

    def cut_points(self) -> List[int]:
        return [idx for idx, base in enumerate(self._bases) if base == RNABase.CUT]

    def __len__(self) -> int:
        return len(self._bases)

    def __iter__(self) -> Iterator[int]:
        return iter(self._bases)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return self._bases == other._bases

    def __str__(self) -> str:
        return "".join(nucleotide_to_string(b) for b in self._bases)

    def __repr__(self) -> str:
        return f"Sequence({str(self)!r})"
