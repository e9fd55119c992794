from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pair:
    """
    Immutable (i, j) index pair used to represent one base pair of a structure.

    Parameters
    ----------
    base_i : int
        Left index (0-based).
    base_j : int
        Right index (0-based), must satisfy j > i in valid uses.
    """
    base_i: int
    base_j: int

    def as_tuple(self) -> tuple[int, int]:
        """
        Pair indices as a tuple.

        Returns
        -------
        tuple[int, int]
            The pair ``(i, j)``.
        """
        return self.base_i, self.base_j

    def is_stacked_on(self, other: Pair) -> bool:
        """
        Whether this pair is an adjacent helix step of `other`.

        Covers both orientations of the stacking step, i.e. `(i, j)` next to
        `(i - 1, j + 1)` or `(i + 1, j - 1)`, with either endpoint written
        first.

        Parameters
        ----------
        other : Pair
            The candidate neighbouring pair.

        Returns
        -------
        bool
            True if the pairs stack directly on one another.
        """
        i, j = self.base_i, self.base_j
        k, l = other.base_i, other.base_j
        return (
            (i - 1 == k and j + 1 == l)
            or (i + 1 == k and j - 1 == l)
            or (i - 1 == l and j + 1 == k)
            or (i + 1 == l and j - 1 == k)
        )
