from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional, Sequence as SequenceLike, Tuple

from rna_layout.errors import DelimiterCapacityError, DotBracketParseError
from rna_layout.rules.constraints import CUT_CHARS, pair_type
from rna_layout.structures.pairing import Pair
from rna_layout.structures.sequence import Sequence

logger = logging.getLogger(__name__)

# Bracket glyphs per layer. Layer 0 is the nested structure.
BRACKETS: List[Tuple[str, str]] = [('(', ')'), ('[', ']'), ('{', '}'), ('<', '>')]

StemPairs = List[Tuple[int, int]]


def find_cut_points(dot_bracket: str) -> List[int]:
    """
    Locate the strand cut markers (`&`, `-`, `+`) in a dot-bracket string.

    Cut markers occupy a position of their own but never pair; they are
    tracked by the sequence rather than by the pairing list.

    Parameters
    ----------
    dot_bracket : str
        The dot-bracket string.

    Returns
    -------
    List[int]
        Indices of every cut marker, in order.
    """
    return [idx for idx, ch in enumerate(dot_bracket) if ch in CUT_CHARS]


def _group_into_stems(pairs: Iterable[Pair]) -> List[List[Pair]]:
    """
    Groups pairs into stems by adjacency.

    Each pair joins the first stem already holding a pair it stacks on;
    otherwise it starts a new stem. Pairs are expected in 5' order.
    """
    stems: List[List[Pair]] = []
    for pair in pairs:
        for stem in stems:
            if any(pair.is_stacked_on(member) for member in stem):
                stem.append(pair)
                break
        else:
            stems.append([pair])
    return stems


def _check_symmetric(pairs: List[int]) -> None:
    """Raises `ValueError` unless `pairs` is a valid symmetric pairing list."""
    length = len(pairs)
    for idx, partner in enumerate(pairs):
        if partner == -1:
            continue
        if not 0 <= partner < length or partner == idx:
            raise ValueError(f"Base {idx} has invalid partner {partner} in a structure of length {length}")
        if pairs[partner] != idx:
            raise ValueError(f"Base {idx} pairs with {partner}, but {partner} pairs with {pairs[partner]}")


class SecStruct:
    """
    A secondary structure stored as a symmetric pairing list.

    `pairs[i] = j` (with `j >= 0`) means base `i` pairs with base `j`, and then
    `pairs[j] == i`; `-1` marks an unpaired base. The class offers dot-bracket
    conversion (optionally with the `[]`, `{}` and `<>` pseudoknot layers),
    pseudoknot separation and a handful of stem/loop queries used by the layout.

    Parameters
    ----------
    pairs : Iterable[int], optional
        Initial pairing list. It is copied, never aliased.

    Raises
    ------
    ValueError
        If an entry is below -1, points outside the list or at itself, or is
        not mirrored by its partner.
    """
    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[int] = ()):
        self._pairs: List[int] = [int(p) for p in pairs]
        _check_symmetric(self._pairs)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_dot_bracket(cls, dot_bracket: str, pseudoknots: bool = False) -> SecStruct:
        """
        Parses a dot-bracket string into a structure.

        `()` is always read. When `pseudoknots` is True the `[]`, `{}` and `<>`
        layers are read as well, each with its own stack so that layers may
        cross one another. Every other character is unpaired.

        Parameters
        ----------
        dot_bracket : str
            The dot-bracket string.
        pseudoknots : bool, optional
            Also read the pseudoknot bracket layers, by default False.

        Returns
        -------
        SecStruct
            The parsed structure, with the same length as `dot_bracket`.

        Raises
        ------
        DotBracketParseError
            If a closing bracket has no open partner on its layer's stack, or an
            opening bracket is never closed.
        """
        layers = BRACKETS if pseudoknots else BRACKETS[:1]
        openers = {open_ch: layer for layer, (open_ch, _) in enumerate(layers)}
        closers = {close_ch: layer for layer, (_, close_ch) in enumerate(layers)}
        stacks: List[List[int]] = [[] for _ in layers]

        pairs = [-1] * len(dot_bracket)
        for idx, ch in enumerate(dot_bracket):
            if ch in openers:
                stacks[openers[ch]].append(idx)
            elif ch in closers:
                stack = stacks[closers[ch]]
                if not stack:
                    raise DotBracketParseError(
                        f"Invalid parenthesis notation: unmatched '{ch}' at position {idx}",
                        position=idx,
                        char=ch,
                    )
                partner = stack.pop()
                pairs[partner] = idx
                pairs[idx] = partner

        unclosed = sorted(idx for stack in stacks for idx in stack)
        if unclosed:
            idx = unclosed[0]
            raise DotBracketParseError(
                f"Invalid parenthesis notation: unclosed '{dot_bracket[idx]}' at position {idx}",
                position=idx,
                char=dot_bracket[idx],
            )

        return cls(pairs)

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------
    @property
    def length(self) -> int:
        return len(self._pairs)

    @property
    def pairs(self) -> List[int]:
        """A copy of the pairing list."""
        return list(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecStruct):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"SecStruct({self._pairs!r})"

    def is_paired(self, index: int) -> bool:
        return self._pairs[index] >= 0

    def pairing_partner(self, index: int) -> int:
        """Partner of `index`, or -1 when unpaired."""
        return self._pairs[index]

    def num_pairs(self) -> int:
        """Total number of base pairs."""
        return sum(1 for idx, partner in enumerate(self._pairs) if partner > idx)

    def nonempty(self) -> bool:
        """True if the structure holds at least one pair."""
        return any(partner >= 0 for partner in self._pairs)

    def iter_pairs(self) -> Iterator[Pair]:
        """Yields each base pair once as a `Pair` with `base_i < base_j`, in 5' order."""
        for idx, partner in enumerate(self._pairs):
            if partner > idx:
                yield Pair(idx, partner)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_pairing_partner(self, index: int, partner: int) -> None:
        """
        Pairs `index` with `partner`, keeping the list symmetric.

        Any previous partner of either base is unpaired first. Passing a
        negative `partner` is the same as `set_unpaired(index)`.

        Raises
        ------
        IndexError
            If `index` or `partner` lies outside the structure. Nothing is
            changed in that case.
        ValueError
            If `index` and `partner` are the same position.
        """
        length = len(self._pairs)
        if not 0 <= index < length:
            raise IndexError(f"Base {index} is outside a structure of length {length}")
        if partner < 0:
            self.set_unpaired(index)
            return
        if partner >= length:
            raise IndexError(f"Partner {partner} is outside a structure of length {length}")
        if partner == index:
            raise ValueError(f"Base {index} cannot pair with itself")

        if self._pairs[index] != partner:
            self.set_unpaired(index)
            self.set_unpaired(partner)
        self._pairs[index] = partner
        self._pairs[partner] = index

    def set_unpaired(self, index: int) -> None:
        """Unpairs `index` and its former partner, if any."""
        partner = self._pairs[index]
        if partner >= 0:
            self._pairs[partner] = -1
        self._pairs[index] = -1

    # ------------------------------------------------------------------
    # Dot-bracket output
    # ------------------------------------------------------------------
    def to_dot_bracket(self, seq: Optional[Sequence] = None, pseudoknots: bool = False) -> str:
        """
        Renders the structure in dot-bracket notation.

        Without `pseudoknots` every pair is written with `()`, so a crossing
        structure cannot be read back faithfully. With `pseudoknots`, pairs are
        grouped into stems and each stem gets the first bracket layer that does
        not leave a half-open bracket of that layer between its outer pair.

        Parameters
        ----------
        seq : Sequence, optional
            If given, unpaired positions holding a strand cut are written as `&`.
        pseudoknots : bool, optional
            Assign stems to `()`, `[]`, `{}` and `<>` layers, by default False.

        Returns
        -------
        str
            The dot-bracket string.

        Raises
        ------
        DelimiterCapacityError
            If a stem cannot be placed in any of the four bracket layers.
        """
        chars = ['.'] * len(self._pairs)
        if seq is not None:
            for idx, partner in enumerate(self._pairs):
                if partner < 0 and idx < seq.length and seq.has_cut(idx):
                    chars[idx] = '&'

        if not pseudoknots:
            for pair in self.iter_pairs():
                chars[pair.base_i] = '('
                chars[pair.base_j] = ')'
            return ''.join(chars)

        for stem in _group_into_stems(self.iter_pairs()):
            outer = stem[0]
            between = ''.join(chars[outer.base_i + 1:outer.base_j])
            layer = _first_balanced_layer(between)
            if layer is None:
                raise DelimiterCapacityError(
                    f"Stem starting at {outer.as_tuple()} needs more than {len(BRACKETS)} bracket layers"
                )
            open_ch, close_ch = BRACKETS[layer]
            for pair in stem:
                chars[pair.base_i] = open_ch
                chars[pair.base_j] = close_ch

        return ''.join(chars)

    # ------------------------------------------------------------------
    # Pseudoknot separation
    # ------------------------------------------------------------------
    def filter_for_pseudoknots(self) -> SecStruct:
        """
        Returns a copy holding only the nested (`()` layer) pairs.

        This is the structure the layout draws; crossing pairs would break the
        strict nesting the layout tree relies on.
        """
        layered = self.to_dot_bracket(pseudoknots=True)
        nested = ''.join('.' if ch in '[]{}<>' else ch for ch in layered)
        return SecStruct.from_dot_bracket(nested, pseudoknots=False)

    def only_pseudoknots(self) -> SecStruct:
        """Returns a copy holding only the pairs outside the `()` layer."""
        layered = self.to_dot_bracket(pseudoknots=True)
        crossing = ''.join('.' if ch in '()' else ch for ch in layered)
        return SecStruct.from_dot_bracket(crossing, pseudoknots=True)

    # ------------------------------------------------------------------
    # Stem, loop and stack queries
    # ------------------------------------------------------------------
    def stems(self) -> List[StemPairs]:
        """
        Groups all pairs into stems of adjacent stacked pairs.

        Returns
        -------
        List[List[Tuple[int, int]]]
            One list of `(i, partner)` tuples (with `i < partner`) per stem, in
            order of each stem's 5'-most pair.
        """
        return [[pair.as_tuple() for pair in stem] for stem in _group_into_stems(self.iter_pairs())]

    def stem_with(self, index: int) -> StemPairs:
        """
        Returns the stem holding the pair that `index` belongs to.

        Returns an empty list when `index` is unpaired.
        """
        partner = self.pairing_partner(index)
        if partner < 0:
            return []
        target = (min(index, partner), max(index, partner))
        for stem in self.stems():
            if target in stem:
                return stem
        return []

    def is_internal(self, index: int) -> Optional[List[int]]:
        """
        Checks whether an unpaired base sits in a simple internal loop.

        The loop is bounded by the nearest pair on each side of `index`; it is
        internal when those pairs are different helices' ends of one loop, i.e.
        nothing is paired strictly between their two partners.

        Parameters
        ----------
        index : int
            Position to test.

        Returns
        -------
        Optional[List[int]]
            Every index from the 5' flanking pair to the 3' flanking pair,
            followed by every index between the two partners (inclusive), or
            `None` when `index` is paired or not inside an internal loop.
        """
        pairs = self._pairs
        if pairs[index] >= 0:
            return None

        start_here = next((idx for idx in range(index, -1, -1) if pairs[idx] >= 0), -1)
        end_here = next((idx for idx in range(index, len(pairs)) if pairs[idx] >= 0), -1)
        if start_here < 0 or end_here < 0:
            return None

        there_start = min(pairs[start_here], pairs[end_here])
        there_end = max(pairs[start_here], pairs[end_here])
        if start_here == there_start:
            return None

        if any(pairs[idx] >= 0 for idx in range(there_start + 1, there_end)):
            return None

        return list(range(start_here, end_here + 1)) + list(range(there_start, there_end + 1))

    def get_longest_stack_length(self) -> int:
        """
        Length of the longest run of stacked pairs `(i, j), (i+1, j-1), ...`.

        Only the 5' side of each pair drives the scan.
        """
        longest = 0
        run_length = 0
        last_partner = -1
        for idx, partner in enumerate(self._pairs):
            if partner > idx:
                if run_length and partner == last_partner - 1:
                    run_length += 1
                else:
                    run_length = 1
                last_partner = partner
            else:
                run_length = 0
                last_partner = -1
            longest = max(longest, run_length)
        return longest

    # ------------------------------------------------------------------
    # Derived structures
    # ------------------------------------------------------------------
    def get_satisfied_pairs(self, seq: Sequence) -> SecStruct:
        """
        Keeps only the pairs whose two bases can pair in `seq`.

        Parameters
        ----------
        seq : Sequence
            Sequence supplying the base at every position.

        Returns
        -------
        SecStruct
            A new structure of the same length.
        """
        kept = [-1] * len(self._pairs)
        for pair in self.iter_pairs():
            if pair_type(seq.nt(pair.base_i), seq.nt(pair.base_j)) != 0:
                kept[pair.base_i] = pair.base_j
                kept[pair.base_j] = pair.base_i
        return SecStruct(kept)

    def slice(self, start: int, end: Optional[int] = None) -> SecStruct:
        """
        Copies the region `[start, end)` and re-indexes it from zero.

        Pairs whose partner falls outside the region are dropped: both
        remaining halves are left unpaired so the slice stays symmetric.
        """
        window = self._pairs[start:end]
        stop = start + len(window)
        sliced = [
            partner - start if start <= partner < stop else -1
            for partner in window
        ]
        dropped = sum(1 for old, new in zip(window, sliced) if old >= 0 and new < 0)
        if dropped:
            logger.debug(f"slice({start}, {end}) left {dropped} orphaned bases unpaired")
        return SecStruct(sliced)

    @classmethod
    def from_pair_list(cls, length: int, pairs: SequenceLike[Tuple[int, int]]) -> SecStruct:
        """Builds a structure of `length` bases from `(i, j)` index tuples."""
        ss = cls([-1] * length)
        for i, j in pairs:
            ss.set_pairing_partner(i, j)
        return ss

    # Names used by Eterna-style callers.
    from_parens = from_dot_bracket
    get_parenthesis = to_dot_bracket


def _first_balanced_layer(between: str) -> Optional[int]:
    """
    Index of the first bracket layer with neither or both delimiters in `between`.

    A layer whose open bracket appears without its close bracket (or vice
    versa) would be crossed by the new stem, so it is skipped.
    """
    for layer, (open_ch, close_ch) in enumerate(BRACKETS):
        if (open_ch in between) == (close_ch in between):
            return layer
    return None
