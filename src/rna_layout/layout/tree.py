from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from rna_layout.errors import LayoutStructureError

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """The three shapes a layout tree node can take."""
    JUNCTION = "junction"
    PAIR = "pair"
    UNPAIRED = "unpaired"


@dataclass(frozen=True, slots=True, eq=False)
class LayoutNode:
    """
    One node of the layout skeleton.

    The tree has a node for each unpaired base, each base pair and each
    junction (the loop a set of pairs and unpaired bases hang off)::

             5   4
             x   x
              \\ /     3      2      1
        6 x<-- x <--  x <--- x <--- x <--- x [root]
              / \\    10     11     12     / \\
             x   x                       x   x
             7   8                      14   15

    - The root is the outermost junction and has no indices.
    - A pair node holds `index_a < index_b` and exactly one child: the junction
      enclosed by the pair (which may have no children).
    - A junction's children are the pairs and unpaired bases found directly in
      its span, in 5' to 3' order.
    - An unpaired node holds `index_a` only and has no children.

    Nodes compare and hash by identity so they can key a placement map.

    Attributes
    ----------
    kind : NodeKind
        Which of the three shapes this node is.
    index_a : int
        5' index of a pair, or the index of an unpaired base; -1 for junctions.
    index_b : int
        3' index of a pair; -1 otherwise.
    children : Tuple[LayoutNode, ...]
        Child nodes in 5' to 3' order.
    """
    kind: NodeKind
    index_a: int = -1
    index_b: int = -1
    children: Tuple[LayoutNode, ...] = ()

    @property
    def is_pair(self) -> bool:
        return self.kind is NodeKind.PAIR

    @property
    def is_junction(self) -> bool:
        return self.kind is NodeKind.JUNCTION

    @property
    def is_leaf(self) -> bool:
        """True for unpaired-base nodes."""
        return self.kind is NodeKind.UNPAIRED

    def iter_nodes(self) -> Iterator[LayoutNode]:
        """Pre-order walk over this node and all its descendants."""
        stack: List[LayoutNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def unpaired_node(index: int) -> LayoutNode:
    return LayoutNode(NodeKind.UNPAIRED, index_a=index)


def pair_node(index_a: int, index_b: int, loop: LayoutNode) -> LayoutNode:
    return LayoutNode(NodeKind.PAIR, index_a=index_a, index_b=index_b, children=(loop,))


def junction_node(children: Sequence[LayoutNode] = ()) -> LayoutNode:
    return LayoutNode(NodeKind.JUNCTION, children=tuple(children))


def build_layout_tree(pairs: Sequence[int]) -> Optional[LayoutNode]:
    """
    Builds the layout skeleton for a symmetric, pseudoknot-free pairing list.

    Parameters
    ----------
    pairs : Sequence[int]
        Pairing list (`-1` for unpaired). Crossing pairs must already have been
        removed, e.g. with `SecStruct.filter_for_pseudoknots`.

    Returns
    -------
    Optional[LayoutNode]
        The root junction, or `None` when the structure has no pairs at all
        (the caller falls back to a line or circle layout).

    Raises
    ------
    LayoutStructureError
        If the pairing list is not properly nested.
    """
    if not any(partner >= 0 for partner in pairs):
        logger.debug(f"No pairs in structure of length {len(pairs)}; no layout tree built")
        return None

    root = junction_node(_build_children(pairs, 0, len(pairs) - 1))
    logger.debug(f"Built layout tree with {sum(1 for _ in root.iter_nodes())} nodes for N={len(pairs)}")
    return root


# Span start, span end, cursor, children found so far, and the enclosing pair
# together with its parent's child list (None for the outermost span).
_SpanFrame = Tuple[int, int, int, List[LayoutNode], Optional[Tuple[int, int, List[LayoutNode]]]]


def _build_children(pairs: Sequence[int], start: int, end: int) -> List[LayoutNode]:
    """
    Builds the nodes found directly in the closed span `[start, end]`.

    An empty span (`start == end + 1`) yields no children. Nested spans are
    walked with an explicit stack, so long helices do not hit the recursion
    limit. A pair node is only created once the loop it closes is complete.
    """
    if start > end + 1:
        raise LayoutStructureError(
            f"Error occurred while drawing RNA for indices {start} {end}", start=start, end=end
        )

    top_level: List[LayoutNode] = []
    stack: List[_SpanFrame] = [(start, end, start, top_level, None)]
    while stack:
        span_start, span_end, cursor, children, closing = stack.pop()

        while cursor <= span_end:
            partner = pairs[cursor]
            if partner >= 0:
                break
            children.append(unpaired_node(cursor))
            cursor += 1
        else:
            if closing is not None:
                index_a, index_b, parent_children = closing
                parent_children.append(pair_node(index_a, index_b, junction_node(children)))
            continue

        # Spans are walked 5' to 3', so a well-nested partner always lies
        # ahead of the cursor and inside the span.
        if partner <= cursor or partner > span_end or pairs[partner] != cursor:
            raise LayoutStructureError(
                f"Base {cursor} pairs with {partner}, outside span [{span_start}, {span_end}]",
                start=cursor,
                end=partner,
            )

        # Resume this span after the pair once its loop has been built.
        stack.append((span_start, span_end, partner + 1, children, closing))
        stack.append((cursor + 1, partner - 1, cursor + 1, [], (cursor, partner, children)))

    return top_level
