"""
Structural Decomposer

Splits a hand into complete groups (triplets and sequences), at most one
pair, partial groups (two tiles waiting on a third) and isolated tiles.

The best decomposition maximises complete groups, then pair presence, then
partial groups. The search tries every assignment of the lowest remaining
tile and memoises on the remaining count signature, so repeated calls on
the same shapes are cheap.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from .errors import DecompositionError
from .tiles import (
    NUM_TILE_KINDS, TERMINAL_HONOR_INDICES, Meld, Tile, remove_tiles, to_counts,
)


class BlockKind(IntEnum):
    """Shapes a decomposition can assign tiles to"""
    TRIPLET = 0     # 111
    SEQUENCE = 1    # 123
    PAIR = 2        # 11 (the head, or a partial waiting on a third copy)
    ADJACENT = 3    # 12 / 23 .. 89 (two-sided or edge)
    GAP = 4         # 13 (interior)


class WaitQuality(IntEnum):
    """Shape of the wait a partial group (or lone tile) is waiting on"""
    TWO_SIDED = 0   # 23 waiting on 1 or 4
    INTERIOR = 1    # 13 waiting on 2
    EDGE = 2        # 12 waiting on 3, 89 waiting on 7
    PAIR = 3        # 11 waiting on a third copy
    SINGLE = 4      # lone tile waiting on its pair


BLOCK_SIZES = {
    BlockKind.TRIPLET: 3,
    BlockKind.SEQUENCE: 3,
    BlockKind.PAIR: 2,
    BlockKind.ADJACENT: 2,
    BlockKind.GAP: 2,
}


@dataclass(frozen=True)
class Block:
    """A group, pair or partial group identified by its lowest tile kind"""
    kind: BlockKind
    index: int
    head: bool = False

    @property
    def indices(self) -> Tuple[int, ...]:
        if self.kind == BlockKind.TRIPLET:
            return (self.index,) * 3
        if self.kind == BlockKind.SEQUENCE:
            return (self.index, self.index + 1, self.index + 2)
        if self.kind == BlockKind.PAIR:
            return (self.index, self.index)
        if self.kind == BlockKind.ADJACENT:
            return (self.index, self.index + 1)
        return (self.index, self.index + 2)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return tuple(Tile.from_index(i) for i in self.indices)

    @property
    def is_edge(self) -> bool:
        """12 or 89: only one tile completes it"""
        return self.kind == BlockKind.ADJACENT and self.index % 9 in (0, 7)

    @property
    def wait_quality(self) -> Optional[WaitQuality]:
        if self.kind == BlockKind.PAIR:
            return WaitQuality.PAIR
        if self.kind == BlockKind.GAP:
            return WaitQuality.INTERIOR
        if self.kind == BlockKind.ADJACENT:
            return WaitQuality.EDGE if self.is_edge else WaitQuality.TWO_SIDED
        return None

    def completions(self) -> Tuple[int, ...]:
        """Tile kinds that turn this partial into a complete group"""
        if self.kind == BlockKind.PAIR:
            return (self.index,)
        if self.kind == BlockKind.GAP:
            return (self.index + 1,)
        if self.kind == BlockKind.ADJACENT:
            rank = self.index % 9
            waits = []
            if rank > 0:
                waits.append(self.index - 1)
            if rank < 7:
                waits.append(self.index + 2)
            return tuple(waits)
        return ()

    def __repr__(self) -> str:
        return f"Block({self.kind.name}, {''.join(str(t) for t in self.tiles)})"


@dataclass(frozen=True)
class Decomposition:
    """
    Result of decomposing a hand.

    Attributes:
        groups: Complete groups found in the concealed hand
        melds: Exposed melds, counted as complete groups
        pair: The head pair, if any
        partials: Two-tile proto-groups
        isolated: Kind indices of tiles that belong to nothing
    """
    groups: Tuple[Block, ...] = ()
    melds: Tuple[Meld, ...] = ()
    pair: Optional[Block] = None
    partials: Tuple[Block, ...] = ()
    isolated: Tuple[int, ...] = ()

    @property
    def complete_groups(self) -> int:
        return len(self.groups) + len(self.melds)

    @property
    def pair_count(self) -> int:
        return 1 if self.pair is not None else 0

    @property
    def partial_count(self) -> int:
        return len(self.partials)

    @property
    def counts(self) -> Tuple[int, int, int]:
        """(complete groups, pair, partial groups)"""
        return self.complete_groups, self.pair_count, self.partial_count

    @property
    def triplet_indices(self) -> List[int]:
        """Kinds of all triplets/quads, concealed and exposed"""
        found = [b.index for b in self.groups if b.kind == BlockKind.TRIPLET]
        found += [m.base_tile.tile_index for m in self.melds if m.is_triplet]
        return found

    @property
    def sequence_indices(self) -> List[int]:
        """Lowest kind of every sequence, concealed and exposed"""
        found = [b.index for b in self.groups if b.kind == BlockKind.SEQUENCE]
        found += [m.base_tile.tile_index for m in self.melds if not m.is_triplet]
        return found

    @property
    def concealed_triplet_indices(self) -> List[int]:
        found = [b.index for b in self.groups if b.kind == BlockKind.TRIPLET]
        found += [m.base_tile.tile_index for m in self.melds if m.is_triplet and not m.is_open]
        return found


@lru_cache(maxsize=1 << 16)
def _search(counts: Tuple[int, ...], has_pair: bool) -> Tuple[int, int, int, Tuple[Block, ...]]:
    """
    Best (groups, pair, partials, blocks) for the remaining counts.

    Options for the lowest remaining kind are tried in a fixed order
    (triplet, sequence, pair, partials, isolate); ties keep the first.
    """
    first = next((i for i, c in enumerate(counts) if c > 0), -1)
    if first == -1:
        return 0, 0, 0, ()

    rank = first % 9
    suited = first < 27
    best: Optional[Tuple[int, int, int, Tuple[Block, ...]]] = None

    def consider(taken: Sequence[int], block: Optional[Block], pair_now: bool,
                 dg: int, dp: int, dt: int):
        nonlocal best
        rest = list(counts)
        for idx in taken:
            rest[idx] -= 1
        g, p, t, blocks = _search(tuple(rest), pair_now)
        candidate = (g + dg, p + dp, t + dt, ((block,) if block else ()) + blocks)
        if best is None or candidate[:3] > best[:3]:
            best = candidate

    if counts[first] >= 3:
        consider((first,) * 3, Block(BlockKind.TRIPLET, first), has_pair, 1, 0, 0)
    if suited and rank <= 6 and counts[first + 1] and counts[first + 2]:
        consider((first, first + 1, first + 2), Block(BlockKind.SEQUENCE, first), has_pair, 1, 0, 0)
    if counts[first] >= 2:
        if not has_pair:
            consider((first, first), Block(BlockKind.PAIR, first, head=True), True, 0, 1, 0)
        consider((first, first), Block(BlockKind.PAIR, first), has_pair, 0, 0, 1)
    if suited and rank <= 7 and counts[first + 1]:
        consider((first, first + 1), Block(BlockKind.ADJACENT, first), has_pair, 0, 0, 1)
    if suited and rank <= 6 and counts[first + 2]:
        consider((first, first + 2), Block(BlockKind.GAP, first), has_pair, 0, 0, 1)
    consider((first,), None, has_pair, 0, 0, 0)

    return best


def decompose(hand: Sequence[Tile], melds: Sequence[Meld] = ()) -> Decomposition:
    """
    Find the best decomposition of a hand.

    Args:
        hand: Concealed tiles
        melds: Exposed melds, counted as complete groups

    Returns:
        Decomposition with groups, pair, partials and isolated tiles
    """
    counts = to_counts(hand)
    groups_found, pair_found, _, blocks = _search(tuple(int(c) for c in counts), False)

    groups: List[Block] = []
    partials: List[Block] = []
    pair: Optional[Block] = None
    for block in blocks:
        if block.kind in (BlockKind.TRIPLET, BlockKind.SEQUENCE):
            groups.append(block)
        elif block.head:
            pair = block
        else:
            partials.append(block)

    leftover = counts.astype(int)
    for block in blocks:
        for idx in block.indices:
            leftover[idx] -= 1
    if (leftover < 0).any() or len(groups) != groups_found or (pair is not None) != bool(pair_found):
        raise DecompositionError(f"Decomposition consumed tiles not in hand: {blocks}")
    isolated = tuple(i for i in range(NUM_TILE_KINDS) for _ in range(leftover[i]))

    return Decomposition(
        groups=tuple(groups),
        melds=tuple(melds),
        pair=pair,
        partials=tuple(partials),
        isolated=isolated,
    )


def decompose_after_discard(hand: Sequence[Tile], tile: Tile, melds: Sequence[Meld] = ()) -> Decomposition:
    """Decompose the hand that remains after discarding one copy of tile"""
    return decompose(remove_tiles(hand, [tile]), melds)


def pairs_in_hand(hand: Sequence[Tile]) -> List[int]:
    """Kinds held at least twice (each kind counts as one pair)"""
    counts = to_counts(hand)
    return [i for i in range(NUM_TILE_KINDS) if counts[i] >= 2]


def terminal_honor_kinds(hand: Sequence[Tile]) -> List[int]:
    """Distinct terminal/honor kinds held"""
    counts = to_counts(hand)
    return [i for i in TERMINAL_HONOR_INDICES if counts[i] > 0]


def clear_cache() -> None:
    _search.cache_clear()
