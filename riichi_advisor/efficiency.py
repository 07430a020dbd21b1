"""
Efficiency Analyzer

Scores how well a hand accepts new tiles: every useful tile kind is weighted
by how many copies are still unseen and by the quality of the wait it
fills, then averaged over the useful kinds.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .availability import AvailabilityTracker
from .config import AdvisorConfig, DEFAULT_CONFIG
from .decomposition import WaitQuality, decompose
from .strategy import Strategy
from .tiles import TERMINAL_HONOR_INDICES, Meld, Tile, remove_tiles, to_counts


@dataclass(frozen=True)
class UsefulTile:
    """A tile kind that would advance the hand, and the wait it fills"""
    index: int
    quality: WaitQuality

    @property
    def tile(self) -> Tile:
        return Tile.from_index(self.index)


def quality_weight(quality: WaitQuality, config: AdvisorConfig = DEFAULT_CONFIG) -> float:
    return {
        WaitQuality.TWO_SIDED: config.two_sided_quality,
        WaitQuality.INTERIOR: config.interior_quality,
        WaitQuality.EDGE: config.edge_quality,
        WaitQuality.PAIR: config.pair_quality,
        WaitQuality.SINGLE: config.single_quality,
    }[quality]


def _general_useful(hand: Sequence[Tile], melds: Sequence[Meld]) -> List[UsefulTile]:
    d = decompose(hand, melds)
    found = []
    for partial in d.partials:
        found.extend(UsefulTile(idx, partial.wait_quality) for idx in partial.completions())
    if d.pair is not None:
        found.append(UsefulTile(d.pair.index, WaitQuality.PAIR))
    for idx in d.isolated:
        # Another copy, or a neighbour within two ranks in the same suit
        neighbours = [idx]
        if idx < 27:
            rank = idx % 9
            neighbours += [idx + step for step in (-2, -1, 1, 2) if 0 <= rank + step <= 8]
        found.extend(UsefulTile(n, WaitQuality.SINGLE) for n in neighbours)
    return found


def useful_tiles(
    hand: Sequence[Tile],
    strategy: Strategy = Strategy.GENERAL,
    melds: Sequence[Meld] = (),
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> List[UsefulTile]:
    """
    Tile kinds that would advance the hand under a strategy.

    A kind reachable through several shapes keeps its best wait quality.
    Result is ordered by kind index.
    """
    counts = to_counts(hand)
    if strategy == Strategy.CHIITOITSU:
        found = [UsefulTile(i, WaitQuality.SINGLE) for i in range(len(counts)) if counts[i] == 1]
    elif strategy == Strategy.THIRTEEN_ORPHANS:
        has_duplicate = any(counts[i] >= 2 for i in TERMINAL_HONOR_INDICES)
        found = [
            UsefulTile(i, WaitQuality.SINGLE) for i in TERMINAL_HONOR_INDICES
            if counts[i] == 0 or not has_duplicate
        ]
    else:
        found = _general_useful(hand, melds)

    best: Dict[int, UsefulTile] = {}
    for useful in found:
        current = best.get(useful.index)
        if current is None or quality_weight(useful.quality, config) > quality_weight(current.quality, config):
            best[useful.index] = useful
    return [best[i] for i in sorted(best)]


def efficiency(
    hand: Sequence[Tile],
    strategy: Strategy,
    availability: AvailabilityTracker,
    melds: Sequence[Meld] = (),
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> float:
    """
    Availability-weighted average wait quality over the useful kinds.

    Returns:
        Sum of (unseen copies x quality weight) / number of useful kinds,
        or 0.0 when nothing is useful
    """
    useful = useful_tiles(hand, strategy, melds, config)
    if not useful:
        return 0.0
    total = sum(availability.remaining(u.index) * quality_weight(u.quality, config) for u in useful)
    return total / len(useful)


def efficiency_after_discard(
    hand: Sequence[Tile],
    tile: Tile,
    strategy: Strategy,
    availability: AvailabilityTracker,
    melds: Sequence[Meld] = (),
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> float:
    """Efficiency of the hand left after discarding one copy of tile"""
    return efficiency(remove_tiles(hand, [tile]), strategy, availability, melds, config)
