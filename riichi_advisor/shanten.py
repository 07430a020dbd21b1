"""
Shanten Calculator for Riichi Mahjong

Calculates the shanten number (distance to tenpai) for a hand under the
strategy being played, and the winning tiles once the hand is tenpai.

Shanten values:
- -1: Complete hand (already won)
-  0: Tenpai (one tile away from winning)
-  1: Iishanten (one away from tenpai)
-  2+: Further from tenpai
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import numpy as np

from .availability import AvailabilityTracker
from .decomposition import Decomposition, WaitQuality, decompose
from .strategy import Strategy
from .tiles import COPIES_PER_KIND, NUM_TILE_KINDS, TERMINAL_HONOR_INDICES, Meld, Tile, to_counts


MIN_SHANTEN = -1
MAX_SHANTEN = 8


@dataclass
class ShantenResult:
    """Result of shanten calculation."""
    shanten: int  # -1 = complete, 0 = tenpai, 1+ = tiles away
    decomposition: Decomposition
    wait_tiles: List[int] = field(default_factory=list)  # Winning kinds, only at tenpai
    ukeire: int = 0  # Unseen copies of the winning kinds

    @property
    def is_tenpai(self) -> bool:
        return self.shanten == 0

    @property
    def is_complete(self) -> bool:
        return self.shanten == -1


def calculate_shanten(groups: int, pairs: int, partials: int) -> int:
    """
    Standard form shanten (4 groups + 1 pair).

    Partial groups only count while there are group slots left to fill,
    and a hand with four groups and a pair is complete.
    """
    if groups >= 4 and pairs >= 1:
        return MIN_SHANTEN
    pair_slot = 1 if pairs >= 1 else 0
    shanten = 8 - 2 * groups - pair_slot - min(partials, max(0, 4 - groups))
    return max(0, min(MAX_SHANTEN, shanten))


def shanten_chiitoitsu(counts: np.ndarray) -> int:
    """
    Shanten for chiitoitsu (7 pairs).

    Shanten = 6 - pairs + max(0, 7 - distinct_tiles)
    """
    pairs = int((counts >= 2).sum())
    distinct = int((counts >= 1).sum())
    return 6 - pairs + max(0, 7 - distinct)


def shanten_kokushi(counts: np.ndarray) -> int:
    """
    Shanten for kokushi musou (13 orphans).

    Need one of each terminal/honor + one pair among them.
    """
    unique_count = sum(1 for idx in TERMINAL_HONOR_INDICES if counts[idx] >= 1)
    has_pair = any(counts[idx] >= 2 for idx in TERMINAL_HONOR_INDICES)
    return 13 - unique_count - (1 if has_pair else 0)


def is_winning_hand(groups: int, pairs: int, strategy: Strategy = Strategy.GENERAL) -> bool:
    """
    Whether the shape counts as a finished hand.

    Thirteen orphans has no group/pair shape; use ShantenCalculator for it.
    """
    if strategy == Strategy.CHIITOITSU:
        return pairs == 7
    if strategy == Strategy.THIRTEEN_ORPHANS:
        return False
    return groups == 4 and pairs == 1


def wait_shape(result: ShantenResult, strategy: Strategy = Strategy.GENERAL) -> Optional[WaitQuality]:
    """
    Shape of a tenpai hand's wait, or None when not tenpai.

    Seven pairs and thirteen orphans always wait on a single tile.
    """
    if result.shanten != 0:
        return None
    if strategy in (Strategy.CHIITOITSU, Strategy.THIRTEEN_ORPHANS):
        return WaitQuality.SINGLE
    decomposition = result.decomposition
    if decomposition.pair is None or not decomposition.partials:
        return WaitQuality.SINGLE
    return decomposition.partials[0].wait_quality


class ShantenCalculator:
    """
    Shanten calculator for Riichi Mahjong.

    Calculates shanten for:
    - Standard form (4 groups + 1 pair), also used when folding
    - Chiitoitsu (7 pairs)
    - Kokushi musou (13 orphans)
    """

    def __init__(self, availability: Optional[AvailabilityTracker] = None):
        """
        Args:
            availability: Unseen copies per kind; without it ukeire counts
                every copy not in the hand
        """
        self.availability = availability

    def calculate(
        self,
        hand: Sequence[Tile],
        strategy: Strategy = Strategy.GENERAL,
        melds: Sequence[Meld] = (),
    ) -> ShantenResult:
        """
        Calculate shanten for a hand.

        Args:
            hand: Concealed tiles (any size; mid-deal hands are taken as-is)
            strategy: Shape being played
            melds: Own exposed melds

        Returns:
            ShantenResult with shanten value and, at tenpai, waiting tiles
        """
        decomposition = decompose(hand, melds)
        shanten = self._shanten(hand, decomposition, strategy)

        wait_tiles: List[int] = []
        ukeire = 0
        if shanten == 0:
            wait_tiles, ukeire = self._calculate_waits(hand, strategy, melds)

        return ShantenResult(
            shanten=shanten,
            decomposition=decomposition,
            wait_tiles=wait_tiles,
            ukeire=ukeire,
        )

    def shanten_only(self, hand: Sequence[Tile], strategy: Strategy = Strategy.GENERAL,
                     melds: Sequence[Meld] = ()) -> int:
        return self._shanten(hand, decompose(hand, melds), strategy)

    @staticmethod
    def _shanten(hand: Sequence[Tile], decomposition: Decomposition, strategy: Strategy) -> int:
        if strategy == Strategy.CHIITOITSU:
            return shanten_chiitoitsu(to_counts(hand))
        if strategy == Strategy.THIRTEEN_ORPHANS:
            return shanten_kokushi(to_counts(hand))
        return calculate_shanten(*decomposition.counts)

    def _calculate_waits(
        self,
        hand: Sequence[Tile],
        strategy: Strategy,
        melds: Sequence[Meld],
    ) -> Tuple[List[int], int]:
        """
        Every kind whose addition completes the hand.

        Returns list of tile indices and total count of unseen copies.
        """
        counts = to_counts(hand)
        waiting_tiles = []
        total_ukeire = 0

        for tile_idx in range(NUM_TILE_KINDS):
            if counts[tile_idx] >= COPIES_PER_KIND:
                continue  # Already have 4

            extended = list(hand) + [Tile.from_index(tile_idx)]
            if self._shanten(extended, decompose(extended, melds), strategy) != -1:
                continue

            waiting_tiles.append(tile_idx)
            if self.availability is not None:
                total_ukeire += self.availability.remaining(tile_idx)
            else:
                total_ukeire += COPIES_PER_KIND - int(counts[tile_idx])

        return waiting_tiles, total_ukeire


def get_shanten(hand: Sequence[Tile], strategy: Strategy = Strategy.GENERAL,
                melds: Sequence[Meld] = ()) -> int:
    """
    Convenience function to calculate shanten.

    Returns:
        Shanten value (-1 to 8)
    """
    return ShantenCalculator().shanten_only(hand, strategy, melds)


def get_waits(hand: Sequence[Tile], strategy: Strategy = Strategy.GENERAL,
              melds: Sequence[Meld] = ()) -> Tuple[List[int], int]:
    """
    Get the winning tiles of a tenpai hand.

    Returns:
        Tuple of (waiting_tile_indices, total_ukeire_count)
    """
    result = ShantenCalculator().calculate(hand, strategy, melds)
    return result.wait_tiles, result.ukeire
