"""
Availability Tracker

Counts how many copies of each tile kind are still unseen from the
evaluating player's seat: not in the own hand, any discard pile, any meld,
or among the dora indicators.
"""

from typing import Iterable, Union
import numpy as np

from .state import TurnState
from .tiles import COPIES_PER_KIND, NUM_TILE_KINDS, Tile, to_counts


class AvailabilityTracker:
    """Unseen copies per tile kind for one turn"""

    def __init__(self, visible: np.ndarray):
        """
        Args:
            visible: 34-element array of visible copies per kind
        """
        self._remaining = np.clip(COPIES_PER_KIND - visible.astype(np.int16), 0, COPIES_PER_KIND).astype(np.int8)

    @classmethod
    def from_state(cls, state: TurnState) -> "AvailabilityTracker":
        visible_tiles = list(state.hand) + list(state.dora_indicators)
        for pile in state.discards:
            visible_tiles.extend(pile)
        for player_melds in state.melds:
            for meld in player_melds:
                visible_tiles.extend(meld.tiles)
        return cls(to_counts(visible_tiles))

    @classmethod
    def from_visible(cls, tiles: Iterable[Tile]) -> "AvailabilityTracker":
        return cls(to_counts(tiles))

    def remaining(self, tile: Union[Tile, int]) -> int:
        """Unseen copies of a tile kind (by tile or kind index)"""
        index = tile.tile_index if isinstance(tile, Tile) else tile
        return int(self._remaining[index])

    def total(self) -> int:
        return int(self._remaining.sum())

    def to_array(self) -> np.ndarray:
        return self._remaining.copy()

    def __repr__(self) -> str:
        return f"AvailabilityTracker({self.total()} unseen of {NUM_TILE_KINDS * COPIES_PER_KIND})"
