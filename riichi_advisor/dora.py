"""
Dora System

Maps dora indicators to the tiles they promote and stamps the resulting
dora counts onto tiles at the boundary, so the rest of the engine only
ever reads Tile.dora_count.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from .tiles import Tile, TileSuit, HonorRank


@dataclass
class DoraSystem:
    """
    Dora indicators revealed this round.

    Dora add han to a hand without being yaku themselves. Each indicator
    promotes the next tile in sequence; several indicators may stack on the
    same kind. Red fives carry their own dora count from parsing.
    """

    dora_indicators: List[Tile] = field(default_factory=list)

    @staticmethod
    def get_dora_tile(indicator: Tile) -> Tile:
        """
        Get the dora tile from an indicator.

        The dora is the next tile in sequence:
        - Numbers: 1->2->...->9->1
        - Winds: E->S->W->N->E
        - Dragons: White->Green->Red->White
        """
        if indicator.suit != TileSuit.HONOR:
            return Tile(indicator.suit, indicator.rank % 9 + 1)
        if indicator.rank <= HonorRank.NORTH:
            return Tile(TileSuit.HONOR, indicator.rank % 4 + 1)
        return Tile(TileSuit.HONOR, (indicator.rank - HonorRank.WHITE + 1) % 3 + HonorRank.WHITE)

    def get_all_dora_tiles(self) -> List[Tile]:
        return [self.get_dora_tile(ind) for ind in self.dora_indicators]

    def add_dora_indicator(self, indicator: Tile) -> None:
        """Add a new dora indicator (e.g., after kan)"""
        self.dora_indicators.append(indicator)

    def dora_value(self, tile: Tile) -> int:
        """How many indicators point at this tile's kind"""
        return sum(1 for dora in self.get_all_dora_tiles() if dora == tile)

    def apply(self, tiles: Iterable[Tile]) -> List[Tile]:
        """
        Stamp indicator dora onto tiles, on top of any red-five dora they
        already carry.
        """
        dora_tiles = self.get_all_dora_tiles()
        return [
            t.with_dora(t.dora_count + sum(1 for d in dora_tiles if d == t))
            for t in tiles
        ]

    def count_dora(self, tiles: Iterable[Tile]) -> int:
        """Total dora in tiles that have not been stamped yet"""
        return sum(t.dora_count for t in self.apply(tiles))

    def __repr__(self) -> str:
        dora_str = ", ".join(str(self.get_dora_tile(i)) for i in self.dora_indicators)
        return f"DoraSystem(dora=[{dora_str}])"


def tile_from_flag(tile: Tile, is_dora: bool) -> Tile:
    """
    Convert a boolean dora flag (as some clients report it) into a count.
    A flagged tile counts at least one dora.
    """
    if is_dora and tile.dora_count == 0:
        return tile.with_dora(1)
    return tile
