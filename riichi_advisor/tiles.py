"""
Riichi Mahjong Tile Model

Defines the 34 tile kinds used by the advisor:
- Dots (p), Characters (m), Bamboo (s): ranks 1-9
- Honors (z): 1-4 East/South/West/North, 5-7 White/Green/Red dragon

Tiles compare by kind only (suit and rank). The dora count rides along on
each tile and is compared only in strict mode.
"""

import re
from enum import IntEnum
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .errors import TileParseError, HandError


NUM_TILE_KINDS = 34
COPIES_PER_KIND = 4
MAX_HAND_SIZE = 14


class TileSuit(IntEnum):
    """Tile suits, in the order used for sorting and indexing"""
    DOTS = 0        # p
    CHARACTERS = 1  # m
    BAMBOO = 2      # s
    HONOR = 3       # z


class HonorRank(IntEnum):
    """Ranks of honor tiles"""
    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4
    WHITE = 5
    GREEN = 6
    RED = 7


SUIT_LETTERS = {
    TileSuit.DOTS: "p",
    TileSuit.CHARACTERS: "m",
    TileSuit.BAMBOO: "s",
    TileSuit.HONOR: "z",
}
LETTER_SUITS = {letter: suit for suit, letter in SUIT_LETTERS.items()}

NUMBERED_SUITS = (TileSuit.DOTS, TileSuit.CHARACTERS, TileSuit.BAMBOO)

# 1/9 of each numbered suit plus all seven honors
TERMINAL_HONOR_INDICES = (0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33)


@dataclass(frozen=True)
class Tile:
    """
    A single tile.

    Attributes:
        suit: Dots, Characters, Bamboo or Honor
        rank: 1-9 for numbered suits, 1-7 for honors
        dora_count: How many dora indicators point at this tile (stacking)
    """
    suit: TileSuit
    rank: int
    dora_count: int = 0

    def __post_init__(self):
        """Validate rank and dora count"""
        if self.suit == TileSuit.HONOR:
            if not 1 <= self.rank <= 7:
                raise ValueError(f"Honor tiles must have rank 1-7, got {self.rank}")
        elif not 1 <= self.rank <= 9:
            raise ValueError(f"Numbered suits must have rank 1-9, got {self.rank}")
        if self.dora_count < 0:
            raise ValueError(f"Dora count cannot be negative, got {self.dora_count}")

    @property
    def is_honor(self) -> bool:
        return self.suit == TileSuit.HONOR

    @property
    def is_wind(self) -> bool:
        return self.is_honor and self.rank <= HonorRank.NORTH

    @property
    def is_dragon(self) -> bool:
        return self.is_honor and self.rank >= HonorRank.WHITE

    @property
    def is_terminal(self) -> bool:
        """1 or 9 of a numbered suit"""
        return not self.is_honor and self.rank in (1, 9)

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_terminal or self.is_honor

    @property
    def is_simple(self) -> bool:
        """2-8 of a numbered suit"""
        return not self.is_honor and 2 <= self.rank <= 8

    @property
    def tile_index(self) -> int:
        """Kind index 0-33: suit * 9 + rank - 1"""
        return int(self.suit) * 9 + self.rank - 1

    @property
    def notation(self) -> str:
        return f"{self.rank}{SUIT_LETTERS[self.suit]}"

    def same(self, other: Optional["Tile"], strict: bool = False) -> bool:
        """
        Compare two tiles by kind; strict mode also compares dora count.
        """
        if not isinstance(other, Tile):
            return False
        if strict and self.dora_count != other.dora_count:
            return False
        return self == other

    def with_dora(self, dora_count: int) -> "Tile":
        return replace(self, dora_count=dora_count)

    def __eq__(self, other) -> bool:
        """Two tiles are equal if they have the same suit and rank"""
        if not isinstance(other, Tile):
            return False
        return self.suit == other.suit and self.rank == other.rank

    def __hash__(self) -> int:
        return hash((self.suit, self.rank))

    def __lt__(self, other) -> bool:
        """Suit, then rank, then higher dora first"""
        if not isinstance(other, Tile):
            return NotImplemented
        return (self.suit, self.rank, -self.dora_count) < (other.suit, other.rank, -other.dora_count)

    def __repr__(self) -> str:
        if self.dora_count:
            return f"Tile({self.notation}, dora={self.dora_count})"
        return f"Tile({self.notation})"

    def __str__(self) -> str:
        return self.notation

    @classmethod
    def from_index(cls, tile_index: int, dora_count: int = 0) -> "Tile":
        """Create a tile from its kind index (0-33)"""
        if not 0 <= tile_index < NUM_TILE_KINDS:
            raise ValueError(f"Tile index must be 0-33, got {tile_index}")
        return cls(TileSuit(tile_index // 9), tile_index % 9 + 1, dora_count)

    @classmethod
    def from_string(cls, s: str) -> "Tile":
        """
        Parse a single tile like "9p", "1z" or "0m" (red five).

        Raises:
            TileParseError: text is not a single valid tile
        """
        tiles = parse_tiles(s)
        if len(tiles) != 1:
            raise TileParseError(f"Expected exactly one tile, got {len(tiles)}", s)
        return tiles[0]


class MeldType(IntEnum):
    """Types of calls"""
    CHI = 0
    PON = 1
    KAN = 2
    CONCEALED_KAN = 3


@dataclass(frozen=True)
class Meld:
    """
    An exposed (or concealed kan) group of tiles.

    Attributes:
        meld_type: Chi, Pon, Kan or Concealed Kan
        tiles: Tiles in the meld, including the called tile
        called_tile: The tile taken from another player's discard
    """
    meld_type: MeldType
    tiles: Tuple[Tile, ...]
    called_tile: Optional[Tile] = None

    def __post_init__(self):
        """Validate meld shape"""
        object.__setattr__(self, "tiles", tuple(self.tiles))
        if self.meld_type == MeldType.CHI:
            if len(self.tiles) != 3:
                raise ValueError("Chi must have exactly 3 tiles")
            if not is_sequence(self.tiles):
                raise ValueError("Invalid Chi sequence")
        elif self.meld_type == MeldType.PON:
            if len(self.tiles) != 3:
                raise ValueError("Pon must have exactly 3 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Pon tiles must be identical")
        else:
            if len(self.tiles) != 4:
                raise ValueError("Kan must have exactly 4 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Kan tiles must be identical")

    @property
    def is_open(self) -> bool:
        return self.meld_type != MeldType.CONCEALED_KAN

    @property
    def is_triplet(self) -> bool:
        """Pon or either kind of kan"""
        return self.meld_type != MeldType.CHI

    @property
    def base_tile(self) -> Tile:
        """Lowest tile of a chi, the repeated tile otherwise"""
        return min(self.tiles)

    @property
    def dora_count(self) -> int:
        return sum(t.dora_count for t in self.tiles)

    @classmethod
    def from_tiles(cls, tiles: Sequence[Tile], concealed: bool = False) -> "Meld":
        """Infer the meld type from its tiles"""
        tiles = sorted(tiles)
        if len(tiles) == 4:
            return cls(MeldType.CONCEALED_KAN if concealed else MeldType.KAN, tiles)
        if len(tiles) == 3 and all(t == tiles[0] for t in tiles):
            return cls(MeldType.PON, tiles)
        return cls(MeldType.CHI, tiles)

    def __str__(self) -> str:
        return f"[{self.meld_type.name}: {tiles_to_string(self.tiles)}]"


_GROUP_RE = re.compile(r"([0-9]+)([mpsz])")


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse compact notation such as "1239p22456m44468s" or "1m 2m 3m".

    A 0 in a numbered suit is a red five: rank 5 with one dora.

    Raises:
        TileParseError: text contains anything else
    """
    if text is None:
        raise TileParseError("Tile text is required", "")
    compact = re.sub(r"\s+", "", text)
    tiles: List[Tile] = []
    pos = 0
    for match in _GROUP_RE.finditer(compact):
        if match.start() != pos:
            raise TileParseError(f"Unexpected characters in tile text: {compact[pos:match.start()]!r}", text)
        pos = match.end()
        suit = LETTER_SUITS[match.group(2)]
        for digit in match.group(1):
            rank = int(digit)
            dora = 0
            if rank == 0:
                if suit == TileSuit.HONOR:
                    raise TileParseError("Honor tiles must be 1-7", text)
                rank, dora = 5, 1
            try:
                tiles.append(Tile(suit, rank, dora))
            except ValueError as e:
                raise TileParseError(str(e), text) from e
    if pos != len(compact):
        raise TileParseError(f"Unexpected characters in tile text: {compact[pos:]!r}", text)
    return tiles


def parse_tile(text: str) -> Tile:
    return Tile.from_string(text)


def parse_combination(text: str) -> List[Tile]:
    """
    Parse pipe-joined call notation, e.g. "3m|4m" for a chi on 2m or 5m.
    """
    if not text or not text.strip():
        raise TileParseError("Combination text is required", text or "")
    return [parse_tile(part) for part in text.split("|")]


def tiles_to_string(tiles: Iterable[Tile]) -> str:
    """Render tiles in compact notation, grouped by suit in sorted order"""
    groups: List[Tuple[TileSuit, List[str]]] = []
    for tile in sorted(tiles):
        digit = "0" if tile.rank == 5 and tile.dora_count and not tile.is_honor else str(tile.rank)
        if groups and groups[-1][0] == tile.suit:
            groups[-1][1].append(digit)
        else:
            groups.append((tile.suit, [digit]))
    return "".join("".join(digits) + SUIT_LETTERS[suit] for suit, digits in groups)


def to_counts(tiles: Iterable[Tile]) -> np.ndarray:
    """34-element count array of tile kinds"""
    counts = np.zeros(NUM_TILE_KINDS, dtype=np.int8)
    for tile in tiles:
        counts[tile.tile_index] += 1
    return counts


def is_sequence(tiles: Sequence[Tile]) -> bool:
    """Three consecutive ranks in one numbered suit"""
    if len(tiles) != 3:
        return False
    ordered = sorted(tiles)
    if ordered[0].is_honor or any(t.suit != ordered[0].suit for t in ordered):
        return False
    return ordered[1].rank == ordered[0].rank + 1 and ordered[2].rank == ordered[1].rank + 1


def remove_tiles(hand: Sequence[Tile], to_remove: Iterable[Tile]) -> List[Tile]:
    """
    Remove one copy per tile in to_remove, preferring an exact dora match.
    Tiles not present are ignored.
    """
    remaining = list(hand)
    for tile in to_remove:
        match = next((i for i, t in enumerate(remaining) if t.same(tile, strict=True)), None)
        if match is None:
            match = next((i for i, t in enumerate(remaining) if t == tile), None)
        if match is not None:
            remaining.pop(match)
    return remaining


def count_dora(tiles: Iterable[Tile]) -> int:
    return sum(t.dora_count for t in tiles)


def validate_hand(hand: Sequence[Tile], melds: Sequence[Meld] = ()) -> None:
    """
    Check the physical limits of a hand.

    Raises:
        HandError: more than 14 tiles, or more than 4 copies of a kind
    """
    if len(hand) > MAX_HAND_SIZE:
        raise HandError(f"Hand cannot exceed {MAX_HAND_SIZE} tiles, got {len(hand)}")
    counts = to_counts(list(hand) + [t for m in melds for t in m.tiles])
    over = [Tile.from_index(i).notation for i in range(NUM_TILE_KINDS) if counts[i] > COPIES_PER_KIND]
    if over:
        raise HandError(f"More than {COPIES_PER_KIND} copies of {', '.join(over)}")
